# File: crudgen/templates.py
"""
crudgen - Template Store
=========================
Named template bodies for every generated artifact.

Names::

    controller            model
    views/index           views/create        views/edit
    views/form            views/show          layouts/app
    fields/head           fields/cell         fields/view
    fields/form-<kind>    (one per FieldKind: text, textarea, number, ...)

The built-in bodies target a FastAPI + SQLAlchemy 2.0 + Jinja2 project
styled with Tabler.  A stub directory overrides any of them file by file:
``<stub_dir>/views/index.stub`` replaces ``views/index`` and so on.

Placeholders use the ``{{camelCase}}`` form with no inner spaces, so they
never collide with Jinja2 expressions (``{{ value }}``) inside the views.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from crudgen.errors import TemplateNotFoundError, TemplateReadError
from crudgen.models import FieldKind
from crudgen.utils import read_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.templates")

STUB_SUFFIX: str = ".stub"

# ---------------------------------------------------------------------------
# Built-in stubs: Python sources
# ---------------------------------------------------------------------------

CONTROLLER_STUB: str = '''"""CRUD controller for {{modelTitlePlural}} (table `{{tableName}}`)."""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.database import get_db
from {{modelNamespace}}.{{modelModule}} import {{modelName}}

templates = Jinja2Templates(directory="{{viewsDir}}")


def _form_data(raw: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for field in {{modelName}}.fillable:
        value = raw.get(field)
        data[field] = value if value != "" else None
    return data


def _validate(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    for field, rule in {{modelName}}.rules.items():
        if "required" in rule.split("|") and data.get(field) in (None, ""):
            errors.append(f"The {field} field is required.")
    return errors


def _get_or_404(db: Session, pk: int) -> {{modelName}}:
    {{modelNameLowerCase}} = db.get({{modelName}}, pk)
    if {{modelNameLowerCase}} is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="{{modelTitle}} not found")
    return {{modelNameLowerCase}}


class {{modelName}}Controller:
    """Resource controller mounted at /{{routeName}}."""

    router = APIRouter(prefix="/{{routeName}}", tags=["{{routeName}}"])

    @staticmethod
    @router.get("/", response_class=HTMLResponse, name="{{routeName}}.index")
    def index(request: Request, db: Session = Depends(get_db)):
        {{modelNamePluralLowerCase}} = db.scalars(select({{modelName}})).all()
        return templates.TemplateResponse(
            request,
            "{{modelView}}/index{{viewExtension}}",
            {"{{modelNamePluralLowerCase}}": {{modelNamePluralLowerCase}}},
        )

    @staticmethod
    @router.get("/create", response_class=HTMLResponse, name="{{routeName}}.create")
    def create(request: Request):
        return templates.TemplateResponse(
            request,
            "{{modelView}}/create{{viewExtension}}",
            {"{{modelNameLowerCase}}": None, "errors": []},
        )

    @staticmethod
    @router.post("/", name="{{routeName}}.store")
    async def store(request: Request, db: Session = Depends(get_db)):
        data = _form_data(await request.form())
        errors = _validate(data)
        if errors:
            return templates.TemplateResponse(
                request,
                "{{modelView}}/create{{viewExtension}}",
                {"{{modelNameLowerCase}}": data, "errors": errors},
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        db.add({{modelName}}(**data))
        db.commit()
        return RedirectResponse("/{{routeName}}", status_code=status.HTTP_303_SEE_OTHER)

    @staticmethod
    @router.get("/{pk}", response_class=HTMLResponse, name="{{routeName}}.show")
    def show(pk: int, request: Request, db: Session = Depends(get_db)):
        return templates.TemplateResponse(
            request,
            "{{modelView}}/show{{viewExtension}}",
            {"{{modelNameLowerCase}}": _get_or_404(db, pk)},
        )

    @staticmethod
    @router.get("/{pk}/edit", response_class=HTMLResponse, name="{{routeName}}.edit")
    def edit(pk: int, request: Request, db: Session = Depends(get_db)):
        return templates.TemplateResponse(
            request,
            "{{modelView}}/edit{{viewExtension}}",
            {"{{modelNameLowerCase}}": _get_or_404(db, pk), "errors": []},
        )

    @staticmethod
    @router.post("/{pk}", name="{{routeName}}.update")
    async def update(pk: int, request: Request, db: Session = Depends(get_db)):
        {{modelNameLowerCase}} = _get_or_404(db, pk)
        data = _form_data(await request.form())
        errors = _validate(data)
        if errors:
            return templates.TemplateResponse(
                request,
                "{{modelView}}/edit{{viewExtension}}",
                {"{{modelNameLowerCase}}": {{modelNameLowerCase}}, "errors": errors},
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        for field, value in data.items():
            setattr({{modelNameLowerCase}}, field, value)
        db.commit()
        return RedirectResponse("/{{routeName}}", status_code=status.HTTP_303_SEE_OTHER)

    @staticmethod
    @router.post("/{pk}/delete", name="{{routeName}}.destroy")
    def destroy(pk: int, db: Session = Depends(get_db)):
        db.delete(_get_or_404(db, pk))
        db.commit()
        return RedirectResponse("/{{routeName}}", status_code=status.HTTP_303_SEE_OTHER)
'''

MODEL_STUB: str = '''"""{{modelName}} model over the `{{tableName}}` table."""

from datetime import date, datetime, time
from decimal import Decimal
from typing import ClassVar, Dict, List, Optional

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, LargeBinary, Numeric, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base{{softDeletesImport}}


class {{modelName}}({{softDeletes}}Base):
    __tablename__ = "{{tableName}}"

{{columns}}

    fillable: ClassVar[List[str]] = {{fillable}}

    rules: ClassVar[Dict[str, str]] = {{rules}}

    def __repr__(self) -> str:
        return f"<{{modelName}} {{primaryKey}}={self.{{primaryKey}}!r}>"
'''

# ---------------------------------------------------------------------------
# Built-in stubs: Jinja2 views
# ---------------------------------------------------------------------------

INDEX_VIEW_STUB: str = '''{% extends "{{layout}}" %}

{% block title %}{{modelTitlePlural}}{% endblock %}

{% block content %}
<div class="page-header d-print-none">
  <div class="container-xl">
    <div class="row g-2 align-items-center">
      <div class="col">
        <h2 class="page-title">{{modelTitlePlural}}</h2>
      </div>
      <div class="col-auto ms-auto d-print-none">
        <a href="/{{routeName}}/create" class="btn btn-primary">Create {{modelTitle}}</a>
      </div>
    </div>
  </div>
</div>
<div class="page-body">
  <div class="container-xl">
    <div class="card">
      <div class="table-responsive">
        <table class="table card-table table-vcenter text-nowrap datatable">
          <thead>
            <tr>
              <th class="w-1">No.</th>
{{tableHeader}}
              <th class="w-1"></th>
            </tr>
          </thead>
          <tbody>
            {% for {{modelNameLowerCase}} in {{modelNamePluralLowerCase}} %}
            <tr>
              <td>{{ loop.index }}</td>
{{tableBody}}
              <td>
                <div class="btn-list flex-nowrap">
                  <a class="btn btn-sm" href="/{{routeName}}/{{ {{modelNameLowerCase}}.{{primaryKey}} }}">View</a>
                  <a class="btn btn-sm" href="/{{routeName}}/{{ {{modelNameLowerCase}}.{{primaryKey}} }}/edit">Edit</a>
                  <form method="post" action="/{{routeName}}/{{ {{modelNameLowerCase}}.{{primaryKey}} }}/delete"
                        onsubmit="return confirm('Delete this {{modelTitle}}?');">
                    <button type="submit" class="btn btn-sm btn-danger">Delete</button>
                  </form>
                </div>
              </td>
            </tr>
            {% else %}
            <tr>
              <td colspan="100" class="text-center text-muted">No {{modelTitlePlural}} yet.</td>
            </tr>
            {% endfor %}
          </tbody>
        </table>
      </div>
    </div>
  </div>
</div>
{% endblock %}
'''

CREATE_VIEW_STUB: str = '''{% extends "{{layout}}" %}

{% block title %}Create {{modelTitle}}{% endblock %}

{% block content %}
<div class="page-body">
  <div class="container-xl">
    <div class="card">
      <div class="card-header">
        <h3 class="card-title">Create {{modelTitle}}</h3>
      </div>
      <div class="card-body">
        <form method="post" action="/{{routeName}}" enctype="multipart/form-data">
          {% include "{{modelView}}/form{{viewExtension}}" %}
        </form>
      </div>
    </div>
  </div>
</div>
{% endblock %}
'''

EDIT_VIEW_STUB: str = '''{% extends "{{layout}}" %}

{% block title %}Edit {{modelTitle}}{% endblock %}

{% block content %}
<div class="page-body">
  <div class="container-xl">
    <div class="card">
      <div class="card-header">
        <h3 class="card-title">Edit {{modelTitle}}</h3>
      </div>
      <div class="card-body">
        <form method="post" action="/{{routeName}}/{{ {{modelNameLowerCase}}.{{primaryKey}} }}"
              enctype="multipart/form-data">
          {% include "{{modelView}}/form{{viewExtension}}" %}
        </form>
      </div>
    </div>
  </div>
</div>
{% endblock %}
'''

FORM_VIEW_STUB: str = '''{% if errors %}
<div class="alert alert-danger">
  <ul class="mb-0">
    {% for error in errors %}<li>{{ error }}</li>{% endfor %}
  </ul>
</div>
{% endif %}
{{form}}
<div class="form-footer">
  <a href="/{{routeName}}" class="btn btn-link">Cancel</a>
  <button type="submit" class="btn btn-primary">Submit</button>
</div>
'''

SHOW_VIEW_STUB: str = '''{% extends "{{layout}}" %}

{% block title %}{{modelTitle}}{% endblock %}

{% block content %}
<div class="page-body">
  <div class="container-xl">
    <div class="card">
      <div class="card-header">
        <h3 class="card-title">{{modelTitle}} Details</h3>
        <div class="card-actions">
          <a href="/{{routeName}}" class="btn btn-link">Back</a>
        </div>
      </div>
      <div class="card-body">
        <dl class="row">
{{viewRows}}
        </dl>
      </div>
    </div>
  </div>
</div>
{% endblock %}
'''

LAYOUT_STUB: str = '''<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{% block title %}{% endblock %}</title>
  <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/@tabler/core@latest/dist/css/tabler.min.css">
</head>
<body>
  <div class="page">
    <div class="page-wrapper">
      {% block content %}{% endblock %}
    </div>
  </div>
  <script src="https://cdn.jsdelivr.net/npm/@tabler/core@latest/dist/js/tabler.min.js"></script>
</body>
</html>
'''

# ---------------------------------------------------------------------------
# Built-in stubs: per-field fragments
# ---------------------------------------------------------------------------

HEAD_FIELD_STUB: str = "              <th>{{title}}</th>"

CELL_FIELD_STUB: str = "              <td>{{ {{modelNameLowerCase}}.{{column}} }}</td>"

VIEW_FIELD_STUB: str = (
    "          <dt class=\"col-3\">{{title}}</dt>\n"
    "          <dd class=\"col-9\">{{ {{modelNameLowerCase}}.{{column}} }}</dd>"
)

_VALUE_INNER: str = (
    "{{modelNameLowerCase}}['{{column}}'] if {{modelNameLowerCase}} is mapping "
    "else ({{modelNameLowerCase}}.{{column}} if {{modelNameLowerCase}} else '')"
)
_VALUE_EXPR: str = "{{ " + _VALUE_INNER + " }}"


def _input_stub(input_type: str) -> str:
    return (
        "<div class=\"mb-3\">\n"
        "  <label class=\"form-label\" for=\"{{column}}\">{{title}}</label>\n"
        f"  <input type=\"{input_type}\" class=\"form-control\" id=\"{{{{column}}}}\" "
        f"name=\"{{{{column}}}}\" value=\"{_VALUE_EXPR}\">\n"
        "</div>"
    )


FORM_FIELD_STUBS: Dict[FieldKind, str] = {
    FieldKind.TEXT: _input_stub("text"),
    FieldKind.NUMBER: _input_stub("number"),
    FieldKind.DATE: _input_stub("date"),
    FieldKind.DATETIME: _input_stub("datetime-local"),
    FieldKind.TIME: _input_stub("time"),
    FieldKind.TEXTAREA: (
        "<div class=\"mb-3\">\n"
        "  <label class=\"form-label\" for=\"{{column}}\">{{title}}</label>\n"
        "  <textarea class=\"form-control\" id=\"{{column}}\" name=\"{{column}}\" rows=\"4\">"
        f"{_VALUE_EXPR}</textarea>\n"
        "</div>"
    ),
    FieldKind.BOOLEAN: (
        "<div class=\"mb-3\">\n"
        "  <input type=\"hidden\" name=\"{{column}}\" value=\"0\">\n"
        "  <label class=\"form-check\">\n"
        "    <input type=\"checkbox\" class=\"form-check-input\" id=\"{{column}}\" "
        "name=\"{{column}}\" value=\"1\" {% if " + _VALUE_INNER + " %}checked{% endif %}>\n"
        "    <span class=\"form-check-label\">{{title}}</span>\n"
        "  </label>\n"
        "</div>"
    ),
    FieldKind.FILE: (
        "<div class=\"mb-3\">\n"
        "  <label class=\"form-label\" for=\"{{column}}\">{{title}}</label>\n"
        "  <input type=\"file\" class=\"form-control\" id=\"{{column}}\" name=\"{{column}}\">\n"
        "</div>"
    ),
}


def form_field_template_name(kind: FieldKind) -> str:
    return f"fields/form-{kind.value}"


DEFAULT_STUBS: Dict[str, str] = {
    "controller": CONTROLLER_STUB,
    "model": MODEL_STUB,
    "views/index": INDEX_VIEW_STUB,
    "views/create": CREATE_VIEW_STUB,
    "views/edit": EDIT_VIEW_STUB,
    "views/form": FORM_VIEW_STUB,
    "views/show": SHOW_VIEW_STUB,
    "layouts/app": LAYOUT_STUB,
    "fields/head": HEAD_FIELD_STUB,
    "fields/cell": CELL_FIELD_STUB,
    "fields/view": VIEW_FIELD_STUB,
}
DEFAULT_STUBS.update(
    {form_field_template_name(kind): body for kind, body in FORM_FIELD_STUBS.items()}
)


# ---------------------------------------------------------------------------
# TemplateStore
# ---------------------------------------------------------------------------


class TemplateStore:
    """
    Resolves template names to raw bodies.

    Lookup order for ``get(name)``:
        1. ``<stub_dir>/<name>.stub`` if a stub directory is configured
           and the file exists.
        2. The built-in body.

    Raises ``TemplateNotFoundError`` when neither exists and
    ``TemplateReadError`` when a stub file exists but cannot be read.
    """

    def __init__(
        self,
        stub_dir: Optional[Path] = None,
        builtins: Optional[Dict[str, str]] = None,
    ) -> None:
        self._stub_dir: Optional[Path] = Path(stub_dir) if stub_dir is not None else None
        self._builtins: Dict[str, str] = dict(DEFAULT_STUBS if builtins is None else builtins)

    def stub_path(self, name: str) -> Optional[Path]:
        if self._stub_dir is None:
            return None
        return self._stub_dir / f"{name}{STUB_SUFFIX}"

    def has(self, name: str) -> bool:
        path: Optional[Path] = self.stub_path(name)
        return (path is not None and path.is_file()) or name in self._builtins

    def get(self, name: str) -> str:
        path: Optional[Path] = self.stub_path(name)
        if path is not None and path.is_file():
            try:
                body: str = read_file(path)
            except (OSError, UnicodeDecodeError) as exc:
                raise TemplateReadError(
                    f"Cannot read template '{name}': {exc}", path=path
                ) from exc
            logger.debug("Template '%s' loaded from %s", name, path)
            return body

        if name in self._builtins:
            logger.debug("Template '%s' resolved to the built-in stub", name)
            return self._builtins[name]

        raise TemplateNotFoundError(f"Template '{name}' not found.", path=path)

    def names(self) -> List[str]:
        """Built-in names plus any extra ``*.stub`` files in the stub directory."""
        found: List[str] = sorted(self._builtins)
        if self._stub_dir is not None and self._stub_dir.is_dir():
            for stub in sorted(self._stub_dir.rglob(f"*{STUB_SUFFIX}")):
                name: str = stub.relative_to(self._stub_dir).with_suffix("").as_posix()
                if name not in found:
                    found.append(name)
        return found


__all__: List[str] = [
    "DEFAULT_STUBS",
    "FORM_FIELD_STUBS",
    "STUB_SUFFIX",
    "TemplateStore",
    "form_field_template_name",
]
