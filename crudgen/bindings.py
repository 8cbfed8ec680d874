# File: crudgen/bindings.py
"""
crudgen - Template Bindings
============================
Builds the token → text mapping for each artifact.

Every artifact binding starts from ``base_bindings`` (derived from the one
``NamingContext`` of the run plus the generator configuration) and adds
its own tokens:

- controller → base only
- model      → ``{{columns}}``, ``{{fillable}}``, ``{{rules}}``,
               ``{{softDeletesImport}}``, ``{{softDeletes}}``
- views      → ``{{tableHeader}}``, ``{{tableBody}}``, ``{{viewRows}}``,
               ``{{form}}`` (each rendered from per-field fragments)
- route      → ``{{controllerQualifiedName}}``
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, Sequence, Tuple

from crudgen.classifier import INTEGER_TYPES, normalize_declared_type
from crudgen.models import (
    ColumnDescriptor,
    FieldKind,
    FieldSpec,
    GeneratorConfig,
    NamingContext,
)
from crudgen.renderer import render
from crudgen.templates import TemplateStore, form_field_template_name
from crudgen.utils import format_dict_literal, format_list_literal

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.bindings")

TemplateBinding = Dict[str, str]

SOFT_DELETE_COLUMN: str = "deleted_at"
SOFT_DELETE_MIXIN: str = "SoftDeletes"

_INDENT: str = "    "

# FieldKind → (Python annotation, SQLAlchemy type) for mapped columns.
_COLUMN_TYPES: Dict[FieldKind, Tuple[str, str]] = {
    FieldKind.TEXT: ("str", "String"),
    FieldKind.TEXTAREA: ("str", "Text"),
    FieldKind.NUMBER: ("Decimal", "Numeric"),
    FieldKind.BOOLEAN: ("bool", "Boolean"),
    FieldKind.DATE: ("date", "Date"),
    FieldKind.DATETIME: ("datetime", "DateTime"),
    FieldKind.TIME: ("time", "Time"),
    FieldKind.FILE: ("bytes", "LargeBinary"),
}

_FLOAT_TYPES: FrozenSet[str] = frozenset({"float", "double", "double precision", "real"})


def _token(name: str) -> str:
    return "{{" + name + "}}"


# ---------------------------------------------------------------------------
# Base binding
# ---------------------------------------------------------------------------


def primary_key_name(columns: Sequence[ColumnDescriptor]) -> str:
    """Name of the first primary-key column, ``id`` when there is none."""
    for column in columns:
        if column.primary_key:
            return column.name
    return "id"


def base_bindings(
    naming: NamingContext,
    config: GeneratorConfig,
    columns: Sequence[ColumnDescriptor] = (),
) -> TemplateBinding:
    """Tokens shared by every artifact of a run."""
    return {
        _token("modelName"): naming.class_name,
        _token("tableName"): naming.table_name,
        _token("routeName"): naming.route_name,
        _token("modelNamePlural"): naming.plural_class_name,
        _token("modelNameLowerCase"): naming.snake_name,
        _token("modelNamePluralLowerCase"): naming.plural_snake_name,
        _token("modelTitle"): naming.title,
        _token("modelTitlePlural"): naming.title_plural,
        _token("modelView"): naming.view_folder,
        _token("modelModule"): naming.snake_name,
        _token("modelNamespace"): config.model_namespace,
        _token("controllerNamespace"): config.controller_namespace,
        _token("layout"): config.layout,
        _token("primaryKey"): primary_key_name(columns),
        _token("viewExtension"): config.view_extension,
        _token("viewsDir"): config.views_dir,
    }


def controller_bindings(
    naming: NamingContext,
    config: GeneratorConfig,
    columns: Sequence[ColumnDescriptor] = (),
) -> TemplateBinding:
    return base_bindings(naming, config, columns)


# ---------------------------------------------------------------------------
# Model binding
# ---------------------------------------------------------------------------


def _column_types(column: ColumnDescriptor, kind: FieldKind) -> Tuple[str, str]:
    if kind is FieldKind.NUMBER:
        token: str = normalize_declared_type(column.declared_type)
        first_word: str = token.split(" ", 1)[0] if token else ""
        if token in INTEGER_TYPES or first_word in INTEGER_TYPES:
            return "int", "Integer"
        if token in _FLOAT_TYPES or first_word in _FLOAT_TYPES:
            return "float", "Float"
    return _COLUMN_TYPES[kind]


def mapped_column_line(column: ColumnDescriptor, kind: FieldKind) -> str:
    """
    One ``Mapped[...] = mapped_column(...)`` line for *column*.

    Example:
        ``    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)``
    """
    py_type, sa_type = _column_types(column, kind)
    args: List[str] = [sa_type]

    if column.primary_key:
        args.append("primary_key=True")
        if column.autoincrement:
            args.append("autoincrement=True")
        annotation: str = f"Mapped[{py_type}]"
    elif column.nullable:
        args.append("nullable=True")
        annotation = f"Mapped[Optional[{py_type}]]"
    else:
        args.append("nullable=False")
        annotation = f"Mapped[{py_type}]"

    return f"{_INDENT}{column.name}: {annotation} = mapped_column({', '.join(args)})"


def has_soft_deletes(columns: Sequence[ColumnDescriptor]) -> bool:
    return any(column.name.lower() == SOFT_DELETE_COLUMN for column in columns)


def model_bindings(
    naming: NamingContext,
    config: GeneratorConfig,
    columns: Sequence[ColumnDescriptor],
    fields: Sequence[FieldSpec],
    kind_of: Dict[str, FieldKind],
) -> TemplateBinding:
    """
    Base tokens plus the model-only ones.

    *kind_of* maps every column name (eligible or not) to its field kind;
    the mapped columns cover the whole table while ``fillable`` and
    ``rules`` cover only the eligible *fields*.
    """
    bindings: TemplateBinding = base_bindings(naming, config, columns)

    column_lines: List[str] = [
        mapped_column_line(column, kind_of.get(column.name, FieldKind.TEXT))
        for column in columns
    ]
    fillable: List[str] = [spec.name for spec in fields]
    rules: Dict[str, str] = {
        spec.name: "required" for spec in fields if not spec.column.nullable
    }
    soft_deletes: bool = has_soft_deletes(columns)

    bindings.update(
        {
            _token("columns"): "\n".join(column_lines),
            _token("fillable"): format_list_literal(fillable),
            _token("rules"): format_dict_literal(rules),
            _token("softDeletesImport"): f", {SOFT_DELETE_MIXIN}" if soft_deletes else "",
            _token("softDeletes"): f"{SOFT_DELETE_MIXIN}, " if soft_deletes else "",
        }
    )
    logger.debug(
        "Model bindings for %s: %d column(s), fillable=%s, soft deletes=%s",
        naming.class_name,
        len(column_lines),
        fillable,
        soft_deletes,
    )
    return bindings


# ---------------------------------------------------------------------------
# View bindings
# ---------------------------------------------------------------------------


def _field_fragment(
    template_body: str,
    spec: FieldSpec,
    base: TemplateBinding,
) -> str:
    field_binding: TemplateBinding = dict(base)
    field_binding[_token("title")] = spec.label
    field_binding[_token("column")] = spec.name
    return render(template_body, field_binding)


def view_bindings(
    naming: NamingContext,
    config: GeneratorConfig,
    columns: Sequence[ColumnDescriptor],
    fields: Sequence[FieldSpec],
    templates: TemplateStore,
) -> TemplateBinding:
    """Base tokens plus the rendered header, body, detail and form markup."""
    bindings: TemplateBinding = base_bindings(naming, config, columns)

    head_stub: str = templates.get("fields/head")
    cell_stub: str = templates.get("fields/cell")
    view_stub: str = templates.get("fields/view")

    header: List[str] = []
    body: List[str] = []
    rows: List[str] = []
    form: List[str] = []

    for spec in fields:
        header.append(_field_fragment(head_stub, spec, bindings))
        body.append(_field_fragment(cell_stub, spec, bindings))
        rows.append(_field_fragment(view_stub, spec, bindings))
        form.append(
            _field_fragment(
                templates.get(form_field_template_name(spec.field_kind)), spec, bindings
            )
        )

    bindings.update(
        {
            _token("tableHeader"): "\n".join(header),
            _token("tableBody"): "\n".join(body),
            _token("viewRows"): "\n".join(rows),
            _token("form"): "\n".join(form),
        }
    )
    return bindings


# ---------------------------------------------------------------------------
# Route binding
# ---------------------------------------------------------------------------


def route_bindings(route_name: str, controller_qualified_name: str) -> TemplateBinding:
    return {
        _token("routeName"): route_name,
        _token("controllerQualifiedName"): controller_qualified_name,
    }


__all__: List[str] = [
    "TemplateBinding",
    "base_bindings",
    "controller_bindings",
    "model_bindings",
    "view_bindings",
    "route_bindings",
    "mapped_column_line",
    "primary_key_name",
    "has_soft_deletes",
]
