# File: crudgen/models.py
"""
crudgen - Core Data Models
===========================
Pydantic V2 models for everything that crosses a component boundary
(the generation request, introspected columns, the generator
configuration) plus light dataclasses for the transient values built
during a run (field specs, the naming context, generated artifacts).

Pipeline::

    GenerationRequest ──▶ NamingContext ─────────────┐
                                                     ▼
    ColumnDescriptor* ──▶ FieldSpec* ──▶ TemplateBinding ──▶ GeneratedArtifact ──▶ WriteResult
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class FieldKind(str, Enum):
    """UI-facing kind of a form / display field."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    FILE = "file"


class WriteResult(str, Enum):
    """Outcome of emitting one artifact."""

    CREATED = "created"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    frozen=False,
    extra="forbid",
)

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)

DEFAULT_UNWANTED_COLUMNS: List[str] = [
    "id",
    "uuid",
    "ulid",
    "password",
    "email_verified_at",
    "remember_token",
    "created_at",
    "updated_at",
    "deleted_at",
]

DEFAULT_LAYOUT: str = "layouts/app.html"

VIEW_NAMES: Tuple[str, ...] = ("index", "create", "edit", "form", "show")


# ---------------------------------------------------------------------------
# Request & schema primitives
# ---------------------------------------------------------------------------


class GenerationRequest(BaseModel):
    """
    One invocation of the generator: which table, and the optional
    overrides for route, class name and pluralization language.

    Immutable once built.  Blank optional values are treated as absent.
    """

    model_config = _FROZEN_CONFIG

    table_name: str = Field(..., min_length=1, description="Existing table to scaffold.")
    route_override: Optional[str] = Field(default=None, description="Custom route name.")
    class_name_override: Optional[str] = Field(
        default=None, description="Custom class (CRUD) name."
    )
    language: Optional[str] = Field(
        default=None, description="Pluralization language code, e.g. 'tr'."
    )

    @field_validator("table_name", mode="before")
    @classmethod
    def _strip_table_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Table name must not be blank.")
        return v

    @field_validator("route_override", "class_name_override", "language", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ColumnDescriptor(BaseModel):
    """A single introspected table column, in table order."""

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Column name.")
    declared_type: str = Field(..., description="Raw DB type token, e.g. 'VARCHAR(255)'.")
    nullable: bool = Field(default=True, description="Whether the column allows NULL.")
    primary_key: bool = Field(default=False, description="Part of the primary key?")
    autoincrement: bool = Field(
        default=False, description="Value generated by the database."
    )

    def __repr__(self) -> str:
        pk_flag: str = " PK" if self.primary_key else ""
        null_flag: str = " NULL" if self.nullable else " NOT NULL"
        return f"<Column {self.name} {self.declared_type}{pk_flag}{null_flag}>"


# ---------------------------------------------------------------------------
# Transient values built during a run
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """An eligible column projected into a labelled UI field."""

    label: str
    column: ColumnDescriptor
    field_kind: FieldKind

    @property
    def name(self) -> str:
        return self.column.name


@dataclass(frozen=True, slots=True)
class NamingContext:
    """
    Every name derived for one run.

    ``class_name``, ``table_name`` and ``route_name`` are the primary
    names; the rest are derived from ``class_name`` with the same
    pluralization rules so every artifact agrees on them.
    """

    class_name: str
    table_name: str
    route_name: str
    plural_class_name: str
    snake_name: str
    plural_snake_name: str
    view_folder: str
    title: str
    title_plural: str


@dataclass(frozen=True, slots=True)
class GeneratedArtifact:
    """Rendered content waiting to be written."""

    label: str
    target_path: Path
    content: str


# ---------------------------------------------------------------------------
# Generator configuration
# ---------------------------------------------------------------------------


class GeneratorConfig(BaseModel):
    """
    Where the generator reads its inputs and writes its outputs.

    All directory settings are relative to ``project_root`` unless given
    as absolute paths.
    """

    model_config = _SHARED_CONFIG

    # -- Project / database -------------------------------------------------
    project_root: str = Field(default=".", description="Root of the target project.")
    database_url: Optional[str] = Field(
        default=None, description="SQLAlchemy URL of the database to introspect."
    )
    db_schema: Optional[str] = Field(
        default=None, description="Database schema holding the table (e.g. 'public')."
    )

    # -- Templates ----------------------------------------------------------
    stub_path: Optional[str] = Field(
        default=None,
        description="Directory of '<name>.stub' files overriding the built-in templates.",
    )
    layout: str = Field(
        default=DEFAULT_LAYOUT,
        min_length=1,
        description="Layout template the views extend, relative to views_dir.",
    )

    # -- Output layout ------------------------------------------------------
    controller_dir: str = Field(default="app/controllers")
    model_dir: str = Field(default="app/models")
    views_dir: str = Field(default="app/templates")
    routes_file: str = Field(default="app/routes.py")
    controller_namespace: str = Field(default="app.controllers")
    model_namespace: str = Field(default="app.models")
    view_extension: str = Field(default=".html")
    route_template: str = Field(
        default='resource("{{routeName}}", "{{controllerQualifiedName}}")',
        min_length=1,
        description="Route registration statement appended to routes_file.",
    )

    # -- Column filtering ---------------------------------------------------
    unwanted_columns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_UNWANTED_COLUMNS),
        description="Columns never shown in tables or forms.",
    )

    @field_validator("view_extension")
    @classmethod
    def _dotted_extension(cls, v: str) -> str:
        if v and not v.startswith("."):
            return f".{v}"
        return v

    # -- Path helpers -------------------------------------------------------

    @property
    def root(self) -> Path:
        return Path(self.project_root)

    def _resolve(self, relative: str) -> Path:
        path: Path = Path(relative)
        return path if path.is_absolute() else self.root / path

    @property
    def is_default_layout(self) -> bool:
        return self.layout == DEFAULT_LAYOUT

    def controller_path(self, naming: NamingContext) -> Path:
        return self._resolve(self.controller_dir) / f"{naming.snake_name}_controller.py"

    def model_path(self, naming: NamingContext) -> Path:
        return self._resolve(self.model_dir) / f"{naming.snake_name}.py"

    def view_path(self, naming: NamingContext, view: str) -> Path:
        return (
            self._resolve(self.views_dir)
            / naming.view_folder
            / f"{view}{self.view_extension}"
        )

    def layout_path(self) -> Path:
        return self._resolve(self.views_dir) / self.layout

    def routes_path(self) -> Path:
        return self._resolve(self.routes_file)

    def controller_qualified_name(self, naming: NamingContext) -> str:
        """Dotted import path of the generated controller class."""
        return (
            f"{self.controller_namespace}.{naming.snake_name}_controller."
            f"{naming.class_name}Controller"
        )

    def template_dir(self) -> Optional[Path]:
        if not self.stub_path:
            return None
        return self._resolve(self.stub_path)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FieldKind",
    "WriteResult",
    "GenerationRequest",
    "ColumnDescriptor",
    "FieldSpec",
    "NamingContext",
    "GeneratedArtifact",
    "GeneratorConfig",
    "DEFAULT_UNWANTED_COLUMNS",
    "DEFAULT_LAYOUT",
    "VIEW_NAMES",
]

logger.debug("crudgen.models loaded — %d public symbols.", len(__all__))
