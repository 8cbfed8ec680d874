# File: crudgen/__init__.py
"""
crudgen — Schema-driven CRUD Scaffolding
==========================================

Generates a controller, a model, the ``index``/``create``/``edit``/
``form``/``show`` views and a route registration line for an existing
database table, by introspecting its columns and rendering templates.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│  CrudGenerator │────▶│  TemplateStore   │
    │   (cli.py)   │     │ (generator.py) │     │  + renderer      │
    └──────────────┘     └───────┬────────┘     └──────────────────┘
                                 │
          ┌──────────────┬───────┼────────┬──────────────┐
          ▼              ▼       ▼        ▼              ▼
    ┌───────────┐ ┌───────────┐ ┌───────┐ ┌─────────┐ ┌────────┐
    │introspect.│ │classifier │ │naming │ │ emitter │ │ routes │
    └───────────┘ └───────────┘ └───────┘ └─────────┘ └────────┘

Usage::

    # As a library
    from crudgen import CrudGenerator, GenerationRequest, GeneratorConfig
    config = GeneratorConfig(database_url="sqlite:///app.db")
    report = CrudGenerator.from_config(config).generate(
        GenerationRequest(table_name="posts")
    )

    # From the command line
    crudgen posts --database-url sqlite:///app.db
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from crudgen.models import (
    ColumnDescriptor,
    FieldKind,
    FieldSpec,
    GeneratedArtifact,
    GenerationRequest,
    GeneratorConfig,
    NamingContext,
    WriteResult,
)
from crudgen.errors import (
    ArtifactWriteError,
    CrudGenError,
    GeneratorIOError,
    RequestValidationError,
    RouteAppendError,
    SchemaError,
    TableNotFoundError,
    TemplateNotFoundError,
    TemplateReadError,
)
from crudgen.inflector import PluralizationRules, get_rules, supported_languages
from crudgen.naming import NamingResolver, resolve_naming
from crudgen.introspection import SchemaIntrospector
from crudgen.classifier import ColumnClassifier, FIELD_KIND_BY_TYPE, field_kind_for
from crudgen.renderer import render
from crudgen.templates import TemplateStore
from crudgen.emitter import ConsolePrompt, DecisionSource, FileEmitter, StaticDecision
from crudgen.routes import RouteAppender
from crudgen.generator import (
    CrudGenerator,
    GenerationReport,
    GenerationState,
    build_config,
    generate_crud,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Orchestrator
    "CrudGenerator",
    "GenerationReport",
    "GenerationState",
    "generate_crud",
    "build_config",
    # Models
    "ColumnDescriptor",
    "FieldKind",
    "FieldSpec",
    "GeneratedArtifact",
    "GenerationRequest",
    "GeneratorConfig",
    "NamingContext",
    "WriteResult",
    # Errors
    "CrudGenError",
    "RequestValidationError",
    "TableNotFoundError",
    "SchemaError",
    "GeneratorIOError",
    "TemplateNotFoundError",
    "TemplateReadError",
    "ArtifactWriteError",
    "RouteAppendError",
    # Components
    "PluralizationRules",
    "get_rules",
    "supported_languages",
    "NamingResolver",
    "resolve_naming",
    "SchemaIntrospector",
    "ColumnClassifier",
    "FIELD_KIND_BY_TYPE",
    "field_kind_for",
    "render",
    "TemplateStore",
    "DecisionSource",
    "ConsolePrompt",
    "StaticDecision",
    "FileEmitter",
    "RouteAppender",
]
