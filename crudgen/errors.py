# File: crudgen/errors.py
"""
crudgen - Exception Taxonomy
=============================

Every failure the generation pipeline can report derives from
``CrudGenError`` so the CLI can map it to an exit code::

    CrudGenError
    ├── RequestValidationError      bad request (blank table name, unknown language)
    │   └── TableNotFoundError      target table absent from the database
    ├── SchemaError                 introspection failed after existence was assumed
    └── GeneratorIOError            template read / artifact write / route append
        ├── TemplateNotFoundError
        ├── TemplateReadError
        ├── ArtifactWriteError
        └── RouteAppendError

A declined overwrite is *not* an error; it is a ``WriteResult.SKIPPED``
outcome recorded in the generation report.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional


class CrudGenError(Exception):
    """Base class for every error raised by crudgen."""


class RequestValidationError(CrudGenError):
    """The generation request cannot be served as given."""


class TableNotFoundError(RequestValidationError):
    """The requested table does not exist in the connected database."""

    def __init__(self, table_name: str) -> None:
        self.table_name: str = table_name
        super().__init__(f"`{table_name}` table does not exist")


class SchemaError(CrudGenError):
    """Schema introspection failed (missing table, permissions, driver error)."""


class GeneratorIOError(CrudGenError):
    """A template could not be read or an output file could not be written."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path: Optional[Path] = path
        super().__init__(message)


class TemplateNotFoundError(GeneratorIOError):
    """No template body is registered (or on disk) under the requested name."""


class TemplateReadError(GeneratorIOError):
    """A template file exists but could not be read."""


class ArtifactWriteError(GeneratorIOError):
    """A generated artifact could not be written to its target path."""


class RouteAppendError(GeneratorIOError):
    """The route registration line could not be appended to the routes file."""


__all__: List[str] = [
    "CrudGenError",
    "RequestValidationError",
    "TableNotFoundError",
    "SchemaError",
    "GeneratorIOError",
    "TemplateNotFoundError",
    "TemplateReadError",
    "ArtifactWriteError",
    "RouteAppendError",
]
