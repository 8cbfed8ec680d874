# File: crudgen/introspection.py
"""
crudgen - Schema Introspector
==============================

Live table/column introspection through SQLAlchemy's ``Inspector``.

A new ``Inspector`` is created for every call: the inspector memoises
reflection results internally, and the generator must always see the
schema as it is *now*.

Declared types are compiled with the engine's own dialect, so the raw
tokens look like what the database reports (``VARCHAR(255)``,
``TIMESTAMP WITHOUT TIME ZONE``, ``TINYINT(1)``).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.engine.reflection import Inspector
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError

from crudgen.errors import SchemaError
from crudgen.models import ColumnDescriptor

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.introspection")


class SchemaIntrospector:
    """
    Answers two questions about the connected database:

    - ``exists(table)`` → bool
    - ``columns(table)`` → ordered ``ColumnDescriptor`` tuple

    Usage::

        introspector = SchemaIntrospector.from_url("sqlite:///app.db")
        if introspector.exists("posts"):
            cols = introspector.columns("posts")
    """

    def __init__(self, engine: Engine, schema: Optional[str] = None) -> None:
        self._engine: Engine = engine
        self._schema: Optional[str] = schema

    @classmethod
    def from_url(cls, url: str, schema: Optional[str] = None) -> "SchemaIntrospector":
        """Create an introspector over a fresh engine for *url*."""
        try:
            engine: Engine = create_engine(url)
        except (SQLAlchemyError, ValueError, ImportError) as exc:
            raise SchemaError(f"Cannot create database engine: {exc}") from exc
        return cls(engine, schema=schema)

    @property
    def engine(self) -> Engine:
        return self._engine

    def _inspector(self) -> Inspector:
        return inspect(self._engine)

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def exists(self, table_name: str) -> bool:
        """Return True if *table_name* exists in the connected database."""
        try:
            found: bool = self._inspector().has_table(table_name, schema=self._schema)
        except SQLAlchemyError as exc:
            raise SchemaError(
                f"Could not check whether table `{table_name}` exists: {exc}"
            ) from exc
        logger.debug("Table '%s' exists: %s", table_name, found)
        return found

    def columns(self, table_name: str) -> Tuple[ColumnDescriptor, ...]:
        """
        Return the columns of *table_name* in declared order.

        Raises:
            SchemaError: if the table is missing or reflection fails.
        """
        inspector: Inspector = self._inspector()
        try:
            raw_columns: List[Dict[str, Any]] = inspector.get_columns(
                table_name, schema=self._schema
            )
            pk: Dict[str, Any] = inspector.get_pk_constraint(
                table_name, schema=self._schema
            )
        except NoSuchTableError as exc:
            raise SchemaError(f"Table `{table_name}` does not exist.") from exc
        except SQLAlchemyError as exc:
            raise SchemaError(
                f"Could not read columns of `{table_name}`: {exc}"
            ) from exc

        if not raw_columns:
            raise SchemaError(f"Table `{table_name}` does not exist or has no columns.")

        pk_columns: Set[str] = set(pk.get("constrained_columns") or ())

        descriptors: Tuple[ColumnDescriptor, ...] = tuple(
            ColumnDescriptor(
                name=raw["name"],
                declared_type=self._declared_type(raw["type"]),
                nullable=bool(raw.get("nullable", True)),
                primary_key=raw["name"] in pk_columns,
                autoincrement=raw.get("autoincrement") is True,
            )
            for raw in raw_columns
        )

        logger.info(
            "Introspected %d column(s) of '%s': %s",
            len(descriptors),
            table_name,
            ", ".join(c.name for c in descriptors),
        )
        return descriptors

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    def _declared_type(self, sa_type: Any) -> str:
        """Render a reflected SQLAlchemy type as the dialect spells it."""
        try:
            return str(sa_type.compile(dialect=self._engine.dialect))
        except SQLAlchemyError:
            logger.debug(
                "Type %r does not compile for %s; using its class name.",
                sa_type,
                self._engine.dialect.name,
            )
            return type(sa_type).__name__.upper()


__all__: List[str] = ["SchemaIntrospector"]
