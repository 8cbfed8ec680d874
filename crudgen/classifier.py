# File: crudgen/classifier.py
"""
crudgen - Column Classifier / Filter
=====================================

Decides which columns show up in generated tables and forms, and which
kind of input each one gets.

Exclusion policy
    Primary-key columns, database-generated (autoincrement) columns, and
    columns whose name is in the unwanted set (ids, bookkeeping
    timestamps, credentials) are dropped.  Name matching is
    case-insensitive.  Everything else is eligible.

Type mapping
    ``FIELD_KIND_BY_TYPE`` maps normalised declared-type tokens to a
    ``FieldKind``.  Tokens are normalised by ``normalize_declared_type``
    (lower-cased, ``(…)`` arguments and ``unsigned``/``zerofill`` removed,
    whitespace collapsed).  Lookup tries the whole token, then its first
    word; anything unknown is ``text``.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from crudgen.models import DEFAULT_UNWANTED_COLUMNS, ColumnDescriptor, FieldKind, FieldSpec

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.classifier")

_TYPE_ARGS_RE: re.Pattern[str] = re.compile(r"\([^)]*\)")
_TYPE_MODIFIERS_RE: re.Pattern[str] = re.compile(r"\b(unsigned|zerofill|signed)\b")
_WHITESPACE_RE: re.Pattern[str] = re.compile(r"\s+")

# ---------------------------------------------------------------------------
# Declared type → field kind
# ---------------------------------------------------------------------------

FIELD_KIND_BY_TYPE: Dict[str, FieldKind] = {
    # Integers
    "int": FieldKind.NUMBER,
    "integer": FieldKind.NUMBER,
    "tinyint": FieldKind.NUMBER,
    "smallint": FieldKind.NUMBER,
    "mediumint": FieldKind.NUMBER,
    "bigint": FieldKind.NUMBER,
    "serial": FieldKind.NUMBER,
    "smallserial": FieldKind.NUMBER,
    "bigserial": FieldKind.NUMBER,
    "year": FieldKind.NUMBER,
    # Fixed / floating point
    "decimal": FieldKind.NUMBER,
    "numeric": FieldKind.NUMBER,
    "float": FieldKind.NUMBER,
    "double": FieldKind.NUMBER,
    "double precision": FieldKind.NUMBER,
    "real": FieldKind.NUMBER,
    "money": FieldKind.NUMBER,
    # Booleans
    "bool": FieldKind.BOOLEAN,
    "boolean": FieldKind.BOOLEAN,
    "bit": FieldKind.BOOLEAN,
    # Temporal
    "date": FieldKind.DATE,
    "datetime": FieldKind.DATETIME,
    "datetime2": FieldKind.DATETIME,
    "smalldatetime": FieldKind.DATETIME,
    "datetimeoffset": FieldKind.DATETIME,
    "timestamp": FieldKind.DATETIME,
    "timestamptz": FieldKind.DATETIME,
    "timestamp with time zone": FieldKind.DATETIME,
    "timestamp without time zone": FieldKind.DATETIME,
    "time": FieldKind.TIME,
    "timetz": FieldKind.TIME,
    "time with time zone": FieldKind.TIME,
    "time without time zone": FieldKind.TIME,
    # Short strings
    "char": FieldKind.TEXT,
    "nchar": FieldKind.TEXT,
    "varchar": FieldKind.TEXT,
    "nvarchar": FieldKind.TEXT,
    "varchar2": FieldKind.TEXT,
    "character": FieldKind.TEXT,
    "character varying": FieldKind.TEXT,
    "string": FieldKind.TEXT,
    "uuid": FieldKind.TEXT,
    "enum": FieldKind.TEXT,
    "set": FieldKind.TEXT,
    "inet": FieldKind.TEXT,
    "cidr": FieldKind.TEXT,
    "macaddr": FieldKind.TEXT,
    # Long text
    "text": FieldKind.TEXTAREA,
    "tinytext": FieldKind.TEXTAREA,
    "mediumtext": FieldKind.TEXTAREA,
    "longtext": FieldKind.TEXTAREA,
    "ntext": FieldKind.TEXTAREA,
    "clob": FieldKind.TEXTAREA,
    "nclob": FieldKind.TEXTAREA,
    "json": FieldKind.TEXTAREA,
    "jsonb": FieldKind.TEXTAREA,
    "xml": FieldKind.TEXTAREA,
    # Binary
    "blob": FieldKind.FILE,
    "tinyblob": FieldKind.FILE,
    "mediumblob": FieldKind.FILE,
    "longblob": FieldKind.FILE,
    "binary": FieldKind.FILE,
    "varbinary": FieldKind.FILE,
    "bytea": FieldKind.FILE,
    "image": FieldKind.FILE,
}

DEFAULT_FIELD_KIND: FieldKind = FieldKind.TEXT

# Integer families, used when a Python/SQLAlchemy type has to be chosen.
INTEGER_TYPES: FrozenSet[str] = frozenset({
    "int", "integer", "tinyint", "smallint", "mediumint", "bigint",
    "serial", "smallserial", "bigserial", "year",
})


def normalize_declared_type(declared_type: str) -> str:
    """
    Reduce a raw type token to its lookup key.

    Examples:
        >>> normalize_declared_type("VARCHAR(255)")
        'varchar'
        >>> normalize_declared_type("int(10) unsigned")
        'int'
        >>> normalize_declared_type("TIMESTAMP WITHOUT TIME ZONE")
        'timestamp without time zone'
    """
    token: str = _TYPE_ARGS_RE.sub(" ", declared_type.lower())
    token = _TYPE_MODIFIERS_RE.sub(" ", token)
    return _WHITESPACE_RE.sub(" ", token).strip()


def field_kind_for(
    declared_type: str,
    type_map: Optional[Dict[str, FieldKind]] = None,
) -> FieldKind:
    """Map a declared column type to a ``FieldKind`` (``text`` when unknown)."""
    table: Dict[str, FieldKind] = FIELD_KIND_BY_TYPE if type_map is None else type_map
    token: str = normalize_declared_type(declared_type)
    if token in table:
        return table[token]
    first_word: str = token.split(" ", 1)[0] if token else ""
    return table.get(first_word, DEFAULT_FIELD_KIND)


def label_for(column_name: str) -> str:
    """``created_by`` → ``Created By``."""
    return " ".join(word.capitalize() for word in column_name.replace("_", " ").split(" "))


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------


class ColumnClassifier:
    """
    Projects introspected columns onto the ``FieldSpec`` list that drives
    views and forms.  Column order is preserved.
    """

    def __init__(
        self,
        unwanted_columns: Optional[Iterable[str]] = None,
        type_map: Optional[Dict[str, FieldKind]] = None,
    ) -> None:
        names: Iterable[str] = (
            DEFAULT_UNWANTED_COLUMNS if unwanted_columns is None else unwanted_columns
        )
        self._unwanted: FrozenSet[str] = frozenset(n.lower() for n in names)
        self._type_map: Dict[str, FieldKind] = (
            FIELD_KIND_BY_TYPE if type_map is None else type_map
        )

    @property
    def unwanted_columns(self) -> FrozenSet[str]:
        return self._unwanted

    def is_eligible(self, column: ColumnDescriptor) -> bool:
        if column.primary_key or column.autoincrement:
            return False
        return column.name.lower() not in self._unwanted

    def field_kind(self, declared_type: str) -> FieldKind:
        return field_kind_for(declared_type, self._type_map)

    def classify(self, columns: Iterable[ColumnDescriptor]) -> Tuple[FieldSpec, ...]:
        specs: List[FieldSpec] = []
        dropped: List[str] = []

        for column in columns:
            if not self.is_eligible(column):
                dropped.append(column.name)
                continue
            specs.append(
                FieldSpec(
                    label=label_for(column.name),
                    column=column,
                    field_kind=self.field_kind(column.declared_type),
                )
            )

        if dropped:
            logger.debug("Excluded column(s) from views/forms: %s", ", ".join(dropped))
        return tuple(specs)


__all__: List[str] = [
    "FIELD_KIND_BY_TYPE",
    "DEFAULT_FIELD_KIND",
    "INTEGER_TYPES",
    "normalize_declared_type",
    "field_kind_for",
    "label_for",
    "ColumnClassifier",
]
