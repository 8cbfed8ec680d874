"""
tests/conftest.py
Shared fixtures for the crudgen test suite.

No external mocking libraries are used: a real SQLite database file is
created with SQLAlchemy Core inside pytest's tmp_path, and generated
files are written to a temporary project root.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Iterator, List, Sequence

import pytest
import yaml
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    create_engine,
)
from sqlalchemy.engine import Engine

from crudgen.introspection import SchemaIntrospector
from crudgen.models import ColumnDescriptor, GeneratorConfig


# ---------------------------------------------------------------------------
# Scripted decision source
# ---------------------------------------------------------------------------


class ScriptedDecision:
    """Answers overwrite questions from a fixed script and records them."""

    def __init__(self, answers: Sequence[bool] = ()) -> None:
        self.answers: List[bool] = list(answers)
        self.questions: List[str] = []

    def confirm(self, question: str, default: bool = True) -> bool:
        self.questions.append(question)
        if self.answers:
            return self.answers.pop(0)
        return default


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


def _build_metadata() -> MetaData:
    metadata = MetaData()

    Table(
        "posts",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("title", String(255), nullable=False),
        Column("body", Text, nullable=True),
        Column("created_at", DateTime, nullable=True),
        Column("updated_at", DateTime, nullable=True),
    )
    Table(
        "blog_posts",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("headline", String(120), nullable=False),
        Column("published_on", Date, nullable=True),
    )
    Table(
        "notes",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("content", Text, nullable=False),
        Column("pinned", Boolean, nullable=False),
        Column("price", Numeric(10, 2), nullable=True),
        Column("deleted_at", DateTime, nullable=True),
    )
    Table(
        "kullanicilar",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("ad", String(100), nullable=False),
    )
    Table(
        "oturum",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("anahtar", String(64), nullable=False),
    )
    return metadata


@pytest.fixture()
def database_url(tmp_path: pathlib.Path) -> str:
    """SQLite file database holding the sample tables."""
    url: str = f"sqlite:///{tmp_path / 'app.db'}"
    engine: Engine = create_engine(url)
    _build_metadata().create_all(engine)
    engine.dispose()
    return url


@pytest.fixture()
def engine(database_url: str) -> Iterator[Engine]:
    eng: Engine = create_engine(database_url)
    yield eng
    eng.dispose()


@pytest.fixture()
def introspector(engine: Engine) -> SchemaIntrospector:
    return SchemaIntrospector(engine)


# ---------------------------------------------------------------------------
# Project fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def project_root(tmp_path: pathlib.Path) -> pathlib.Path:
    root: pathlib.Path = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture()
def config(project_root: pathlib.Path, database_url: str) -> GeneratorConfig:
    return GeneratorConfig(project_root=str(project_root), database_url=database_url)


@pytest.fixture()
def config_yaml_path(project_root: pathlib.Path, database_url: str) -> pathlib.Path:
    """A crudgen.yaml in the project root."""
    path: pathlib.Path = project_root / "crudgen.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(
            {
                "crudgen": {
                    "database_url": database_url,
                    "model_namespace": "blog.models",
                    "unwanted_columns": ["id", "created_at", "updated_at"],
                }
            },
            fh,
            default_flow_style=False,
        )
    return path


@pytest.fixture()
def posts_columns() -> List[ColumnDescriptor]:
    """The `posts` table as the introspector reports it on SQLite."""
    return [
        ColumnDescriptor(name="id", declared_type="INTEGER", nullable=False, primary_key=True),
        ColumnDescriptor(name="title", declared_type="VARCHAR(255)", nullable=False),
        ColumnDescriptor(name="body", declared_type="TEXT"),
        ColumnDescriptor(name="created_at", declared_type="DATETIME"),
        ColumnDescriptor(name="updated_at", declared_type="DATETIME"),
    ]


@pytest.fixture()
def scripted() -> ScriptedDecision:
    return ScriptedDecision()


@pytest.fixture()
def make_decisions() -> type:
    """Factory for scripted decision sources: ``make_decisions([False, True])``."""
    return ScriptedDecision


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """``cli_main`` reconfigures the ``crudgen`` logger; undo it after each test."""
    yield
    crudgen_logger: logging.Logger = logging.getLogger("crudgen")
    crudgen_logger.handlers.clear()
    crudgen_logger.setLevel(logging.NOTSET)
    crudgen_logger.propagate = True
