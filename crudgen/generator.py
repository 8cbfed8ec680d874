# File: crudgen/generator.py
"""
crudgen - CRUD Generator (Orchestrator)
========================================
Drives one generation run for one table through a forward-only state
machine::

    START ─▶ VALIDATED ─▶ NAMING_RESOLVED ─▶ CONTROLLER_BUILT ─▶ MODEL_BUILT
      │                                                             │
      ▼                                                             ▼
    ABORTED                              DONE ◀─ ROUTE_APPENDED ◀─ VIEWS_BUILT

Validation checks that the table exists *and* fetches and classifies its
columns, so a missing table or an introspection failure surfaces before
any file is touched.  A missing table ends the run in ``ABORTED`` with
the error recorded in the report; ``SchemaError`` and ``GeneratorIOError``
propagate to the caller, leaving already written files in place.

A declined overwrite is a normal outcome (``WriteResult.SKIPPED``) and
the run moves on.

Usage::

    from crudgen import CrudGenerator, GenerationRequest, GeneratorConfig

    config = GeneratorConfig(database_url="sqlite:///app.db")
    generator = CrudGenerator.from_config(config)
    report = generator.generate(GenerationRequest(table_name="posts"))
    print(report.summary())
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from crudgen.bindings import (
    TemplateBinding,
    controller_bindings,
    model_bindings,
    view_bindings,
)
from crudgen.classifier import ColumnClassifier
from crudgen.emitter import DecisionSource, FileEmitter
from crudgen.errors import (
    RequestValidationError,
    TableNotFoundError,
    TemplateNotFoundError,
)
from crudgen.introspection import SchemaIntrospector
from crudgen.models import (
    VIEW_NAMES,
    ColumnDescriptor,
    FieldKind,
    FieldSpec,
    GeneratedArtifact,
    GenerationRequest,
    GeneratorConfig,
    NamingContext,
    WriteResult,
)
from crudgen.naming import NamingResolver
from crudgen.renderer import render, unbound_placeholders
from crudgen.routes import RouteAppender
from crudgen.templates import TemplateStore
from crudgen.utils import Timer, count_lines

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.generator")


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class GenerationState(str, Enum):
    START = "start"
    VALIDATED = "validated"
    NAMING_RESOLVED = "naming_resolved"
    CONTROLLER_BUILT = "controller_built"
    MODEL_BUILT = "model_built"
    VIEWS_BUILT = "views_built"
    ROUTE_APPENDED = "route_appended"
    DONE = "done"
    ABORTED = "aborted"


_TRANSITIONS: Dict[GenerationState, FrozenSet[GenerationState]] = {
    GenerationState.START: frozenset({GenerationState.VALIDATED, GenerationState.ABORTED}),
    GenerationState.VALIDATED: frozenset({GenerationState.NAMING_RESOLVED}),
    GenerationState.NAMING_RESOLVED: frozenset({GenerationState.CONTROLLER_BUILT}),
    GenerationState.CONTROLLER_BUILT: frozenset({GenerationState.MODEL_BUILT}),
    GenerationState.MODEL_BUILT: frozenset({GenerationState.VIEWS_BUILT}),
    GenerationState.VIEWS_BUILT: frozenset({GenerationState.ROUTE_APPENDED}),
    GenerationState.ROUTE_APPENDED: frozenset({GenerationState.DONE}),
    GenerationState.DONE: frozenset(),
    GenerationState.ABORTED: frozenset(),
}


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=True, slots=True)
class ArtifactOutcome:
    """What happened to one generated file."""

    label: str
    path: Path
    result: WriteResult


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """Outcome of ``CrudGenerator.generate()``."""

    success: bool = False
    state: GenerationState = GenerationState.START
    table_name: str = ""
    naming: Optional[NamingContext] = None

    artifacts: List[ArtifactOutcome] = field(default_factory=list)
    route_line: Optional[str] = None
    routes_file: Optional[Path] = None

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    total_elapsed_seconds: float = 0.0

    def count(self, result: WriteResult) -> int:
        return sum(1 for artifact in self.artifacts if artifact.result is result)

    def paths(self, result: Optional[WriteResult] = None) -> List[Path]:
        return [
            artifact.path
            for artifact in self.artifacts
            if result is None or artifact.result is result
        ]

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  crudgen — Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:      {status}")
        lines.append(f"  Table:       {self.table_name}")
        lines.append(f"  Final state: {self.state.value}")
        if self.naming is not None:
            lines.append(f"  Class:       {self.naming.class_name}")
            lines.append(f"  Route:       {self.naming.route_name}")
        lines.append(
            f"  Files:       {self.count(WriteResult.CREATED)} created, "
            f"{self.count(WriteResult.OVERWRITTEN)} overwritten, "
            f"{self.count(WriteResult.SKIPPED)} skipped"
        )
        lines.append(f"  Total time:  {self.total_elapsed_seconds:.3f}s")

        if self.artifacts:
            lines.append(f"{'─'*60}")
            lines.append("  Artifacts:")
            icons: Dict[WriteResult, str] = {
                WriteResult.CREATED: "+",
                WriteResult.OVERWRITTEN: "~",
                WriteResult.SKIPPED: "⊘",
            }
            for artifact in self.artifacts:
                lines.append(
                    f"    {icons[artifact.result]} {artifact.label:<18s} "
                    f"{artifact.result.value:<12s} {artifact.path}"
                )

        if self.route_line is not None:
            lines.append(f"{'─'*60}")
            lines.append(f"  Route appended to {self.routes_file}:")
            lines.append(f"    {self.route_line}")

        if self.step_metrics:
            lines.append(f"{'─'*60}")
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<20s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        if self.errors:
            lines.append(f"{'─'*60}")
            lines.append(f"  Errors ({len(self.errors)}):")
            for err in self.errors:
                lines.append(f"    ✗ {err}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Config loader helpers
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_FILENAMES: Tuple[str, ...] = ("crudgen.yaml", "crudgen.yml", "crudgen.json")


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. An empty file is an empty mapping."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Load a generator configuration file (YAML or JSON).

    Dispatches on the file extension; a file with an unknown extension is
    tried as JSON, then as YAML.  A top-level ``crudgen:`` section is
    unwrapped when present.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Config path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        raw: Dict[str, Any] = _load_yaml_file(path)
    elif suffix == ".json":
        raw = _load_json_file(path)
    else:
        logger.info("Unknown extension '%s' — trying JSON then YAML.", suffix)
        try:
            raw = _load_json_file(path)
        except ValueError:
            raw = _load_yaml_file(path)

    section: Any = raw.get("crudgen", raw)
    if not isinstance(section, dict):
        raise ValueError(f"The 'crudgen' section of {path} must be a mapping.")
    return section


def find_config_file(project_root: Path) -> Optional[Path]:
    """First of ``crudgen.yaml`` / ``crudgen.yml`` / ``crudgen.json`` under *project_root*."""
    for name in DEFAULT_CONFIG_FILENAMES:
        candidate: Path = project_root / name
        if candidate.is_file():
            return candidate
    return None


def build_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GeneratorConfig:
    """
    Merge file settings with explicit overrides and validate.

    When *config_path* is None, a default config file in the project root
    (``overrides["project_root"]`` or the current directory) is used if
    present.  Overrides whose value is None are ignored.

    Raises:
        FileNotFoundError, ValueError: the config file is unusable or the
            merged settings do not validate.
    """
    cleaned: Dict[str, Any] = {
        key: value for key, value in (overrides or {}).items() if value is not None
    }

    if config_path is None:
        config_path = find_config_file(Path(cleaned.get("project_root", ".")))

    data: Dict[str, Any] = {}
    if config_path is not None:
        data = load_config_file(config_path)
        logger.info("Loaded configuration from %s", config_path)

    data.update(cleaned)

    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc


# ---------------------------------------------------------------------------
# CrudGenerator
# ---------------------------------------------------------------------------


class CrudGenerator:
    """
    Generates controller, model, views and route for one table per call.

    Collaborators are injected so tests can substitute an in-memory
    database, a stub directory or a scripted decision source.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        introspector: SchemaIntrospector,
        templates: Optional[TemplateStore] = None,
        decisions: Optional[DecisionSource] = None,
        classifier: Optional[ColumnClassifier] = None,
        route_appender: Optional[RouteAppender] = None,
    ) -> None:
        self._config: GeneratorConfig = config
        self._introspector: SchemaIntrospector = introspector
        self._templates: TemplateStore = (
            templates if templates is not None else TemplateStore(config.template_dir())
        )
        self._emitter: FileEmitter = FileEmitter(decisions)
        self._classifier: ColumnClassifier = (
            classifier
            if classifier is not None
            else ColumnClassifier(config.unwanted_columns)
        )
        self._route_appender: RouteAppender = (
            route_appender
            if route_appender is not None
            else RouteAppender(config.route_template)
        )
        self._state: GenerationState = GenerationState.START

    @classmethod
    def from_config(
        cls,
        config: GeneratorConfig,
        decisions: Optional[DecisionSource] = None,
    ) -> "CrudGenerator":
        """Build a generator whose introspector connects to ``config.database_url``."""
        if not config.database_url:
            raise RequestValidationError(
                "No database URL configured (use --database-url or 'database_url')."
            )
        introspector: SchemaIntrospector = SchemaIntrospector.from_url(
            config.database_url, schema=config.db_schema
        )
        return cls(config, introspector, decisions=decisions)

    @property
    def state(self) -> GenerationState:
        return self._state

    def _advance(self, target: GenerationState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise RuntimeError(
                f"Illegal generator transition {self._state.value} → {target.value}"
            )
        logger.debug("State %s → %s", self._state.value, target.value)
        self._state = target

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def generate(self, request: GenerationRequest) -> GenerationReport:
        """
        Run the full pipeline for ``request.table_name``.

        Returns:
            A ``GenerationReport``; ``success`` is False when the table
            does not exist (state ``ABORTED``, no files touched).

        Raises:
            RequestValidationError: unknown pluralization language.
            SchemaError: introspection failed.
            GeneratorIOError: a template could not be read or a file
                could not be written.
        """
        self._state = GenerationState.START
        report: GenerationReport = GenerationReport(table_name=request.table_name)
        pipeline_start: float = time.perf_counter()

        logger.info("Running CRUD generator for table '%s' ...", request.table_name)

        resolver: NamingResolver = NamingResolver.for_request(request)

        # Step 1: validate (existence, columns, classification)
        with Timer("validate") as t:
            exists: bool = self._introspector.exists(request.table_name)
            if exists:
                columns: Tuple[ColumnDescriptor, ...] = self._introspector.columns(
                    request.table_name
                )
                fields: Tuple[FieldSpec, ...] = self._classifier.classify(columns)
        if not exists:
            error: TableNotFoundError = TableNotFoundError(request.table_name)
            logger.error("%s", error)
            self._advance(GenerationState.ABORTED)
            report.step_metrics.append(
                GenerationStepMetric("validate", False, t.elapsed, str(error))
            )
            report.errors.append(str(error))
            return self._finish(report, pipeline_start)

        self._advance(GenerationState.VALIDATED)
        report.step_metrics.append(
            GenerationStepMetric(
                "validate", True, t.elapsed, f"{len(columns)} columns, {len(fields)} fields"
            )
        )

        # Step 2: naming
        with Timer("naming") as t:
            naming: NamingContext = resolver.resolve(request)
        report.naming = naming
        self._advance(GenerationState.NAMING_RESOLVED)
        report.step_metrics.append(
            GenerationStepMetric(
                "naming", True, t.elapsed, f"{naming.class_name} / {naming.route_name}"
            )
        )

        # Step 3: controller
        with Timer("controller") as t:
            self._build_controller(naming, columns, report)
        self._advance(GenerationState.CONTROLLER_BUILT)
        report.step_metrics.append(GenerationStepMetric("controller", True, t.elapsed))

        # Step 4: model
        with Timer("model") as t:
            self._build_model(naming, columns, fields, report)
        self._advance(GenerationState.MODEL_BUILT)
        report.step_metrics.append(GenerationStepMetric("model", True, t.elapsed))

        # Step 5: views (+ layout)
        with Timer("views") as t:
            self._build_views(naming, columns, fields, report)
        self._advance(GenerationState.VIEWS_BUILT)
        report.step_metrics.append(
            GenerationStepMetric("views", True, t.elapsed, f"{len(VIEW_NAMES)} views")
        )

        # Step 6: route
        with Timer("route") as t:
            self._build_route(naming, report)
        self._advance(GenerationState.ROUTE_APPENDED)
        report.step_metrics.append(GenerationStepMetric("route", True, t.elapsed))

        self._advance(GenerationState.DONE)
        report.success = True
        logger.info("Created successfully.")
        return self._finish(report, pipeline_start)

    # -----------------------------------------------------------------
    # Build steps
    # -----------------------------------------------------------------

    def _render(self, template_name: str, bindings: TemplateBinding) -> str:
        body: str = self._templates.get(template_name)
        missing: Tuple[str, ...] = unbound_placeholders(body, bindings)
        if missing:
            logger.warning(
                "Template '%s' leaves %d placeholder(s) unbound: %s",
                template_name,
                len(missing),
                ", ".join(missing),
            )
        content: str = render(body, bindings)
        logger.debug("Rendered '%s' (%d lines)", template_name, count_lines(content))
        return content

    def _emit(self, artifact: GeneratedArtifact, report: GenerationReport) -> WriteResult:
        result: WriteResult = self._emitter.write(artifact.target_path, artifact.content)
        report.artifacts.append(ArtifactOutcome(artifact.label, artifact.target_path, result))
        return result

    def _build_controller(
        self,
        naming: NamingContext,
        columns: Tuple[ColumnDescriptor, ...],
        report: GenerationReport,
    ) -> None:
        logger.info("Creating Controller ...")
        bindings: TemplateBinding = controller_bindings(naming, self._config, columns)
        self._emit(
            GeneratedArtifact(
                label="Controller",
                target_path=self._config.controller_path(naming),
                content=self._render("controller", bindings),
            ),
            report,
        )

    def _build_model(
        self,
        naming: NamingContext,
        columns: Tuple[ColumnDescriptor, ...],
        fields: Tuple[FieldSpec, ...],
        report: GenerationReport,
    ) -> None:
        logger.info("Creating Model ...")
        kind_of: Dict[str, FieldKind] = {
            column.name: self._classifier.field_kind(column.declared_type)
            for column in columns
        }
        bindings: TemplateBinding = model_bindings(
            naming, self._config, columns, fields, kind_of
        )
        self._emit(
            GeneratedArtifact(
                label="Model",
                target_path=self._config.model_path(naming),
                content=self._render("model", bindings),
            ),
            report,
        )

    def _build_layout(self, report: GenerationReport) -> None:
        layout_path: Path = self._config.layout_path()
        if layout_path.exists():
            return
        if not self._config.is_default_layout:
            raise TemplateNotFoundError(
                f"Layout '{self._config.layout}' not found at {layout_path}.",
                path=layout_path,
            )
        result: WriteResult = self._emitter.write_if_missing(
            layout_path, self._templates.get("layouts/app")
        )
        report.artifacts.append(ArtifactOutcome("Layout", layout_path, result))

    def _build_views(
        self,
        naming: NamingContext,
        columns: Tuple[ColumnDescriptor, ...],
        fields: Tuple[FieldSpec, ...],
        report: GenerationReport,
    ) -> None:
        logger.info("Creating Views ...")
        bindings: TemplateBinding = view_bindings(
            naming, self._config, columns, fields, self._templates
        )

        self._build_layout(report)

        for view in VIEW_NAMES:
            self._emit(
                GeneratedArtifact(
                    label=f"View {view}",
                    target_path=self._config.view_path(naming, view),
                    content=self._render(f"views/{view}", bindings),
                ),
                report,
            )

    def _build_route(self, naming: NamingContext, report: GenerationReport) -> None:
        logger.info("Creating Route ...")
        routes_file: Path = self._config.routes_path()
        report.route_line = self._route_appender.append_route(
            routes_file,
            naming.route_name,
            self._config.controller_qualified_name(naming),
        )
        report.routes_file = routes_file

    def _finish(self, report: GenerationReport, started: float) -> GenerationReport:
        report.state = self._state
        report.total_elapsed_seconds = time.perf_counter() - started
        return report


def generate_crud(
    request: GenerationRequest,
    config: GeneratorConfig,
    decisions: Optional[DecisionSource] = None,
) -> GenerationReport:
    """One-shot convenience: build a generator from *config* and run it."""
    return CrudGenerator.from_config(config, decisions=decisions).generate(request)


__all__: List[str] = [
    "GenerationState",
    "GenerationStepMetric",
    "ArtifactOutcome",
    "GenerationReport",
    "CrudGenerator",
    "generate_crud",
    "load_config_file",
    "find_config_file",
    "build_config",
    "DEFAULT_CONFIG_FILENAMES",
]
