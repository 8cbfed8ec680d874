"""
tests/test_generator.py
End-to-end tests for crudgen.generator (CrudGenerator and config loading).

Run with:
    pytest tests/ -v
"""

from __future__ import annotations

import json
import logging
import pathlib
from typing import List, Tuple

import pytest

from crudgen.emitter import StaticDecision
from crudgen.errors import RequestValidationError, SchemaError, TemplateNotFoundError
from crudgen.generator import (
    CrudGenerator,
    GenerationReport,
    GenerationState,
    build_config,
    find_config_file,
    generate_crud,
    load_config_file,
)
from crudgen.introspection import SchemaIntrospector
from crudgen.models import VIEW_NAMES, ColumnDescriptor, GenerationRequest, GeneratorConfig, WriteResult
from crudgen.routes import ROUTES_FILE_HEADER


def _run(
    config: GeneratorConfig,
    introspector: SchemaIntrospector,
    table: str,
    decisions=None,
    **options,
) -> GenerationReport:
    generator = CrudGenerator(config, introspector, decisions=decisions or StaticDecision(True))
    return generator.generate(GenerationRequest(table_name=table, **options))


def _files_under(root: pathlib.Path) -> List[pathlib.Path]:
    return sorted(p for p in root.rglob("*") if p.is_file())


def _route_lines(config: GeneratorConfig) -> List[str]:
    content = (config.root / "app" / "routes.py").read_text(encoding="utf-8")
    return [line for line in content.splitlines() if line.startswith("resource(")]


# ===========================================================================
# End-to-end scenarios
# ===========================================================================


class TestPostsScenario:
    def test_names(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        report = _run(config, introspector, "posts")
        assert report.success is True
        assert report.state is GenerationState.DONE
        assert report.naming.class_name == "Post"
        assert report.naming.route_name == "posts"

    def test_artifact_paths(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        report = _run(config, introspector, "posts")
        root = config.root
        expected = {
            root / "app" / "controllers" / "post_controller.py",
            root / "app" / "models" / "post.py",
            root / "app" / "templates" / "layouts" / "app.html",
        }
        expected |= {root / "app" / "templates" / "post" / f"{v}.html" for v in VIEW_NAMES}
        assert set(report.paths(WriteResult.CREATED)) == expected
        for path in expected:
            assert path.is_file()

    def test_form_contains_eligible_fields_only(
        self, config: GeneratorConfig, introspector: SchemaIntrospector
    ) -> None:
        _run(config, introspector, "posts")
        form = (config.root / "app" / "templates" / "post" / "form.html").read_text(encoding="utf-8")
        assert 'name="title"' in form
        assert 'name="body"' in form
        for excluded in ("id", "created_at", "updated_at"):
            assert f'name="{excluded}"' not in form

    def test_controller_and_model_content(
        self, config: GeneratorConfig, introspector: SchemaIntrospector
    ) -> None:
        _run(config, introspector, "posts")
        controller = (config.root / "app" / "controllers" / "post_controller.py").read_text(encoding="utf-8")
        model = (config.root / "app" / "models" / "post.py").read_text(encoding="utf-8")
        assert "class PostController:" in controller
        assert "from app.models.post import Post" in controller
        assert 'prefix="/posts"' in controller
        assert "class Post(Base):" in model
        assert '__tablename__ = "posts"' in model
        assert "{{" not in model

    def test_route_line(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        report = _run(config, introspector, "posts")
        routes = config.root / "app" / "routes.py"
        assert report.routes_file == routes
        assert routes.read_text(encoding="utf-8") == ROUTES_FILE_HEADER + (
            'resource("posts", "app.controllers.post_controller.PostController")\n'
        )


class TestOverrides:
    def test_class_name_override_is_exact(
        self, config: GeneratorConfig, introspector: SchemaIntrospector
    ) -> None:
        report = _run(config, introspector, "posts", class_name_override="Article")
        assert report.naming.class_name == "Article"
        assert report.naming.route_name == "posts"
        assert (config.root / "app" / "controllers" / "article_controller.py").is_file()
        assert (config.root / "app" / "templates" / "article" / "index.html").is_file()

    def test_route_override(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        report = _run(config, introspector, "blog_posts", route_override="articles")
        assert report.naming.class_name == "BlogPost"
        assert report.route_line == (
            'resource("articles", "app.controllers.blog_post_controller.BlogPostController")'
        )

    def test_turkish_rules(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        report = _run(config, introspector, "oturum", language="tr")
        assert report.success is True
        assert report.naming.class_name == "Oturum"
        assert (config.root / "app" / "models" / "oturum.py").is_file()

    def test_turkish_plural_table(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        report = _run(config, introspector, "kullanicilar", language="tr")
        assert report.naming.class_name == "Kullanici"

    def test_unknown_language_fails_before_any_io(
        self, config: GeneratorConfig, introspector: SchemaIntrospector
    ) -> None:
        with pytest.raises(RequestValidationError):
            _run(config, introspector, "posts", language="xx")
        assert _files_under(config.root) == []


class TestRepeatedRuns:
    def test_route_is_appended_on_every_run(
        self, config: GeneratorConfig, introspector: SchemaIntrospector
    ) -> None:
        _run(config, introspector, "posts")
        _run(config, introspector, "posts")
        lines = _route_lines(config)
        assert len(lines) == 2
        assert lines[0] == lines[1]

    def test_second_run_overwrites_when_confirmed(
        self, config: GeneratorConfig, introspector: SchemaIntrospector
    ) -> None:
        _run(config, introspector, "posts")
        report = _run(config, introspector, "posts")
        assert report.count(WriteResult.OVERWRITTEN) == 2 + len(VIEW_NAMES)
        assert report.count(WriteResult.CREATED) == 0

    def test_declined_overwrite_keeps_files(
        self, config: GeneratorConfig, introspector: SchemaIntrospector, make_decisions
    ) -> None:
        _run(config, introspector, "posts")
        controller = config.root / "app" / "controllers" / "post_controller.py"
        controller.write_text("# hand edited\n", encoding="utf-8")

        decisions = make_decisions([False] * (2 + len(VIEW_NAMES)))
        report = _run(config, introspector, "posts", decisions=decisions)

        assert controller.read_text(encoding="utf-8") == "# hand edited\n"
        assert report.success is True
        assert report.state is GenerationState.DONE
        assert report.count(WriteResult.SKIPPED) == 2 + len(VIEW_NAMES)
        assert len(decisions.questions) == 2 + len(VIEW_NAMES)
        assert len(_route_lines(config)) == 2

    def test_layout_is_never_overwritten(
        self, config: GeneratorConfig, introspector: SchemaIntrospector, scripted
    ) -> None:
        layout = config.layout_path()
        layout.parent.mkdir(parents=True)
        layout.write_text("<my layout/>", encoding="utf-8")

        report = _run(config, introspector, "posts", decisions=scripted)

        assert layout.read_text(encoding="utf-8") == "<my layout/>"
        assert layout not in report.paths()
        assert not any("app.html" in q for q in scripted.questions)


# ===========================================================================
# Layout handling
# ===========================================================================


class TestLayout:
    def test_default_layout_is_created(
        self, config: GeneratorConfig, introspector: SchemaIntrospector
    ) -> None:
        report = _run(config, introspector, "posts")
        layout = config.layout_path()
        assert layout.is_file()
        assert "{% block content %}" in layout.read_text(encoding="utf-8")
        labels = [artifact.label for artifact in report.artifacts]
        assert labels.index("Layout") < labels.index("View index")

    def test_missing_custom_layout(self, project_root: pathlib.Path, database_url: str, introspector) -> None:
        config = GeneratorConfig(
            project_root=str(project_root),
            database_url=database_url,
            layout="layouts/admin.html",
        )
        with pytest.raises(TemplateNotFoundError, match="admin.html"):
            _run(config, introspector, "posts")
        assert not (project_root / "app" / "templates" / "post").exists()

    def test_existing_custom_layout(self, project_root: pathlib.Path, database_url: str, introspector) -> None:
        config = GeneratorConfig(
            project_root=str(project_root),
            database_url=database_url,
            layout="layouts/admin.html",
        )
        config.layout_path().parent.mkdir(parents=True)
        config.layout_path().write_text("{% block content %}{% endblock %}", encoding="utf-8")

        report = _run(config, introspector, "posts")

        index = (project_root / "app" / "templates" / "post" / "index.html").read_text(encoding="utf-8")
        assert '{% extends "layouts/admin.html" %}' in index
        assert "Layout" not in [a.label for a in report.artifacts]
        assert not (project_root / "app" / "templates" / "layouts" / "app.html").exists()


# ===========================================================================
# Failure paths
# ===========================================================================


class _BrokenIntrospector:
    def exists(self, table_name: str) -> bool:
        return True

    def columns(self, table_name: str) -> Tuple[ColumnDescriptor, ...]:
        raise SchemaError("permission denied for table")


class TestFailures:
    def test_missing_table_aborts_without_side_effects(
        self, config: GeneratorConfig, introspector: SchemaIntrospector
    ) -> None:
        generator = CrudGenerator(config, introspector, decisions=StaticDecision(True))
        report = generator.generate(GenerationRequest(table_name="missing_table"))

        assert report.success is False
        assert report.state is GenerationState.ABORTED
        assert generator.state is GenerationState.ABORTED
        assert report.errors == ["`missing_table` table does not exist"]
        assert report.artifacts == []
        assert report.route_line is None
        assert _files_under(config.root) == []

    def test_schema_error_propagates_before_writes(self, config: GeneratorConfig) -> None:
        generator = CrudGenerator(config, _BrokenIntrospector(), decisions=StaticDecision(True))
        with pytest.raises(SchemaError, match="permission denied"):
            generator.generate(GenerationRequest(table_name="posts"))
        assert generator.state is GenerationState.START
        assert _files_under(config.root) == []

    def test_illegal_transition(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        generator = CrudGenerator(config, introspector)
        with pytest.raises(RuntimeError, match="Illegal generator transition"):
            generator._advance(GenerationState.DONE)

    def test_from_config_requires_database_url(self, project_root: pathlib.Path) -> None:
        with pytest.raises(RequestValidationError, match="database URL"):
            CrudGenerator.from_config(GeneratorConfig(project_root=str(project_root)))

    def test_generator_can_be_reused_after_abort(
        self, config: GeneratorConfig, introspector: SchemaIntrospector
    ) -> None:
        generator = CrudGenerator(config, introspector, decisions=StaticDecision(True))
        generator.generate(GenerationRequest(table_name="missing_table"))
        report = generator.generate(GenerationRequest(table_name="posts"))
        assert report.state is GenerationState.DONE


# ===========================================================================
# Templates, soft deletes, configuration
# ===========================================================================


class TestTemplatesAndModels:
    def test_soft_deletes(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        _run(config, introspector, "notes")
        model = (config.root / "app" / "models" / "note.py").read_text(encoding="utf-8")
        assert "from app.database import Base, SoftDeletes" in model
        assert "class Note(SoftDeletes, Base):" in model
        assert 'rules: ClassVar[Dict[str, str]] = {"content": "required", "pinned": "required"}' in model

    def test_stub_path_overrides_builtin(
        self, project_root: pathlib.Path, database_url: str, introspector: SchemaIntrospector
    ) -> None:
        stubs = project_root / "stubs"
        stubs.mkdir()
        (stubs / "controller.stub").write_text("# {{modelName}} at /{{routeName}}\n", encoding="utf-8")
        config = GeneratorConfig(
            project_root=str(project_root), database_url=database_url, stub_path="stubs"
        )

        _run(config, introspector, "posts")

        controller = project_root / "app" / "controllers" / "post_controller.py"
        assert controller.read_text(encoding="utf-8") == "# Post at /posts\n"
        model = (project_root / "app" / "models" / "post.py").read_text(encoding="utf-8")
        assert "class Post(Base):" in model

    def test_unbound_placeholder_is_reported(
        self,
        project_root: pathlib.Path,
        database_url: str,
        introspector: SchemaIntrospector,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        stubs = project_root / "stubs"
        stubs.mkdir()
        (stubs / "model.stub").write_text("class {{modelName}}: {{authorName}}\n", encoding="utf-8")
        config = GeneratorConfig(
            project_root=str(project_root), database_url=database_url, stub_path="stubs"
        )

        with caplog.at_level(logging.WARNING, logger="crudgen.generator"):
            _run(config, introspector, "posts")

        model = (project_root / "app" / "models" / "post.py").read_text(encoding="utf-8")
        assert model == "class Post: {{authorName}}\n"
        assert "{{authorName}}" in caplog.text

    def test_config_namespaces(self, config_yaml_path: pathlib.Path, introspector: SchemaIntrospector) -> None:
        config = build_config(config_yaml_path, {"project_root": str(config_yaml_path.parent)})
        _run(config, introspector, "posts")
        controller = (config.root / "app" / "controllers" / "post_controller.py").read_text(encoding="utf-8")
        assert "from blog.models.post import Post" in controller

    def test_generate_crud_shortcut(self, config: GeneratorConfig) -> None:
        report = generate_crud(GenerationRequest(table_name="posts"), config, StaticDecision(True))
        assert report.success is True

    def test_summary(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        summary = _run(config, introspector, "posts").summary()
        assert "SUCCESS" in summary
        assert "Class:       Post" in summary
        assert "8 created" in summary
        assert 'resource("posts"' in summary

    def test_step_metrics(self, config: GeneratorConfig, introspector: SchemaIntrospector) -> None:
        report = _run(config, introspector, "posts")
        assert [m.step_name for m in report.step_metrics] == [
            "validate", "naming", "controller", "model", "views", "route",
        ]
        assert report.step_metrics[0].detail == "5 columns, 2 fields"
        assert all(m.success for m in report.step_metrics)


class TestConfigLoading:
    def test_yaml_section_is_unwrapped(self, config_yaml_path: pathlib.Path) -> None:
        data = load_config_file(config_yaml_path)
        assert data["model_namespace"] == "blog.models"
        assert "crudgen" not in data

    def test_json_without_section(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "crudgen.json"
        path.write_text(json.dumps({"views_dir": "views"}), encoding="utf-8")
        assert load_config_file(path) == {"views_dir": "views"}

    def test_empty_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "crudgen.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path) == {}

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config_file(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        "name,content",
        [
            ("bad.yaml", "crudgen: [unclosed"),
            ("list.yaml", "- a\n- b\n"),
            ("bad.json", "{not json"),
            ("section.yaml", "crudgen: 3\n"),
        ],
    )
    def test_unusable_files(self, tmp_path: pathlib.Path, name: str, content: str) -> None:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ValueError):
            load_config_file(path)

    def test_find_config_file(self, config_yaml_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        assert find_config_file(config_yaml_path.parent) == config_yaml_path
        assert find_config_file(tmp_path / "elsewhere") is None

    def test_overrides_win_and_none_is_ignored(self, config_yaml_path: pathlib.Path) -> None:
        config = build_config(
            config_yaml_path,
            {"model_namespace": "shop.models", "database_url": None},
        )
        assert config.model_namespace == "shop.models"
        assert config.database_url is not None
        assert config.unwanted_columns == ["id", "created_at", "updated_at"]

    def test_default_file_is_discovered(self, config_yaml_path: pathlib.Path) -> None:
        config = build_config(None, {"project_root": str(config_yaml_path.parent)})
        assert config.model_namespace == "blog.models"

    def test_unknown_setting_is_rejected(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "crudgen.yaml"
        path.write_text("crudgen:\n  no_such_setting: 1\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Config validation failed"):
            build_config(path)

    def test_view_extension_gets_a_dot(self) -> None:
        assert GeneratorConfig(view_extension="jinja").view_extension == ".jinja"
