"""
tests/test_emitter.py
Unit tests for crudgen.emitter (FileEmitter and decision sources).
"""

from __future__ import annotations

import os
import pathlib
import stat
from typing import List

import pytest

from crudgen.emitter import ConsolePrompt, DecisionSource, FileEmitter, StaticDecision
from crudgen.errors import ArtifactWriteError
from crudgen.models import WriteResult


# ===========================================================================
# Decision sources
# ===========================================================================


def _answers(*replies: str):
    queue: List[str] = list(replies)

    def fake_input(prompt: str) -> str:
        return queue.pop(0)

    return fake_input


def _eof(prompt: str) -> str:
    raise EOFError


class TestConsolePrompt:
    @pytest.mark.parametrize("reply", ["", "  ", "y", "Y", "yes", "sure"])
    def test_yes_answers(self, reply: str) -> None:
        assert ConsolePrompt(_answers(reply)).confirm("Overwrite?") is True

    @pytest.mark.parametrize("reply", ["n", "N", "no", " No "])
    def test_no_answers(self, reply: str) -> None:
        assert ConsolePrompt(_answers(reply)).confirm("Overwrite?") is False

    def test_empty_answer_takes_default(self) -> None:
        assert ConsolePrompt(_answers("")).confirm("Overwrite?", default=False) is False

    def test_eof_takes_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert ConsolePrompt(_eof).confirm("Overwrite?") is True
        assert ConsolePrompt(_eof).confirm("Overwrite?", default=False) is False

    def test_prompt_shows_default(self) -> None:
        seen: List[str] = []

        def fake_input(prompt: str) -> str:
            seen.append(prompt)
            return ""

        ConsolePrompt(fake_input).confirm("Overwrite x?")
        assert seen == ["Overwrite x? [Y/n] "]

    def test_sources_satisfy_protocol(self) -> None:
        assert isinstance(ConsolePrompt(), DecisionSource)
        assert isinstance(StaticDecision(True), DecisionSource)


# ===========================================================================
# FileEmitter
# ===========================================================================


class TestFileEmitterWrite:
    def test_creates_missing_file_and_parents(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "app" / "controllers" / "post_controller.py"
        result = FileEmitter(StaticDecision(False)).write(target, "content\n")
        assert result is WriteResult.CREATED
        assert target.read_text(encoding="utf-8") == "content\n"

    def test_create_does_not_ask(self, tmp_path: pathlib.Path, scripted) -> None:
        FileEmitter(scripted).write(tmp_path / "new.py", "x")
        assert scripted.questions == []

    def test_declined_overwrite_leaves_file_untouched(
        self, tmp_path: pathlib.Path, make_decisions
    ) -> None:
        target = tmp_path / "model.py"
        target.write_bytes(b"original\r\nbytes")
        decisions = make_decisions([False])
        result = FileEmitter(decisions).write(target, "replacement")
        assert result is WriteResult.SKIPPED
        assert target.read_bytes() == b"original\r\nbytes"
        assert len(decisions.questions) == 1
        assert str(target) in decisions.questions[0]

    def test_accepted_overwrite_replaces_file(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "model.py"
        target.write_text("a much longer original content", encoding="utf-8")
        result = FileEmitter(StaticDecision(True)).write(target, "short")
        assert result is WriteResult.OVERWRITTEN
        assert target.read_text(encoding="utf-8") == "short"

    def test_default_answer_is_yes(self, tmp_path: pathlib.Path, scripted) -> None:
        target = tmp_path / "model.py"
        target.write_text("old", encoding="utf-8")
        assert FileEmitter(scripted).write(target, "new") is WriteResult.OVERWRITTEN

    def test_unwritable_target_raises(self, tmp_path: pathlib.Path) -> None:
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(ArtifactWriteError) as excinfo:
            FileEmitter(StaticDecision(True)).write(blocker / "child.py", "x")
        assert excinfo.value.path == blocker / "child.py"

    def test_no_temp_files_left_behind(self, tmp_path: pathlib.Path) -> None:
        emitter = FileEmitter(StaticDecision(True))
        emitter.write(tmp_path / "a.py", "1")
        emitter.write(tmp_path / "a.py", "2")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.py"]

    @pytest.mark.parametrize("mode", [0o644, 0o755, 0o600])
    def test_overwrite_keeps_permissions(self, tmp_path: pathlib.Path, mode: int) -> None:
        target = tmp_path / "post_controller.py"
        target.write_text("old", encoding="utf-8")
        os.chmod(target, mode)
        FileEmitter(StaticDecision(True)).write(target, "new")
        assert stat.S_IMODE(target.stat().st_mode) == mode

    def test_new_file_follows_umask(self, tmp_path: pathlib.Path) -> None:
        previous = os.umask(0o022)
        try:
            target = tmp_path / "post.py"
            FileEmitter(StaticDecision(True)).write(target, "x")
        finally:
            os.umask(previous)
        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    def test_overwrite_through_symlink_keeps_link(self, tmp_path: pathlib.Path) -> None:
        real = tmp_path / "shared" / "index.html"
        real.parent.mkdir()
        real.write_text("old", encoding="utf-8")
        link = tmp_path / "index.html"
        link.symlink_to(real)
        FileEmitter(StaticDecision(True)).write(link, "new")
        assert link.is_symlink()
        assert real.read_text(encoding="utf-8") == "new"


class TestFileEmitterWriteIfMissing:
    def test_writes_when_absent(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "layouts" / "app.html"
        assert FileEmitter(StaticDecision(False)).write_if_missing(target, "x") is WriteResult.CREATED
        assert target.read_text(encoding="utf-8") == "x"

    def test_keeps_existing_without_asking(self, tmp_path: pathlib.Path, scripted) -> None:
        target = tmp_path / "app.html"
        target.write_text("mine", encoding="utf-8")
        assert FileEmitter(scripted).write_if_missing(target, "theirs") is WriteResult.SKIPPED
        assert target.read_text(encoding="utf-8") == "mine"
        assert scripted.questions == []
