# File: crudgen/emitter.py
"""
crudgen - File Emitter
=======================
Writes generated artifacts into the target project without silently
clobbering existing files.

- Missing target → parent directories are created, content is written
  atomically, ``WriteResult.CREATED``.
- Existing target → the injected ``DecisionSource`` is asked whether to
  overwrite (default answer: yes).  "No" leaves the file byte-identical
  and returns ``WriteResult.SKIPPED``; "yes" replaces it completely and
  returns ``WriteResult.OVERWRITTEN``.

Write failures are raised as ``ArtifactWriteError``; nothing is retried.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Protocol, TextIO, runtime_checkable

from crudgen.errors import ArtifactWriteError
from crudgen.models import WriteResult
from crudgen.utils import write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.emitter")


# ---------------------------------------------------------------------------
# Decision sources
# ---------------------------------------------------------------------------


@runtime_checkable
class DecisionSource(Protocol):
    """Synchronous yes/no question."""

    def confirm(self, question: str, default: bool = True) -> bool: ...


class ConsolePrompt:
    """
    Blocking terminal prompt.

    An empty answer (or end of input) takes the default; any answer that
    starts with ``n``/``N`` means no, anything else means yes.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        stream: Optional[TextIO] = None,
    ) -> None:
        self._input: Callable[[str], str] = input_func
        self._stream: TextIO = stream if stream is not None else sys.stderr

    def confirm(self, question: str, default: bool = True) -> bool:
        suffix: str = "[Y/n]" if default else "[y/N]"
        try:
            answer: str = self._input(f"{question} {suffix} ")
        except EOFError:
            self._stream.write("\n")
            return default

        answer = answer.strip().lower()
        if not answer:
            return default
        return not answer.startswith("n")


class StaticDecision:
    """Always gives the same answer; for ``--force``/``--no-overwrite`` and tests."""

    def __init__(self, answer: bool) -> None:
        self.answer: bool = answer

    def confirm(self, question: str, default: bool = True) -> bool:
        logger.debug("%s → %s (static)", question, "yes" if self.answer else "no")
        return self.answer


# ---------------------------------------------------------------------------
# FileEmitter
# ---------------------------------------------------------------------------


class FileEmitter:
    """Writes text files, asking before replacing one that already exists."""

    def __init__(self, decisions: Optional[DecisionSource] = None) -> None:
        self._decisions: DecisionSource = (
            decisions if decisions is not None else ConsolePrompt()
        )

    def write(self, path: Path, content: str) -> WriteResult:
        path = Path(path)
        existed: bool = path.exists()

        if existed:
            question: str = f"{path} already exists. Do you want to overwrite it?"
            if not self._decisions.confirm(question, default=True):
                logger.info("Skipped %s (overwrite declined).", path)
                return WriteResult.SKIPPED

        self._write(path, content)

        result: WriteResult = WriteResult.OVERWRITTEN if existed else WriteResult.CREATED
        logger.info("%s %s", "Overwrote" if existed else "Created", path)
        return result

    def write_if_missing(self, path: Path, content: str) -> WriteResult:
        """Write *content* only when *path* is absent; never prompts."""
        path = Path(path)
        if path.exists():
            logger.debug("Kept existing %s", path)
            return WriteResult.SKIPPED

        self._write(path, content)
        logger.info("Created %s", path)
        return WriteResult.CREATED

    @staticmethod
    def _write(path: Path, content: str) -> None:
        try:
            write_file(path, content, atomic=True)
        except OSError as exc:
            raise ArtifactWriteError(f"Cannot write {path}: {exc}", path=path) from exc


__all__: List[str] = [
    "DecisionSource",
    "ConsolePrompt",
    "StaticDecision",
    "FileEmitter",
]
