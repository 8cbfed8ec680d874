# File: crudgen/utils.py
"""
crudgen - Utility Functions & Helpers
======================================
String-case transformations, literal formatting, file I/O and timing
helpers used throughout the generation pipeline.

- String-conversion functions are decorated with ``@lru_cache(maxsize=None)``;
  the same handful of names is converted many times per run.
- Case conversions are Unicode-aware so non-English table names
  (``kullanıcılar``, ``oturum``) survive intact.
- File writes go through a temporary file in the target directory followed
  by ``os.replace`` so a crash never leaves a half-written artifact.
"""

from __future__ import annotations

import functools
import logging
import os
import re
import stat
import tempfile
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_CAMEL_TO_SNAKE_RE1: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_TO_SNAKE_RE2: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_WORD_RE: re.Pattern[str] = re.compile(r"[^\w]+")
_MULTI_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"_{2,}")
_LEADING_TRAILING_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"^_+|_+$")
_STUDLY_SPLIT_RE: re.Pattern[str] = re.compile(r"[\s_\-]+")


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def upper_first(value: str) -> str:
    """Upper-case the first character only; the rest is left untouched."""
    return value[:1].upper() + value[1:]


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert any string to snake_case.

    Examples:
        >>> to_snake_case("BlogPost")
        'blog_post'
        >>> to_snake_case("getHTTPResponse")
        'get_http_response'
        >>> to_snake_case("already_snake")
        'already_snake'
    """
    if not name:
        return ""
    s: str = _CAMEL_TO_SNAKE_RE1.sub(r"\1_\2", name)
    s = _CAMEL_TO_SNAKE_RE2.sub(r"\1_\2", s)
    s = _NON_WORD_RE.sub("_", s)
    s = _MULTI_UNDERSCORE_RE.sub("_", s)
    s = _LEADING_TRAILING_UNDERSCORE_RE.sub("", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def to_studly_case(name: str) -> str:
    """
    Convert a snake/kebab/spaced string to StudlyCase.

    Only the first letter of every segment is upper-cased; the rest of each
    segment keeps its casing, so ``blogPost`` becomes ``BlogPost`` rather
    than ``Blogpost``.

    Examples:
        >>> to_studly_case("blog_post")
        'BlogPost'
        >>> to_studly_case("order-item line")
        'OrderItemLine'
    """
    if not name:
        return ""
    parts: List[str] = [p for p in _STUDLY_SPLIT_RE.split(name) if p]
    return "".join(upper_first(part) for part in parts)


@functools.lru_cache(maxsize=None)
def to_kebab_case(name: str) -> str:
    """Convert any string to kebab-case (used for view folders)."""
    return to_snake_case(name).replace("_", "-")


@functools.lru_cache(maxsize=None)
def to_title_human(name: str) -> str:
    """
    Convert an identifier to a human-readable title.

    Examples:
        >>> to_title_human("BlogPost")
        'Blog Post'
        >>> to_title_human("order_items")
        'Order Items'
    """
    snake: str = to_snake_case(name)
    return " ".join(word.capitalize() for word in snake.split("_") if word)


# ---------------------------------------------------------------------------
# Literal formatting (for generated source)
# ---------------------------------------------------------------------------


def format_list_literal(items: Sequence[str], quote: bool = True) -> str:
    """
    Format a Python list literal from a sequence of strings.

    If *quote* is True, each item is wrapped in double quotes.
    """
    if quote:
        inner: str = ", ".join(f'"{item}"' for item in items)
    else:
        inner = ", ".join(items)
    return f"[{inner}]"


def format_dict_literal(
    mapping: Dict[str, str],
    quote_keys: bool = True,
    quote_values: bool = True,
) -> str:
    """Format a Python dict literal from a string mapping."""
    parts: List[str] = []
    for k, v in mapping.items():
        key_str: str = f'"{k}"' if quote_keys else k
        val_str: str = f'"{v}"' if quote_values else v
        parts.append(f"{key_str}: {val_str}")
    return "{" + ", ".join(parts) + "}"


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def _current_umask() -> int:
    mask: int = os.umask(0)
    os.umask(mask)
    return mask


def _target_mode(path: Path) -> int:
    """Permission bits the written file should carry: the existing file's, else the umask default."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path*, creating parent directories as needed.

    When *atomic* is True the content goes to a temporary file in the same
    directory which then replaces the target, so readers never observe a
    partial file.

    Returns the number of bytes written.

    Raises:
        OSError: if the directory or file cannot be written.
    """
    if path.is_symlink():
        path = path.resolve()
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")
    byte_count: int = len(encoded)

    if atomic:
        fd: int
        tmp_path: str
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(encoded)
            os.chmod(tmp_path, _target_mode(path))
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    else:
        path.write_bytes(encoded)

    logger.debug("Wrote %d bytes to %s", byte_count, path)
    return byte_count


def read_file(path: Path) -> str:
    """Read a file and return its content as a string."""
    return path.read_text(encoding="utf-8")


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling generation steps.

    Usage:
        with Timer("build controller") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "upper_first",
    "to_snake_case",
    "to_studly_case",
    "to_kebab_case",
    "to_title_human",
    "format_list_literal",
    "format_dict_literal",
    "ensure_directory",
    "write_file",
    "read_file",
    "count_lines",
    "Timer",
]

logger.debug("crudgen.utils loaded — %d public symbols.", len(__all__))
