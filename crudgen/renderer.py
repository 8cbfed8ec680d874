# File: crudgen/renderer.py
"""
crudgen - Template Renderer
============================
Placeholder substitution over template bodies.

A template body is an opaque string holding ``{{token}}`` placeholders.
``render`` replaces every bound token in a **single left-to-right scan**:
one compiled alternation of the escaped tokens (longest first) is run over
the body, and each match is replaced by its bound text.  Replacement text
is never scanned again, so a value that happens to contain another
token's literal form is emitted verbatim.

Tokens that are not bound are left untouched.  Rendering is pure.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import List, Mapping, Tuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.renderer")

_PLACEHOLDER_RE: re.Pattern[str] = re.compile(r"\{\{[A-Za-z_][A-Za-z0-9_\-]*\}\}")


@lru_cache(maxsize=256)
def _compile_tokens(tokens: Tuple[str, ...]) -> re.Pattern[str]:
    """One alternation over *tokens*; longest first so no token shadows a longer one."""
    ordered: List[str] = sorted(tokens, key=lambda t: (-len(t), t))
    return re.compile("|".join(re.escape(token) for token in ordered))


def render(template_body: str, bindings: Mapping[str, str]) -> str:
    """
    Substitute every bound token in *template_body*.

    Args:
        template_body: Raw template text.
        bindings:      Token → replacement text, tokens given in their
                       literal form (``"{{modelName}}"``).

    Returns:
        The rendered text.  Identical to *template_body* when no bound
        token occurs in it.
    """
    tokens: Tuple[str, ...] = tuple(sorted(token for token in bindings if token))
    if not tokens or not template_body:
        return template_body

    pattern: re.Pattern[str] = _compile_tokens(tokens)
    return pattern.sub(lambda match: bindings[match.group(0)], template_body)


def placeholders_in(template_body: str) -> Tuple[str, ...]:
    """Return the distinct ``{{token}}`` placeholders of *template_body*, in order of appearance."""
    seen: List[str] = []
    for match in _PLACEHOLDER_RE.finditer(template_body):
        token: str = match.group(0)
        if token not in seen:
            seen.append(token)
    return tuple(seen)


def unbound_placeholders(template_body: str, bindings: Mapping[str, str]) -> Tuple[str, ...]:
    """Placeholders of *template_body* that *bindings* leaves unresolved."""
    missing: Tuple[str, ...] = tuple(
        token for token in placeholders_in(template_body) if token not in bindings
    )
    if missing:
        logger.debug("Unbound placeholder(s): %s", ", ".join(missing))
    return missing


__all__: List[str] = ["render", "placeholders_in", "unbound_placeholders"]
