# File: crudgen/inflector.py
"""
crudgen - Pluralization Rule Sets
==================================

Language-specific singular/plural inflection used to derive class names
from table names (``blog_posts`` → ``BlogPost``).

Each language is a frozen ``PluralizationRules`` value: irregular pairs,
uninflected words, and ordered ``(pattern, replacement)`` rules where the
first matching pattern wins.  A rule set is picked per run with
``get_rules(language)`` and handed to whoever needs it; nothing here holds
mutable module state, so two runs with different languages never interfere.

Only the last ``_``/``-``/space separated segment of a compound name is
inflected (``order_items`` → ``order_item``).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from crudgen.errors import RequestValidationError
from crudgen.utils import upper_first

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.inflector")

_Rule = Tuple[re.Pattern, str]

_SEGMENT_SPLIT_RE: re.Pattern[str] = re.compile(r"^(.*[_\-\s])([^_\-\s]+)$", re.DOTALL)


def _compile(rules: Sequence[Tuple[str, str]]) -> Tuple[_Rule, ...]:
    return tuple(
        (re.compile(pattern, re.IGNORECASE), replacement)
        for pattern, replacement in rules
    )


# ---------------------------------------------------------------------------
# Rule set value object
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PluralizationRules:
    """
    Immutable inflection rules for one language.

    ``irregular`` holds ``(singular, plural)`` pairs; lookups against it and
    against ``uninflected`` are case-insensitive.
    """

    language: str
    plural: Tuple[_Rule, ...]
    singular: Tuple[_Rule, ...]
    irregular: Tuple[Tuple[str, str], ...] = ()
    uninflected: FrozenSet[str] = frozenset()

    _to_plural: Dict[str, str] = field(init=False, repr=False, compare=False)
    _to_singular: Dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_to_plural", {s.lower(): p for s, p in self.irregular}
        )
        object.__setattr__(
            self, "_to_singular", {p.lower(): s for s, p in self.irregular}
        )

    def pluralize(self, word: str) -> str:
        """Return the plural form of *word* (last segment only)."""
        return self._inflect(word, self._to_plural, self._to_singular, self.plural)

    def singularize(self, word: str) -> str:
        """Return the singular form of *word* (last segment only)."""
        return self._inflect(word, self._to_singular, self._to_plural, self.singular)

    def _inflect(
        self,
        word: str,
        irregular: Dict[str, str],
        already_inflected: Dict[str, str],
        rules: Tuple[_Rule, ...],
    ) -> str:
        if not word:
            return word

        match = _SEGMENT_SPLIT_RE.match(word)
        prefix, segment = (match.group(1), match.group(2)) if match else ("", word)
        lower: str = segment.lower()

        if lower in self.uninflected or lower in already_inflected:
            return word

        if lower in irregular:
            replacement: str = irregular[lower]
            if segment[:1].isupper():
                replacement = upper_first(replacement)
            return prefix + replacement

        for pattern, substitution in rules:
            if pattern.search(segment):
                return prefix + pattern.sub(substitution, segment, count=1)

        return word


# ---------------------------------------------------------------------------
# Language rule sets
# ---------------------------------------------------------------------------

ENGLISH: PluralizationRules = PluralizationRules(
    language="english",
    plural=_compile([
        (r"(quiz)$", r"\1zes"),
        (r"^(ox)$", r"\1en"),
        (r"([ml])ouse$", r"\1ice"),
        (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
        (r"(x|ch|ss|sh)$", r"\1es"),
        (r"([^aeiouy]|qu)y$", r"\1ies"),
        (r"(kni|wi|li)fe$", r"\1ves"),
        (r"(wol|hal|shel|cal|sel|el|scar|loa|thie|hoo)f$", r"\1ves"),
        (r"sis$", "ses"),
        (r"(buffal|tomat|potat|her|ech)o$", r"\1oes"),
        (r"(bu|campu|statu|alia|viru|censu)s$", r"\1ses"),
        (r"(octop)us$", r"\1i"),
        (r"([^aeiou]us)$", r"\1es"),
        (r"^(ax|test)is$", r"\1es"),
        (r"s$", "s"),
        (r"$", "s"),
    ]),
    singular=_compile([
        (r"(quiz)zes$", r"\1"),
        (r"(matr)ices$", r"\1ix"),
        (r"(vert|ind)ices$", r"\1ex"),
        (r"^(ox)en$", r"\1"),
        (r"(alias|status|bus|campus|virus|census)(?:es)?$", r"\1"),
        (r"([^aeiou]us)es$", r"\1"),
        (r"(octop)i$", r"\1us"),
        (r"^(ax|test)es$", r"\1is"),
        (r"(cris)es$", r"\1is"),
        (r"(analy|diagno|parenthe|progno|synop|the)(?:sis|ses)$", r"\1sis"),
        (r"(shoe)s$", r"\1"),
        (r"(buffal|tomat|potat|her|ech)oes$", r"\1o"),
        (r"(x|ch|ss|sh)es$", r"\1"),
        (r"([ml])ice$", r"\1ouse"),
        (r"([^aeiouy]|qu)ies$", r"\1y"),
        (r"(?<!o)(kni|wi|li)ves$", r"\1fe"),
        (r"(wol|hal|shel|cal|sel|el|scar|loa|thie|hoo)ves$", r"\1f"),
        (r"(ss)$", r"\1"),
        (r"s$", ""),
    ]),
    irregular=(
        ("person", "people"),
        ("man", "men"),
        ("woman", "women"),
        ("child", "children"),
        ("goose", "geese"),
        ("tooth", "teeth"),
        ("foot", "feet"),
        ("criterion", "criteria"),
        ("cookie", "cookies"),
        ("movie", "movies"),
        ("zombie", "zombies"),
        ("cache", "caches"),
        ("leaf", "leaves"),
    ),
    uninflected=frozenset({
        "audio", "data", "deer", "equipment", "feedback", "fish",
        "hardware", "information", "media", "metadata", "money", "news",
        "police", "rice", "series", "sheep", "software", "species",
        "staff", "traffic",
    }),
)

TURKISH: PluralizationRules = PluralizationRules(
    language="turkish",
    plural=_compile([
        (r"([eöiü][^aoıueöiü]{0,6})$", r"\1ler"),
        (r"([aoıu][^aoıueöiü]{0,6})$", r"\1lar"),
    ]),
    singular=_compile([
        (r"l[ae]r$", ""),
    ]),
    irregular=(
        ("ben", "biz"),
        ("sen", "siz"),
        ("o", "onlar"),
    ),
)

SPANISH: PluralizationRules = PluralizationRules(
    language="spanish",
    plural=_compile([
        (r"ú([sn])$", r"u\1es"),
        (r"ó([sn])$", r"o\1es"),
        (r"í([sn])$", r"i\1es"),
        (r"é([sn])$", r"e\1es"),
        (r"á([sn])$", r"a\1es"),
        (r"z$", "ces"),
        (r"([aeiou]s)$", r"\1"),
        (r"([^aeéiou])$", r"\1es"),
        (r"$", "s"),
    ]),
    singular=_compile([
        (r"ereses$", "erés"),
        (r"iones$", "ión"),
        (r"ces$", "z"),
        (r"es$", ""),
        (r"s$", ""),
    ]),
    irregular=(
        ("el", "los"),
        ("papá", "papás"),
        ("mamá", "mamás"),
        ("sofá", "sofás"),
        ("mes", "meses"),
    ),
    uninflected=frozenset({
        "lunes", "martes", "miércoles", "jueves", "viernes",
        "cumpleaños", "virus", "atlas", "sida",
    }),
)

FRENCH: PluralizationRules = PluralizationRules(
    language="french",
    plural=_compile([
        (r"(s|x|z)$", r"\1"),
        (r"(b|cor|ém|gemm|soupir|trav|vant|vitr)ail$", r"\1aux"),
        (r"ail$", "ails"),
        (r"(bal|carnaval|chacal|festival|récital|régal)$", r"\1s"),
        (r"al$", "aux"),
        (r"(bleu|émeu|landau|pneu|sarrau)$", r"\1s"),
        (r"(bijou|caillou|chou|genou|hibou|joujou|pou|eau|eu)$", r"\1x"),
        (r"$", "s"),
    ]),
    singular=_compile([
        (r"eaux$", "eau"),
        (r"(b|cor|ém|gemm|soupir|trav|vant|vitr)aux$", r"\1ail"),
        (r"aux$", "al"),
        (r"(bijou|caillou|chou|genou|hibou|joujou|pou|eu)x$", r"\1"),
        (r"s$", ""),
    ]),
    irregular=(
        ("monsieur", "messieurs"),
        ("madame", "mesdames"),
        ("mademoiselle", "mesdemoiselles"),
        ("œil", "yeux"),
        ("ciel", "cieux"),
    ),
)

PORTUGUESE: PluralizationRules = PluralizationRules(
    language="portuguese",
    plural=_compile([
        (r"^(japon|escoc|ingl|dinamarqu|fregu|portugu)ês$", r"\1eses"),
        (r"^(alem|c|p)ão$", r"\1ães"),
        (r"ão$", "ões"),
        (r"(r|z)$", r"\1es"),
        (r"al$", "ais"),
        (r"el$", "éis"),
        (r"ol$", "óis"),
        (r"ul$", "uis"),
        (r"([^aeou])il$", r"\1is"),
        (r"m$", "ns"),
        (r"s$", "s"),
        (r"$", "s"),
    ]),
    singular=_compile([
        (r"^(japon|escoc|ingl|dinamarqu|fregu|portugu)eses$", r"\1ês"),
        (r"^(alem|c|p)ães$", r"\1ão"),
        (r"ões$", "ão"),
        (r"(r|z)es$", r"\1"),
        (r"ais$", "al"),
        (r"éis$", "el"),
        (r"óis$", "ol"),
        (r"uis$", "ul"),
        (r"([^aeou])is$", r"\1il"),
        (r"ns$", "m"),
        (r"s$", ""),
    ]),
    irregular=(
        ("país", "países"),
        ("mão", "mãos"),
        ("irmão", "irmãos"),
        ("cidadão", "cidadãos"),
    ),
    uninflected=frozenset({"tórax", "tênis", "ônibus", "lápis", "fênix"}),
)

NORWEGIAN_BOKMAL: PluralizationRules = PluralizationRules(
    language="norwegian-bokmal",
    plural=_compile([
        (r"e$", "er"),
        (r"$", "er"),
    ]),
    singular=_compile([
        (r"er$", ""),
    ]),
    irregular=(("konto", "konti"),),
    uninflected=frozenset({"barn", "fjell", "hus"}),
)


_RULE_SETS: Dict[str, PluralizationRules] = {
    "en": ENGLISH,
    "english": ENGLISH,
    "tr": TURKISH,
    "turkish": TURKISH,
    "es": SPANISH,
    "spanish": SPANISH,
    "fr": FRENCH,
    "french": FRENCH,
    "pt": PORTUGUESE,
    "portuguese": PORTUGUESE,
    "nb": NORWEGIAN_BOKMAL,
    "no": NORWEGIAN_BOKMAL,
    "norwegian-bokmal": NORWEGIAN_BOKMAL,
}

DEFAULT_LANGUAGE: str = "english"


def supported_languages() -> List[str]:
    """Return every accepted language code / name, sorted."""
    return sorted(_RULE_SETS)


def get_rules(language: Optional[str] = None) -> PluralizationRules:
    """
    Return the rule set for *language* (code or name, case-insensitive).

    ``None`` or an empty string selects English.

    Raises:
        RequestValidationError: if the language is not supported.
    """
    if not language:
        return _RULE_SETS[DEFAULT_LANGUAGE]

    key: str = language.strip().lower().replace("_", "-")
    try:
        rules: PluralizationRules = _RULE_SETS[key]
    except KeyError:
        raise RequestValidationError(
            f"Unsupported language '{language}'. "
            f"Supported: {', '.join(supported_languages())}."
        ) from None

    logger.debug("Selected %s pluralization rules for '%s'.", rules.language, language)
    return rules


__all__: List[str] = [
    "PluralizationRules",
    "ENGLISH",
    "TURKISH",
    "SPANISH",
    "FRENCH",
    "PORTUGUESE",
    "NORWEGIAN_BOKMAL",
    "DEFAULT_LANGUAGE",
    "get_rules",
    "supported_languages",
]
