# File: crudgen/naming.py
"""
crudgen - Naming Resolver
==========================

Derives the single ``NamingContext`` of a run from a ``GenerationRequest``:

- ``class_name``: the class-name override with its first letter upper-cased,
  otherwise the StudlyCase singular of the table name
  (``blog_posts`` → ``BlogPost``).
- ``route_name``: the route override, otherwise the lower-cased table name.

The pluralization rules are an explicit input.  ``NamingResolver.for_request``
picks them from ``request.language``; callers can also hand a rule set in
directly.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from crudgen.inflector import PluralizationRules, get_rules
from crudgen.models import GenerationRequest, NamingContext
from crudgen.utils import (
    to_kebab_case,
    to_snake_case,
    to_studly_case,
    to_title_human,
    upper_first,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.naming")


class NamingResolver:
    """
    Turns a request into a ``NamingContext`` using one rule set.

    Usage::

        resolver = NamingResolver.for_request(request)
        naming = resolver.resolve(request)
    """

    def __init__(self, rules: Optional[PluralizationRules] = None) -> None:
        self._rules: PluralizationRules = rules if rules is not None else get_rules()

    @classmethod
    def for_request(cls, request: GenerationRequest) -> "NamingResolver":
        """Build a resolver using the rules of ``request.language``."""
        return cls(get_rules(request.language))

    @property
    def rules(self) -> PluralizationRules:
        return self._rules

    def class_name(self, request: GenerationRequest) -> str:
        if request.class_name_override:
            return upper_first(request.class_name_override)
        return to_studly_case(self._rules.singularize(request.table_name))

    def route_name(self, request: GenerationRequest) -> str:
        if request.route_override:
            return request.route_override
        return request.table_name.lower()

    def resolve(self, request: GenerationRequest) -> NamingContext:
        class_name: str = self.class_name(request)
        plural_class_name: str = self._rules.pluralize(class_name)

        naming: NamingContext = NamingContext(
            class_name=class_name,
            table_name=request.table_name,
            route_name=self.route_name(request),
            plural_class_name=plural_class_name,
            snake_name=to_snake_case(class_name),
            plural_snake_name=to_snake_case(plural_class_name),
            view_folder=to_kebab_case(class_name),
            title=to_title_human(class_name),
            title_plural=to_title_human(plural_class_name),
        )
        logger.debug(
            "Resolved names for '%s' (%s rules): class=%s route=%s",
            request.table_name,
            self._rules.language,
            naming.class_name,
            naming.route_name,
        )
        return naming


def resolve_naming(
    request: GenerationRequest,
    rules: Optional[PluralizationRules] = None,
) -> NamingContext:
    """Shortcut: resolve with *rules*, or with the request's language rules."""
    resolver: NamingResolver = (
        NamingResolver(rules) if rules is not None else NamingResolver.for_request(request)
    )
    return resolver.resolve(request)


__all__: List[str] = ["NamingResolver", "resolve_naming"]
