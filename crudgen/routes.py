# File: crudgen/routes.py
"""
crudgen - Route Appender
=========================
Appends one resource-route registration line to the project's routes
file.  The file is only ever appended to; it is created (with its parent
directories) when missing.

Repeated runs for the same table append the same line again.

A routes file created by the default template starts with a small header
defining ``resource()``, which imports the controller class and includes
its ``router``.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List, Optional

from crudgen.bindings import TemplateBinding, route_bindings
from crudgen.errors import RouteAppendError
from crudgen.renderer import render
from crudgen.utils import ensure_directory

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.routes")

DEFAULT_ROUTE_TEMPLATE: str = 'resource("{{routeName}}", "{{controllerQualifiedName}}")'

ROUTES_FILE_HEADER: str = '''"""Resource routes registered by crudgen."""

from importlib import import_module

from fastapi import APIRouter

router = APIRouter()


def resource(name: str, controller: str) -> None:
    module_name, _, class_name = controller.rpartition(".")
    controller_class = getattr(import_module(module_name), class_name)
    router.include_router(controller_class.router, tags=[name])


'''

# Serialises appends from concurrent generator runs in one process.
_APPEND_LOCK: threading.Lock = threading.Lock()


class RouteAppender:
    """
    Renders and appends route registration statements.

    Usage::

        appender = RouteAppender()
        line = appender.append_route(
            Path("app/routes.py"), "posts", "app.controllers.post_controller.PostController"
        )
    """

    def __init__(
        self,
        route_template: str = DEFAULT_ROUTE_TEMPLATE,
        header: Optional[str] = None,
    ) -> None:
        self._template: str = route_template
        if header is None:
            header = ROUTES_FILE_HEADER if route_template == DEFAULT_ROUTE_TEMPLATE else ""
        self._header: str = header

    def build_line(self, route_name: str, controller_qualified_name: str) -> str:
        bindings: TemplateBinding = route_bindings(route_name, controller_qualified_name)
        return render(self._template, bindings)

    def append_route(
        self,
        routes_file: Path,
        route_name: str,
        controller_qualified_name: str,
    ) -> str:
        """
        Append the registration line for *route_name* to *routes_file*.

        Returns:
            The appended line, without its terminator.

        Raises:
            RouteAppendError: if the file cannot be created or appended to.
        """
        routes_file = Path(routes_file)
        line: str = self.build_line(route_name, controller_qualified_name)

        with _APPEND_LOCK:
            try:
                ensure_directory(routes_file.parent)
                fresh: bool = not routes_file.exists() or routes_file.stat().st_size == 0
                with routes_file.open("a", encoding="utf-8") as handle:
                    if fresh and self._header:
                        handle.write(self._header)
                        logger.debug("Wrote routes header to %s", routes_file)
                    handle.write(line + "\n")
            except OSError as exc:
                raise RouteAppendError(
                    f"Cannot append route to {routes_file}: {exc}", path=routes_file
                ) from exc

        logger.info("Appended route to %s: %s", routes_file, line)
        return line


__all__: List[str] = ["DEFAULT_ROUTE_TEMPLATE", "ROUTES_FILE_HEADER", "RouteAppender"]
