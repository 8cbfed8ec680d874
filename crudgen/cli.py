# File: crudgen/cli.py
"""
crudgen - Command-Line Interface
=================================

argparse front end for the CRUD generator.

Usage examples::

    # Scaffold the `posts` table
    crudgen posts --database-url sqlite:///app.db

    # Custom class and route names
    crudgen blog_posts --crud-name Article --route articles

    # Turkish pluralization rules
    crudgen kullanicilar --lang tr

    # Never overwrite existing files, debug logging
    crudgen posts --no-overwrite -vv

Settings are read from ``crudgen.yaml`` in the project root (or the file
given with ``--config``); command-line options win over file settings.

Exit codes:
    0 — success
    1 — validation error (table missing, bad request)
    2 — schema error
    3 — I/O error (template read, file write, route append)
    4 — input/argument error (bad config file, blank table name)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

from pydantic import ValidationError

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_SCHEMA_ERROR: int = 2
EXIT_IO_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root crudgen logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR (quiet), 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("crudgen")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from crudgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="crudgen",
        description=(
            "Generate a CRUD controller, model, views and route for an "
            "existing database table."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s posts --database-url sqlite:///app.db\n"
            "  %(prog)s blog_posts --crud-name Article --route articles\n"
            "  %(prog)s kullanicilar --lang tr\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"crudgen v{__version__}",
    )

    parser.add_argument(
        "table",
        metavar="TABLE",
        help="Name of the existing table to scaffold.",
    )

    # --- Naming ---
    naming_group = parser.add_argument_group("naming")
    naming_group.add_argument(
        "--route",
        default=None,
        metavar="NAME",
        help="Custom route name (default: the lower-cased table name).",
    )
    naming_group.add_argument(
        "--crud-name",
        default=None,
        metavar="NAME",
        help="Custom class name (default: singular StudlyCase of the table).",
    )
    naming_group.add_argument(
        "--lang",
        default=None,
        metavar="LANG",
        help="Pluralization language (en, tr, es, fr, pt, nb).",
    )

    # --- Config overrides ---
    config_group = parser.add_argument_group("configuration")
    config_group.add_argument(
        "--config",
        default=None,
        metavar="PATH",
        help="Configuration file (YAML or JSON). Default: crudgen.yaml in the project root.",
    )
    config_group.add_argument(
        "--database-url",
        default=None,
        metavar="URL",
        help="SQLAlchemy database URL to introspect.",
    )
    config_group.add_argument(
        "--project-root",
        default=None,
        metavar="DIR",
        help="Root of the target project (default: current directory).",
    )
    config_group.add_argument(
        "--stub-path",
        default=None,
        metavar="DIR",
        help="Directory of '<name>.stub' files overriding the built-in templates.",
    )

    # --- Overwrite behaviour ---
    overwrite_group = parser.add_mutually_exclusive_group()
    overwrite_group.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite existing files without asking.",
    )
    overwrite_group.add_argument(
        "--no-overwrite",
        action="store_true",
        default=False,
        help="Never overwrite existing files.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.database_url is not None:
        overrides["database_url"] = args.database_url

    if args.project_root is not None:
        overrides["project_root"] = args.project_root

    if args.stub_path is not None:
        overrides["stub_path"] = args.stub_path

    return overrides


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(args: argparse.Namespace) -> int:
    """
    Run the generation pipeline.

    Returns the appropriate exit code.
    """
    from crudgen.emitter import ConsolePrompt, DecisionSource, StaticDecision
    from crudgen.errors import GeneratorIOError, RequestValidationError, SchemaError
    from crudgen.generator import CrudGenerator, GenerationReport, build_config
    from crudgen.models import GenerationRequest, GeneratorConfig

    try:
        request: GenerationRequest = GenerationRequest(
            table_name=args.table,
            route_override=args.route,
            class_name_override=args.crud_name,
            language=args.lang,
        )
    except ValidationError as exc:
        logger.error("Invalid request: %s", exc)
        return EXIT_INPUT_ERROR

    config_path: Optional[Path] = Path(args.config) if args.config else None
    try:
        config: GeneratorConfig = build_config(config_path, _build_config_overrides(args))
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load configuration: %s", exc)
        return EXIT_INPUT_ERROR

    if args.force:
        decisions: DecisionSource = StaticDecision(True)
    elif args.no_overwrite:
        decisions = StaticDecision(False)
    else:
        decisions = ConsolePrompt()

    try:
        generator: CrudGenerator = CrudGenerator.from_config(config, decisions=decisions)
        report: GenerationReport = generator.generate(request)
    except RequestValidationError as exc:
        logger.error("%s", exc)
        return EXIT_VALIDATION_ERROR
    except SchemaError as exc:
        logger.error("Schema error: %s", exc)
        return EXIT_SCHEMA_ERROR
    except GeneratorIOError as exc:
        logger.error("I/O error: %s", exc)
        return EXIT_IO_ERROR

    if not args.quiet:
        print(report.summary())

    return EXIT_SUCCESS if report.success else EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    logger.info("Running Crud Generator ...")
    exit_code: int = _run_generation(args)

    if exit_code != EXIT_SUCCESS:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_SCHEMA_ERROR",
    "EXIT_IO_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("crudgen.cli loaded.")
