"""Launchr command-line entry point.

Usage::

    launchr
    launchr --project-type BackEnd --backend "Express.js + ts" --database Postgres \\
        --backend-tools dotenv,cors --yes
    python -m launchr --dry-run

Every choice not given as a flag is asked for interactively.  This module is
the only place that terminates the process.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar

from pydantic import ValidationError

from launchr.config import Config
from launchr.orchestrator import Orchestrator
from launchr.prompts import collect_selection, confirm
from launchr.scaffolder.models import (
    ORM,
    BackendFramework,
    BackendTool,
    Database,
    FrontendFramework,
    FrontendTool,
    ProjectType,
)
from launchr.utils import console, print_banner, print_error, print_warning

E = TypeVar("E", bound=Enum)

EXIT_INTERRUPTED = 130


def enum_choice(enum_cls: type[E]) -> Callable[[str], E]:
    """argparse ``type=`` converter matching an enum value case-insensitively."""

    def _convert(raw: str) -> E:
        wanted = raw.strip().lower()
        for member in enum_cls:
            if member.value.lower() == wanted:
                return member
        valid = ", ".join(repr(m.value) for m in enum_cls)
        raise argparse.ArgumentTypeError(f"invalid choice {raw!r} (choose from {valid})")

    _convert.__name__ = enum_cls.__name__
    return _convert


def enum_list(enum_cls: type[E]) -> Callable[[str], tuple[E, ...]]:
    """argparse ``type=`` converter for a comma-separated list of enum values.

    An empty string means "none" and yields an empty tuple.
    """
    single = enum_choice(enum_cls)

    def _convert(raw: str) -> tuple[E, ...]:
        return tuple(single(part) for part in raw.split(",") if part.strip())

    _convert.__name__ = f"{enum_cls.__name__} list"
    return _convert


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="launchr",
        description="Launchr -- scaffold a frontend and/or backend starter project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  launchr\n"
            "  launchr -o ./my-app --project-type FrontEnd --frontend 'React + Tailwind' "
            "--frontend-tools '' --yes\n"
            "  launchr --project-type BackEnd --backend 'Express.js + ts' --database Postgres "
            "--backend-tools dotenv --dry-run\n"
        ),
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory that receives frontend/ and backend/ (default: current directory)",
    )
    parser.add_argument("--project-type", type=enum_choice(ProjectType), default=None)
    parser.add_argument("--frontend", type=enum_choice(FrontendFramework), default=None)
    parser.add_argument(
        "--frontend-tools",
        type=enum_list(FrontendTool),
        default=None,
        help="Comma-separated frontend tools ('' for none)",
    )
    parser.add_argument("--backend", type=enum_choice(BackendFramework), default=None)
    parser.add_argument("--database", type=enum_choice(Database), default=None)
    parser.add_argument("--orm", type=enum_choice(ORM), default=None)
    parser.add_argument(
        "--backend-tools",
        type=enum_list(BackendTool),
        default=None,
        help="Comma-separated backend tools ('' for none)",
    )
    parser.add_argument(
        "--package-manager",
        default=None,
        help="Package manager program (default: npm)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the planned steps without running them",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Do not ask for confirmation before starting",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``launchr`` and ``python -m launchr``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env(
            output_dir=Path(args.output) if args.output else None,
            package_manager=args.package_manager,
            dry_run=True if args.dry_run else None,
        )
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            print_error(f"Invalid configuration: {field}: {error['msg']}")
        sys.exit(1)
    except ValueError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    print_banner()
    try:
        selection = collect_selection(
            project_type=args.project_type,
            frontend=args.frontend,
            frontend_tools=args.frontend_tools,
            backend=args.backend,
            database=args.database,
            orm=args.orm,
            backend_tools=args.backend_tools,
        )
    except ValidationError as exc:
        for error in exc.errors():
            print_error(f"Invalid selection: {error['msg']}")
        sys.exit(1)
    except (KeyboardInterrupt, EOFError):
        console.print()
        print_warning("Aborted.")
        sys.exit(EXIT_INTERRUPTED)

    if not (args.yes or config.dry_run):
        try:
            proceed = confirm()
        except (KeyboardInterrupt, EOFError):
            proceed = False
        if not proceed:
            print_warning("Aborted.")
            sys.exit(1)

    try:
        report = asyncio.run(Orchestrator(config).run(selection))
    except KeyboardInterrupt:
        console.print()
        print_error("Interrupted.")
        sys.exit(EXIT_INTERRUPTED)

    if not report.success:
        sys.exit(report.exit_code)


if __name__ == "__main__":
    main()
