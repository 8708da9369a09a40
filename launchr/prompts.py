"""Interactive prompts.

Asks the user for each choice that was not already given on the command
line and assembles the answers into a validated ``Selection``.  Single
selects and multi-selects are numbered menus rendered with Rich.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Sequence, TypeVar

from rich.prompt import Confirm, Prompt

from launchr.scaffolder.models import (
    ORM,
    BackendFramework,
    BackendOptions,
    BackendTool,
    Database,
    FrontendFramework,
    FrontendOptions,
    FrontendTool,
    ProjectType,
    Selection,
)
from launchr.utils import console, print_error

E = TypeVar("E", bound=Enum)


def _print_menu(message: str, options: Sequence[Enum]) -> None:
    console.print(f"[bold]{message}[/bold]")
    for index, option in enumerate(options, start=1):
        console.print(f"  [cyan]{index}.[/cyan] {option.value}")


def select(message: str, options: Sequence[E]) -> E:
    """Ask for exactly one of *options*."""
    _print_menu(message, options)
    answer = Prompt.ask(
        "Choose",
        choices=[str(i) for i in range(1, len(options) + 1)],
        default="1",
        console=console,
    )
    return options[int(answer) - 1]


def parse_multiselect(answer: str, options: Sequence[E]) -> tuple[E, ...]:
    """Parse a comma-separated list of menu numbers.

    A blank answer selects nothing.  Repeated numbers are ignored.

    Raises:
        ValueError: If an entry is not a number in range.
    """
    picked: list[E] = []
    for raw in answer.split(","):
        raw = raw.strip()
        if not raw:
            continue
        if not raw.isdigit() or not 1 <= int(raw) <= len(options):
            raise ValueError(f"'{raw}' is not one of 1-{len(options)}")
        option = options[int(raw) - 1]
        if option not in picked:
            picked.append(option)
    return tuple(picked)


def multiselect(message: str, options: Sequence[E]) -> tuple[E, ...]:
    """Ask for any number of *options*; re-asks until the answer parses."""
    _print_menu(message, options)
    while True:
        answer = Prompt.ask(
            "Choose (comma-separated numbers, blank for none)",
            default="",
            show_default=False,
            console=console,
        )
        try:
            return parse_multiselect(answer, options)
        except ValueError as exc:
            print_error(str(exc))


def confirm(message: str = "Start project setup?") -> bool:
    return Confirm.ask(message, default=True, console=console)


def collect_selection(
    project_type: Optional[ProjectType] = None,
    frontend: Optional[FrontendFramework] = None,
    frontend_tools: Optional[Iterable[FrontendTool]] = None,
    backend: Optional[BackendFramework] = None,
    database: Optional[Database] = None,
    orm: Optional[ORM] = None,
    backend_tools: Optional[Iterable[BackendTool]] = None,
) -> Selection:
    """Build a ``Selection``, prompting for every answer not supplied.

    Tool lists given as ``None`` are prompted for; an empty iterable means
    "no tools" and is not prompted.  Tools are not asked for when the
    branch's framework is ``None``.
    """
    if project_type is None:
        project_type = select("What type of project do you want to create?", list(ProjectType))

    frontend_options: FrontendOptions | None = None
    if project_type.has_frontend:
        if frontend is None:
            frontend = select("What frontend framework do you want to use?", list(FrontendFramework))
        if frontend_tools is None:
            frontend_tools = (
                ()
                if frontend == FrontendFramework.NONE
                else multiselect("Which frontend tools would you like to include?", list(FrontendTool))
            )
        frontend_options = FrontendOptions(framework=frontend, tools=tuple(frontend_tools))

    backend_options: BackendOptions | None = None
    if project_type.has_backend:
        if backend is None:
            backend = select("What backend framework do you want to use?", list(BackendFramework))
        if database is None:
            database = (
                Database.NONE
                if backend == BackendFramework.NONE
                else select("What database are you going to use?", list(Database))
            )
        if database == Database.ORM and orm is None:
            orm = select("What ORM do you want to use?", list(ORM))
        if backend_tools is None:
            backend_tools = (
                ()
                if backend == BackendFramework.NONE
                else multiselect("What backend tools would you like to include?", list(BackendTool))
            )
        backend_options = BackendOptions(
            framework=backend,
            database=database,
            orm=orm,
            tools=tuple(backend_tools),
        )

    return Selection(
        project_type=project_type,
        frontend=frontend_options,
        backend=backend_options,
    )
