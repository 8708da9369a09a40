"""Launchr run orchestrator.

Drives one scaffolding run:

1. Print the selected configuration.
2. Build the frontend and backend plans (pure).
3. Execute the frontend plan, then the backend plan, stopping at the first
   fatal step.
4. Print next steps when everything succeeded.

The orchestrator never exits the process; it returns a ``RunReport`` and the
CLI decides the exit status.
"""

from __future__ import annotations

import time

from rich.table import Table

from launchr.config import Config
from launchr.scaffolder.executor import CommandRunner, PlanExecutor
from launchr.scaffolder.models import (
    BranchKind,
    CreateDirectory,
    ExecutionResult,
    Plan,
    RunCommand,
    RunReport,
    ScaffoldPlan,
    Selection,
    UpdateManifestScripts,
    WriteFile,
)
from launchr.scaffolder.planner import PlanBuilder
from launchr.utils import (
    console,
    format_duration,
    print_branch_header,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


class Orchestrator:
    """Plans and executes a scaffolding run for one ``Selection``.

    Attributes:
        config: Run configuration (output directory, package manager, ...).
        builder: Plan builder bound to *config*.
        executor: Plan executor used for every branch.
    """

    def __init__(
        self,
        config: Config,
        builder: PlanBuilder | None = None,
        executor: PlanExecutor | None = None,
    ) -> None:
        self.config = config
        self.builder = builder or PlanBuilder(config)
        self.executor = executor or PlanExecutor(CommandRunner(timeout=config.command_timeout))

    async def run(self, selection: Selection) -> RunReport:
        """Plan and execute *selection*.

        Returns:
            A ``RunReport`` with one ``ExecutionResult`` per executed branch.
            Branches after a fatal failure are not executed and have no
            result.
        """
        print_selection_summary(selection)
        plan = self.builder.build(selection)

        if self.config.dry_run:
            print_plan(plan)
            return RunReport()

        start = time.monotonic()
        report = RunReport()
        for branch_plan in plan.branches():
            if not branch_plan:
                continue
            print_branch_header(branch_plan.branch.value)
            result = await self.executor.execute(branch_plan)
            report.results.append(result)
            if not result.success:
                print_error(f"{branch_plan.branch.value.capitalize()} setup aborted.")
                break
            _print_branch_done(result)

        if not report.results:
            print_warning("Nothing to do: no framework selected.")
            return report

        elapsed = format_duration(time.monotonic() - start)
        if report.success:
            print_success(f"Project setup complete! ({elapsed})")
            if self.config.show_next_steps:
                print_next_steps(plan)
        else:
            print_error(f"Project setup failed after {elapsed}.")
        return report


# ---------------------------------------------------------------------------
# Reporting helpers
# ---------------------------------------------------------------------------


def selection_summary(selection: Selection) -> dict[str, str]:
    """Return the label/value rows describing *selection*."""
    rows: dict[str, str] = {"Project Type": selection.project_type.value}
    if selection.frontend is not None:
        rows["Frontend"] = selection.frontend.framework.value
        if selection.frontend.tools:
            rows["Frontend Tools"] = ", ".join(t.value for t in selection.frontend.tools)
    if selection.backend is not None:
        rows["Backend"] = selection.backend.framework.value
        rows["Database"] = selection.backend.database.value
        if selection.backend.orm is not None:
            rows["ORM"] = selection.backend.orm.value
        if selection.backend.tools:
            rows["Backend Tools"] = ", ".join(t.value for t in selection.backend.tools)
    return rows


def print_selection_summary(selection: Selection) -> None:
    print_summary_table(selection_summary(selection), title="Your project configuration")


def print_plan(plan: ScaffoldPlan) -> None:
    """Print the planned steps of every active branch as a table."""
    table = Table(title="Planned steps", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Branch")
    table.add_column("Action")
    table.add_column("Target")

    index = 0
    for branch_plan in plan.branches():
        for step in branch_plan.steps:
            index += 1
            if isinstance(step, CreateDirectory):
                action, target = "mkdir", str(step.path)
            elif isinstance(step, RunCommand):
                action, target = "run", f"{step.command_line}  (in {step.cwd})"
            elif isinstance(step, WriteFile):
                action, target = "write", str(step.path)
            elif isinstance(step, UpdateManifestScripts):
                action, target = "scripts", f"{step.path} ({', '.join(step.scripts)})"
            else:
                action, target = type(step).__name__, ""
            table.add_row(str(index), branch_plan.branch.value, action, target)

    if index == 0:
        print_warning("Nothing to do: no framework selected.")
        return
    console.print(table)


def print_next_steps(plan: ScaffoldPlan) -> None:
    """Print the follow-up commands for every generated branch."""
    lines: list[str] = ["[cyan]Next steps:[/cyan]"]
    for branch_plan in plan.branches():
        if not branch_plan:
            continue
        lines.extend(_branch_next_steps(branch_plan))

    lines.extend([
        "",
        "[yellow]Pro Tips:[/yellow]",
        "[dim]  - Environment files (.env) have been created with common variables[/dim]",
        "[dim]  - Update the database URLs and API keys in your .env files[/dim]",
        "[dim]  - Run 'npm install' in each directory to install dependencies[/dim]",
    ])
    console.print()
    console.print("\n".join(lines))


def _branch_next_steps(plan: Plan) -> list[str]:
    title = "Frontend" if plan.branch == BranchKind.FRONTEND else "Backend"
    return [
        f"[white]{title}:[/white]",
        f"[dim]  cd {plan.root}[/dim]",
        "[dim]  npm install[/dim]",
        "[dim]  npm run dev[/dim]",
        "[dim]  Don't forget to configure your .env file![/dim]",
    ]


def _print_branch_done(result: ExecutionResult) -> None:
    name = result.branch.value.capitalize()
    failed = result.failed_writes
    if failed:
        print_warning(f"{name} setup completed with {len(failed)} file(s) not written.")
    else:
        print_success(f"{name} setup completed!")
