"""Plan execution.

Runs the steps of a ``Plan`` strictly in order.  Each step kind is handled by
a small executor that raises on failure; ``PlanExecutor`` turns those
exceptions into ``StepOutcome`` records and decides whether the run goes on:

* ``CreateDirectory`` -- an existing directory is informational; failing to
  create one is fatal.
* ``RunCommand`` -- a nonzero exit (or a missing program) is fatal.
* ``WriteFile`` / ``UpdateManifestScripts`` -- failures are reported and the
  plan continues.

Nothing is retried and nothing is rolled back.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

from launchr.utils import (
    print_error,
    print_info,
    print_step_start,
    print_success,
    print_warning,
    run_command,
)

from .models import (
    CreateDirectory,
    ExecutionResult,
    Plan,
    RunCommand,
    Step,
    StepOutcome,
    StepStatus,
    UpdateManifestScripts,
    WriteFile,
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FatalStepError(Exception):
    """Raised when a step fails in a way that must abort the whole run."""

    def __init__(self, message: str, step: Step, detail: str = "") -> None:
        self.step = step
        self.detail = detail
        super().__init__(message)


class CommandFailedError(FatalStepError):
    """An external command exited with a nonzero status or could not start."""

    def __init__(self, step: RunCommand, returncode: int | None, detail: str = "") -> None:
        self.returncode = returncode
        if returncode is None:
            message = f"Command failed: {step.command_line}"
        else:
            message = f"Command failed: {step.command_line} (exit code {returncode})"
        super().__init__(message, step, detail)


class DirectoryCreationError(FatalStepError):
    """A branch directory could not be created."""


class StepWriteError(Exception):
    """Raised when a file write fails; recoverable."""

    def __init__(self, message: str, step: Step) -> None:
        self.step = step
        super().__init__(message)


# ---------------------------------------------------------------------------
# Filesystem steps
# ---------------------------------------------------------------------------


def create_directory(step: CreateDirectory) -> StepStatus:
    """Create the directory (and parents).

    Returns:
        ``StepStatus.INFO`` if it already existed, ``StepStatus.SUCCESS``
        otherwise.

    Raises:
        DirectoryCreationError: If the path cannot be created.
    """
    path = Path(step.path)
    if path.is_dir():
        return StepStatus.INFO
    try:
        path.mkdir(parents=True, exist_ok=False)
    except OSError as exc:
        raise DirectoryCreationError(
            f"Failed to create folder: {path}", step, detail=str(exc)
        ) from exc
    return StepStatus.SUCCESS


def write_file(step: WriteFile) -> None:
    """Write the file, overwriting unconditionally.

    Raises:
        StepWriteError: If the file cannot be written.
    """
    path = Path(step.path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(step.content, encoding="utf-8")
    except OSError as exc:
        raise StepWriteError(f"Failed to write {path}: {exc}", step) from exc


def update_manifest_scripts(step: UpdateManifestScripts) -> StepStatus:
    """Merge ``step.scripts`` into the ``scripts`` object of a JSON manifest.

    Existing scripts with other names are kept.

    Returns:
        ``StepStatus.INFO`` if there is no manifest to update,
        ``StepStatus.SUCCESS`` otherwise.

    Raises:
        StepWriteError: If the manifest is unreadable, is not a JSON object,
            or cannot be written back.
    """
    path = Path(step.path)
    if not path.exists():
        return StepStatus.INFO
    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        # ValueError covers JSONDecodeError and UnicodeDecodeError.
        raise StepWriteError(f"Failed to read {path}: {exc}", step) from exc
    if not isinstance(manifest, dict):
        raise StepWriteError(f"Failed to update {path}: not a JSON object", step)

    scripts = manifest.get("scripts")
    if not isinstance(scripts, dict):
        scripts = {}
    manifest["scripts"] = {**scripts, **step.scripts}
    try:
        path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise StepWriteError(f"Failed to write {path}: {exc}", step) from exc
    return StepStatus.SUCCESS


# ---------------------------------------------------------------------------
# External commands
# ---------------------------------------------------------------------------


class CommandRunner:
    """Runs ``RunCommand`` steps with the user's terminal attached."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout

    async def run(self, step: RunCommand) -> None:
        """Run the command to completion.

        Output is not captured: the child's own error output has already
        reached the terminal, so a failure only carries the exit status
        (or the timeout message).

        Raises:
            CommandFailedError: On a nonzero exit status or if the program
                cannot be started.
        """
        cmd = [step.program, *step.args]
        try:
            returncode, _stdout, stderr = await run_command(
                cmd, cwd=step.cwd, timeout=self.timeout, capture=False
            )
        except OSError as exc:
            raise CommandFailedError(step, None, detail=str(exc)) from exc
        if returncode != 0:
            # stderr is empty unless run_command produced its own message.
            raise CommandFailedError(step, returncode, detail=stderr)


# ---------------------------------------------------------------------------
# PlanExecutor
# ---------------------------------------------------------------------------


class PlanExecutor:
    """Executes a plan step by step, stopping at the first fatal step."""

    def __init__(self, runner: CommandRunner | None = None) -> None:
        self.runner = runner or CommandRunner()

    async def execute(self, plan: Plan) -> ExecutionResult:
        """Execute every step of *plan* in order.

        Returns:
            An ``ExecutionResult``.  ``fatal_error`` is set (and the
            remaining steps are skipped) if a step failed fatally.
        """
        result = ExecutionResult(branch=plan.branch)
        for step in plan.steps:
            print_step_start(_describe(step))
            try:
                outcome = await self._dispatch(step)
            except FatalStepError as exc:
                print_error(str(exc))
                if exc.detail:
                    print_error(exc.detail)
                result.outcomes.append(
                    StepOutcome(step=step, status=StepStatus.FATAL, message=str(exc))
                )
                result.fatal_error = f"{exc}: {exc.detail}" if exc.detail else str(exc)
                break
            except StepWriteError as exc:
                print_warning(str(exc))
                result.outcomes.append(
                    StepOutcome(step=step, status=StepStatus.FAILED, message=str(exc))
                )
                continue

            _report(outcome)
            result.outcomes.append(outcome)
        return result

    async def _dispatch(self, step: Step) -> StepOutcome:
        if isinstance(step, CreateDirectory):
            status = await asyncio.to_thread(create_directory, step)
            message = (
                f"Folder already exists: {step.path}"
                if status == StepStatus.INFO
                else f"Folder created: {step.path}"
            )
            return StepOutcome(step=step, status=status, message=message)

        if isinstance(step, RunCommand):
            await self.runner.run(step)
            message = step.label or f"Completed: {step.command_line}"
            return StepOutcome(step=step, status=StepStatus.SUCCESS, message=message)

        if isinstance(step, WriteFile):
            await asyncio.to_thread(write_file, step)
            return StepOutcome(step=step, status=StepStatus.SUCCESS, message=f"Written: {step.path}")

        if isinstance(step, UpdateManifestScripts):
            status = await asyncio.to_thread(update_manifest_scripts, step)
            message = (
                f"No manifest to update at {step.path}"
                if status == StepStatus.INFO
                else f"Scripts updated: {', '.join(step.scripts)}"
            )
            return StepOutcome(step=step, status=status, message=message)

        raise TypeError(f"Unknown step type: {type(step).__name__}")


def _describe(step: Step) -> str:
    if isinstance(step, RunCommand):
        return step.label or step.command_line
    if isinstance(step, WriteFile):
        return step.label or f"Writing {step.path}"
    return step.label


def _report(outcome: StepOutcome) -> None:
    if outcome.status == StepStatus.INFO:
        print_info(outcome.message)
    else:
        print_success(outcome.message)
