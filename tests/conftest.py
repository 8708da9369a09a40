"""Shared pytest fixtures for the Launchr test suite.

Provides reusable fixtures for:
- Temporary output directories and configs rooted in them
- Representative selections (frontend-only, backend-only, fullstack)
- A recording command runner that never spawns real processes
- Mock subprocess helpers
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from launchr.config import Config
from launchr.scaffolder.executor import CommandFailedError, CommandRunner
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
    RunCommand,
    Selection,
)


# ---------------------------------------------------------------------------
# Paths & config
# ---------------------------------------------------------------------------

@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Temporary directory that receives frontend/ and backend/."""
    out = tmp_path / "workspace"
    out.mkdir()
    yield out


@pytest.fixture
def config(output_dir: Path) -> Config:
    """A Config rooted in the temporary output directory."""
    return Config(output_dir=output_dir, show_next_steps=True)


# ---------------------------------------------------------------------------
# Selections
# ---------------------------------------------------------------------------

@pytest.fixture
def react_selection() -> Selection:
    """Frontend-only React + Tailwind with no tools."""
    return Selection(
        project_type=ProjectType.FRONTEND,
        frontend=FrontendOptions(framework=FrontendFramework.REACT, tools=()),
    )


@pytest.fixture
def express_ts_selection() -> Selection:
    """Backend-only Express.js + ts with Postgres and dotenv."""
    return Selection(
        project_type=ProjectType.BACKEND,
        backend=BackendOptions(
            framework=BackendFramework.EXPRESS_TS,
            database=Database.POSTGRES,
            orm=None,
            tools=(BackendTool.DOTENV,),
        ),
    )


@pytest.fixture
def fullstack_selection() -> Selection:
    """Fullstack Next.js TS + Express.js with Prisma and a handful of tools."""
    return Selection(
        project_type=ProjectType.FULLSTACK,
        frontend=FrontendOptions(
            framework=FrontendFramework.NEXT_TS,
            tools=(FrontendTool.AXIOS, FrontendTool.ZUSTAND),
        ),
        backend=BackendOptions(
            framework=BackendFramework.EXPRESS,
            database=Database.ORM,
            orm=ORM.PRISMA,
            tools=(BackendTool.CORS, BackendTool.NODEMON, BackendTool.DOTENV),
        ),
    )


# ---------------------------------------------------------------------------
# Command runners
# ---------------------------------------------------------------------------

class RecordingRunner(CommandRunner):
    """CommandRunner that records steps instead of spawning processes.

    ``fail_on`` is a predicate; matching steps raise ``CommandFailedError``
    with exit code 1.  ``on_run`` is called for every step that succeeds,
    e.g. to emulate files the real tool would create.
    """

    def __init__(
        self,
        fail_on: Callable[[RunCommand], bool] | None = None,
        on_run: Callable[[RunCommand], None] | None = None,
    ) -> None:
        super().__init__()
        self.calls: list[RunCommand] = []
        self.fail_on = fail_on or (lambda step: False)
        self.on_run = on_run

    async def run(self, step: RunCommand) -> None:
        self.calls.append(step)
        if self.fail_on(step):
            raise CommandFailedError(step, 1, detail="simulated failure")
        if self.on_run is not None:
            self.on_run(step)


def emulate_npm_init(step: RunCommand) -> None:
    """Write the package.json that ``npm init -y`` would create."""
    if step.args == ("init", "-y"):
        (Path(step.cwd) / "package.json").write_text(
            '{\n  "name": "backend",\n  "version": "1.0.0",\n'
            '  "scripts": {\n    "test": "echo \\"Error: no test specified\\" && exit 1"\n  }\n}\n',
            encoding="utf-8",
        )


@pytest.fixture
def recording_runner() -> RecordingRunner:
    """A runner whose every command succeeds and is recorded."""
    return RecordingRunner(on_run=emulate_npm_init)


@pytest.fixture
def failing_runner() -> Callable[..., RecordingRunner]:
    """Factory for a runner that fails on steps matching a predicate.

    Usage:
        def test_abort(failing_runner):
            runner = failing_runner(lambda step: "install" in step.args)
    """
    def factory(fail_on: Callable[[RunCommand], bool]) -> RecordingRunner:
        return RecordingRunner(fail_on=fail_on, on_run=emulate_npm_init)

    return factory


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
