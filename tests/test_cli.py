"""Tests for the command-line entry point (launchr.cli)."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from launchr.cli import EXIT_INTERRUPTED, build_parser, enum_choice, enum_list, main
from launchr.scaffolder.models import (
    BackendFramework,
    BackendTool,
    BranchKind,
    Database,
    ExecutionResult,
    FrontendFramework,
    ProjectType,
    RunReport,
)

pytestmark = pytest.mark.unit

BACKEND_FLAGS = [
    "--project-type", "backend",
    "--backend", "express.js + ts",
    "--database", "Postgres",
    "--backend-tools", "dotenv",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("LAUNCHR_"):
            monkeypatch.delenv(name)


@pytest.fixture
def mock_orchestrator():
    """Patch the Orchestrator so main() never executes a plan."""
    with patch("launchr.cli.Orchestrator") as cls:
        cls.return_value.run = AsyncMock(return_value=RunReport())
        yield cls


# ---------------------------------------------------------------------------
# Argument converters & parser
# ---------------------------------------------------------------------------


class TestConverters:
    def test_enum_choice_is_case_insensitive(self):
        assert enum_choice(Database)("postgres") is Database.POSTGRES
        assert enum_choice(FrontendFramework)(" next.js ts + tailwind ") is FrontendFramework.NEXT_TS

    def test_enum_choice_rejects_unknown(self):
        with pytest.raises(argparse.ArgumentTypeError, match="invalid choice"):
            enum_choice(Database)("Oracle")

    def test_enum_list(self):
        convert = enum_list(BackendTool)
        assert convert("") == ()
        assert convert("dotenv, CORS") == (BackendTool.DOTENV, BackendTool.CORS)

    def test_parser_rejects_bad_value(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--database", "Oracle"])
        assert exc_info.value.code == 2

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.project_type is None
        assert args.frontend_tools is None
        assert args.yes is False
        assert args.dry_run is False


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_non_interactive_run(self, tmp_path: Path, mock_orchestrator):
        with patch("launchr.prompts.Prompt.ask") as mock_ask:
            main([*BACKEND_FLAGS, "--output", str(tmp_path), "--yes"])

        mock_ask.assert_not_called()
        config = mock_orchestrator.call_args.args[0]
        assert config.output_dir == tmp_path
        assert config.dry_run is False

        selection = mock_orchestrator.return_value.run.call_args.args[0]
        assert selection.project_type is ProjectType.BACKEND
        assert selection.backend.framework is BackendFramework.EXPRESS_TS
        assert selection.backend.tools == (BackendTool.DOTENV,)

    def test_dry_run_skips_confirmation(self, mock_orchestrator):
        with patch("launchr.cli.confirm") as mock_confirm:
            main([*BACKEND_FLAGS, "--dry-run", "--package-manager", "pnpm"])

        mock_confirm.assert_not_called()
        config = mock_orchestrator.call_args.args[0]
        assert config.dry_run is True
        assert config.package_manager == "pnpm"

    def test_failed_run_exits_nonzero(self, mock_orchestrator):
        failed = ExecutionResult(branch=BranchKind.BACKEND, fatal_error="Command failed: npm init -y")
        mock_orchestrator.return_value.run = AsyncMock(return_value=RunReport(results=[failed]))

        with pytest.raises(SystemExit) as exc_info:
            main([*BACKEND_FLAGS, "--yes"])
        assert exc_info.value.code == 1

    def test_invalid_orm_combination_exits(self, mock_orchestrator):
        with pytest.raises(SystemExit) as exc_info:
            main([*BACKEND_FLAGS, "--orm", "Prisma", "--yes"])
        assert exc_info.value.code == 1
        mock_orchestrator.assert_not_called()

    @pytest.mark.parametrize("timeout", ["abc", "0", "-3"])
    def test_invalid_timeout_env_exits(self, monkeypatch, mock_orchestrator, timeout):
        monkeypatch.setenv("LAUNCHR_COMMAND_TIMEOUT", timeout)
        with patch("launchr.cli.print_error") as mock_error:
            with pytest.raises(SystemExit) as exc_info:
                main([*BACKEND_FLAGS, "--yes"])
        assert exc_info.value.code == 1
        assert mock_error.call_args.args[0].startswith("Invalid configuration")
        mock_orchestrator.assert_not_called()

    def test_declined_confirmation_aborts(self, mock_orchestrator):
        with patch("launchr.cli.confirm", return_value=False):
            with pytest.raises(SystemExit) as exc_info:
                main(BACKEND_FLAGS)
        assert exc_info.value.code == 1
        mock_orchestrator.assert_not_called()

    def test_interrupt_during_prompts(self, mock_orchestrator):
        with patch("launchr.cli.collect_selection", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main([])
        assert exc_info.value.code == EXIT_INTERRUPTED
        mock_orchestrator.assert_not_called()

    def test_interrupt_during_run(self, mock_orchestrator):
        mock_orchestrator.return_value.run = MagicMock(side_effect=KeyboardInterrupt)
        with pytest.raises(SystemExit) as exc_info:
            main([*BACKEND_FLAGS, "--yes"])
        assert exc_info.value.code == EXIT_INTERRUPTED
