"""Launchr configuration.

Centralised, typed configuration for a scaffolding run.  Settings use a
Pydantic v2 model so they are validated at construction time and can be
built from environment variables or CLI flags without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global Launchr configuration.

    Created once by the CLI entry point and then passed to the planner,
    executor and orchestrator.  Nothing in Launchr reads the process working
    directory directly; every generated path is rooted at ``output_dir``.
    """

    output_dir: Path = Field(default=Path("."), description="Where frontend/ and backend/ are created")
    package_manager: str = Field(default="npm", description="Program used for install/init/create")
    package_runner: str = Field(default="npx", description="Program used for one-off generators")
    command_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-command timeout in seconds; None waits indefinitely",
    )
    dry_run: bool = Field(default=False, description="Print the plan instead of executing it")
    show_next_steps: bool = Field(default=True, description="Print next steps after a successful run")

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def frontend_dir(self) -> Path:
        """Root of the generated frontend branch."""
        return self.output_dir / "frontend"

    @property
    def backend_dir(self) -> Path:
        """Root of the generated backend branch."""
        return self.output_dir / "backend"

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            LAUNCHR_OUTPUT_DIR, LAUNCHR_PACKAGE_MANAGER, LAUNCHR_PACKAGE_RUNNER,
            LAUNCHR_COMMAND_TIMEOUT, LAUNCHR_DRY_RUN.

        Keyword *overrides* whose value is not ``None`` take precedence over
        the environment (used by the CLI for explicit flags).
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("LAUNCHR_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["LAUNCHR_OUTPUT_DIR"])
        if os.environ.get("LAUNCHR_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["LAUNCHR_PACKAGE_MANAGER"]
        if os.environ.get("LAUNCHR_PACKAGE_RUNNER"):
            kwargs["package_runner"] = os.environ["LAUNCHR_PACKAGE_RUNNER"]
        if os.environ.get("LAUNCHR_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = float(os.environ["LAUNCHR_COMMAND_TIMEOUT"])
        if os.environ.get("LAUNCHR_DRY_RUN"):
            kwargs["dry_run"] = os.environ["LAUNCHR_DRY_RUN"].strip().lower() in _TRUTHY

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)
