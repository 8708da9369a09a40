"""Scaffolding plan builder.

Turns a validated ``Selection`` into an ordered, side-effect-free list of
steps for each branch.  Nothing here touches the filesystem or spawns a
process; the :mod:`launchr.scaffolder.executor` consumes the result.

Per-framework behaviour is a single lookup in the ``FRONTEND_STACKS`` /
``BACKEND_STACKS`` tables.  Each stack builds its own plan fragment.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

from launchr.config import Config

from .catalog import orm_init_commands, resolve_packages
from .models import (
    BackendFramework,
    BackendOptions,
    BackendTool,
    BranchKind,
    CreateDirectory,
    FrontendFramework,
    FrontendOptions,
    PackageSet,
    Plan,
    RunCommand,
    ScaffoldPlan,
    Selection,
    Step,
    UpdateManifestScripts,
    WriteFile,
)
from .templates import RenderedFile, TemplateCatalog, manifest_scripts


# ---------------------------------------------------------------------------
# Stack definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeneratorCommand:
    """An external project generator invocation.

    ``via_runner`` selects the package runner (``npx``) instead of the
    package manager (``npm``).
    """

    args: tuple[str, ...]
    label: str
    via_runner: bool = False

    def to_step(self, config: Config, cwd: Path) -> RunCommand:
        program = config.package_runner if self.via_runner else config.package_manager
        return RunCommand(program=program, args=self.args, cwd=cwd, label=self.label)


def _vite(template: str, label: str) -> GeneratorCommand:
    return GeneratorCommand(("create", "vite@latest", ".", "--", "--template", template), label)


def _create_next_app(language_flag: str, label: str, turbo: bool) -> GeneratorCommand:
    args = [
        "create-next-app@latest",
        ".",
        language_flag,
        "--no-tailwind",
        "--eslint",
        "--app",
        "--no-src-dir",
        "--import-alias",
        "@/*",
    ]
    if turbo:
        args.append("--turbo")
    args.append("--yes")
    return GeneratorCommand(tuple(args), label, via_runner=True)


@dataclass(frozen=True)
class FrontendStack:
    """How one frontend framework is scaffolded."""

    framework: FrontendFramework
    generator: GeneratorCommand
    styling_label: str

    def fragment(self, builder: "PlanBuilder", root: Path) -> list[Step]:
        """Generator, styling install, then config files over the generator's output."""
        steps: list[Step] = [self.generator.to_step(builder.config, root)]
        styling = resolve_packages([self.framework])
        steps.extend(builder.install_steps(styling, root, runtime_label="", dev_label=self.styling_label))
        steps.extend(builder.write_steps(builder.templates.frontend_files(self.framework), root))
        return steps


@dataclass(frozen=True)
class BackendStack:
    """How one backend framework is scaffolded."""

    framework: BackendFramework

    @property
    def typescript(self) -> bool:
        return self.framework.is_typescript

    def fragment(self, builder: "PlanBuilder", options: BackendOptions, root: Path) -> list[Step]:
        config = builder.config
        steps: list[Step] = [
            RunCommand(
                program=config.package_manager,
                args=("init", "-y"),
                cwd=root,
                label="Initializing package.json for backend",
            )
        ]

        keys = [self.framework, options.database, *options.tools]
        if options.orm is not None:
            keys.append(options.orm)
        packages = resolve_packages(keys, typescript=self.typescript)
        steps.extend(
            builder.install_steps(
                packages,
                root,
                runtime_label="Installing backend packages",
                dev_label="Installing backend development dependencies",
            )
        )

        for args in orm_init_commands(options.orm):
            steps.append(
                RunCommand(
                    program=config.package_runner,
                    args=args,
                    cwd=root,
                    label=f"Initializing {options.orm.value}",
                )
            )

        files = builder.templates.backend_files(self.framework, options.tools)
        server, extra = files[:1], files[1:]
        steps.extend(builder.write_steps(server, root))
        steps.append(
            UpdateManifestScripts(
                path=root / "package.json",
                scripts=manifest_scripts(self.typescript, BackendTool.NODEMON in options.tools),
            )
        )
        steps.extend(builder.write_steps(extra, root))
        return steps


FRONTEND_STACKS: dict[FrontendFramework, FrontendStack] = {
    stack.framework: stack
    for stack in (
        FrontendStack(
            FrontendFramework.REACT,
            _vite("react", "Setting up React with Vite"),
            "Installing Tailwind CSS v4",
        ),
        FrontendStack(
            FrontendFramework.REACT_TS,
            _vite("react-ts", "Setting up React with TypeScript and Vite"),
            "Installing Tailwind CSS v4",
        ),
        FrontendStack(
            FrontendFramework.NEXT,
            _create_next_app("--js", "Setting up Next.js project with Turbo", turbo=True),
            "Installing Tailwind CSS v4 and PostCSS",
        ),
        FrontendStack(
            FrontendFramework.NEXT_TS,
            _create_next_app("--ts", "Setting up Next.js with TypeScript", turbo=False),
            "Installing Tailwind CSS v4 and PostCSS",
        ),
        FrontendStack(
            FrontendFramework.VUE,
            _vite("vue", "Setting up Vue.js with Vite"),
            "Installing Tailwind CSS v4",
        ),
    )
}

BACKEND_STACKS: dict[BackendFramework, BackendStack] = {
    fw: BackendStack(fw) for fw in BackendFramework if fw is not BackendFramework.NONE
}


# ---------------------------------------------------------------------------
# PlanBuilder
# ---------------------------------------------------------------------------


class PlanBuilder:
    """Builds the frontend and backend plans for a selection.

    ``build`` is pure: calling it twice with the same selection and root
    returns equal plans.
    """

    def __init__(self, config: Config | None = None, templates: TemplateCatalog | None = None) -> None:
        self.config = config or Config()
        self.templates = templates or TemplateCatalog()

    # -- Public API --------------------------------------------------------

    def build(self, selection: Selection, root: Optional[Path] = None) -> ScaffoldPlan:
        """Plan both branches of *selection* under *root*.

        Args:
            selection: The validated user choices.
            root: Directory that receives ``frontend/`` and ``backend/``.
                Defaults to ``config.output_dir``.

        Returns:
            A ``ScaffoldPlan`` whose inactive branches have empty plans.
        """
        config = self.config
        if root is not None:
            config = config.model_copy(update={"output_dir": Path(root)})
        return ScaffoldPlan(
            frontend=self.build_frontend(selection.frontend, config.frontend_dir),
            backend=self.build_backend(selection.backend, config.backend_dir),
        )

    def build_frontend(self, options: FrontendOptions | None, root: Path) -> Plan:
        stack = FRONTEND_STACKS.get(options.framework) if options else None
        if stack is None:
            return Plan(branch=BranchKind.FRONTEND, root=root)

        steps: list[Step] = [CreateDirectory(path=root)]
        steps.extend(stack.fragment(self, root))
        steps.extend(
            self.install_steps(
                resolve_packages(options.tools),
                root,
                runtime_label="Installing frontend tools",
                dev_label="Installing frontend development tools",
            )
        )
        steps.extend(self._env_step(BranchKind.FRONTEND, root))
        return Plan(branch=BranchKind.FRONTEND, root=root, steps=tuple(steps))

    def build_backend(self, options: BackendOptions | None, root: Path) -> Plan:
        stack = BACKEND_STACKS.get(options.framework) if options else None
        if stack is None:
            return Plan(branch=BranchKind.BACKEND, root=root)

        steps: list[Step] = [CreateDirectory(path=root)]
        steps.extend(stack.fragment(self, options, root))
        steps.extend(self._env_step(BranchKind.BACKEND, root))
        return Plan(branch=BranchKind.BACKEND, root=root, steps=tuple(steps))

    # -- Step helpers ------------------------------------------------------

    def install_steps(
        self,
        packages: PackageSet,
        cwd: Path,
        runtime_label: str,
        dev_label: str,
    ) -> list[RunCommand]:
        """One ``install`` for runtime and one ``install -D`` for dev packages.

        Empty package lists produce no step.
        """
        steps: list[RunCommand] = []
        pm = self.config.package_manager
        if packages.runtime:
            steps.append(
                RunCommand(program=pm, args=("install", *packages.runtime), cwd=cwd, label=runtime_label)
            )
        if packages.dev:
            steps.append(
                RunCommand(program=pm, args=("install", "-D", *packages.dev), cwd=cwd, label=dev_label)
            )
        return steps

    def write_steps(self, files: list[RenderedFile], root: Path) -> list[WriteFile]:
        return [
            WriteFile(path=_join(root, f.path), content=f.content, label=f"Writing {f.path}")
            for f in files
        ]

    def _env_step(self, branch: BranchKind, root: Path) -> list[WriteFile]:
        env = self.templates.env_file(branch)
        if env is None:
            return []
        return [
            WriteFile(
                path=_join(root, env.path),
                content=env.content,
                label=f"Creating environment file for {branch.value}",
            )
        ]


def build_plan(selection: Selection, config: Config | None = None, root: Optional[Path] = None) -> ScaffoldPlan:
    """Functional shortcut for ``PlanBuilder(config).build(selection, root)``."""
    return PlanBuilder(config).build(selection, root)


def _join(root: Path, relative: PurePosixPath) -> Path:
    return root.joinpath(*relative.parts)
