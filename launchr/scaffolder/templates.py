"""Jinja2 template rendering and the template catalog.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``launchr/scaffolder/templates/`` directory, and the catalog tables that map
each selectable framework to the files it produces and the path (relative to
the branch root) each one is written to.  The catalog is the only place in
Launchr that knows generated file contents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .models import BackendFramework, BranchKind, FrontendFramework


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Rendering is pure: callers decide where (and
    whether) the result is written.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"backend/server/express.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )


# ---------------------------------------------------------------------------
# Catalog entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateFile:
    """One generated file: which template renders it and where it goes."""

    template: str
    output: str
    context: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RenderedFile:
    """A rendered template, ready to be planned as a file write."""

    path: PurePosixPath
    content: str


def _vite(plugin: str, plugin_package: str, config_name: str, style_path: str) -> tuple[TemplateFile, ...]:
    return (
        TemplateFile(
            "frontend/vite.config.j2",
            config_name,
            {"plugin": plugin, "plugin_package": plugin_package},
        ),
        TemplateFile("frontend/tailwind.css.j2", style_path),
    )


def _next(content_globs: tuple[str, ...], globals_path: str, with_next_config: bool) -> tuple[TemplateFile, ...]:
    files = [
        TemplateFile("frontend/postcss.config.mjs.j2", "postcss.config.mjs"),
        TemplateFile(
            "frontend/tailwind.config.js.j2",
            "tailwind.config.js",
            {"content_globs": content_globs},
        ),
        TemplateFile("frontend/tailwind.css.j2", globals_path),
    ]
    if with_next_config:
        files.append(TemplateFile("frontend/next.config.ts.j2", "next.config.ts"))
    return tuple(files)


# Files written over the scaffold generator's output, in write order.
FRONTEND_TEMPLATES: dict[FrontendFramework, tuple[TemplateFile, ...]] = {
    FrontendFramework.REACT: _vite("react", "@vitejs/plugin-react", "vite.config.js", "src/index.css"),
    FrontendFramework.REACT_TS: _vite("react", "@vitejs/plugin-react", "vite.config.ts", "src/index.css"),
    FrontendFramework.NEXT: _next(
        ("./app/**/*.{js,ts,jsx,tsx}", "./components/**/*.{js,ts,jsx,tsx}"),
        "app/globals.css",
        with_next_config=False,
    ),
    FrontendFramework.NEXT_TS: _next(
        ("./src/app/**/*.{ts,tsx}", "./src/components/**/*.{ts,tsx}"),
        "src/app/globals.css",
        with_next_config=True,
    ),
    FrontendFramework.VUE: _vite("vue", "@vitejs/plugin-vue", "vite.config.js", "src/style.css"),
}

BACKEND_SERVER_TEMPLATES: dict[BackendFramework, str] = {
    BackendFramework.NODE: "backend/server/node.j2",
    BackendFramework.EXPRESS: "backend/server/express.j2",
    BackendFramework.EXPRESS_TS: "backend/server/express.j2",
    BackendFramework.HAPI: "backend/server/hapi.j2",
    BackendFramework.HAPI_TS: "backend/server/hapi.j2",
    BackendFramework.KOA: "backend/server/koa.j2",
}

TSCONFIG_TEMPLATE = TemplateFile("backend/tsconfig.json.j2", "tsconfig.json")

ENV_TEMPLATES: dict[BranchKind, TemplateFile] = {
    BranchKind.FRONTEND: TemplateFile("frontend/env.j2", ".env"),
    BranchKind.BACKEND: TemplateFile("backend/env.j2", ".env"),
}


def server_filename(typescript: bool) -> str:
    return "server.ts" if typescript else "server.js"


def manifest_scripts(typescript: bool, watch: bool) -> dict[str, str]:
    """Return the ``package.json`` scripts for a generated backend.

    Args:
        typescript: Whether the server entry is ``server.ts``.
        watch: Whether ``nodemon`` was selected for the dev script.
    """
    entry = server_filename(typescript)
    start = f"ts-node {entry}" if typescript else f"node {entry}"
    if watch:
        dev = f"nodemon --exec ts-node {entry}" if typescript else f"nodemon {entry}"
    else:
        dev = start
    scripts = {"start": start, "dev": dev}
    if typescript:
        scripts["build"] = "tsc"
    return scripts


# ---------------------------------------------------------------------------
# TemplateCatalog
# ---------------------------------------------------------------------------


class TemplateCatalog:
    """Looks up and renders the files each selection produces.

    Unknown keys (including the ``None`` framework choices) resolve to no
    files rather than an error.
    """

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def frontend_files(self, framework: FrontendFramework) -> list[RenderedFile]:
        """Render the build/style configuration files for *framework*."""
        return [self._render(tf) for tf in FRONTEND_TEMPLATES.get(framework, ())]

    def backend_files(
        self,
        framework: BackendFramework,
        tools: Iterable[str] = (),
    ) -> list[RenderedFile]:
        """Render the server entry file (and ``tsconfig.json`` for TypeScript).

        The server content is a function of the framework, its language
        variant and the selected tools only.
        """
        template = BACKEND_SERVER_TEMPLATES.get(framework)
        if template is None:
            return []
        typescript = framework.is_typescript
        context = {
            "typescript": typescript,
            "tools": {getattr(t, "value", t) for t in tools},
        }
        files = [
            self._render(TemplateFile(template, server_filename(typescript), context)),
        ]
        if typescript:
            files.append(self._render(TSCONFIG_TEMPLATE))
        return files

    def env_file(self, branch: BranchKind) -> RenderedFile | None:
        """Render the ``.env`` file; content depends on the branch kind only."""
        tf = ENV_TEMPLATES.get(branch)
        return self._render(tf) if tf is not None else None

    def _render(self, tf: TemplateFile) -> RenderedFile:
        return RenderedFile(
            path=PurePosixPath(tf.output),
            content=self.renderer.render(tf.template, tf.context),
        )
