"""Package catalog -- which npm packages each selectable option contributes.

Every table is keyed by the closed enums in :mod:`launchr.scaffolder.models`
and is the only place in Launchr that names dependency packages.  Resolution
is a set union over the chosen keys, emitted in catalog-definition order so
install commands are deterministic regardless of the order options were
picked in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from .models import (
    ORM,
    BackendFramework,
    BackendTool,
    Database,
    FrontendFramework,
    FrontendTool,
    PackageSet,
)

CatalogKey = Union[FrontendFramework, FrontendTool, BackendFramework, Database, ORM, BackendTool]


@dataclass(frozen=True)
class PackageEntry:
    """Packages contributed by one option.

    ``types`` are type-definition packages; they are installed as development
    dependencies and only for TypeScript projects.
    """

    runtime: tuple[str, ...] = ()
    dev: tuple[str, ...] = ()
    types: tuple[str, ...] = ()


_TS_TOOLCHAIN = ("typescript", "ts-node", "@types/node")


# ---------------------------------------------------------------------------
# Frontend
# ---------------------------------------------------------------------------

# Styling packages each template needs on top of what its generator installs.
FRONTEND_FRAMEWORK_PACKAGES: dict[FrontendFramework, PackageEntry] = {
    FrontendFramework.REACT: PackageEntry(dev=("tailwindcss", "@tailwindcss/vite")),
    FrontendFramework.REACT_TS: PackageEntry(dev=("tailwindcss", "@tailwindcss/vite")),
    FrontendFramework.NEXT: PackageEntry(
        dev=("tailwindcss@4", "@tailwindcss/postcss", "postcss"),
    ),
    FrontendFramework.NEXT_TS: PackageEntry(
        dev=("tailwindcss@4", "postcss", "@tailwindcss/postcss"),
    ),
    FrontendFramework.VUE: PackageEntry(dev=("tailwindcss", "@tailwindcss/vite")),
}

FRONTEND_TOOL_PACKAGES: dict[FrontendTool, PackageEntry] = {
    FrontendTool.SHADCN: PackageEntry(
        runtime=("@radix-ui/react-slot", "class-variance-authority", "clsx", "tailwind-merge"),
    ),
    FrontendTool.MATERIAL_UI: PackageEntry(
        runtime=("@mui/material", "@emotion/react", "@emotion/styled"),
    ),
    FrontendTool.LUCIDE: PackageEntry(runtime=("lucide-react",)),
    FrontendTool.REACT_ICONS: PackageEntry(runtime=("react-icons",)),
    FrontendTool.ZOD: PackageEntry(runtime=("zod",)),
    FrontendTool.AXIOS: PackageEntry(runtime=("axios",)),
    FrontendTool.FRAMER_MOTION: PackageEntry(runtime=("framer-motion",)),
    FrontendTool.REDUX: PackageEntry(runtime=("@reduxjs/toolkit", "react-redux")),
    FrontendTool.ZUSTAND: PackageEntry(runtime=("zustand",)),
}


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

BACKEND_FRAMEWORK_PACKAGES: dict[BackendFramework, PackageEntry] = {
    BackendFramework.EXPRESS: PackageEntry(runtime=("express",)),
    BackendFramework.EXPRESS_TS: PackageEntry(
        runtime=("express",), dev=("@types/express", *_TS_TOOLCHAIN),
    ),
    BackendFramework.HAPI: PackageEntry(runtime=("@hapi/hapi",)),
    BackendFramework.HAPI_TS: PackageEntry(
        runtime=("@hapi/hapi",), dev=("@types/hapi__hapi", *_TS_TOOLCHAIN),
    ),
    BackendFramework.KOA: PackageEntry(runtime=("koa",)),
}

# Database.ORM and Database.NONE deliberately have no entry.
DATABASE_PACKAGES: dict[Database, PackageEntry] = {
    Database.MONGODB: PackageEntry(runtime=("mongoose",)),
    Database.POSTGRES: PackageEntry(runtime=("pg",), types=("@types/pg",)),
    Database.MYSQL: PackageEntry(runtime=("mysql2",)),
    Database.SQLITE: PackageEntry(runtime=("sqlite3",)),
}

ORM_PACKAGES: dict[ORM, PackageEntry] = {
    ORM.SEQUELIZE: PackageEntry(runtime=("sequelize",), types=("@types/sequelize",)),
    ORM.TYPEORM: PackageEntry(runtime=("typeorm", "reflect-metadata")),
    ORM.PRISMA: PackageEntry(runtime=("prisma", "@prisma/client")),
}

BACKEND_TOOL_PACKAGES: dict[BackendTool, PackageEntry] = {
    BackendTool.BCRYPT: PackageEntry(runtime=("bcrypt",), types=("@types/bcrypt",)),
    BackendTool.ZOD: PackageEntry(runtime=("zod",)),
    BackendTool.JWT: PackageEntry(runtime=("jsonwebtoken",), types=("@types/jsonwebtoken",)),
    BackendTool.JOSE: PackageEntry(runtime=("jose",)),
    BackendTool.HELMET: PackageEntry(runtime=("helmet",)),
    BackendTool.CORS: PackageEntry(runtime=("cors",), types=("@types/cors",)),
    BackendTool.REDIS: PackageEntry(runtime=("redis",)),
    BackendTool.DOTENV: PackageEntry(runtime=("dotenv",)),
    BackendTool.NODEMAILER: PackageEntry(runtime=("nodemailer",), types=("@types/nodemailer",)),
    BackendTool.NODEMON: PackageEntry(dev=("nodemon",)),
}

# Extra commands (run through the package runner, e.g. ``npx``) that an ORM
# needs after its packages are installed.
ORM_INIT_COMMANDS: dict[ORM, tuple[tuple[str, ...], ...]] = {
    ORM.PRISMA: (("prisma", "init"),),
}

# Definition order across tables; resolution output follows it.
_TABLES: tuple[dict, ...] = (
    FRONTEND_FRAMEWORK_PACKAGES,
    FRONTEND_TOOL_PACKAGES,
    BACKEND_FRAMEWORK_PACKAGES,
    DATABASE_PACKAGES,
    ORM_PACKAGES,
    BACKEND_TOOL_PACKAGES,
)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_packages(keys: Iterable[CatalogKey], typescript: bool = False) -> PackageSet:
    """Union the packages contributed by *keys*.

    Keys are matched by enum type as well as value, so ``Database.NONE`` never
    matches a ``FrontendFramework.NONE`` entry.  Keys without a catalog entry
    contribute nothing.  A package that any chosen entry lists as a
    development dependency is installed as one, so the two sequences of the
    result are always disjoint.

    Args:
        keys: Selected options, in any order, possibly repeated.
        typescript: Whether to include type-definition packages.

    Returns:
        A ``PackageSet`` in catalog-definition order.
    """
    chosen = {(type(k), k) for k in keys if isinstance(k, Enum)}

    runtime: list[str] = []
    dev: list[str] = []
    for table in _TABLES:
        for key, entry in table.items():
            if (type(key), key) not in chosen:
                continue
            runtime.extend(entry.runtime)
            dev.extend(entry.dev)
            if typescript:
                dev.extend(entry.types)

    dev_unique = _unique(dev)
    dev_names = set(dev_unique)
    runtime_unique = tuple(p for p in _unique(runtime) if p not in dev_names)
    return PackageSet(runtime=runtime_unique, dev=dev_unique)


def orm_init_commands(orm: ORM | None) -> tuple[tuple[str, ...], ...]:
    """Return the post-install initialisation commands for *orm*."""
    if orm is None:
        return ()
    return ORM_INIT_COMMANDS.get(orm, ())


def _unique(packages: list[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for pkg in packages:
        if pkg not in seen:
            seen.add(pkg)
            result.append(pkg)
    return tuple(result)
