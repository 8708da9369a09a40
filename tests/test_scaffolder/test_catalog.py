"""Tests for the package catalog.

Covers:
- Union semantics (no duplicates, repeated keys)
- Catalog-definition ordering independent of input order
- Runtime/dev partitioning and type-definition packages
- Unknown / empty-contribution keys
- ORM initialisation commands
"""

from __future__ import annotations

import pytest

from launchr.scaffolder.catalog import (
    BACKEND_TOOL_PACKAGES,
    FRONTEND_TOOL_PACKAGES,
    orm_init_commands,
    resolve_packages,
)
from launchr.scaffolder.models import (
    ORM,
    BackendFramework,
    BackendTool,
    Database,
    FrontendFramework,
    FrontendTool,
    PackageSet,
)

pytestmark = pytest.mark.unit


class TestResolvePackages:
    def test_empty_selection(self):
        result = resolve_packages([])
        assert result == PackageSet()
        assert not result

    def test_single_tool(self):
        result = resolve_packages([FrontendTool.REDUX])
        assert result.runtime == ("@reduxjs/toolkit", "react-redux")
        assert result.dev == ()

    def test_repeated_key_contributes_once(self):
        once = resolve_packages([FrontendTool.SHADCN])
        twice = resolve_packages([FrontendTool.SHADCN, FrontendTool.SHADCN])
        assert once == twice
        assert len(twice.runtime) == len(set(twice.runtime)) == 4

    def test_order_follows_catalog_not_input(self):
        forward = resolve_packages([FrontendTool.SHADCN, FrontendTool.ZUSTAND, FrontendTool.AXIOS])
        backward = resolve_packages([FrontendTool.AXIOS, FrontendTool.ZUSTAND, FrontendTool.SHADCN])
        assert forward == backward
        assert forward.runtime[-2:] == ("axios", "zustand")

    def test_shared_package_deduplicated_across_entries(self):
        result = resolve_packages(
            [BackendFramework.EXPRESS_TS, BackendFramework.HAPI_TS], typescript=True
        )
        assert result.dev.count("typescript") == 1
        assert result.dev.count("@types/node") == 1

    def test_runtime_and_dev_disjoint(self):
        keys = [BackendFramework.EXPRESS_TS, Database.POSTGRES, *BackendTool]
        result = resolve_packages(keys, typescript=True)
        assert not set(result.runtime) & set(result.dev)

    def test_express_ts_partition(self):
        result = resolve_packages([BackendFramework.EXPRESS_TS], typescript=True)
        assert result.runtime == ("express",)
        assert result.dev == ("@types/express", "typescript", "ts-node", "@types/node")

    def test_type_definitions_only_for_typescript(self):
        js = resolve_packages([Database.POSTGRES, BackendTool.CORS])
        ts = resolve_packages([Database.POSTGRES, BackendTool.CORS], typescript=True)
        assert js.runtime == ("pg", "cors")
        assert js.dev == ()
        assert ts.runtime == ("pg", "cors")
        assert ts.dev == ("@types/pg", "@types/cors")

    def test_nodemon_is_dev_dependency_for_javascript(self):
        result = resolve_packages([BackendTool.NODEMON])
        assert result.runtime == ()
        assert result.dev == ("nodemon",)

    def test_frontend_framework_styling_packages(self):
        assert resolve_packages([FrontendFramework.REACT]).dev == ("tailwindcss", "@tailwindcss/vite")
        assert resolve_packages([FrontendFramework.NEXT]).dev == (
            "tailwindcss@4", "@tailwindcss/postcss", "postcss",
        )

    @pytest.mark.parametrize("key", [
        FrontendFramework.NONE,
        BackendFramework.NONE,
        BackendFramework.NODE,
        Database.NONE,
        Database.ORM,
    ])
    def test_keys_without_entry_contribute_nothing(self, key):
        assert resolve_packages([key]) == PackageSet()

    def test_non_enum_keys_ignored(self):
        assert resolve_packages(["zod", "express"]) == PackageSet()  # type: ignore[list-item]

    def test_none_values_do_not_cross_match(self):
        # FrontendFramework.NONE and Database.NONE share the value "None".
        assert resolve_packages([Database.NONE, FrontendFramework.NONE]) == PackageSet()

    def test_backend_catalog_order(self):
        result = resolve_packages(
            [BackendTool.DOTENV, ORM.TYPEORM, Database.MONGODB, BackendFramework.KOA]
        )
        assert result.runtime == ("koa", "mongoose", "typeorm", "reflect-metadata", "dotenv")


class TestCatalogCoverage:
    def test_every_frontend_tool_has_packages(self):
        assert set(FRONTEND_TOOL_PACKAGES) == set(FrontendTool)

    def test_every_backend_tool_has_packages(self):
        assert set(BACKEND_TOOL_PACKAGES) == set(BackendTool)


class TestOrmInitCommands:
    def test_prisma_init(self):
        assert orm_init_commands(ORM.PRISMA) == (("prisma", "init"),)

    @pytest.mark.parametrize("orm", [ORM.SEQUELIZE, ORM.TYPEORM, None])
    def test_no_init_needed(self, orm):
        assert orm_init_commands(orm) == ()
