"""Pydantic v2 models for the Launchr scaffolder.

Defines the closed option enumerations offered by the prompts, the validated
``Selection`` built from the user's answers, the planned ``Step`` variants,
and the outcome records produced when a plan is executed.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ProjectType(str, Enum):
    """Which halves of the project to scaffold."""
    FRONTEND = "FrontEnd"
    BACKEND = "BackEnd"
    FULLSTACK = "Fullstack (Frontend + Backend)"

    @property
    def has_frontend(self) -> bool:
        return self in (ProjectType.FRONTEND, ProjectType.FULLSTACK)

    @property
    def has_backend(self) -> bool:
        return self in (ProjectType.BACKEND, ProjectType.FULLSTACK)


class FrontendFramework(str, Enum):
    REACT = "React + Tailwind"
    REACT_TS = "React TS + Tailwind"
    NEXT = "Next.js + Tailwind"
    NEXT_TS = "Next.js TS + Tailwind"
    VUE = "Vue + Tailwind"
    NONE = "None"


class FrontendTool(str, Enum):
    SHADCN = "shadcn/ui"
    MATERIAL_UI = "material ui"
    LUCIDE = "Lucide Icons"
    REACT_ICONS = "react-icons"
    ZOD = "Zod"
    AXIOS = "Axios"
    FRAMER_MOTION = "framer motion"
    REDUX = "Redux"
    ZUSTAND = "zustand"


class BackendFramework(str, Enum):
    NODE = "Node.js"
    EXPRESS = "Express.js"
    EXPRESS_TS = "Express.js + ts"
    HAPI = "Hapi.js"
    HAPI_TS = "Hapi.js + ts"
    KOA = "Koa"
    NONE = "None"

    @property
    def is_typescript(self) -> bool:
        return self.value.endswith("+ ts")


class Database(str, Enum):
    """Database choice. ``ORM`` defers the driver choice to an ORM."""
    MONGODB = "MongoDB"
    POSTGRES = "Postgres"
    MYSQL = "MySQL"
    SQLITE = "SQLite"
    ORM = "ORM's"
    NONE = "None"


class ORM(str, Enum):
    SEQUELIZE = "Sequelize"
    TYPEORM = "TypeORM"
    PRISMA = "Prisma"


class BackendTool(str, Enum):
    # Misspelled on purpose; this is the value the prompt has always offered.
    BCRYPT = "bcypt"
    ZOD = "zod"
    JWT = "jsonwebtoken (JWT)"
    JOSE = "jose"
    HELMET = "helmet"
    CORS = "cors"
    REDIS = "redis"
    DOTENV = "dotenv"
    NODEMAILER = "nodemailer"
    NODEMON = "nodemon"


class BranchKind(str, Enum):
    """One half of a scaffolding run."""
    FRONTEND = "frontend"
    BACKEND = "backend"


class StepStatus(str, Enum):
    """Terminal status of an executed step."""
    SUCCESS = "success"
    INFO = "info"
    FAILED = "failed"
    FATAL = "fatal"


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def _ordered_unique(values: tuple[Enum, ...], enum_cls: type[Enum]) -> tuple[Enum, ...]:
    """De-duplicate *values* and order them by enum definition order."""
    chosen = set(values)
    return tuple(member for member in enum_cls if member in chosen)


class FrontendOptions(BaseModel):
    """Answers for the frontend branch."""
    model_config = ConfigDict(frozen=True)

    framework: FrontendFramework = Field(..., description="Frontend stack")
    tools: tuple[FrontendTool, ...] = Field(default=(), description="Auxiliary packages")

    @field_validator("tools")
    @classmethod
    def _dedupe_tools(cls, v: tuple[FrontendTool, ...]) -> tuple[FrontendTool, ...]:
        return _ordered_unique(v, FrontendTool)


class BackendOptions(BaseModel):
    """Answers for the backend branch."""
    model_config = ConfigDict(frozen=True)

    framework: BackendFramework = Field(..., description="Backend framework")
    database: Database = Field(default=Database.NONE, description="Database driver choice")
    orm: Optional[ORM] = Field(default=None, description="ORM, only when database is ORM's")
    tools: tuple[BackendTool, ...] = Field(default=(), description="Auxiliary packages")

    @field_validator("tools")
    @classmethod
    def _dedupe_tools(cls, v: tuple[BackendTool, ...]) -> tuple[BackendTool, ...]:
        return _ordered_unique(v, BackendTool)

    @model_validator(mode="after")
    def _check_orm(self) -> "BackendOptions":
        if self.database == Database.ORM and self.orm is None:
            raise ValueError("an ORM must be chosen when database is \"ORM's\"")
        if self.database != Database.ORM and self.orm is not None:
            raise ValueError("orm is only valid when database is \"ORM's\"")
        return self

    @property
    def is_typescript(self) -> bool:
        return self.framework.is_typescript


class Selection(BaseModel):
    """The complete, validated set of user choices for one run."""
    model_config = ConfigDict(frozen=True)

    project_type: ProjectType
    frontend: Optional[FrontendOptions] = None
    backend: Optional[BackendOptions] = None

    @model_validator(mode="after")
    def _check_branches(self) -> "Selection":
        if self.project_type.has_frontend != (self.frontend is not None):
            raise ValueError(
                f"frontend options must be given iff project type includes a frontend "
                f"(project type: {self.project_type.value})"
            )
        if self.project_type.has_backend != (self.backend is not None):
            raise ValueError(
                f"backend options must be given iff project type includes a backend "
                f"(project type: {self.project_type.value})"
            )
        return self


# ---------------------------------------------------------------------------
# Steps & plans
# ---------------------------------------------------------------------------

class _Step(BaseModel):
    model_config = ConfigDict(frozen=True)


class CreateDirectory(_Step):
    kind: Literal["create_directory"] = "create_directory"
    path: Path

    @property
    def label(self) -> str:
        return f"Creating folder: {self.path}"


class RunCommand(_Step):
    kind: Literal["run_command"] = "run_command"
    program: str
    args: tuple[str, ...] = ()
    cwd: Path
    label: str = ""

    @property
    def command_line(self) -> str:
        return " ".join((self.program, *self.args))


class WriteFile(_Step):
    kind: Literal["write_file"] = "write_file"
    path: Path
    content: str
    label: str = ""


class UpdateManifestScripts(_Step):
    """Merge ``scripts`` entries into an existing ``package.json``."""
    kind: Literal["update_manifest_scripts"] = "update_manifest_scripts"
    path: Path
    scripts: dict[str, str]

    @property
    def label(self) -> str:
        return f"Updating scripts in {self.path}"


Step = Annotated[
    Union[CreateDirectory, RunCommand, WriteFile, UpdateManifestScripts],
    Field(discriminator="kind"),
]


class Plan(BaseModel):
    """Ordered steps for one branch. Empty when the branch is inactive."""
    model_config = ConfigDict(frozen=True)

    branch: BranchKind
    root: Path
    steps: tuple[Step, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def __bool__(self) -> bool:
        return bool(self.steps)


class ScaffoldPlan(BaseModel):
    """Frontend and backend plans, executed in that order."""
    model_config = ConfigDict(frozen=True)

    frontend: Plan
    backend: Plan

    def branches(self) -> tuple[Plan, Plan]:
        return (self.frontend, self.backend)


class PackageSet(BaseModel):
    """Runtime and development packages, disjoint and duplicate-free."""
    model_config = ConfigDict(frozen=True)

    runtime: tuple[str, ...] = ()
    dev: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.runtime or self.dev)


# ---------------------------------------------------------------------------
# Execution results
# ---------------------------------------------------------------------------

class StepOutcome(BaseModel):
    """The terminal status of one executed step."""
    step: Step
    status: StepStatus
    message: str = ""


class ExecutionResult(BaseModel):
    """Outcome of executing one branch plan."""
    branch: BranchKind
    outcomes: list[StepOutcome] = Field(default_factory=list)
    fatal_error: Optional[str] = Field(
        default=None, description="Detail of the step that aborted the run, if any"
    )

    @property
    def success(self) -> bool:
        return self.fatal_error is None

    @property
    def failed_writes(self) -> list[StepOutcome]:
        return [o for o in self.outcomes if o.status == StepStatus.FAILED]


class RunReport(BaseModel):
    """Outcome of a whole run, handed to the single exit point in the CLI."""
    results: list[ExecutionResult] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(r.success for r in self.results)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1
