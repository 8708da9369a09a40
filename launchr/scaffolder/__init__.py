"""Launchr scaffolder -- plans and executes a project scaffolding run.

A validated ``Selection`` is turned into an ordered ``ScaffoldPlan`` by the
``PlanBuilder`` (pure, no I/O) and then executed branch by branch by the
``PlanExecutor``, which stops at the first fatal step.

Quick usage::

    from launchr.scaffolder import PlanBuilder, PlanExecutor, Selection

    plan = PlanBuilder().build(selection, Path("."))
    result = await PlanExecutor().execute(plan.frontend)
"""

from launchr.scaffolder.catalog import resolve_packages
from launchr.scaffolder.executor import CommandRunner, FatalStepError, PlanExecutor
from launchr.scaffolder.models import Plan, ScaffoldPlan, Selection
from launchr.scaffolder.planner import PlanBuilder, build_plan
from launchr.scaffolder.templates import TemplateCatalog, TemplateRenderer

__all__ = [
    "CommandRunner",
    "FatalStepError",
    "Plan",
    "PlanBuilder",
    "PlanExecutor",
    "ScaffoldPlan",
    "Selection",
    "TemplateCatalog",
    "TemplateRenderer",
    "build_plan",
    "resolve_packages",
]
