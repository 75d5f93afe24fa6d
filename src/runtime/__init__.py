"""Runtime engine exports."""

from .loop import PlannerRuntime, RuntimeBootstrap

__all__ = ["PlannerRuntime", "RuntimeBootstrap"]
