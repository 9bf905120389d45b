"""Capability modules: each provisions one section of targets.yaml (cluster, task definitions, schedules)."""

import task_targets.capabilities.cluster  # noqa: F401
import task_targets.capabilities.schedules  # noqa: F401
import task_targets.capabilities.task_definitions  # noqa: F401
from task_targets.capabilities.registry import CAPABILITIES, run_capabilities

__all__ = ["CAPABILITIES", "run_capabilities"]
