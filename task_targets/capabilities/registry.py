"""Capability registry: phase ordering, handler registration, and execution."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol

import pulumi

from task_targets.capabilities.context import CapabilityContext


class Phase(IntEnum):
    """Execution phase order for capabilities (lower runs first)."""

    FOUNDATION = 0
    INFRASTRUCTURE = 1
    COMPUTE = 2


class CapabilityHandler(Protocol):
    """Protocol for capability handler functions."""

    def __call__(self, section_config: Any, ctx: CapabilityContext) -> None:
        ...


@dataclass
class CapabilityDef:
    """Registered capability: handler, phase, and optional dependencies."""

    handler: Callable[[Any, CapabilityContext], None]
    phase: Phase
    requires: list[str]


CAPABILITIES: dict[str, CapabilityDef] = {}


def register(
    name: str,
    phase: Phase,
    requires: list[str] | None = None,
) -> Callable[[CapabilityHandler], CapabilityHandler]:
    """Decorator to register a capability handler in CAPABILITIES."""

    def decorator(fn: CapabilityHandler) -> CapabilityHandler:
        CAPABILITIES[name] = CapabilityDef(
            handler=fn,
            phase=phase,
            requires=requires or [],
        )
        return fn

    return decorator


def run_capabilities(spec_sections: dict[str, Any], ctx: CapabilityContext) -> list[str]:
    """Run handlers for declared sections in phase order; return the names run.

    Raises RuntimeError for a section with no registered handler, or one whose
    required sections are not declared.
    """
    unknown = sorted(set(spec_sections) - set(CAPABILITIES))
    if unknown:
        raise RuntimeError(f"no capability registered for: {', '.join(unknown)}")

    for name in spec_sections:
        missing = [r for r in CAPABILITIES[name].requires if r not in spec_sections]
        if missing:
            raise RuntimeError(f"capability {name!r} requires undeclared sections: {', '.join(missing)}")

    ordered = sorted(spec_sections, key=lambda n: CAPABILITIES[n].phase)
    for name in ordered:
        pulumi.log.info(f"Provisioning capability '{name}' ({CAPABILITIES[name].phase.name})")
        CAPABILITIES[name].handler(spec_sections[name], ctx)
    return ordered
