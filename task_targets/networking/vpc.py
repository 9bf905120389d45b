"""VPC model: subnets grouped by type, and subnet selection for task ENIs."""

from dataclasses import dataclass, field
from enum import Enum

import pulumi


class SubnetType(str, Enum):
    """Subnet tier, matching the `network` tag on shared subnets."""

    PUBLIC = "public"
    PRIVATE = "private"
    ISOLATED = "isolated"


class SubnetSelectionError(LookupError):
    """Raised when a subnet selection matches no subnets in the VPC."""


@dataclass(frozen=True)
class SubnetSelection:
    """Where to place a task's ENIs.

    Explicit subnet_ids win over subnet_type when both are given.
    """

    subnet_type: SubnetType = SubnetType.PRIVATE
    subnet_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SelectedSubnets:
    subnet_ids: list[str]


@dataclass
class Vpc:
    """VPC identifier plus its subnet ids per tier."""

    vpc_id: pulumi.Input[str]
    cidr_block: str = ""
    subnets: dict[SubnetType, list[str]] = field(default_factory=dict)

    def select_subnets(self, selection: SubnetSelection | None = None) -> SelectedSubnets:
        """Resolve a selection to concrete subnet ids; raise SubnetSelectionError if none match."""
        selection = selection or SubnetSelection()
        if selection.subnet_ids:
            return SelectedSubnets(subnet_ids=list(selection.subnet_ids))
        subnet_ids = self.subnets.get(selection.subnet_type) or []
        if not subnet_ids:
            available = ", ".join(sorted(t.value for t, ids in self.subnets.items() if ids)) or "(none)"
            raise SubnetSelectionError(
                f"No {selection.subnet_type.value} subnets in VPC. Available subnet types: {available}"
            )
        return SelectedSubnets(subnet_ids=list(subnet_ids))
