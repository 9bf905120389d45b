"""ECS cluster, task definition, role and security group references used by rule targets."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pulumi

from task_targets.networking.vpc import Vpc


class NetworkMode(str, Enum):
    """Docker networking mode of a task definition."""

    AWS_VPC = "awsvpc"
    BRIDGE = "bridge"
    HOST = "host"
    NONE = "none"


class Compatibility(str, Enum):
    """Launch types a task definition can run on."""

    EC2 = "EC2"
    FARGATE = "FARGATE"
    EC2_AND_FARGATE = "EC2_AND_FARGATE"

    @property
    def requires_compatibilities(self) -> list[str]:
        if self is Compatibility.EC2_AND_FARGATE:
            return ["EC2", "FARGATE"]
        return [self.value]


@dataclass(frozen=True)
class Role:
    name: pulumi.Input[str]
    role_arn: pulumi.Input[str]
    resource: Any = None


@dataclass(frozen=True)
class SecurityGroupRef:
    security_group_id: pulumi.Input[str]
    resource: Any = None


@dataclass
class Cluster:
    """ECS cluster and the VPC its tasks are placed in."""

    name: str
    cluster_arn: pulumi.Input[str]
    vpc: Vpc
    resource: Any = None


@dataclass
class TaskDefinition:
    """ECS task definition with its roles, network mode and launch compatibility.

    Resources created on behalf of the task definition (its default security
    group, the events role) are registered as named children so they are only
    created once, however many rule targets run this task definition.
    They are created with aws_provider, the provider of the task definition itself.
    """

    name: str
    task_definition_arn: pulumi.Input[str]
    task_role: Role
    network_mode: NetworkMode = NetworkMode.BRIDGE
    compatibility: Compatibility = Compatibility.EC2
    execution_role: Role | None = None
    resource: Any = None
    aws_provider: Any = None
    warnings: list[str] = field(default_factory=list)
    _children: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_ec2_compatible(self) -> bool:
        return self.compatibility in (Compatibility.EC2, Compatibility.EC2_AND_FARGATE)

    @property
    def is_fargate_compatible(self) -> bool:
        return self.compatibility in (Compatibility.FARGATE, Compatibility.EC2_AND_FARGATE)

    def try_find_child(self, child_id: str) -> Any | None:
        """Return the child registered under child_id, or None."""
        return self._children.get(child_id)

    def add_child(self, child_id: str, child: Any) -> None:
        """Register a child; raise ValueError if child_id is already taken."""
        if child_id in self._children:
            raise ValueError(
                f"There is already a child named {child_id!r} on task definition {self.name!r}"
            )
        self._children[child_id] = child

    def add_warning(self, message: str) -> None:
        """Record a non-fatal warning and log it."""
        self.warnings.append(message)
        pulumi.log.warn(f"[{self.name}] {message}")
