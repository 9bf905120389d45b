"""Start an ECS task when an EventBridge rule fires.

EcsTask resolves the security groups for the task's ENIs once, at construction.
Each bind derives the statements the events role needs and the ECS launch
parameters for the rule target. Resolving is the only step that may create a
resource (the task definition's default security group); binding is repeatable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import pulumi

from task_targets.compute.models import (
    Cluster,
    Compatibility,
    NetworkMode,
    Role,
    SecurityGroupRef,
    TaskDefinition,
)
from task_targets.iam.policies import PolicyStatement
from task_targets.iam.roles import singleton_event_role
from task_targets.networking.security_groups import create_task_security_group
from task_targets.networking.vpc import SubnetSelection, SubnetType

SECURITY_GROUP_CHILD_ID = "SecurityGroup"
NON_AWSVPC_SECURITY_GROUP_WARNING = "security groups are ignored when network mode is not awsvpc"


class LaunchType(str, Enum):
    EC2 = "EC2"
    FARGATE = "FARGATE"


class AssignPublicIp(str, Enum):
    ENABLED = "ENABLED"
    DISABLED = "DISABLED"


# EC2 wins when a task definition supports both launch types.
_LAUNCH_TYPES: dict[Compatibility, LaunchType] = {
    Compatibility.EC2: LaunchType.EC2,
    Compatibility.EC2_AND_FARGATE: LaunchType.EC2,
    Compatibility.FARGATE: LaunchType.FARGATE,
}


@dataclass(frozen=True)
class TaskEnvironmentVariable:
    name: str
    value: str


@dataclass(frozen=True)
class ContainerOverride:
    """Per-container overrides applied when the task starts."""

    container_name: str
    command: list[str] | None = None
    environment: list[TaskEnvironmentVariable] | None = None
    cpu: int | None = None
    memory: int | None = None
    memory_reservation: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render with camelCase keys, omitting unset fields."""
        data: dict[str, Any] = {"containerName": self.container_name}
        if self.command is not None:
            data["command"] = list(self.command)
        if self.environment is not None:
            data["environment"] = [{"name": e.name, "value": e.value} for e in self.environment]
        if self.cpu is not None:
            data["cpu"] = self.cpu
        if self.memory is not None:
            data["memory"] = self.memory
        if self.memory_reservation is not None:
            data["memoryReservation"] = self.memory_reservation
        return data


@dataclass(frozen=True)
class EcsTaskProps:
    """What to run, how many, and where to place its ENIs.

    security_group is the legacy single-group field; pass security_groups instead.
    """

    cluster: Cluster
    task_definition: TaskDefinition
    task_count: int = 1
    container_overrides: list[ContainerOverride] | None = None
    subnet_selection: SubnetSelection | None = None
    security_group: SecurityGroupRef | None = None
    security_groups: list[SecurityGroupRef] | None = None


@dataclass(frozen=True)
class AwsVpcConfiguration:
    subnets: list[str]
    assign_public_ip: AssignPublicIp
    security_groups: list[pulumi.Input[str]] | None = None


@dataclass(frozen=True)
class NetworkConfiguration:
    aws_vpc_configuration: AwsVpcConfiguration


@dataclass(frozen=True)
class EcsParameters:
    task_count: int
    task_definition_arn: pulumi.Input[str]
    launch_type: LaunchType | None = None
    network_configuration: NetworkConfiguration | None = None


@dataclass(frozen=True)
class RuleTargetConfig:
    """Everything a rule needs to run the task. id is left blank for the caller to assign."""

    id: str
    arn: pulumi.Input[str]
    role: Role
    policy_statements: list[PolicyStatement]
    ecs_parameters: EcsParameters
    input: dict[str, Any]
    target_resource: TaskDefinition


def resolve_security_groups(
    task_definition: TaskDefinition,
    cluster: Cluster,
    security_group: SecurityGroupRef | None = None,
    security_groups: list[SecurityGroupRef] | None = None,
) -> tuple[SecurityGroupRef | None, list[SecurityGroupRef] | None]:
    """Return (legacy single group, group list) for the task's ENIs.

    Only awsvpc tasks have ENIs; for other modes both are None and any supplied
    groups are dropped with a warning. An explicit list is used as is. Otherwise
    the task definition's default group is reused, falling back to the legacy
    group, and created in the cluster VPC if neither exists.
    """
    if task_definition.network_mode is not NetworkMode.AWS_VPC:
        if security_group is not None or security_groups is not None:
            task_definition.add_warning(NON_AWSVPC_SECURITY_GROUP_WARNING)
        return None, None

    if security_groups is not None:
        return None, list(security_groups)

    resolved = task_definition.try_find_child(SECURITY_GROUP_CHILD_ID) or security_group
    if resolved is None:
        sg = create_task_security_group(
            task_definition.name,
            cluster.vpc.vpc_id,
            parent=task_definition.resource,
            aws_provider=task_definition.aws_provider,
        )
        resolved = SecurityGroupRef(security_group_id=sg.id, resource=sg)
        task_definition.add_child(SECURITY_GROUP_CHILD_ID, resolved)
    return resolved, [resolved]


def build_policy_statements(task_definition: TaskDefinition, cluster: Cluster) -> list[PolicyStatement]:
    """Statements the events role needs to run the task definition on the cluster.

    RunTask always comes first and is pinned to the cluster. PassRole follows for
    the execution role when there is one, and for the task role when the task
    can run on Fargate. Statements are never merged.
    """
    statements = [
        PolicyStatement(
            actions=["ecs:RunTask"],
            resources=[task_definition.task_definition_arn],
            conditions={"ArnEquals": {"ecs:cluster": cluster.cluster_arn}},
        )
    ]
    if task_definition.execution_role is not None:
        statements.append(
            PolicyStatement(
                actions=["iam:PassRole"],
                resources=[task_definition.execution_role.role_arn],
            )
        )
    if task_definition.is_fargate_compatible:
        statements.append(
            PolicyStatement(
                actions=["iam:PassRole"],
                resources=[task_definition.task_role.role_arn],
            )
        )
    return statements


def launch_type_for(task_definition: TaskDefinition) -> LaunchType:
    return _LAUNCH_TYPES[task_definition.compatibility]


def assign_public_ip_for(subnet_selection: SubnetSelection) -> AssignPublicIp:
    if subnet_selection.subnet_type is SubnetType.PUBLIC:
        return AssignPublicIp.ENABLED
    return AssignPublicIp.DISABLED


def container_overrides_input(overrides: list[ContainerOverride] | None) -> dict[str, Any]:
    """Build the rule input. RunTask names the container `name`, not `containerName`."""
    if overrides is None:
        return {}
    entries = []
    for override in overrides:
        fields = override.to_dict()
        container_name = fields.pop("containerName")
        entries.append({"name": container_name, **fields})
    return {"containerOverrides": entries}


class EcsTask:
    """Rule target that runs a task definition on an ECS cluster."""

    def __init__(self, props: EcsTaskProps) -> None:
        if props.security_group is not None and props.security_groups is not None:
            raise ValueError("Only one of SecurityGroup or SecurityGroups can be populated.")
        if props.task_count < 1:
            raise ValueError(f"task_count must be at least 1, got {props.task_count}")

        self.props = props
        self.cluster = props.cluster
        self.task_definition = props.task_definition
        self.task_count = props.task_count
        # security_group stays populated for callers reading the generated group.
        self.security_group, self.security_groups = resolve_security_groups(
            self.task_definition,
            self.cluster,
            security_group=props.security_group,
            security_groups=props.security_groups,
        )

    def bind(self, rule: Any = None, target_id: str | None = None) -> RuleTargetConfig:
        """Describe how the rule runs this task. rule and target_id are not used."""
        statements = build_policy_statements(self.task_definition, self.cluster)
        role = singleton_event_role(self.task_definition)

        ecs_parameters = EcsParameters(
            task_count=self.task_count,
            task_definition_arn=self.task_definition.task_definition_arn,
        )
        if self.task_definition.network_mode is NetworkMode.AWS_VPC:
            subnet_selection = self.props.subnet_selection or SubnetSelection(subnet_type=SubnetType.PRIVATE)
            security_group_ids = None
            if self.security_groups is not None:
                security_group_ids = [sg.security_group_id for sg in self.security_groups]
            ecs_parameters = EcsParameters(
                task_count=self.task_count,
                task_definition_arn=self.task_definition.task_definition_arn,
                launch_type=launch_type_for(self.task_definition),
                network_configuration=NetworkConfiguration(
                    aws_vpc_configuration=AwsVpcConfiguration(
                        subnets=self.cluster.vpc.select_subnets(subnet_selection).subnet_ids,
                        assign_public_ip=assign_public_ip_for(subnet_selection),
                        security_groups=security_group_ids,
                    ),
                ),
            )

        return RuleTargetConfig(
            id="",
            arn=self.cluster.cluster_arn,
            role=role,
            policy_statements=statements,
            ecs_parameters=ecs_parameters,
            input=container_overrides_input(self.props.container_overrides),
            target_resource=self.task_definition,
        )
