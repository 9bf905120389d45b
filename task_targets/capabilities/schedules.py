"""Schedules capability: EventBridge rules that run ECS tasks."""

from typing import Any

from task_targets.capabilities.context import CapabilityContext
from task_targets.capabilities.registry import Phase, register
from task_targets.compute.models import SecurityGroupRef
from task_targets.config import ContainerOverrideConfig, ScheduleConfig
from task_targets.networking.vpc import SubnetSelection, SubnetType
from task_targets.targets.ecs_task import (
    ContainerOverride,
    EcsTask,
    EcsTaskProps,
    TaskEnvironmentVariable,
)
from task_targets.triggers.eventbridge import add_ecs_task_target, create_event_rule


def _container_override(o: ContainerOverrideConfig) -> ContainerOverride:
    environment = None
    if o.environment is not None:
        environment = [TaskEnvironmentVariable(name=k, value=v) for k, v in sorted(o.environment.items())]
    return ContainerOverride(
        container_name=o.container_name,
        command=o.command,
        environment=environment,
        cpu=o.cpu,
        memory=o.memory,
        memory_reservation=o.memory_reservation,
    )


def build_task_props(schedule: ScheduleConfig, ctx: CapabilityContext) -> EcsTaskProps:
    """Translate one spec.schedules entry into EcsTask props."""
    subnet_selection = None
    if schedule.subnet_type is not None or schedule.subnet_ids:
        subnet_selection = SubnetSelection(
            subnet_type=SubnetType(schedule.subnet_type or SubnetType.PRIVATE.value),
            subnet_ids=tuple(schedule.subnet_ids),
        )

    security_group = None
    if schedule.security_group_id is not None:
        security_group = SecurityGroupRef(security_group_id=schedule.security_group_id)
    security_groups = None
    if schedule.security_group_ids is not None:
        security_groups = [SecurityGroupRef(security_group_id=sg) for sg in schedule.security_group_ids]

    overrides = None
    if schedule.container_overrides is not None:
        overrides = [_container_override(o) for o in schedule.container_overrides]

    return EcsTaskProps(
        cluster=ctx.cluster,
        task_definition=ctx.task_definition(schedule.task_definition),
        task_count=schedule.task_count,
        container_overrides=overrides,
        subnet_selection=subnet_selection,
        security_group=security_group,
        security_groups=security_groups,
    )


@register("schedules", phase=Phase.COMPUTE, requires=["cluster", "taskDefinitions"])
def schedules_handler(
    section_config: Any,
    ctx: CapabilityContext,
) -> None:
    """Create a rule per spec.schedules entry with an ECS task target; export rule names."""
    for schedule in ctx.config.schedules:
        target = EcsTask(build_task_props(schedule, ctx))
        rule = create_event_rule(
            schedule.name,
            ctx.aws_provider,
            schedule_expression=schedule.schedule,
            event_pattern=schedule.event_pattern,
            description=schedule.description,
        )
        add_ecs_task_target(rule, target, f"{schedule.name}-task", ctx.aws_provider)
        ctx.set(f"schedules.{schedule.name}", target)
        ctx.export(f"rule_{schedule.name.replace('-', '_')}", rule.name)
