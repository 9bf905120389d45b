"""Task definitions capability: IAM roles and an ECS task definition per entry."""

from typing import Any

from task_targets.capabilities.context import CapabilityContext
from task_targets.capabilities.registry import Phase, register
from task_targets.compute.ecs_task import create_task_definition
from task_targets.iam.roles import create_task_roles


@register("taskDefinitions", phase=Phase.INFRASTRUCTURE)
def task_definitions_handler(
    section_config: Any,
    ctx: CapabilityContext,
) -> None:
    """Create roles and a task definition for each spec.taskDefinitions entry.

    Each is registered on the context by name for the schedules capability.
    """
    cluster_name = ctx.config.cluster_name
    for task in ctx.config.task_definitions:
        family = f"{cluster_name}-{task.name}"
        task_role, exec_role = create_task_roles(
            family,
            ctx.aws_provider,
            with_execution_role=task.execution_role,
        )
        task_definition = create_task_definition(
            cluster_name,
            task,
            ctx.config.region,
            task_role,
            exec_role,
            ctx.aws_provider,
        )
        ctx.add_task_definition(task.name, task_definition)
        ctx.export(f"task_definition_{task.name.replace('-', '_')}", task_definition.task_definition_arn)
