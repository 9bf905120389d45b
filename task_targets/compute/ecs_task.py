"""ECS task definition and container definition builder."""

import json
from typing import Any

import pulumi
import pulumi_aws

from task_targets.compute.models import Compatibility, NetworkMode, Role, TaskDefinition
from task_targets.config import TaskDefinitionConfig


def container_name_for(name: str) -> str:
    """Container names allow letters, digits, hyphens and underscores, up to 255 chars."""
    return name.replace(".", "-").replace("/", "-")[:255]


def _make_container_def(
    task: TaskDefinitionConfig,
    region: str,
    log_group: str,
) -> str:
    """Build ECS container definition JSON string."""
    container_spec: dict[str, Any] = {
        "name": container_name_for(task.name),
        "image": task.image,
        "essential": True,
        "environment": [
            {"name": "PYTHONUNBUFFERED", "value": "1"},
            *({"name": k, "value": v} for k, v in sorted(task.environment.items())),
        ],
        "logConfiguration": {
            "logDriver": "awslogs",
            "options": {
                "awslogs-create-group": "true",
                "awslogs-region": region,
                "awslogs-group": log_group,
                "awslogs-stream-prefix": task.name,
            },
        },
    }
    if task.command:
        container_spec["command"] = list(task.command)
    return json.dumps([container_spec])


def create_task_definition(
    cluster_name: str,
    task: TaskDefinitionConfig,
    region: str,
    task_role: Role,
    exec_role: Role | None,
    aws_provider: pulumi_aws.Provider,
) -> TaskDefinition:
    """Create ECS task definition for a scheduled task and return its model."""
    network_mode = NetworkMode(task.network_mode)
    compatibility = Compatibility(task.compatibility)
    family = f"{cluster_name}-{task.name}"
    task_def_args: dict[str, Any] = {
        "family": family,
        "cpu": str(task.cpu),
        "memory": str(task.memory),
        "network_mode": network_mode.value,
        "requires_compatibilities": compatibility.requires_compatibilities,
        "task_role_arn": task_role.role_arn,
        "container_definitions": _make_container_def(task, region, log_group=family),
    }
    if exec_role is not None:
        task_def_args["execution_role_arn"] = exec_role.role_arn
    task_def = pulumi_aws.ecs.TaskDefinition(
        f"{family}_task",
        opts=pulumi.ResourceOptions(provider=aws_provider),
        **task_def_args,
    )
    return TaskDefinition(
        name=family,
        task_definition_arn=task_def.arn,
        task_role=task_role,
        network_mode=network_mode,
        compatibility=compatibility,
        execution_role=exec_role,
        resource=task_def,
        aws_provider=aws_provider,
    )
