"""Cluster capability: the ECS cluster scheduled tasks run on."""

from typing import Any

from task_targets.capabilities.context import CapabilityContext
from task_targets.capabilities.registry import Phase, register
from task_targets.compute.ecs_cluster import create_ecs_cluster


@register("cluster", phase=Phase.FOUNDATION)
def cluster_handler(
    section_config: Any,
    ctx: CapabilityContext,
) -> None:
    """Create the ECS cluster in the shared VPC; set cluster and export its name."""
    cluster = create_ecs_cluster(
        ctx.config.cluster_name,
        ctx.vpc,
        ctx.aws_provider,
        container_insights=ctx.config.cluster.container_insights,
    )
    ctx.cluster = cluster
    ctx.export("ecs_cluster_name", cluster.name)
    ctx.export("ecs_cluster_arn", cluster.cluster_arn)
