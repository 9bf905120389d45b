"""ECS cluster."""

import pulumi
import pulumi_aws

from task_targets.compute.models import Cluster
from task_targets.networking.vpc import Vpc


def create_ecs_cluster(
    name: str,
    vpc: Vpc,
    aws_provider: pulumi_aws.Provider,
    container_insights: bool = False,
) -> Cluster:
    """Create ECS cluster whose tasks are placed in vpc."""
    cluster = pulumi_aws.ecs.Cluster(
        f"{name}_cluster",
        name=name,
        settings=[
            pulumi_aws.ecs.ClusterSettingArgs(
                name="containerInsights",
                value="enabled" if container_insights else "disabled",
            )
        ],
        opts=pulumi.ResourceOptions(provider=aws_provider),
    )
    return Cluster(name=name, cluster_arn=cluster.arn, vpc=vpc, resource=cluster)
