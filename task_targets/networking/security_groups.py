"""Security groups for scheduled task ENIs."""

from typing import Any

import pulumi
import pulumi_aws


def create_task_security_group(
    task_definition_name: str,
    vpc_id: pulumi.Input[str],
    parent: Any = None,
    aws_provider: pulumi_aws.Provider | None = None,
) -> pulumi_aws.ec2.SecurityGroup:
    """Create the default security group for a task definition: no ingress, egress all.

    The group is parented to the task definition resource.
    """
    return pulumi_aws.ec2.SecurityGroup(
        f"{task_definition_name}_task_sg",
        vpc_id=vpc_id,
        description=f"Scheduled tasks for {task_definition_name}",
        egress=[
            pulumi_aws.ec2.SecurityGroupEgressArgs(
                protocol="-1",
                from_port=0,
                to_port=0,
                cidr_blocks=["0.0.0.0/0"],
            ),
        ],
        opts=pulumi.ResourceOptions(parent=parent, provider=aws_provider),
    )
