"""Lookup the shared VPC and its subnets."""

import pulumi
import pulumi_aws

from task_targets.networking.vpc import SubnetType, Vpc


def lookup_vpc(aws_provider: pulumi_aws.Provider) -> Vpc:
    """Lookup the shared VPC from subnets tagged network=public|private|isolated.

    Private subnets are required; they locate the VPC and are the default
    placement for task ENIs. Does not create any resources.
    """
    subnets: dict[SubnetType, list[str]] = {}
    for subnet_type in SubnetType:
        found = pulumi_aws.ec2.get_subnets(
            filters=[pulumi_aws.ec2.GetSubnetsFilterArgs(name="tag:network", values=[subnet_type.value])],
            opts=pulumi.InvokeOptions(provider=aws_provider),
        )
        subnets[subnet_type] = list(found.ids)

    private_subnet_ids = subnets[SubnetType.PRIVATE]
    if not private_subnet_ids:
        raise SystemExit("No private subnets found (tag network=private)")

    first_subnet = pulumi_aws.ec2.get_subnet(
        id=private_subnet_ids[0],
        opts=pulumi.InvokeOptions(provider=aws_provider),
    )
    vpc = pulumi_aws.ec2.get_vpc(
        id=first_subnet.vpc_id,
        opts=pulumi.InvokeOptions(provider=aws_provider),
    )
    return Vpc(vpc_id=vpc.id, cidr_block=vpc.cidr_block, subnets=subnets)
