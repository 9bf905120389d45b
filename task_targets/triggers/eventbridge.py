"""EventBridge rules and the ECS task targets attached to them."""

import json
from typing import Any

import pulumi
import pulumi_aws

from task_targets.iam.roles import create_target_policy
from task_targets.targets.ecs_task import AssignPublicIp, EcsParameters, EcsTask


def create_event_rule(
    name: str,
    aws_provider: pulumi_aws.Provider,
    schedule_expression: str | None = None,
    event_pattern: dict[str, Any] | None = None,
    description: str | None = None,
) -> pulumi_aws.cloudwatch.EventRule:
    """Create a rule fired on a schedule or on matching events (exactly one of the two)."""
    if (schedule_expression is None) == (event_pattern is None):
        raise ValueError(f"rule {name!r} needs exactly one of schedule_expression or event_pattern")
    return pulumi_aws.cloudwatch.EventRule(
        f"{name}_rule",
        name=name,
        description=description or f"Runs ECS tasks for {name}",
        schedule_expression=schedule_expression,
        event_pattern=json.dumps(event_pattern) if event_pattern is not None else None,
        opts=pulumi.ResourceOptions(provider=aws_provider),
    )


def _ecs_target_args(params: EcsParameters) -> pulumi_aws.cloudwatch.EventTargetEcsTargetArgs:
    """Map ECS launch parameters onto the EventTarget ecs_target block."""
    network_configuration = None
    if params.network_configuration is not None:
        vpc_config = params.network_configuration.aws_vpc_configuration
        network_configuration = pulumi_aws.cloudwatch.EventTargetEcsTargetNetworkConfigurationArgs(
            subnets=vpc_config.subnets,
            security_groups=vpc_config.security_groups,
            assign_public_ip=vpc_config.assign_public_ip is AssignPublicIp.ENABLED,
        )
    return pulumi_aws.cloudwatch.EventTargetEcsTargetArgs(
        task_definition_arn=params.task_definition_arn,
        task_count=params.task_count,
        launch_type=params.launch_type.value if params.launch_type is not None else None,
        network_configuration=network_configuration,
    )


def add_ecs_task_target(
    rule: pulumi_aws.cloudwatch.EventRule,
    target: EcsTask,
    target_id: str,
    aws_provider: pulumi_aws.Provider,
) -> pulumi_aws.cloudwatch.EventTarget:
    """Bind the task to the rule: grant the events role its statements and create the EventTarget."""
    config = target.bind(rule, target_id)
    policy = create_target_policy(
        f"{target_id}_events_policy",
        config.role,
        config.policy_statements,
        aws_provider,
    )
    pulumi.log.info(
        f"Rule target {target_id!r} runs {config.ecs_parameters.task_count} task(s) "
        f"of {config.target_resource.name!r}"
    )
    return pulumi_aws.cloudwatch.EventTarget(
        f"{target_id}_target",
        rule=rule.name,
        target_id=target_id,
        arn=config.arn,
        role_arn=config.role.role_arn,
        ecs_target=_ecs_target_args(config.ecs_parameters),
        input=json.dumps(config.input),
        opts=pulumi.ResourceOptions(provider=aws_provider, depends_on=[policy]),
    )
