"""IAM roles for ECS tasks and for the EventBridge rules that start them."""

import pulumi
import pulumi_aws

from task_targets.compute.models import Role, TaskDefinition
from task_targets.iam.policies import PolicyStatement, assume_role_policy, policy_document

EVENTS_ROLE_CHILD_ID = "EventsRole"


def create_task_roles(
    name: str,
    aws_provider: pulumi_aws.Provider,
    with_execution_role: bool = True,
) -> tuple[Role, Role | None]:
    """Create ECS task role and, optionally, an execution role with ECR + CloudWatch attachments."""
    assume_policy = assume_role_policy("ecs-tasks.amazonaws.com")

    task_role = pulumi_aws.iam.Role(
        f"{name}_task_role",
        name=f"{name}-ecs-task",
        assume_role_policy=assume_policy,
        opts=pulumi.ResourceOptions(provider=aws_provider),
    )
    if not with_execution_role:
        return Role(name=task_role.name, role_arn=task_role.arn, resource=task_role), None

    execution_role = pulumi_aws.iam.Role(
        f"{name}_exec_role",
        name=f"{name}-ecs-exec",
        assume_role_policy=assume_policy,
        opts=pulumi.ResourceOptions(provider=aws_provider),
    )
    pulumi_aws.iam.RolePolicyAttachment(
        f"{name}_exec_ecr",
        role=execution_role.name,
        policy_arn="arn:aws:iam::aws:policy/AmazonEC2ContainerRegistryReadOnly",
        opts=pulumi.ResourceOptions(provider=aws_provider),
    )
    pulumi_aws.iam.RolePolicyAttachment(
        f"{name}_exec_logs",
        role=execution_role.name,
        policy_arn="arn:aws:iam::aws:policy/CloudWatchLogsFullAccess",
        opts=pulumi.ResourceOptions(provider=aws_provider),
    )
    return (
        Role(name=task_role.name, role_arn=task_role.arn, resource=task_role),
        Role(name=execution_role.name, role_arn=execution_role.arn, resource=execution_role),
    )


def singleton_event_role(task_definition: TaskDefinition) -> Role:
    """Return the role EventBridge assumes to run this task definition, creating it once.

    Every rule target for the same task definition shares the role; each target
    attaches its own statements with create_target_policy.
    """
    existing = task_definition.try_find_child(EVENTS_ROLE_CHILD_ID)
    if existing is not None:
        return existing

    role = pulumi_aws.iam.Role(
        f"{task_definition.name}_events_role",
        assume_role_policy=assume_role_policy("events.amazonaws.com"),
        opts=pulumi.ResourceOptions(
            parent=task_definition.resource,
            provider=task_definition.aws_provider,
        ),
    )
    events_role = Role(name=role.name, role_arn=role.arn, resource=role)
    task_definition.add_child(EVENTS_ROLE_CHILD_ID, events_role)
    return events_role


def create_target_policy(
    policy_name: str,
    role: Role,
    statements: list[PolicyStatement],
    aws_provider: pulumi_aws.Provider,
) -> pulumi_aws.iam.RolePolicy:
    """Attach statements to a role as an inline policy."""
    return pulumi_aws.iam.RolePolicy(
        policy_name,
        role=role.name,
        policy=policy_document(statements),
        opts=pulumi.ResourceOptions(provider=aws_provider),
    )
