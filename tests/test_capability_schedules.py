"""Tests for the schedules capability handler (EcsTask props, rules and targets)."""

from unittest.mock import MagicMock, patch

import pytest

from task_targets.capabilities import CAPABILITIES
from task_targets.capabilities.context import CapabilityContext
from task_targets.capabilities.schedules import build_task_props
from task_targets.compute.models import Cluster, Compatibility, NetworkMode, Role, SecurityGroupRef, TaskDefinition
from task_targets.config import ContainerOverrideConfig, ScheduleConfig, TargetsConfig
from task_targets.networking.vpc import SubnetSelection, SubnetType, Vpc
from task_targets.targets.ecs_task import ContainerOverride, EcsTask, TaskEnvironmentVariable


def _make_ctx(schedules: list[ScheduleConfig]) -> CapabilityContext:
    config = TargetsConfig(name="jobs", region="us-west-2", raw_spec={}, schedules=schedules)
    vpc = Vpc(vpc_id="vpc-1", subnets={SubnetType.PRIVATE: ["subnet-a"]})
    ctx = CapabilityContext(config=config, vpc=vpc, aws_provider=MagicMock())
    ctx.cluster = Cluster(name="jobs", cluster_arn="arn:cluster", vpc=vpc)
    ctx.add_task_definition(
        "report",
        TaskDefinition(
            name="jobs-report",
            task_definition_arn="arn:task-def",
            task_role=Role(name="t", role_arn="arn:t"),
            network_mode=NetworkMode.BRIDGE,
            compatibility=Compatibility.EC2,
        ),
    )
    return ctx


def test_build_task_props_defaults() -> None:
    schedule = ScheduleConfig(name="hourly", task_definition="report", schedule="rate(1 hour)")
    ctx = _make_ctx([schedule])
    props = build_task_props(schedule, ctx)

    assert props.cluster is ctx.cluster
    assert props.task_definition is ctx.task_definition("report")
    assert props.task_count == 1
    assert props.subnet_selection is None
    assert props.security_group is None
    assert props.security_groups is None
    assert props.container_overrides is None


def test_build_task_props_maps_every_field() -> None:
    schedule = ScheduleConfig(
        name="hourly",
        task_definition="report",
        schedule="rate(1 hour)",
        task_count=3,
        subnet_type="public",
        subnet_ids=["subnet-x"],
        security_group_ids=["sg-a", "sg-b"],
        container_overrides=[
            ContainerOverrideConfig(
                container_name="report",
                environment={"B": "2", "A": "1"},
                memory=512,
            )
        ],
    )
    props = build_task_props(schedule, _make_ctx([schedule]))

    assert props.task_count == 3
    assert props.subnet_selection == SubnetSelection(subnet_type=SubnetType.PUBLIC, subnet_ids=("subnet-x",))
    assert props.security_groups == [SecurityGroupRef("sg-a"), SecurityGroupRef("sg-b")]
    assert props.container_overrides == [
        ContainerOverride(
            container_name="report",
            environment=[TaskEnvironmentVariable("A", "1"), TaskEnvironmentVariable("B", "2")],
            memory=512,
        )
    ]


def test_build_task_props_legacy_security_group() -> None:
    schedule = ScheduleConfig(
        name="hourly", task_definition="report", schedule="rate(1 hour)", security_group_id="sg-legacy"
    )
    props = build_task_props(schedule, _make_ctx([schedule]))
    assert props.security_group == SecurityGroupRef("sg-legacy")
    assert props.security_groups is None


def test_build_task_props_unknown_task_definition() -> None:
    schedule = ScheduleConfig(name="hourly", task_definition="missing", schedule="rate(1 hour)")
    with pytest.raises(RuntimeError, match="task_definitions.missing"):
        build_task_props(schedule, _make_ctx([schedule]))


@patch("task_targets.capabilities.schedules.add_ecs_task_target")
@patch("task_targets.capabilities.schedules.create_event_rule")
def test_schedules_handler_creates_rule_and_target(
    mock_rule: MagicMock,
    mock_add_target: MagicMock,
) -> None:
    """Each schedule gets a rule and an EcsTask target; the rule name is exported."""
    mock_rule.return_value.name = "nightly-report"
    schedule = ScheduleConfig(
        name="nightly-report",
        task_definition="report",
        schedule="cron(0 3 * * ? *)",
        description="Nightly report",
    )
    ctx = _make_ctx([schedule])

    CAPABILITIES["schedules"].handler([], ctx)

    mock_rule.assert_called_once_with(
        "nightly-report",
        ctx.aws_provider,
        schedule_expression="cron(0 3 * * ? *)",
        event_pattern=None,
        description="Nightly report",
    )
    rule, target, target_id, provider = mock_add_target.call_args[0]
    assert rule is mock_rule.return_value
    assert isinstance(target, EcsTask)
    assert target_id == "nightly-report-task"
    assert provider is ctx.aws_provider
    assert ctx.require("schedules.nightly-report") is target
    assert ctx.exports == {"rule_nightly_report": "nightly-report"}
