"""Tests for the task definitions capability handler."""

from unittest.mock import MagicMock, patch

from task_targets.capabilities import CAPABILITIES
from task_targets.capabilities.context import CapabilityContext
from task_targets.config import TargetsConfig, TaskDefinitionConfig


@patch("task_targets.capabilities.task_definitions.create_task_definition")
@patch("task_targets.capabilities.task_definitions.create_task_roles")
def test_task_definitions_handler_creates_roles_and_definitions(
    mock_roles: MagicMock,
    mock_task_def: MagicMock,
) -> None:
    """Each entry gets roles (execution role per config) and a task definition stored by name."""
    task_role, exec_role = MagicMock(), MagicMock()
    mock_roles.side_effect = [(task_role, exec_role), (task_role, None)]
    report_td, cleanup_td = MagicMock(), MagicMock()
    report_td.task_definition_arn = "arn:report"
    cleanup_td.task_definition_arn = "arn:cleanup"
    mock_task_def.side_effect = [report_td, cleanup_td]

    report = TaskDefinitionConfig(name="report", image="img")
    cleanup = TaskDefinitionConfig(name="db-cleanup", image="img", execution_role=False)
    config = TargetsConfig(name="jobs", region="us-west-2", raw_spec={}, task_definitions=[report, cleanup])
    ctx = CapabilityContext(config=config, vpc=MagicMock(), aws_provider=MagicMock())

    CAPABILITIES["taskDefinitions"].handler([], ctx)

    assert mock_roles.call_args_list[0][0] == ("jobs-report", ctx.aws_provider)
    assert mock_roles.call_args_list[0][1] == {"with_execution_role": True}
    assert mock_roles.call_args_list[1][1] == {"with_execution_role": False}
    mock_task_def.assert_any_call("jobs", report, "us-west-2", task_role, exec_role, ctx.aws_provider)
    mock_task_def.assert_any_call("jobs", cleanup, "us-west-2", task_role, None, ctx.aws_provider)
    assert ctx.task_definition("report") is report_td
    assert ctx.task_definition("db-cleanup") is cleanup_td
    assert ctx.exports == {
        "task_definition_report": "arn:report",
        "task_definition_db_cleanup": "arn:cleanup",
    }
