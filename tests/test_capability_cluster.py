"""Tests for the cluster capability handler."""

from unittest.mock import MagicMock, patch

from task_targets.capabilities import CAPABILITIES
from task_targets.capabilities.context import CapabilityContext
from task_targets.config import ClusterConfig, TargetsConfig


@patch("task_targets.capabilities.cluster.create_ecs_cluster")
def test_cluster_handler_sets_cluster_and_exports(mock_create: MagicMock) -> None:
    """Cluster is created in the context VPC, stored as 'cluster', and its name/ARN exported."""
    mock_create.return_value.name = "reports"
    mock_create.return_value.cluster_arn = "arn:cluster"
    config = TargetsConfig(
        name="nightly-reports",
        region="us-west-2",
        raw_spec={},
        cluster=ClusterConfig(name="reports", container_insights=True),
    )
    ctx = CapabilityContext(config=config, vpc=MagicMock(), aws_provider=MagicMock())

    CAPABILITIES["cluster"].handler({}, ctx)

    mock_create.assert_called_once_with("reports", ctx.vpc, ctx.aws_provider, container_insights=True)
    assert ctx.cluster is mock_create.return_value
    assert ctx.exports == {"ecs_cluster_name": "reports", "ecs_cluster_arn": "arn:cluster"}
