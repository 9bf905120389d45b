"""Tests for CapabilityContext (set/get/require/export)."""

from unittest.mock import MagicMock

import pytest

from task_targets.capabilities.context import CapabilityContext


def _make_ctx() -> CapabilityContext:
    """Build a minimal context with mocked config, VPC, and provider."""
    return CapabilityContext(
        config=MagicMock(),
        vpc=MagicMock(),
        aws_provider=MagicMock(),
    )


def test_set_and_get() -> None:
    ctx = _make_ctx()
    ctx.set("cluster", "jobs")
    assert ctx.get("cluster") == "jobs"


def test_get_missing_returns_default() -> None:
    ctx = _make_ctx()
    assert ctx.get("missing") is None
    assert ctx.get("missing", 99) == 99


def test_require_raises_runtime_error_listing_available_keys() -> None:
    ctx = _make_ctx()
    ctx.set("cluster", 1)
    ctx.set("task_definitions.report", 2)

    with pytest.raises(RuntimeError) as exc_info:
        ctx.require("task_definitions.missing")

    msg = str(exc_info.value)
    assert "missing required key: 'task_definitions.missing'" in msg
    assert "cluster, task_definitions.report" in msg


def test_require_message_when_empty() -> None:
    with pytest.raises(RuntimeError, match=r"Available keys: \(none\)"):
        _make_ctx().require("x")


def test_exports_is_a_copy() -> None:
    ctx = _make_ctx()
    ctx.export("ecs_cluster_name", "jobs")
    exports = ctx.exports
    exports["extra"] = "value"
    assert ctx.exports == {"ecs_cluster_name": "jobs"}


def test_cluster_accessor() -> None:
    ctx = _make_ctx()
    with pytest.raises(RuntimeError, match="missing required key: 'cluster'"):
        _ = ctx.cluster
    cluster = MagicMock()
    ctx.cluster = cluster
    assert ctx.cluster is cluster
    assert ctx.get("cluster") is cluster


def test_task_definition_accessors() -> None:
    ctx = _make_ctx()
    report = MagicMock()
    ctx.add_task_definition("report", report)

    assert ctx.task_definition("report") is report
    with pytest.raises(RuntimeError, match="task_definitions.cleanup.*task_definitions.report"):
        ctx.task_definition("cleanup")
