"""State shared by capability handlers while targets.yaml is provisioned."""

from dataclasses import dataclass, field
from typing import Any

import pulumi_aws

from task_targets.compute.models import Cluster, TaskDefinition
from task_targets.config import TargetsConfig
from task_targets.networking.vpc import Vpc

CLUSTER_KEY = "cluster"
TASK_DEFINITION_PREFIX = "task_definitions."


@dataclass
class CapabilityContext:
    """Config, the shared VPC and provider, plus what earlier phases produced.

    Handlers hand results to later phases through set/require. The cluster and
    task definitions have typed accessors since every schedule needs them.
    """

    config: TargetsConfig
    vpc: Vpc
    aws_provider: pulumi_aws.Provider
    _outputs: dict[str, Any] = field(default_factory=dict)
    _exports: dict[str, Any] = field(default_factory=dict)

    def set(self, key: str, value: Any) -> None:
        self._outputs[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._outputs.get(key, default)

    def require(self, key: str) -> Any:
        """Return the value under key; RuntimeError naming the keys set so far if absent."""
        try:
            return self._outputs[key]
        except KeyError:
            available = ", ".join(sorted(self._outputs)) or "(none)"
            raise RuntimeError(f"missing required key: {key!r}. Available keys: {available}") from None

    @property
    def cluster(self) -> Cluster:
        return self.require(CLUSTER_KEY)

    @cluster.setter
    def cluster(self, cluster: Cluster) -> None:
        self.set(CLUSTER_KEY, cluster)

    def add_task_definition(self, name: str, task_definition: TaskDefinition) -> None:
        """Register a task definition under its targets.yaml name."""
        self.set(f"{TASK_DEFINITION_PREFIX}{name}", task_definition)

    def task_definition(self, name: str) -> TaskDefinition:
        return self.require(f"{TASK_DEFINITION_PREFIX}{name}")

    def export(self, key: str, value: Any) -> None:
        """Queue a stack output; __main__ passes these to pulumi.export."""
        self._exports[key] = value

    @property
    def exports(self) -> dict[str, Any]:
        return dict(self._exports)
