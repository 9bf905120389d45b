"""targets.yaml configuration loading and validation."""

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

import jsonschema
import pulumi
import pulumi_aws
import yaml

from task_targets.spec.validator import validate_targets_spec


@dataclass
class ClusterConfig:
    name: str = ""
    container_insights: bool = False


@dataclass
class TaskDefinitionConfig:
    name: str
    image: str
    cpu: int = 256
    memory: int = 512
    network_mode: str = "awsvpc"
    compatibility: str = "FARGATE"
    execution_role: bool = True
    command: list[str] | None = None
    environment: dict[str, str] = field(default_factory=dict)


@dataclass
class ContainerOverrideConfig:
    container_name: str
    command: list[str] | None = None
    environment: dict[str, str] | None = None
    cpu: int | None = None
    memory: int | None = None
    memory_reservation: int | None = None


@dataclass
class ScheduleConfig:
    name: str
    task_definition: str
    schedule: str | None = None
    event_pattern: dict[str, Any] | None = None
    description: str | None = None
    task_count: int = 1
    subnet_type: str | None = None
    subnet_ids: list[str] = field(default_factory=list)
    security_group_id: str | None = None  # legacy single group
    security_group_ids: list[str] | None = None
    container_overrides: list[ContainerOverrideConfig] | None = None


@dataclass
class TargetsConfig:
    """Parsed and validated targets.yaml configuration."""

    name: str
    region: str
    raw_spec: dict[str, Any]
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    task_definitions: list[TaskDefinitionConfig] = field(default_factory=list)
    schedules: list[ScheduleConfig] = field(default_factory=list)

    @property
    def cluster_name(self) -> str:
        return self.cluster.name or self.name

    @property
    def spec_sections(self) -> dict[str, Any]:
        """Return declared (non-None) spec section names and their config (for registry).

        The cluster section is always present; its settings are optional.
        """
        sections = {"cluster": self.raw_spec.get("cluster") or {}}
        for k in ("taskDefinitions", "schedules"):
            if self.raw_spec.get(k) is not None:
                sections[k] = self.raw_spec[k]
        return sections

    def task_definition(self, name: str) -> TaskDefinitionConfig:
        """Return the task definition config named name; raise KeyError if undeclared."""
        for td in self.task_definitions:
            if td.name == name:
                return td
        raise KeyError(f"task definition {name!r} is not declared in spec.taskDefinitions")

    @classmethod
    def from_file(cls, path: str) -> "TargetsConfig":
        """Load and validate targets.yaml from file path."""
        if not Path(path).exists():
            raise SystemExit(f"targets.yaml not found: {path}")

        with open(path, encoding="utf-8") as f:
            document: dict[str, Any] = yaml.safe_load(f)

        try:
            validate_targets_spec(document)
        except jsonschema.ValidationError as e:
            raise SystemExit(str(e)) from e

        aws_config = pulumi.Config("aws")
        region = aws_config.require("region")
        try:
            return cls.from_dict(document, region)
        except KeyError as e:
            raise SystemExit(e.args[0]) from e

    @classmethod
    def from_dict(cls, document: dict[str, Any], region: str) -> "TargetsConfig":
        """Build config from an already-validated document.

        Raises KeyError if a schedule names an undeclared task definition.
        """
        metadata = document["metadata"]
        spec = document["spec"]

        c = spec.get("cluster") or {}
        cluster = ClusterConfig(
            name=c.get("name", ""),
            container_insights=c.get("containerInsights", False),
        )

        task_definitions = [
            TaskDefinitionConfig(
                name=td["name"],
                image=td["image"],
                cpu=td.get("cpu", 256),
                memory=td.get("memory", 512),
                network_mode=td.get("networkMode", "awsvpc"),
                compatibility=td.get("compatibility", "FARGATE"),
                execution_role=td.get("executionRole", True),
                command=td.get("command"),
                environment=td.get("environment") or {},
            )
            for td in spec.get("taskDefinitions") or []
        ]

        schedules = []
        for s in spec.get("schedules") or []:
            overrides = None
            if s.get("containerOverrides") is not None:
                overrides = [
                    ContainerOverrideConfig(
                        container_name=o["containerName"],
                        command=o.get("command"),
                        environment=o.get("environment"),
                        cpu=o.get("cpu"),
                        memory=o.get("memory"),
                        memory_reservation=o.get("memoryReservation"),
                    )
                    for o in s["containerOverrides"]
                ]
            schedules.append(ScheduleConfig(
                name=s["name"],
                task_definition=s["taskDefinition"],
                schedule=s.get("schedule"),
                event_pattern=s.get("eventPattern"),
                description=s.get("description"),
                task_count=s.get("taskCount", 1),
                subnet_type=s.get("subnetType"),
                subnet_ids=s.get("subnetIds", []),
                security_group_id=s.get("securityGroupId"),
                security_group_ids=s.get("securityGroupIds"),
                container_overrides=overrides,
            ))

        config = cls(
            name=metadata["name"],
            region=region,
            raw_spec=spec,
            cluster=cluster,
            task_definitions=task_definitions,
            schedules=schedules,
        )
        for schedule in schedules:
            config.task_definition(schedule.task_definition)
        return config


def load_targets_config() -> TargetsConfig:
    """Load targets.yaml from TARGETS_YAML_PATH environment variable."""
    path = os.environ.get("TARGETS_YAML_PATH")
    if not path:
        raise SystemExit("TARGETS_YAML_PATH environment variable required")
    if not Path(path).exists():
        raise SystemExit("TARGETS_YAML_PATH must point to targets.yaml")
    return TargetsConfig.from_file(path)


def create_aws_provider(name: str, region: str) -> pulumi_aws.Provider:
    """Create AWS provider with default resource tags."""
    return pulumi_aws.Provider(
        "aws-tagged",
        region=region,
        default_tags=pulumi_aws.ProviderDefaultTagsArgs(
            tags={
                "service": name,
                "managed-by": "ecs-task-targets",
            }
        ),
    )
