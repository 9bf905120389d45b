"""
Pulumi program: provisions scheduled ECS tasks from targets.yaml.
Looks up the shared VPC, creates the cluster and task definitions, then one
EventBridge rule per schedule with the task as its target.
"""

import pulumi

from task_targets.capabilities import run_capabilities
from task_targets.capabilities.context import CapabilityContext
from task_targets.config import create_aws_provider, load_targets_config
from task_targets.shared.lookups import lookup_vpc

config = load_targets_config()
aws_provider = create_aws_provider(config.name, config.region)
ctx = CapabilityContext(
    config=config,
    vpc=lookup_vpc(aws_provider),
    aws_provider=aws_provider,
)
run_capabilities(config.spec_sections, ctx)

for key, value in ctx.exports.items():
    pulumi.export(key, value)
