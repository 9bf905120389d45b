"""IAM policy statements and policy documents."""

import json
from dataclasses import dataclass
from typing import Any

import pulumi

POLICY_VERSION = "2012-10-17"


@dataclass(frozen=True)
class PolicyStatement:
    """One IAM policy statement. Resources and condition values may be unresolved outputs."""

    actions: list[str]
    resources: list[pulumi.Input[str]]
    conditions: dict[str, dict[str, pulumi.Input[str]]] | None = None
    effect: str = "Allow"

    def to_dict(self) -> dict[str, Any]:
        statement: dict[str, Any] = {
            "Effect": self.effect,
            "Action": list(self.actions),
            "Resource": list(self.resources),
        }
        if self.conditions:
            statement["Condition"] = {op: dict(values) for op, values in self.conditions.items()}
        return statement


def policy_document(statements: list[PolicyStatement]) -> pulumi.Output[str]:
    """Render statements as a JSON policy document, resolving any outputs they hold."""
    return pulumi.Output.json_dumps(
        {
            "Version": POLICY_VERSION,
            "Statement": [s.to_dict() for s in statements],
        }
    )


def assume_role_policy(service: str) -> str:
    """Trust policy letting an AWS service principal assume the role."""
    return json.dumps(
        {
            "Version": POLICY_VERSION,
            "Statement": [
                {
                    "Action": "sts:AssumeRole",
                    "Effect": "Allow",
                    "Principal": {"Service": service},
                }
            ],
        }
    )
