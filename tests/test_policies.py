"""Tests for IAM policy statements and documents."""

import json

from task_targets.iam.policies import PolicyStatement, assume_role_policy


def test_statement_to_dict_with_condition() -> None:
    statement = PolicyStatement(
        actions=["ecs:RunTask"],
        resources=["arn:task-def"],
        conditions={"ArnEquals": {"ecs:cluster": "arn:cluster"}},
    )
    assert statement.to_dict() == {
        "Effect": "Allow",
        "Action": ["ecs:RunTask"],
        "Resource": ["arn:task-def"],
        "Condition": {"ArnEquals": {"ecs:cluster": "arn:cluster"}},
    }


def test_statement_to_dict_without_condition() -> None:
    statement = PolicyStatement(actions=["iam:PassRole"], resources=["arn:role"])
    assert "Condition" not in statement.to_dict()


def test_assume_role_policy_names_service_principal() -> None:
    policy = json.loads(assume_role_policy("events.amazonaws.com"))
    assert policy["Version"] == "2012-10-17"
    statement = policy["Statement"][0]
    assert statement["Action"] == "sts:AssumeRole"
    assert statement["Principal"] == {"Service": "events.amazonaws.com"}
