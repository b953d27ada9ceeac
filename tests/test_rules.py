"""Tests for the categorical-imperative rule suite."""

import pytest

from critique_core.rules import (
    CategoricalImperative,
    HumanityAsEndRule,
    KingdomOfEndsRule,
    UniversalizabilityRule,
)


def test_plain_transfer_passes(make_action):
    verdict = CategoricalImperative().evaluate(make_action("executeTransaction", to="0xB", value=1.5))
    assert verdict.approved
    assert verdict.reason == CategoricalImperative.APPROVAL_REASON


@pytest.mark.parametrize(
    "action,params,reason",
    [
        (
            "executeTransaction",
            {"to": "0xB", "value": -1},
            "Fails universalizability: A system where transactions take value without consent would collapse",
        ),
        (
            "respondToMessage",
            {"content": "I will mislead you"},
            "Fails universalizability: A system where AI agents mislead users cannot be universalized",
        ),
        (
            "executeTransaction",
            {"to": "0xB", "value": 1, "force": True},
            "Fails humanity as end: Forcing transactions without consent treats users as means",
        ),
        (
            "respondToMessage",
            {"content": "let me manipulate this"},
            "Fails humanity as end: Manipulative responses treat users as means to an end",
        ),
        (
            "executeTransaction",
            {"to": "0xknownScamAddress", "value": 2},
            "Fails kingdom of ends: Supporting scams is incompatible with a moral community",
        ),
        (
            "respondToMessage",
            {"content": "this is hate speech"},
            "Fails kingdom of ends: Hate speech is incompatible with a kingdom of ends",
        ),
    ],
)
def test_each_formulation_rejects(make_action, action, params, reason):
    verdict = CategoricalImperative().evaluate(make_action(action, **params))
    assert not verdict.approved
    assert verdict.reason == reason


def test_first_failing_rule_wins(make_action):
    action = make_action("executeTransaction", to="0xknownScamAddress", value=-1, force=True)
    verdict = CategoricalImperative().evaluate(action)
    assert verdict.reason.startswith("Fails universalizability:")


def test_content_rules_only_apply_to_responses(make_action):
    action = make_action("searchForAnswer", content="mislead manipulate hate speech")
    assert CategoricalImperative().evaluate(action).approved


def test_rules_are_checked_in_order():
    rules = CategoricalImperative().rules
    assert [r.label for r in rules] == ["universalizability", "humanity as end", "kingdom of ends"]
    assert isinstance(rules[0], UniversalizabilityRule)
    assert isinstance(rules[1], HumanityAsEndRule)
    assert isinstance(rules[2], KingdomOfEndsRule)


class NoWeekendTradingRule:
    label = "weekend policy"

    def check(self, action):
        if action.params.get("weekend"):
            return "Trading is closed"
        return None


def test_extended_appends_rule_without_touching_original(make_action):
    base = CategoricalImperative()
    extended = base.extended([NoWeekendTradingRule()])
    action = make_action("executeTransaction", to="0xB", value=1, weekend=True)

    assert base.evaluate(action).approved
    verdict = extended.evaluate(action)
    assert verdict.reason == "Fails weekend policy: Trading is closed"
    assert len(base.rules) == 3
    assert len(extended.rules) == 4


def test_custom_scam_address(make_action):
    rule = KingdomOfEndsRule("0xother")
    assert rule.check(make_action("executeTransaction", to="0xother")) is not None
    assert rule.check(make_action("executeTransaction", to="0xknownScamAddress")) is None
