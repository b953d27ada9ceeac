"""Tests for the epistemic uncertainty checker."""

from critique_core.epistemic import EpistemicChecker, HighValueTransactionRule, LongResponseRule


def test_high_value_transaction_is_uncertain(make_action):
    flag = EpistemicChecker().check(make_action("executeTransaction", to="0xB", value=1500))
    assert flag.uncertain
    assert flag.reason == "High-value transactions exceed confidence boundaries"


def test_threshold_is_exclusive(make_action):
    assert not EpistemicChecker().check(make_action("executeTransaction", to="0xB", value=1000)).uncertain


def test_long_response_is_uncertain(make_action):
    flag = EpistemicChecker().check(make_action("respondToMessage", content="x" * 501))
    assert flag.uncertain
    assert flag.reason == "Long responses may exceed knowledge boundaries"
    assert not EpistemicChecker().check(make_action("respondToMessage", content="x" * 500)).uncertain


def test_other_actions_are_certain(make_action):
    flag = EpistemicChecker().check(make_action("searchForAnswer", query="x" * 1000, value=5000))
    assert not flag.uncertain
    assert flag.reason == ""


def test_custom_rules(make_action):
    checker = EpistemicChecker([HighValueTransactionRule(10), LongResponseRule(5)])
    assert checker.check(make_action("executeTransaction", value=11)).uncertain
    assert checker.check(make_action("respondToMessage", content="abcdef")).uncertain
