"""Shared fixtures for the critique test suite."""

import pytest

from critique_core.models import CandidateAction
from critique_core.pipeline import CritiquePipeline


@pytest.fixture
def pipeline():
    return CritiquePipeline(clock=lambda: 1_700_000_000.0)


@pytest.fixture
def valid_transaction():
    return {
        "hash": "0x123abc",
        "from": "0xUserAddress",
        "to": "0xRecipientAddress",
        "value": 1.5,
        "data": "0x",
        "chainId": "1",
    }


@pytest.fixture
def scam_transaction():
    return {
        "hash": "0x456def",
        "from": "0xUserAddress",
        "to": "0xknownScamAddress",
        "value": 2.0,
        "data": "0x",
        "chainId": "1",
    }


@pytest.fixture
def question_message():
    return {
        "content": "Hello, can you help me with my investment portfolio?",
        "sender": "0xUserAddress",
    }


@pytest.fixture
def unknown_input():
    return {"type": "unknown", "data": "complex data that the agent can't confidently process"}


@pytest.fixture
def make_action():
    def _make(action, **params):
        return CandidateAction(action=action, params=params, justification="test")

    return _make


class ExplodingRule:
    """Rule that raises, for exercising pipeline failure handling."""

    label = "exploding"

    def check(self, action):
        raise RuntimeError("boom")


@pytest.fixture
def exploding_pipeline():
    from critique_core.rules import CategoricalImperative

    return CritiquePipeline(ethics=CategoricalImperative([ExplodingRule()]))
