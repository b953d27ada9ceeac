"""Tests for the primary-action responder."""

import os
from unittest.mock import patch

import pytest

from critique_agent.config import AgentSettings
from critique_agent.extension import CarContext, CritiqueExtension
from critique_agent.responder import respond, run_agent_turn, verify_recipient
from critique_core.models import CandidateAction, CritiqueResult


def _car(*actions, **kw):
    result = CritiqueResult(confidence=1.0, approved_actions=list(actions))
    return CarContext(result=result, explanation="because", **kw)


def test_missing_critique():
    assert respond(None) == {"message": "No critique available for this input.", "deferred": True}


def test_error():
    reply = respond(CarContext(error="boom", deferred=True, defer_reason="Pipeline error occurred"))
    assert reply["message"] == "An error occurred: boom"


def test_deferred():
    reply = respond(_car(deferred=True, defer_reason="Low confidence"))
    assert reply == {"message": "I need human guidance: Low confidence", "explanation": "because"}


def test_no_approved_actions():
    reply = respond(_car())
    assert reply["message"].startswith("I've processed your request, but no actions were approved.")
    assert reply["limitations"] == []


def test_primary_action_only():
    reply = respond(_car(
        CandidateAction(action="executeTransaction", params={"to": "0xB", "value": 1.5}),
        CandidateAction(action="monitorTransaction", params={"txHash": "0x1"}),
    ))
    assert reply["message"] == "Transaction executed successfully to 0xB with value 1.5"
    assert reply["action"]["action"] == "executeTransaction"
    assert reply["explanation"] == "because"


def test_message_and_monitoring():
    assert respond(_car(CandidateAction(action="respondToMessage", params={"content": "hi"})))["message"] == "hi"
    reply = respond(_car(CandidateAction(action="monitorTransaction", params={"txHash": "0x1"})))
    assert reply["message"] == "Transaction monitoring set up for 0x1"


def test_verify_recipient():
    ok = respond(_car(CandidateAction(action="verifyRecipient", params={"address": "0xB"})))
    assert ok["message"] == "Recipient verified: 0xB"
    bad = respond(_car(CandidateAction(action="verifyRecipient", params={"address": "0xknownScamAddress"})))
    assert bad["message"] == "Recipient verification failed: 0xknownScamAddress"


def test_unrecognized_action():
    reply = respond(_car(CandidateAction(action="logEvent")))
    assert reply["message"] == "Executing unrecognized action: logEvent"


@pytest.mark.asyncio
async def test_run_agent_turn(pipeline, valid_transaction, scam_transaction):
    with patch.dict(os.environ, {}, clear=True):
        extension = CritiqueExtension(AgentSettings(), pipeline=pipeline, log_decision=lambda line: None)

    car, output = await run_agent_turn(extension, valid_transaction)
    assert not car.deferred
    assert output["message"] == "Recipient verified: 0xRecipientAddress"
    assert "car_explanation" in output

    car, output = await run_agent_turn(extension, scam_transaction, {})
    assert car.deferred
    assert output["deferred"] is True


def test_non_string_recipient_fails_verification():
    reply = respond(_car(CandidateAction(action="verifyRecipient", params={"address": {"ens": "bob.eth"}})))
    assert reply["message"] == "Recipient verification failed: {'ens': 'bob.eth'}"
    assert not verify_recipient(["0xB"])
    assert not verify_recipient("")


def test_missing_recipient_is_reported():
    reply = respond(_car(CandidateAction(action="verifyRecipient", params={"address": None})))
    assert reply["message"] == "Recipient verification failed: no recipient address"


@pytest.mark.asyncio
async def test_run_agent_turn_with_structured_recipient(pipeline):
    with patch.dict(os.environ, {}, clear=True):
        extension = CritiqueExtension(AgentSettings(), pipeline=pipeline, log_decision=lambda line: None)
    event = {"hash": "0x1", "from": "0xA", "to": {"ens": "bob.eth"}, "value": 0, "data": "0x", "chainId": "1"}

    car, output = await run_agent_turn(extension, event)
    assert not car.deferred
    assert output["message"].startswith("Recipient verification failed:")

