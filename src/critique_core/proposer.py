"""Action proposal: one fixed branch per record type, no search or planning."""

from __future__ import annotations

from typing import List, assert_never

from critique_core.config import DEFAULT_CONFIG, CritiqueConfig
from critique_core.models import (
    CandidateAction,
    EventRecord,
    MessageRecord,
    Proposal,
    Risk,
    StructuredRecord,
    TransactionRecord,
    UnknownRecord,
    UserInputRecord,
)


def contextual_response(message: MessageRecord, config: CritiqueConfig = DEFAULT_CONFIG) -> str:
    return config.response_templates.get(message.intent or "", config.default_response)


def _propose_transaction(tx: TransactionRecord) -> Proposal:
    actions: List[CandidateAction] = [
        CandidateAction(
            action="verifyRecipient",
            params={"address": tx.to},
            justification="Ensure recipient is valid and not flagged for scams",
        )
    ]
    if tx.value > 0:
        actions.append(
            CandidateAction(
                action="executeTransaction",
                params={"to": tx.to, "value": tx.value, "data": tx.data},
                justification="Transaction parameters validated, value is positive",
            )
        )
    actions.append(
        CandidateAction(
            action="checkGasPrice",
            params={"chainId": tx.chain_id},
            justification="Optimize transaction cost based on current gas prices",
        )
    )
    if tx.risk == Risk.HIGH:
        actions.append(
            CandidateAction(
                action="monitorTransaction",
                params={"txHash": tx.hash},
                justification="High-risk transaction requires additional monitoring",
            )
        )
    reasoning = f"Analyzing {tx.transaction_type} transaction from {tx.from_address} to {tx.to}"
    return Proposal(actions=actions, reasoning=reasoning)


def _propose_message(message: MessageRecord, config: CritiqueConfig) -> Proposal:
    actions: List[CandidateAction] = [
        CandidateAction(
            action="respondToMessage",
            params={"content": contextual_response(message, config), "context": message.as_dict()},
            justification="Generated response based on intent, sentiment, and history",
        )
    ]
    if message.intent == "question":
        actions.append(
            CandidateAction(
                action="searchForAnswer",
                params={"query": message.content},
                justification="Perform search to provide accurate response",
            )
        )
    sentiment = message.sentiment.value if message.sentiment is not None else None
    reasoning = f"Processing message with intent: {message.intent} and sentiment: {sentiment}"
    return Proposal(actions=actions, reasoning=reasoning)


def _propose_event(event: EventRecord) -> Proposal:
    return Proposal(
        actions=[
            CandidateAction(
                action="logEvent",
                params={"event": event.as_dict()},
                justification="Record event for future reference",
            )
        ],
        reasoning=f"Processing event: {event.event_name}",
    )


def propose(record: StructuredRecord, config: CritiqueConfig = DEFAULT_CONFIG) -> Proposal:
    """Propose an ordered list of candidate actions.  The first is primary."""
    if isinstance(record, TransactionRecord):
        return _propose_transaction(record)
    if isinstance(record, MessageRecord):
        return _propose_message(record, config)
    if isinstance(record, EventRecord):
        return _propose_event(record)
    if isinstance(record, (UserInputRecord, UnknownRecord)):
        return Proposal()
    assert_never(record)
