"""Category-specific enrichment of structured records.

Every derived field is a pure function of the record it annotates.  The
enricher returns a new record and never touches fields already present.
"""

from __future__ import annotations

from dataclasses import replace
from typing import assert_never

from critique_core.config import DEFAULT_CONFIG, CritiqueConfig
from critique_core.models import (
    EventRecord,
    MessageRecord,
    Risk,
    Sentiment,
    StructuredRecord,
    TransactionRecord,
    UnknownRecord,
    UserInputRecord,
)

# Keyword groups for intent detection, checked in order.
_INTENT_KEYWORDS = (
    ("purchase-intent", ("buy", "purchase")),
    ("sell-intent", ("sell", "trade")),
    ("question", ("help", "?")),
    ("greeting", ("hello", "hi")),
)

_EVENT_CATEGORIES = {
    "Transfer": "token-transfer",
    "Approval": "token-approval",
}


def categorize_transaction(tx: TransactionRecord, config: CritiqueConfig = DEFAULT_CONFIG) -> str:
    if not tx.to:
        return "contract-deployment"
    if len(tx.data) > 2:
        return config.erc20_selectors.get(tx.data[:10], "unknown-contract-interaction")
    return "value-transfer"


def assess_risk(tx: TransactionRecord, config: CritiqueConfig = DEFAULT_CONFIG) -> Risk:
    if tx.value > config.high_value_threshold or not tx.to or len(tx.data) > config.risky_data_length:
        return Risk.HIGH
    return Risk.LOW


def detect_intent(message: MessageRecord) -> str:
    content = message.content.lower()
    for intent, keywords in _INTENT_KEYWORDS:
        if any(k in content for k in keywords):
            return intent
    return "statement"


def analyze_sentiment(message: MessageRecord, config: CritiqueConfig = DEFAULT_CONFIG) -> Sentiment:
    content = message.content.lower()
    positive = sum(1 for word in config.positive_words if word in content)
    negative = sum(1 for word in config.negative_words if word in content)
    if positive > negative:
        return Sentiment.POSITIVE
    if negative > positive:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def categorize_event(event: EventRecord) -> str:
    return _EVENT_CATEGORIES.get(event.event_name, "generic-event") if isinstance(event.event_name, str) else "generic-event"


def enrich(record: StructuredRecord, config: CritiqueConfig = DEFAULT_CONFIG) -> StructuredRecord:
    if isinstance(record, TransactionRecord):
        return replace(
            record,
            transaction_type=categorize_transaction(record, config),
            risk=assess_risk(record, config),
        )
    if isinstance(record, MessageRecord):
        return replace(record, intent=detect_intent(record), sentiment=analyze_sentiment(record, config))
    if isinstance(record, EventRecord):
        return replace(record, event_category=categorize_event(record))
    if isinstance(record, (UserInputRecord, UnknownRecord)):
        return record
    assert_never(record)
