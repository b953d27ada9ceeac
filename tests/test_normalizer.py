"""Tests for per-category normalisation."""

import json
import math

from critique_core.context import HistoryContext
from critique_core.models import (
    Category,
    EventRecord,
    MessageRecord,
    TransactionRecord,
    UnknownRecord,
    UserInputRecord,
)
from critique_core.normalizer import as_number, normalize


def _clock():
    return 123.0


def test_transaction_defaults():
    record = normalize({"hash": "0x1", "from": "0xA", "to": "0xB"}, Category.TRANSACTION)
    assert isinstance(record, TransactionRecord)
    assert record.value == 0
    assert record.data == ""
    assert record.previous_txs == ()
    assert record.transaction_type is None


def test_transaction_history_from_context():
    context = {"previousTransactions": [{"hash": "0x0"}]}
    record = normalize({"hash": "0x1", "from": "0xA", "to": "0xB"}, Category.TRANSACTION, context)
    assert record.previous_txs == ({"hash": "0x0"},)


def test_snake_case_context_keys_accepted():
    context = {"previous_transactions": [1, 2]}
    record = normalize({"hash": "0x1", "from": "0xA", "to": "0xB"}, Category.TRANSACTION, context)
    assert record.previous_txs == (1, 2)


def test_value_coercion():
    assert as_number("12.5") == 12.5
    assert as_number("abc") == 0
    assert as_number(None) == 0
    assert as_number(True) == 0
    assert as_number(-5) == -5
    assert as_number(float("nan")) == 0
    assert as_number("nan") == 0


def test_values_beyond_float_range_become_infinite():
    assert as_number(10**400) == math.inf
    assert as_number(-(10**400)) == -math.inf
    assert as_number(float("inf")) == math.inf
    assert as_number(12) == 12


def test_huge_integer_value_normalizes():
    raw = json.loads('{"hash": "0x1", "from": "0xA", "to": "0xB", "value": 1' + "0" * 400 + "}")
    record = normalize(raw, Category.TRANSACTION)
    assert record.value == math.inf


def test_negative_value_is_preserved():
    record = normalize({"hash": "0x1", "from": "0xA", "to": "0xB", "value": -3}, Category.TRANSACTION)
    assert record.value == -3


def test_message_fields_and_fallbacks():
    raw = {"message": "hello", "from": "0xA"}
    record = normalize(raw, Category.MESSAGE, {"conversationHistory": ["earlier"]}, clock=_clock)
    assert isinstance(record, MessageRecord)
    assert record.content == "hello"
    assert record.sender == "0xA"
    assert record.timestamp == 123.0
    assert record.conversation_history == ("earlier",)


def test_message_keeps_supplied_timestamp():
    record = normalize({"content": "hi", "timestamp": 42}, Category.MESSAGE, clock=_clock)
    assert record.timestamp == 42


def test_event_fields():
    raw = {"event": "Transfer", "blockNumber": 10, "transactionHash": "0xabc"}
    record = normalize(raw, Category.EVENT)
    assert isinstance(record, EventRecord)
    assert record.event_name == "Transfer"
    assert dict(record.parameters) == {}
    assert record.block_number == 10


def test_user_input_fields():
    record = normalize({"inputType": "user", "input": "do it"}, Category.USER_INPUT, clock=_clock)
    assert isinstance(record, UserInputRecord)
    assert record.input == "do it"
    assert record.input_type == "user"
    assert record.timestamp == 123.0


def test_unknown_is_shallow_copy():
    raw = {"type": "unknown", "data": "x"}
    record = normalize(raw, Category.UNKNOWN)
    raw["data"] = "changed"
    assert isinstance(record, UnknownRecord)
    assert record.as_dict() == {"type": "unknown", "data": "x"}


def test_non_mapping_input_is_wrapped():
    record = normalize("plain text", Category.UNKNOWN)
    assert record.as_dict() == {"value": "plain text"}


def test_history_context_ignores_non_list_history():
    history = HistoryContext.from_mapping({"previousTransactions": "nope", "user": "alice"})
    assert history.previous_transactions == ()
    assert history.extras["user"] == "alice"
    assert HistoryContext.from_mapping(None).is_empty
