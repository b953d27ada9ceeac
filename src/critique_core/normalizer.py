from __future__ import annotations

import logging
import math
import time
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from critique_core.context import HistoryContext
from critique_core.models import (
    Category,
    EventRecord,
    MessageRecord,
    StructuredRecord,
    TransactionRecord,
    UnknownRecord,
    UserInputRecord,
)

log = logging.getLogger(__name__)

Clock = Callable[[], float]


def as_number(value: Any) -> float:
    """Coerce a raw value field.

    Missing, unparseable and NaN values become 0.  Values beyond float range
    become signed infinity so value limits still apply to them.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        try:
            float(value)
        except OverflowError:
            log.debug("Transaction value out of float range, treating as infinite")
            return math.inf if value > 0 else -math.inf
        return value
    if isinstance(value, float):
        return 0 if math.isnan(value) else value
    try:
        number = float(str(value).strip())
    except ValueError:
        log.debug("Unparseable transaction value %r, defaulting to 0", value)
        return 0
    return 0 if math.isnan(number) else number


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _timestamp(raw: Mapping[str, Any], clock: Clock) -> float:
    ts = raw.get("timestamp")
    if isinstance(ts, (int, float)) and not isinstance(ts, bool) and ts:
        return ts
    return clock()


def _transaction(raw: Mapping[str, Any], history: HistoryContext, clock: Clock) -> TransactionRecord:
    return TransactionRecord(
        hash=raw.get("hash"),
        from_address=raw.get("from"),
        to=raw.get("to") or None,
        value=as_number(raw.get("value")),
        data=as_text(raw.get("data")),
        gas=raw.get("gas"),
        chain_id=raw.get("chainId"),
        previous_txs=history.previous_transactions,
    )


def _message(raw: Mapping[str, Any], history: HistoryContext, clock: Clock) -> MessageRecord:
    return MessageRecord(
        content=as_text(raw.get("content") or raw.get("message")),
        sender=raw.get("sender") or raw.get("from"),
        timestamp=_timestamp(raw, clock),
        conversation_history=history.conversation_history,
    )


def _event(raw: Mapping[str, Any], history: HistoryContext, clock: Clock) -> EventRecord:
    parameters = raw.get("parameters")
    return EventRecord(
        event_name=raw.get("event"),
        parameters=MappingProxyType(dict(parameters)) if isinstance(parameters, Mapping) else MappingProxyType({}),
        block_number=raw.get("blockNumber"),
        transaction_hash=raw.get("transactionHash"),
    )


def _user_input(raw: Mapping[str, Any], history: HistoryContext, clock: Clock) -> UserInputRecord:
    return UserInputRecord(
        input=raw.get("input"),
        input_type=raw.get("inputType"),
        timestamp=_timestamp(raw, clock),
    )


def _unknown(raw: Mapping[str, Any], history: HistoryContext, clock: Clock) -> UnknownRecord:
    return UnknownRecord(fields=MappingProxyType(dict(raw)))


_NORMALIZERS: Dict[Category, Callable[[Mapping[str, Any], HistoryContext, Clock], StructuredRecord]] = {
    Category.TRANSACTION: _transaction,
    Category.MESSAGE: _message,
    Category.EVENT: _event,
    Category.USER_INPUT: _user_input,
    Category.UNKNOWN: _unknown,
}

if set(_NORMALIZERS) != set(Category):  # pragma: no cover
    raise RuntimeError("normalizer table does not cover every category")


def normalize(
    raw: Any,
    category: Category,
    context: Optional[Mapping[str, Any]] = None,
    clock: Clock = time.time,
) -> StructuredRecord:
    """Convert a raw event into the fixed record schema for its category.

    Missing fields are tolerated: optional ones get defaults and absent
    identifying fields (e.g. no ``to``) are left as ``None`` for later
    stages to interpret.  Non-mapping input is wrapped as ``{"value": raw}``.
    """
    if not isinstance(raw, Mapping):
        raw = {"value": raw}
    history = HistoryContext.from_mapping(context)
    return _NORMALIZERS[category](raw, history, clock)
