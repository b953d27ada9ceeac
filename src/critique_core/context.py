from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

HISTORY_CONTEXT_VERSION = 1

_PREVIOUS_TX_KEYS = ("previousTransactions", "previous_transactions")
_CONVERSATION_KEYS = ("conversationHistory", "conversation_history")


def _history(mapping: Mapping[str, Any], keys: Tuple[str, ...]) -> Tuple[Any, ...]:
    for key in keys:
        value = mapping.get(key)
        if isinstance(value, (list, tuple)):
            return tuple(value)
    return ()


@dataclass(frozen=True)
class HistoryContext:
    """Cross-call history supplied by the caller.

    The pipeline only reads it.  Transaction history feeds transaction
    records, conversation history feeds message records; anything else the
    caller passed is kept in ``extras``.
    """

    version: int = HISTORY_CONTEXT_VERSION
    previous_transactions: Tuple[Any, ...] = ()
    conversation_history: Tuple[Any, ...] = ()
    extras: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "HistoryContext":
        if isinstance(mapping, HistoryContext):
            return mapping
        if not isinstance(mapping, Mapping):
            return cls()
        known = set(_PREVIOUS_TX_KEYS) | set(_CONVERSATION_KEYS) | {"version"}
        version = mapping.get("version", HISTORY_CONTEXT_VERSION)
        return cls(
            version=version if isinstance(version, int) else HISTORY_CONTEXT_VERSION,
            previous_transactions=_history(mapping, _PREVIOUS_TX_KEYS),
            conversation_history=_history(mapping, _CONVERSATION_KEYS),
            extras=MappingProxyType({k: v for k, v in mapping.items() if k not in known}),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.previous_transactions or self.conversation_history or self.extras)
