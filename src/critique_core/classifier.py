"""Structural classification of raw events.

Shape, not declared type, decides the category.  Rules are checked in a
fixed order and the first match wins, so an input that looks like both a
transaction and a message is a transaction.
"""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Tuple

from critique_core.config import DEFAULT_CONFIG, CritiqueConfig
from critique_core.models import Category


def _present(raw: Mapping[str, Any], key: str) -> bool:
    value = raw.get(key)
    # Empty strings, zero and False count as absent.
    return value is not None and value != "" and value != 0


_RULES: List[Tuple[Category, Callable[[Mapping[str, Any]], bool]]] = [
    (Category.TRANSACTION, lambda r: _present(r, "hash") and _present(r, "from") and _present(r, "to")),
    (Category.MESSAGE, lambda r: _present(r, "content") or _present(r, "message")),
    (Category.EVENT, lambda r: _present(r, "event")),
    (Category.USER_INPUT, lambda r: r.get("inputType") == "user"),
]


def classify(raw: Any) -> Category:
    """Assign one of the five categories.  Never fails."""
    if not isinstance(raw, Mapping):
        return Category.UNKNOWN
    for category, matches in _RULES:
        if matches(raw):
            return category
    return Category.UNKNOWN


def detect_source(raw: Any, config: CritiqueConfig = DEFAULT_CONFIG) -> str:
    """Name the network or origin an event came from."""
    if not isinstance(raw, Mapping):
        return "unknown"
    chain_id = raw.get("chainId")
    if _present(raw, "chainId"):
        return config.chain_names.get(str(chain_id), f"Chain-{chain_id}")
    return str(raw.get("source") or "unknown")
