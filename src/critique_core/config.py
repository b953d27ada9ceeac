from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Tuple


def _frozen(mapping: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CritiqueConfig:
    # Boundaries
    confidence_threshold: float = 0.7
    high_value_threshold: float = 1000.0
    risky_data_length: int = 1000
    max_transaction_value: float = 1000.0
    long_response_limit: int = 500
    max_processing_time_ms: float = 5000.0

    # Confidence penalties
    rejection_penalty: float = 0.2
    uncertainty_penalty: float = 0.1
    high_value_penalty: float = 0.1

    # Transactions
    erc20_selectors: Mapping[str, str] = field(default_factory=lambda: _frozen({
        "0xa9059cbb": "ERC20-transfer",
        "0x23b872dd": "ERC20-transferFrom",
    }))
    chain_names: Mapping[str, str] = field(default_factory=lambda: _frozen({
        "1": "Ethereum",
        "42161": "Arbitrum",
        "10": "Optimism",
        "56": "BSC",
    }))
    default_token: str = "ETH"

    # Address reputation
    known_scam_address: str = "0xknownScamAddress"
    malicious_addresses: Tuple[str, ...] = ("0xknownScamAddress", "0xanotherScam")
    suspicious_prefix: str = "0x000"
    trusted_contract_prefix: str = "0xsafe"
    dangerous_call_markers: Tuple[str, ...] = ("selfdestruct",)

    # Messages
    positive_words: Tuple[str, ...] = ("good", "great", "excellent", "thanks", "happy")
    negative_words: Tuple[str, ...] = ("bad", "poor", "terrible", "fail", "sad")
    response_templates: Mapping[str, str] = field(default_factory=lambda: _frozen({
        "greeting": "Hello! How can I assist you with blockchain or AI tasks?",
        "question": "Let me look that up for you. I'll respond shortly.",
        "purchase-intent": "I can assist with blockchain transactions. Please provide more details.",
    }))
    default_response: str = "Thank you for your message. I'll process it accordingly."

    def with_overrides(self, **overrides: Any) -> "CritiqueConfig":
        """Return a copy with the given fields replaced.

        Mapping fields are re-frozen so a plain ``dict`` can be passed in.
        """
        for name in ("erc20_selectors", "chain_names", "response_templates"):
            if name in overrides:
                overrides[name] = _frozen(overrides[name])
        for name in ("malicious_addresses", "dangerous_call_markers", "positive_words", "negative_words"):
            if name in overrides:
                overrides[name] = tuple(overrides[name])
        return replace(self, **overrides)


DEFAULT_CONFIG = CritiqueConfig()


def load_config(**overrides: Any) -> CritiqueConfig:
    env = {
        "confidence_threshold": float(os.getenv("CRITIQUE_CONFIDENCE_THRESHOLD", DEFAULT_CONFIG.confidence_threshold)),
        "high_value_threshold": float(os.getenv("CRITIQUE_HIGH_VALUE_THRESHOLD", DEFAULT_CONFIG.high_value_threshold)),
        "risky_data_length": int(os.getenv("CRITIQUE_RISKY_DATA_LENGTH", DEFAULT_CONFIG.risky_data_length)),
        "max_transaction_value": float(os.getenv("CRITIQUE_MAX_TRANSACTION_VALUE", DEFAULT_CONFIG.max_transaction_value)),
        "long_response_limit": int(os.getenv("CRITIQUE_LONG_RESPONSE_LIMIT", DEFAULT_CONFIG.long_response_limit)),
    }
    env.update(overrides)
    return DEFAULT_CONFIG.with_overrides(**env)
