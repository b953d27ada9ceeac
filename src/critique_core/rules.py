"""Categorical-imperative rule suite.

Each rule inspects one candidate action and returns a failure reason or
``None``.  The evaluator runs its rules in order and reports the first
failure, so adding a rule means passing a longer rule tuple, never editing
an existing rule.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol, Sequence, Tuple

from critique_core.config import DEFAULT_CONFIG, CritiqueConfig
from critique_core.models import CandidateAction, EthicalVerdict
from critique_core.normalizer import as_number, as_text

log = logging.getLogger(__name__)

EXECUTE_TRANSACTION = "executeTransaction"
RESPOND_TO_MESSAGE = "respondToMessage"


def response_content(action: CandidateAction) -> str:
    return as_text(action.params.get("content"))


def transaction_value(action: CandidateAction) -> float:
    return as_number(action.params.get("value"))


class EthicalRule(Protocol):
    """A named check returning a failure reason, or ``None`` if the action passes."""

    label: str

    def check(self, action: CandidateAction) -> Optional[str]:
        ...


class ResponseContentRule:
    """Reject ``respondToMessage`` actions whose content contains a phrase."""

    def __init__(self, phrase: str, reason: str) -> None:
        self.phrase = phrase
        self.reason = reason

    def check(self, action: CandidateAction) -> Optional[str]:
        if action.action == RESPOND_TO_MESSAGE and self.phrase in response_content(action):
            return self.reason
        return None


class UniversalizabilityRule:
    """Could the action be a universal law without contradiction?"""

    label = "universalizability"

    def __init__(self) -> None:
        self._content = ResponseContentRule(
            "mislead", "A system where AI agents mislead users cannot be universalized"
        )

    def check(self, action: CandidateAction) -> Optional[str]:
        if action.action == EXECUTE_TRANSACTION and transaction_value(action) < 0:
            return "A system where transactions take value without consent would collapse"
        return self._content.check(action)


class HumanityAsEndRule:
    """Does the action treat people as ends, never merely as means?"""

    label = "humanity as end"

    def __init__(self) -> None:
        self._content = ResponseContentRule(
            "manipulate", "Manipulative responses treat users as means to an end"
        )

    def check(self, action: CandidateAction) -> Optional[str]:
        if action.action == EXECUTE_TRANSACTION and action.params.get("force"):
            return "Forcing transactions without consent treats users as means"
        return self._content.check(action)


class KingdomOfEndsRule:
    """Is the action compatible with a moral community?"""

    label = "kingdom of ends"

    def __init__(self, scam_address: str = DEFAULT_CONFIG.known_scam_address) -> None:
        self.scam_address = scam_address
        self._content = ResponseContentRule(
            "hate speech", "Hate speech is incompatible with a kingdom of ends"
        )

    def check(self, action: CandidateAction) -> Optional[str]:
        if action.action == EXECUTE_TRANSACTION and action.params.get("to") == self.scam_address:
            return "Supporting scams is incompatible with a moral community"
        return self._content.check(action)


def default_rules(config: CritiqueConfig = DEFAULT_CONFIG) -> Tuple[EthicalRule, ...]:
    return (
        UniversalizabilityRule(),
        HumanityAsEndRule(),
        KingdomOfEndsRule(config.known_scam_address),
    )


class CategoricalImperative:
    """Fail-fast ethical evaluator over an ordered rule tuple."""

    APPROVAL_REASON = "Action passes all three formulations of the categorical imperative"

    def __init__(
        self,
        rules: Optional[Sequence[EthicalRule]] = None,
        config: CritiqueConfig = DEFAULT_CONFIG,
    ) -> None:
        self.rules: Tuple[EthicalRule, ...] = tuple(rules) if rules is not None else default_rules(config)

    def evaluate(self, action: CandidateAction) -> EthicalVerdict:
        for rule in self.rules:
            reason = rule.check(action)
            if reason is not None:
                log.debug("Rule %s rejected %s: %s", rule.label, action.action, reason)
                return EthicalVerdict(approved=False, reason=f"Fails {rule.label}: {reason}")
        return EthicalVerdict(approved=True, reason=self.APPROVAL_REASON)

    def extended(self, rules: Iterable[EthicalRule]) -> "CategoricalImperative":
        """Return an evaluator that runs ``rules`` after the current ones."""
        return CategoricalImperative(self.rules + tuple(rules))

    def __repr__(self) -> str:
        return f"CategoricalImperative(rules={[r.label for r in self.rules]!r})"
