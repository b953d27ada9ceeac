from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple

from critique_core.config import DEFAULT_CONFIG, CritiqueConfig
from critique_core.models import CandidateAction, UncertaintyFlag
from critique_core.rules import EXECUTE_TRANSACTION, RESPOND_TO_MESSAGE, response_content, transaction_value


class UncertaintyRule(Protocol):
    def __call__(self, action: CandidateAction) -> Optional[str]:
        ...


class HighValueTransactionRule:
    def __init__(self, threshold: float = DEFAULT_CONFIG.high_value_threshold) -> None:
        self.threshold = threshold

    def __call__(self, action: CandidateAction) -> Optional[str]:
        if action.action == EXECUTE_TRANSACTION and transaction_value(action) > self.threshold:
            return "High-value transactions exceed confidence boundaries"
        return None


class LongResponseRule:
    def __init__(self, limit: int = DEFAULT_CONFIG.long_response_limit) -> None:
        self.limit = limit

    def __call__(self, action: CandidateAction) -> Optional[str]:
        if action.action == RESPOND_TO_MESSAGE and len(response_content(action)) > self.limit:
            return "Long responses may exceed knowledge boundaries"
        return None


class EpistemicChecker:
    """Flags actions the system cannot be confident about.

    Independent of the ethical verdict: an approved action may still be
    uncertain.
    """

    def __init__(
        self,
        rules: Optional[Sequence[UncertaintyRule]] = None,
        config: CritiqueConfig = DEFAULT_CONFIG,
    ) -> None:
        if rules is None:
            rules = (
                HighValueTransactionRule(config.high_value_threshold),
                LongResponseRule(config.long_response_limit),
            )
        self.rules: Tuple[UncertaintyRule, ...] = tuple(rules)

    def check(self, action: CandidateAction) -> UncertaintyFlag:
        for rule in self.rules:
            reason = rule(action)
            if reason is not None:
                return UncertaintyFlag(uncertain=True, reason=reason)
        return UncertaintyFlag()
