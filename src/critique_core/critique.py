from __future__ import annotations

from typing import List, Sequence

from critique_core.config import DEFAULT_CONFIG, CritiqueConfig
from critique_core.epistemic import EpistemicChecker
from critique_core.models import CandidateAction, CritiqueResult, Proposal
from critique_core.rules import EXECUTE_TRANSACTION, CategoricalImperative, transaction_value


def calculate_confidence(
    approved: Sequence[CandidateAction],
    rejected: Sequence[CandidateAction],
    uncertainties: Sequence[str],
    config: CritiqueConfig = DEFAULT_CONFIG,
) -> float:
    """Start at 1.0 and subtract a penalty per rejection and uncertainty.

    Approved high-value transactions still cost confidence.  The result is
    clamped to [0, 1] and rounded to absorb float drift (1.0 - 0.2 - 0.1
    must compare equal to 0.7).
    """
    confidence = 1.0
    confidence -= config.rejection_penalty * len(rejected)
    confidence -= config.uncertainty_penalty * len(uncertainties)
    for action in approved:
        if action.action == EXECUTE_TRANSACTION and transaction_value(action) > config.high_value_threshold:
            confidence -= config.high_value_penalty
    return round(min(1.0, max(0.0, confidence)), 10)


class CritiqueAggregator:
    """Runs every candidate through the ethical and epistemic checks."""

    def __init__(
        self,
        ethics: CategoricalImperative | None = None,
        epistemic: EpistemicChecker | None = None,
        config: CritiqueConfig = DEFAULT_CONFIG,
    ) -> None:
        self.config = config
        self.ethics = ethics or CategoricalImperative(config=config)
        self.epistemic = epistemic or EpistemicChecker(config=config)

    def critique(self, proposal: Proposal) -> CritiqueResult:
        approved: List[CandidateAction] = []
        rejected: List[CandidateAction] = []
        limitations: List[str] = []
        uncertainties: List[str] = []
        lines: List[str] = [proposal.reasoning]

        for action in proposal.actions:
            verdict = self.ethics.evaluate(action)
            if verdict.approved:
                approved.append(action)
                lines.append(f"Approved: {action.action} - {verdict.reason}")
            else:
                rejected.append(action)
                lines.append(f"Rejected: {action.action} - {verdict.reason}")
                limitations.append(f"Ethical constraint: {verdict.reason}")

            flag = self.epistemic.check(action)
            if flag.uncertain:
                uncertainties.append(flag.reason)

        confidence = calculate_confidence(approved, rejected, uncertainties, self.config)
        lines.append(f"Confidence: {confidence:.2f}")

        return CritiqueResult(
            confidence=confidence,
            limitations=tuple(limitations),
            uncertainties=tuple(uncertainties),
            approved_actions=tuple(approved),
            rejected_actions=tuple(rejected),
            explanation="\n".join(lines),
        )
