from __future__ import annotations

from critique_core.config import DEFAULT_CONFIG
from critique_core.models import CritiqueResult, DeferralDecision


def decide_boundary(
    result: CritiqueResult,
    threshold: float = DEFAULT_CONFIG.confidence_threshold,
) -> DeferralDecision:
    """Decide whether to defer to a human.

    Conditions are checked in order and only the first one that holds is
    reported: low confidence, then limitations, then uncertainties.
    """
    if result.confidence < threshold:
        return DeferralDecision(
            should_defer=True,
            reason=f"Low confidence ({result.confidence:.2f}) below threshold of {threshold:g}",
        )
    if result.limitations:
        return DeferralDecision(
            should_defer=True,
            reason=f"Limitations detected: {', '.join(result.limitations)}",
        )
    if result.uncertainties:
        return DeferralDecision(
            should_defer=True,
            reason=f"Uncertainties present: {', '.join(result.uncertainties)}",
        )
    return DeferralDecision(should_defer=False, reason="Within epistemic boundaries")
