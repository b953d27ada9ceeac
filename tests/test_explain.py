"""Tests for explanation rendering."""

from critique_core.explain import generate_explanation
from critique_core.models import CandidateAction, CritiqueResult


def test_empty_result():
    text = generate_explanation(CritiqueResult(confidence=1.0, explanation="nothing to do"))
    assert text.startswith("**Decision Analysis**")
    assert "- **Confidence Level**: 1.00" in text
    assert "- **Approved Actions**:\nNone" in text
    assert "- **Rejected Actions**:\nNone" in text
    assert text.endswith("**Reasoning**:\nnothing to do")
    assert "**Limitations**" not in text
    assert "**Uncertainties**" not in text


def test_full_result():
    result = CritiqueResult(
        confidence=0.7,
        approved_actions=[CandidateAction(action="verifyRecipient", justification="Check the recipient")],
        rejected_actions=[CandidateAction(action="executeTransaction", justification="Send")],
        limitations=["Ethical constraint: nope"],
        uncertainties=["High-value transactions exceed confidence boundaries"],
        explanation="why",
    )
    text = generate_explanation(result)
    assert "- **Confidence Level**: 0.70" in text
    assert "- verifyRecipient: Check the recipient" in text
    assert "- executeTransaction: Rejected due to ethical constraints" in text
    assert "**Limitations**:\n- Ethical constraint: nope" in text
    assert text.endswith("**Uncertainties**:\n- High-value transactions exceed confidence boundaries")
