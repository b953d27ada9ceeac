"""Human-readable rendering of a critique result.

Pure formatting: no side effects and no failure modes.
"""

from __future__ import annotations

from typing import List, Sequence

from critique_core.models import CandidateAction, CritiqueResult

REJECTED_CAPTION = "Rejected due to ethical constraints"


def _bullets(items: Sequence[str]) -> str:
    return "\n".join(f"- {item}" for item in items) or "None"


def _approved_lines(actions: Sequence[CandidateAction]) -> List[str]:
    return [f"{a.action}: {a.justification}" for a in actions]


def _rejected_lines(actions: Sequence[CandidateAction]) -> List[str]:
    return [f"{a.action}: {REJECTED_CAPTION}" for a in actions]


def generate_explanation(result: CritiqueResult) -> str:
    sections = [
        "**Decision Analysis**",
        f"- **Confidence Level**: {result.confidence:.2f}",
        "- **Approved Actions**:",
        _bullets(_approved_lines(result.approved_actions)),
        "",
        "- **Rejected Actions**:",
        _bullets(_rejected_lines(result.rejected_actions)),
        "",
        "**Reasoning**:",
        result.explanation,
    ]
    if result.limitations:
        sections += ["", "**Limitations**:", _bullets(result.limitations)]
    if result.uncertainties:
        sections += ["", "**Uncertainties**:", _bullets(result.uncertainties)]
    return "\n".join(sections).strip()
