"""Critique Core: staged decision evaluation with ethical and epistemic checks.

A raw event passes through four stages:

    1. Sensibility: classify the event and normalise it into a record.
    2. Understanding: enrich the record with derived fields.
    3. Reason: propose candidate actions.
    4. Critique: judge every action and score overall confidence.

The boundary decider and explanation renderer consume the critique result
independently.
"""

from .boundary import decide_boundary
from .config import DEFAULT_CONFIG, CritiqueConfig, load_config
from .context import HistoryContext
from .epistemic import EpistemicChecker
from .errors import CritiqueError, PipelineFailure
from .explain import generate_explanation
from .models import (
    CandidateAction,
    Category,
    CritiqueResult,
    DeferralDecision,
    EthicalConstraints,
    EthicalVerdict,
    PipelineOptions,
    UncertaintyFlag,
)
from .monetary import MonetaryActionEvaluator
from .pipeline import CritiquePipeline, evaluate, evaluate_monetary_action, explain
from .rules import CategoricalImperative, EthicalRule

__all__ = [
    "DEFAULT_CONFIG",
    "CandidateAction",
    "CategoricalImperative",
    "Category",
    "CritiqueConfig",
    "CritiqueError",
    "CritiquePipeline",
    "CritiqueResult",
    "DeferralDecision",
    "EpistemicChecker",
    "EthicalConstraints",
    "EthicalRule",
    "EthicalVerdict",
    "HistoryContext",
    "MonetaryActionEvaluator",
    "PipelineFailure",
    "PipelineOptions",
    "UncertaintyFlag",
    "decide_boundary",
    "evaluate",
    "evaluate_monetary_action",
    "explain",
    "generate_explanation",
    "load_config",
]
