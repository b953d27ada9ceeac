"""The four-stage critique pipeline.

Classification and normalisation, enrichment, action proposal, then
critique.  Every stage is a pure function of its input; the pipeline holds
only immutable configuration, so one instance can serve concurrent callers.

Usage::

    from critique_core import CritiquePipeline

    pipeline = CritiquePipeline()
    result = pipeline.evaluate({"content": "hello?"})
    decision = pipeline.decide_boundary(result)
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Mapping, Optional, Union

from critique_core.boundary import decide_boundary
from critique_core.classifier import classify, detect_source
from critique_core.config import DEFAULT_CONFIG, CritiqueConfig
from critique_core.critique import CritiqueAggregator
from critique_core.enricher import enrich
from critique_core.epistemic import EpistemicChecker
from critique_core.errors import PipelineFailure
from critique_core.explain import generate_explanation
from critique_core.models import (
    CandidateAction,
    CritiqueResult,
    DeferralDecision,
    EthicalVerdict,
    PipelineOptions,
    PipelineTrace,
    RecordMetadata,
)
from critique_core.monetary import MonetaryActionEvaluator
from critique_core.normalizer import Clock, normalize
from critique_core.proposer import propose
from critique_core.rules import CategoricalImperative

log = logging.getLogger(__name__)

OptionsLike = Union[PipelineOptions, Mapping[str, Any], None]


class CritiquePipeline:
    """Runs raw events through classification, enrichment, proposal and critique.

    Args:
        config: Thresholds, address lists and lookup tables.  Substitute a
            modified :class:`CritiqueConfig` to change them for one pipeline.
        ethics: Ethical evaluator; defaults to the three categorical
            imperative rules.
        epistemic: Uncertainty checker.
        monetary: Monetary action gate, used standalone and, when
            ``monetary_gate`` is set in the options, as a fourth ethical rule.
        clock: Source of timestamps for records that carry none.
    """

    def __init__(
        self,
        config: CritiqueConfig = DEFAULT_CONFIG,
        ethics: Optional[CategoricalImperative] = None,
        epistemic: Optional[EpistemicChecker] = None,
        monetary: Optional[MonetaryActionEvaluator] = None,
        clock: Clock = time.time,
    ) -> None:
        self.config = config
        self.ethics = ethics or CategoricalImperative(config=config)
        self.epistemic = epistemic or EpistemicChecker(config=config)
        self.monetary = monetary or MonetaryActionEvaluator(config)
        self._clock = clock
        self._aggregator = CritiqueAggregator(self.ethics, self.epistemic, config)
        self._gated_aggregator = CritiqueAggregator(self.ethics.extended([self.monetary]), self.epistemic, config)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def inspect(self, raw: Any, context: Optional[Mapping[str, Any]] = None) -> PipelineTrace:
        """Run the stages up to and including action proposal."""
        category = classify(raw)
        metadata = RecordMetadata(
            category=category,
            source=detect_source(raw, self.config),
            timestamp=self._clock(),
        )
        record = enrich(normalize(raw, category, context, self._clock), self.config)
        return PipelineTrace(metadata=metadata, record=record, proposal=propose(record, self.config))

    def evaluate(
        self,
        raw: Any,
        context: Optional[Mapping[str, Any]] = None,
        options: OptionsLike = None,
    ) -> CritiqueResult:
        """Run the full pipeline.

        Raises:
            PipelineFailure: If any stage raised unexpectedly.  No partial
                result is returned.
            pydantic.ValidationError: If ``options`` is a mapping that does
                not validate.
        """
        opts = self._options(options)
        if opts.debug:
            log.debug("Pipeline input: %r (constraints: %s)", raw, opts.ethical_constraints.model_dump())

        started = time.monotonic()
        try:
            trace = self.inspect(raw, context)
            if opts.debug:
                log.debug("Category: %s, source: %s", trace.metadata.category.value, trace.metadata.source)
                log.debug("Enriched record: %r", trace.record)
                log.debug("Proposal: %s", trace.proposal.model_dump())
            aggregator = self._gated_aggregator if opts.monetary_gate else self._aggregator
            result = aggregator.critique(trace.proposal)
        except Exception as exc:
            log.exception("Error in critique pipeline")
            raise PipelineFailure(exc) from exc

        if opts.debug:
            log.debug("Critique: %s", result.model_dump())

        elapsed_ms = (time.monotonic() - started) * 1000
        if elapsed_ms > opts.max_processing_time:
            log.warning("Processing time exceeded: %.0fms > %.0fms", elapsed_ms, opts.max_processing_time)
        return result

    def decide_boundary(self, result: CritiqueResult, threshold: Optional[float] = None) -> DeferralDecision:
        return decide_boundary(result, self.config.confidence_threshold if threshold is None else threshold)

    def explain(self, result: CritiqueResult) -> str:
        return generate_explanation(result)

    def evaluate_monetary_action(self, action: Union[CandidateAction, Mapping[str, Any]]) -> EthicalVerdict:
        if not isinstance(action, CandidateAction):
            action = CandidateAction.model_validate(action)
        return self.monetary.evaluate(action)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _options(self, options: OptionsLike) -> PipelineOptions:
        if options is None:
            return PipelineOptions(
                confidence_threshold=self.config.confidence_threshold,
                max_processing_time=self.config.max_processing_time_ms,
            )
        if isinstance(options, PipelineOptions):
            return options
        return PipelineOptions.model_validate(options)

    def __repr__(self) -> str:
        return f"CritiquePipeline(ethics={self.ethics!r})"


# ---------------------------------------------------------------------------
# Module-level convenience API
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=1)
def default_pipeline() -> CritiquePipeline:
    return CritiquePipeline()


def evaluate(raw: Any, context: Optional[Mapping[str, Any]] = None, options: OptionsLike = None) -> CritiqueResult:
    return default_pipeline().evaluate(raw, context, options)


def evaluate_monetary_action(action: Union[CandidateAction, Mapping[str, Any]]) -> EthicalVerdict:
    return default_pipeline().evaluate_monetary_action(action)


def explain(result: CritiqueResult) -> str:
    return generate_explanation(result)
