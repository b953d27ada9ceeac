"""Agent extension that wraps every turn in the critique pipeline.

The host runtime calls :meth:`CritiqueExtension.before_run` with the raw
turn input and its context, and :meth:`CritiqueExtension.after_run` with
the agent's output.  The first stores the critique under ``context["car"]``;
the second rewrites the output when the critique says to defer.

Usage::

    from critique_agent.extension import CritiqueExtension

    ext = CritiqueExtension()
    ctx = await ext.before_run(event, context)
    output = await ext.after_run(event, {"message": "..."}, ctx)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from critique_agent.config import AgentSettings, get_settings
from critique_core.errors import PipelineFailure
from critique_core.models import CritiqueResult, DeferralDecision
from critique_core.pipeline import CritiquePipeline

log = logging.getLogger(__name__)

CONTEXT_KEY = "car"


class CarContext(BaseModel):
    """What the extension leaves in the turn context for the agent."""

    model_config = ConfigDict(frozen=True)

    result: Optional[CritiqueResult] = None
    deferred: bool = False
    defer_reason: str = ""
    explanation: Optional[str] = None
    error: Optional[str] = None


class CritiqueExtension:
    """Before/after-run hooks around an agent turn.

    Args:
        settings: Adapter settings.  Defaults to :func:`get_settings`.
        pipeline: Pipeline to run.  Defaults to one built from the settings'
            core configuration.
        log_decision: Callable receiving one decision log line at a time.
            Defaults to the module logger at INFO.
    """

    name = "car"

    def __init__(
        self,
        settings: Optional[AgentSettings] = None,
        pipeline: Optional[CritiquePipeline] = None,
        log_decision: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.pipeline = pipeline or CritiquePipeline(self.settings.critique_config())
        self._log_decision = log_decision or log.info

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    async def before_run(self, input: Any, context: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """Critique the turn input and return a new context with the outcome.

        A pipeline failure never propagates: it becomes a forced deferral.
        """
        context = dict(context or {})
        try:
            result = self.pipeline.evaluate(input, context, self.settings.pipeline_options())
        except PipelineFailure as exc:
            self._log_decision(f"[CAR] Error in pipeline: {exc.original}")
            context[CONTEXT_KEY] = CarContext(
                error=str(exc.original),
                deferred=True,
                defer_reason="Pipeline error occurred",
            )
            return context

        decision = self._deferral(result)
        explanation = self.pipeline.explain(result) if self.settings.ENABLE_EXPLANATIONS else None
        context[CONTEXT_KEY] = CarContext(
            result=result,
            deferred=decision.should_defer if decision else False,
            defer_reason=decision.reason if decision and decision.should_defer else "",
            explanation=explanation,
        )
        return context

    async def after_run(self, input: Any, output: Mapping[str, Any], context: Mapping[str, Any]) -> dict[str, Any]:
        """Rewrite the agent output according to the critique in ``context``."""
        output = dict(output)
        car = context.get(CONTEXT_KEY)
        if not isinstance(car, CarContext):
            return output

        self._log_decision(f"[CAR] Decision for input: {input!r}")
        if car.result is not None:
            self._log_decision(f"[CAR] Confidence: {car.result.confidence:.2f}")
            self._log_decision(f"[CAR] Approved actions: {len(car.result.approved_actions)}")
        if car.deferred:
            self._log_decision(f"[CAR] Deferred to human judgment: {car.defer_reason}")

        message_prefix = f"{self.settings.DEFERRAL_MESSAGE}: {car.defer_reason}"
        if car.error is not None:
            output.update(message=message_prefix, deferred=True)
            return output

        if car.deferred:
            message = message_prefix
            if self.settings.ENABLE_EXPLANATIONS and car.explanation:
                message += f"\n\n{car.explanation}"
            output.update(message=message, deferred=True)
            return output

        if self.settings.ENABLE_EXPLANATIONS and car.explanation:
            output["car_explanation"] = car.explanation
        return output

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _deferral(self, result: CritiqueResult) -> Optional[DeferralDecision]:
        if not self.settings.ENABLE_DEFERRAL:
            return None
        decision = self.pipeline.decide_boundary(result, self.settings.CONFIDENCE_THRESHOLD)
        if decision.should_defer or not self.settings.DEFER_ON_EMPTY:
            return decision
        if not result.approved_actions and not result.rejected_actions:
            return DeferralDecision(should_defer=True, reason="No actions were proposed for this input")
        return decision

    def __repr__(self) -> str:
        return f"CritiqueExtension(threshold={self.settings.CONFIDENCE_THRESHOLD!r})"
