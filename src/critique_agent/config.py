"""Central configuration for the critique agent adapter.

All settings are loaded from environment variables prefixed ``CRITIQUE_``
(with ``.env`` file support via *python-dotenv* in the CLI entry point).
Validation and type coercion are handled by ``pydantic-settings``.

Usage::

    from critique_agent.config import get_settings

    settings = get_settings()
    print(settings.CONFIDENCE_THRESHOLD)

The :func:`get_settings` helper creates the :class:`AgentSettings` singleton
lazily so that importing this module never triggers validation before the
caller has had a chance to load a ``.env`` file or populate the environment.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from critique_core.config import CritiqueConfig, load_config
from critique_core.models import EthicalConstraints, PipelineOptions

logger = logging.getLogger(__name__)

# Canonical .env locations (checked in order of priority).
ENV_PATHS: list[str] = ["config/.env", ".env"]

# ---------------------------------------------------------------------------
# Settings model
# ---------------------------------------------------------------------------


class AgentSettings(BaseSettings):
    """Validated configuration for the critique extension and CLI.

    Every setting carries a default, so the adapter runs with an empty
    environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="CRITIQUE_",
        env_file_encoding="utf-8",
        # Allow extra env vars without raising a validation error.
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Epistemic boundary
    # ------------------------------------------------------------------
    CONFIDENCE_THRESHOLD: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Minimum confidence required to act without deferring to a human.",
    )
    ENABLE_DEFERRAL: bool = Field(
        default=True,
        description="Check epistemic boundaries and defer when they are crossed.",
    )
    DEFER_ON_EMPTY: bool = Field(
        default=False,
        description=(
            "Defer when the pipeline proposed no actions at all.  Off by "
            "default: unclassifiable input then passes with confidence 1.0."
        ),
    )
    DEFERRAL_MESSAGE: str = Field(
        default="I need to defer to human judgment",
        description="Prefix used when the agent output is replaced by a deferral.",
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    ENABLE_EXPLANATIONS: bool = Field(
        default=True,
        description="Render a human-readable explanation into the context and output.",
    )
    DEBUG: bool = Field(
        default=False,
        description="Log every pipeline stage output at DEBUG level.",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level used by the CLI.",
    )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    MAX_PROCESSING_TIME: float = Field(
        default=5000.0,
        ge=0.0,
        description="Advisory processing budget in milliseconds.  Overruns are logged, never enforced.",
    )
    MONETARY_GATE: bool = Field(
        default=False,
        description="Run the monetary action safety gate as an extra ethical rule.",
    )
    MALICIOUS_ADDRESSES: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Comma-separated addresses added to the built-in malicious address list.",
    )

    # ------------------------------------------------------------------
    # Ethical constraint toggles (carried, not yet gating)
    # ------------------------------------------------------------------
    ALLOW_HIGH_VALUE_TRANSACTIONS: bool = False
    REQUIRE_EXPLICIT_CONSENT: bool = False
    PREVENT_MISLEADING_RESPONSES: bool = True

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("MALICIOUS_ADDRESSES", mode="before")
    @classmethod
    def _split_comma_separated_addresses(cls, value: Any) -> list[str]:
        """Accept a comma-separated string from the environment and split it
        into a list of addresses.

        If the value is already a list (e.g. when constructed from Python code)
        it is returned unchanged.
        """
        if value is None:
            return []
        if isinstance(value, str):
            return [a.strip() for a in value.split(",") if a.strip()]
        if isinstance(value, (list, tuple)):
            return list(value)
        raise TypeError(
            f"MALICIOUS_ADDRESSES must be a comma-separated string or list, got {type(value).__name__}"
        )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    # ------------------------------------------------------------------
    # Translation into core values
    # ------------------------------------------------------------------

    def pipeline_options(self) -> PipelineOptions:
        return PipelineOptions(
            confidence_threshold=self.CONFIDENCE_THRESHOLD,
            max_processing_time=self.MAX_PROCESSING_TIME,
            debug=self.DEBUG,
            monetary_gate=self.MONETARY_GATE,
            ethical_constraints=EthicalConstraints(
                allow_high_value_transactions=self.ALLOW_HIGH_VALUE_TRANSACTIONS,
                require_explicit_consent=self.REQUIRE_EXPLICIT_CONSENT,
                prevent_misleading_responses=self.PREVENT_MISLEADING_RESPONSES,
            ),
        )

    def critique_config(self) -> CritiqueConfig:
        base = load_config(confidence_threshold=self.CONFIDENCE_THRESHOLD)
        if not self.MALICIOUS_ADDRESSES:
            return base
        extra = tuple(a for a in self.MALICIOUS_ADDRESSES if a not in base.malicious_addresses)
        return base.with_overrides(malicious_addresses=base.malicious_addresses + extra)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def find_env_file() -> Path | None:
    """Return the first existing ``.env`` file from :data:`ENV_PATHS`."""
    for candidate in ENV_PATHS:
        p = Path(candidate)
        if p.is_file():
            return p
    return None


# ---------------------------------------------------------------------------
# Lazy singleton accessor
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=1)
def get_settings() -> AgentSettings:
    """Return the global :class:`AgentSettings` singleton.

    The instance is created on first call so that the module can be imported
    safely before any ``.env`` file has been loaded.  Subsequent calls return
    the cached instance.

    Raises:
        pydantic.ValidationError: If any value fails validation.
    """
    logger.debug("Initialising AgentSettings from environment.")
    return AgentSettings()
