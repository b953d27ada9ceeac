from __future__ import annotations


class CritiqueError(Exception):
    """Base class for errors raised by the critique pipeline."""


class PipelineFailure(CritiqueError):
    """An unexpected exception escaped one of the pipeline stages.

    The caller receives no partial result.  The original exception is kept
    on ``original`` and chained as ``__cause__``.
    """

    def __init__(self, original: BaseException, stage: str = "") -> None:
        self.original = original
        self.stage = stage
        super().__init__(f"Pipeline failed: {original}")
