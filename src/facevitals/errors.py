"""Typed failures raised by the analysis pipeline.

Every failure carries a short machine-readable ``kind`` and a message that can
be shown to the user as-is.
"""

from __future__ import annotations


class AnalysisError(Exception):
    kind = "analysis_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DurationTooShort(AnalysisError):
    kind = "duration_too_short"


class DetectionInconsistent(AnalysisError):
    kind = "detection_inconsistent"


class SignalQualityTooLow(AnalysisError):
    kind = "signal_quality_too_low"


class InsufficientIntervals(AnalysisError):
    kind = "insufficient_intervals"


class AnalysisCancelled(AnalysisError):
    kind = "cancelled"
