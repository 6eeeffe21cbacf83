"""Offline rPPG vitals estimation from recorded face videos.

Heart rate, HRV (SDNN, RMSSD) and respiratory rate are derived from the
forehead green-channel signal.
"""

from .config import AnalysisConfig
from .errors import (
    AnalysisCancelled,
    AnalysisError,
    DetectionInconsistent,
    DurationTooShort,
    InsufficientIntervals,
    SignalQualityTooLow,
)
from .models import ProcessingProgress, SignalPoint, VitalSignsResults
from .pipeline import analyze, extract_signal, process_signal

__all__ = [
    "AnalysisConfig",
    "AnalysisCancelled",
    "AnalysisError",
    "DetectionInconsistent",
    "DurationTooShort",
    "InsufficientIntervals",
    "SignalQualityTooLow",
    "ProcessingProgress",
    "SignalPoint",
    "VitalSignsResults",
    "analyze",
    "extract_signal",
    "process_signal",
]

__version__ = "0.2.0"
