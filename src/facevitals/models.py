"""Value types shared by the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class SignalPoint:
    t: float  # ms since recording start
    v: float  # mean green intensity of the ROI


@dataclass(frozen=True)
class FrameSample:
    """Outcome of one sampled instant of the video."""

    t_ms: float
    point: Optional[SignalPoint] = None
    frame_image: Optional[bytes] = None  # JPEG, face contour overlay
    roi_image: Optional[bytes] = None  # JPEG, forehead crop


@dataclass(frozen=True)
class ProcessingProgress:
    stage: str
    percentage: int
    frame_image: Optional[bytes] = None
    roi_image: Optional[bytes] = None
    signal: Tuple[SignalPoint, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class VitalSignsResults:
    heart_rate: Optional[int] = None  # BPM
    respiratory_rate: Optional[int] = None  # breaths per minute
    sdnn: Optional[int] = None  # ms
    rmssd: Optional[int] = None  # ms

    def to_dict(self) -> dict:
        return {
            "heartRate": self.heart_rate,
            "respiratoryRate": self.respiratory_rate,
            "sdnn": self.sdnn,
            "rmssd": self.rmssd,
        }
