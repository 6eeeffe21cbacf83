"""Analysis parameters for the offline rPPG pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass


def round_half_up(x: float) -> int:
    """Round to nearest integer, halves away from -inf (3.5 -> 4, 2.5 -> 3)."""
    return int(math.floor(x + 0.5))


@dataclass
class AnalysisConfig:
    fps: float = 20.0  # frame sampling rate [Hz]
    min_duration_s: float = 30.0
    min_signal_s: float = 15.0  # seconds worth of face detections required
    detrend_window_s: float = 1.5
    band_low_hz: float = 0.75  # 45 BPM
    band_high_hz: float = 4.0  # 240 BPM
    peak_distance_divisor: float = 4.0
    min_peaks: int = 10
    ibi_min_ms: float = 250.0
    ibi_max_ms: float = 2000.0
    min_intervals: int = 9
    rr_low_hz: float = 0.1  # 6 BrPM
    rr_high_hz: float = 0.5  # 30 BrPM
    extraction_share: int = 60  # percent of progress used by frame sampling
    previews: bool = True
    jpeg_quality: int = 80

    @property
    def detrend_window(self) -> int:
        return max(1, round_half_up(self.fps * self.detrend_window_s))

    @property
    def min_peak_distance(self) -> int:
        return max(1, round_half_up(self.fps / self.peak_distance_divisor))

    @property
    def min_samples(self) -> int:
        return int(self.fps * self.min_signal_s)
