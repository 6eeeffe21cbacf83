"""Heart rate and time-domain HRV from detected pulse peaks."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .config import AnalysisConfig, round_half_up
from .errors import InsufficientIntervals
from .models import VitalSignsResults
from .respiration import estimate_respiratory_rate

logger = logging.getLogger(__name__)


def inter_beat_intervals(
    peaks: Sequence[int],
    fs: float,
    ibi_min_ms: float = 250.0,
    ibi_max_ms: float = 2000.0,
) -> np.ndarray:
    """Intervals between consecutive peaks in ms, limited to [min, max].

    Out-of-range intervals are dropped, never clamped.
    """
    p = np.asarray(peaks, dtype=np.float64)
    if p.size < 2 or fs <= 0:
        return np.zeros(0, dtype=np.float64)
    ibis = np.diff(p) / fs * 1000.0
    keep = (ibis >= ibi_min_ms) & (ibis <= ibi_max_ms)
    return ibis[keep]


def heart_rate(ibis_ms: np.ndarray) -> int:
    return round_half_up(60000.0 / float(np.mean(ibis_ms)))


def sdnn(ibis_ms: np.ndarray) -> int:
    # population standard deviation (divide by N)
    return round_half_up(float(np.std(ibis_ms)))


def rmssd(ibis_ms: np.ndarray) -> int:
    d = np.diff(np.asarray(ibis_ms, dtype=np.float64))
    if d.size == 0:
        raise ValueError("RMSSD needs at least two intervals")
    return round_half_up(math.sqrt(float(np.sum(d * d)) / d.size))


@dataclass
class HrvSummary:
    heart_rate: int
    sdnn: int
    rmssd: int
    mean_ibi_ms: float
    count: int


def summarize_intervals(
    ibis_ms: np.ndarray,
    min_intervals: int = 9,
) -> HrvSummary:
    ibis = np.asarray(ibis_ms, dtype=np.float64)
    if ibis.size < min_intervals:
        raise InsufficientIntervals(
            "Not enough valid inter-beat intervals found to calculate metrics."
        )
    return HrvSummary(
        heart_rate=heart_rate(ibis),
        sdnn=sdnn(ibis),
        rmssd=rmssd(ibis),
        mean_ibi_ms=float(np.mean(ibis)),
        count=int(ibis.size),
    )


def compute_vitals(
    peaks: Sequence[int],
    cfg: Optional[AnalysisConfig] = None,
) -> VitalSignsResults:
    """Turn peak indices into the final vital signs.

    Raises InsufficientIntervals when too few intervals survive the range
    filter. Respiratory rate is best-effort and may come back as None.
    """
    cfg = cfg or AnalysisConfig()
    ibis = inter_beat_intervals(peaks, cfg.fps, cfg.ibi_min_ms, cfg.ibi_max_ms)
    logger.info("%d valid inter-beat intervals from %d peaks", ibis.size, len(peaks))
    summary = summarize_intervals(ibis, cfg.min_intervals)
    rr = estimate_respiratory_rate(ibis, cfg.rr_low_hz, cfg.rr_high_hz)
    return VitalSignsResults(
        heart_rate=summary.heart_rate,
        respiratory_rate=rr.brpm,
        sdnn=summary.sdnn,
        rmssd=summary.rmssd,
    )
