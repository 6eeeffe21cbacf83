"""Respiration rate (RR) estimation from the inter-beat interval series.

Breathing modulates the heart period (respiratory sinus arrhythmia), so the
IBI sequence, treated as a signal sampled once per beat, carries a spectral
peak at the breathing frequency.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import round_half_up
from .fft import fft, next_pow2

logger = logging.getLogger(__name__)


@dataclass
class RrResult:
    brpm: Optional[int]  # breaths per minute
    peak_hz: Optional[float] = None
    magnitude: float = 0.0


def _rr_peak(
    ibis_ms: np.ndarray,
    rr_min_hz: float,
    rr_max_hz: float,
) -> RrResult:
    x = np.asarray(ibis_ms, dtype=np.float64).reshape(-1)
    if x.size == 0:
        raise ValueError("empty IBI series")
    mean_ibi = float(np.mean(x))
    if mean_ibi <= 0:
        raise ValueError("mean IBI must be positive")
    fs = 1000.0 / mean_ibi  # one sample per beat
    size = next_pow2(x.size)
    padded = np.zeros(size, dtype=np.float64)
    padded[: x.size] = x
    re, im = fft(padded, np.zeros(size, dtype=np.float64))
    res = fs / size
    i0 = int(math.ceil(rr_min_hz / res))
    i1 = min(int(math.floor(rr_max_hz / res)), size - 1)
    if i1 < i0:
        return RrResult(None)
    mag = np.hypot(re[i0 : i1 + 1], im[i0 : i1 + 1])
    k = int(np.argmax(mag))
    peak_mag = float(mag[k])
    idx = i0 + k
    if peak_mag <= 0.0 or idx <= 0:
        return RrResult(None)
    f_rr = idx * res
    return RrResult(round_half_up(f_rr * 60.0), f_rr, peak_mag)


def estimate_respiratory_rate(
    ibis_ms: np.ndarray,
    rr_min_hz: float = 0.1,
    rr_max_hz: float = 0.5,
) -> RrResult:
    """Estimate breaths per minute from the IBI spectrum.

    Never raises: any failure degrades to ``RrResult(None)``.

    Args:
        ibis_ms: inter-beat intervals in ms.
        rr_min_hz/rr_max_hz: respiration band (Hz)
    """
    try:
        result = _rr_peak(ibis_ms, rr_min_hz, rr_max_hz)
    except Exception:
        logger.warning("Could not calculate respiratory rate", exc_info=True)
        return RrResult(None)
    if result.brpm is None:
        logger.warning(
            "No respiratory peak in %.2f-%.2f Hz; respiratory rate unavailable",
            rr_min_hz,
            rr_max_hz,
        )
    return result
