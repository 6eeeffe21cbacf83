"""Pulse peak detection with an adaptive height threshold."""

from __future__ import annotations

from typing import List

import numpy as np


def find_peaks(x: np.ndarray, min_distance: int) -> List[int]:
    """Return indices of local maxima above mean + 0.5 * std.

    A sample qualifies when it is strictly greater than both neighbours and
    above the threshold. Qualifying samples are accepted left to right, each
    only if it lies at least ``min_distance`` samples after the previously
    accepted one, so the earlier of two close candidates always wins.

    Args:
        x: 1D filtered signal.
        min_distance: minimum spacing between accepted peaks (samples).
    """
    x = np.asarray(x, dtype=np.float64).reshape(-1)
    if x.size < 3:
        return []
    threshold = float(np.mean(x)) + 0.5 * float(np.std(x))
    mid = x[1:-1]
    is_cand = (mid > threshold) & (mid > x[:-2]) & (mid > x[2:])
    candidates = np.flatnonzero(is_cand) + 1

    peaks: List[int] = []
    for i in candidates:
        i = int(i)
        if not peaks or i - peaks[-1] >= min_distance:
            peaks.append(i)
    return peaks
