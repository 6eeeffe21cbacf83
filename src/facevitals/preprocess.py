"""Signal preprocessing for rPPG: drift removal and FFT band-pass."""

from __future__ import annotations

import numpy as np

from .fft import fft, ifft, next_pow2


def detrend(x: np.ndarray, win: int) -> np.ndarray:
    """Subtract a centered moving average from a 1D signal.

    The window around sample i spans [i - win//2, i + win//2] and shrinks at
    the edges instead of padding, so boundary samples are averaged only over
    real data.

    Args:
        x: 1D array.
        win: window length in samples (>=1).
    """
    x = np.asarray(x, dtype=np.float64).reshape(-1)
    n = x.size
    if n == 0:
        return x.copy()
    half = max(int(win), 1) // 2
    idx = np.arange(n)
    start = np.maximum(0, idx - half)
    end = np.minimum(n - 1, idx + half)
    csum = np.concatenate([[0.0], np.cumsum(x)])
    mean = (csum[end + 1] - csum[start]) / (end - start + 1)
    return x - mean


def bandpass(
    x: np.ndarray,
    fs: float,
    fmin: float = 0.75,
    fmax: float = 4.0,
) -> np.ndarray:
    """Ideal (brick-wall) band-pass in the frequency domain.

    The signal is zero-padded to the next power of two, every bin whose
    frequency falls outside [fmin, fmax] is zeroed together with its mirror,
    and the inverse transform is truncated back to the input length.

    Args:
        x: 1D array.
        fs: sampling rate [Hz].
        fmin: low cut [Hz].
        fmax: high cut [Hz].
    """
    x = np.asarray(x, dtype=np.float64).reshape(-1)
    n = x.size
    if n == 0:
        return x.copy()
    if fmin > 0 and np.ptp(x) == 0:
        # Constant input has only DC content, which the band always rejects
        return np.zeros(n, dtype=np.float64)
    size = next_pow2(n)
    padded = np.zeros(size, dtype=np.float64)
    padded[:n] = x
    re, im = fft(padded, np.zeros(size, dtype=np.float64))
    bins = np.arange(size)
    freqs = np.minimum(bins, size - bins) * (fs / size)
    reject = (freqs < fmin) | (freqs > fmax)
    re[reject] = 0.0
    im[reject] = 0.0
    out, _ = ifft(re, im)
    return out[:n]
