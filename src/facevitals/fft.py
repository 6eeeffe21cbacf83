"""Radix-2 FFT on parallel real/imaginary arrays.

Iterative Cooley-Tukey with a bit-reversal permutation. Each butterfly stage
is evaluated on the whole array at once with numpy, so the cost stays at
O(N log N) array operations without a Python-level inner loop.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def next_pow2(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    n = int(n)
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def _bit_reversal(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n, dtype=np.int64)
    rev = np.zeros(n, dtype=np.int64)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return rev


def fft(real: np.ndarray, imag: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Forward DFT of a complex sequence given as (real, imag).

    Args:
        real, imag: 1D arrays of equal length N, N a power of two.

    Returns:
        (real, imag) of the spectrum as new float64 arrays.
    """
    re = np.array(real, dtype=np.float64).reshape(-1)
    im = np.array(imag, dtype=np.float64).reshape(-1)
    if re.size != im.size:
        raise ValueError("real and imag must have the same length")
    n = re.size
    if n == 0:
        return re, im
    if n & (n - 1):
        raise ValueError(f"FFT length must be a power of two, got {n}")

    rev = _bit_reversal(n)
    re = re[rev]
    im = im[rev]

    size = 2
    while size <= n:
        half = size // 2
        angle = -2.0 * np.pi * np.arange(half) / size
        wr = np.cos(angle)
        wi = np.sin(angle)
        blocks_re = re.reshape(-1, size)
        blocks_im = im.reshape(-1, size)
        even_re, odd_re = blocks_re[:, :half], blocks_re[:, half:]
        even_im, odd_im = blocks_im[:, :half], blocks_im[:, half:]
        p_re = odd_re * wr - odd_im * wi
        p_im = odd_re * wi + odd_im * wr
        re = np.concatenate([even_re + p_re, even_re - p_re], axis=1).reshape(-1)
        im = np.concatenate([even_im + p_im, even_im - p_im], axis=1).reshape(-1)
        size *= 2
    return re, im


def ifft(real: np.ndarray, imag: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Inverse DFT via conjugation: conj(fft(conj(x))) / N."""
    im_in = -np.asarray(imag, dtype=np.float64)
    re, im = fft(real, im_in)
    n = re.size
    if n == 0:
        return re, im
    return re / n, -im / n
