from __future__ import annotations

import numpy as np
import pytest

from facevitals.fft import fft, ifft, next_pow2


def test_next_pow2() -> None:
    assert next_pow2(0) == 1
    assert next_pow2(1) == 1
    assert next_pow2(2) == 2
    assert next_pow2(3) == 4
    assert next_pow2(600) == 1024
    assert next_pow2(1024) == 1024


def test_fft_matches_numpy() -> None:
    rng = np.random.RandomState(0)
    re = rng.randn(256)
    im = rng.randn(256)
    out_re, out_im = fft(re, im)
    ref = np.fft.fft(re + 1j * im)
    assert np.allclose(out_re, ref.real, atol=1e-9)
    assert np.allclose(out_im, ref.imag, atol=1e-9)


def test_ifft_round_trip() -> None:
    rng = np.random.RandomState(1)
    for n in (1, 2, 8, 64, 1024):
        re = rng.randn(n)
        im = rng.randn(n)
        back_re, back_im = ifft(*fft(re, im))
        assert np.allclose(back_re, re, rtol=1e-9, atol=1e-9)
        assert np.allclose(back_im, im, rtol=1e-9, atol=1e-9)


def test_fft_does_not_modify_inputs() -> None:
    re = np.arange(8, dtype=np.float64)
    im = np.zeros(8)
    fft(re, im)
    assert np.array_equal(re, np.arange(8))
    assert not im.any()


def test_fft_rejects_non_power_of_two() -> None:
    with pytest.raises(ValueError):
        fft(np.zeros(6), np.zeros(6))
    with pytest.raises(ValueError):
        fft(np.zeros(8), np.zeros(4))


def test_fft_empty() -> None:
    re, im = fft(np.zeros(0), np.zeros(0))
    assert re.size == 0 and im.size == 0
