from __future__ import annotations

from facevitals.config import AnalysisConfig, round_half_up


def test_default_derived_sizes() -> None:
    cfg = AnalysisConfig()
    assert cfg.detrend_window == 30
    assert cfg.min_peak_distance == 5
    assert cfg.min_samples == 300


def test_derived_sizes_round_halves_up() -> None:
    # 10 / 4 = 2.5 and 15 * 1.5 = 22.5 must not round to even
    assert AnalysisConfig(fps=10).min_peak_distance == 3
    assert AnalysisConfig(fps=15).detrend_window == 23
    assert AnalysisConfig(fps=30).detrend_window == 45
    assert AnalysisConfig(fps=30).min_peak_distance == 8


def test_round_half_up() -> None:
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(-0.5) == 0
    assert round_half_up(2.49) == 2
