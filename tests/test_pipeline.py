from __future__ import annotations

import threading
from typing import List

import numpy as np
import pytest

from facevitals.config import AnalysisConfig
from facevitals.errors import (
    AnalysisCancelled,
    DetectionInconsistent,
    DurationTooShort,
    SignalQualityTooLow,
)
from facevitals.models import ProcessingProgress, SignalPoint
from facevitals.pipeline import (
    STAGE_DONE,
    STAGE_EXTRACT,
    STAGE_PROCESS,
    STAGE_VITALS,
    analyze,
    extract_signal,
    process_signal,
    sample_frames,
)


def _cfg() -> AnalysisConfig:
    return AnalysisConfig(previews=False)


def test_analyze_synthetic_pulse(fake_video, fake_detector) -> None:
    video = fake_video(40.0)
    detector = fake_detector()
    progress: List[ProcessingProgress] = []
    res = analyze(video, detector, progress.append, _cfg())
    assert res.heart_rate is not None and 70 <= res.heart_rate <= 74
    assert res.sdnn is not None
    assert res.rmssd is not None
    # one detector call per sampled frame, 20 frames per second
    assert detector.calls == 800
    assert len(video.requested) == 800


def test_progress_contract(fake_video, fake_detector) -> None:
    progress: List[ProcessingProgress] = []
    analyze(fake_video(40.0), fake_detector(), progress.append, _cfg())

    first = progress[0]
    assert (first.stage, first.percentage, first.signal) == (STAGE_EXTRACT, 0, ())
    extraction = [p for p in progress if p.stage == STAGE_EXTRACT]
    assert len(extraction) == 801
    pcts = [p.percentage for p in extraction]
    assert pcts == sorted(pcts)
    assert max(pcts) <= 60
    final_signal = extraction[-1].signal
    times = [p.t for p in final_signal]
    assert all(b > a for a, b in zip(times, times[1:]))
    assert times[0] == 0.0 and times[1] == pytest.approx(50.0)

    tail = [(p.stage, p.percentage) for p in progress[len(extraction) :]]
    assert tail == [(STAGE_PROCESS, 65), (STAGE_VITALS, 80), (STAGE_DONE, 100)]


def test_previews_are_emitted_when_enabled(fake_video, fake_detector) -> None:
    cfg = AnalysisConfig(previews=True)
    video = fake_video(40.0)
    video.frame_at = lambda t: np.full((64, 64, 3), 90, dtype=np.uint8)  # type: ignore[assignment]
    samples = sample_frames(video, fake_detector(face_every=2), cfg)
    first, second = next(samples), next(samples)
    assert first.point is None and first.frame_image is None
    assert second.point is not None and second.point.v == pytest.approx(90.0)
    assert second.frame_image is not None and second.roi_image is not None


def test_too_short_video(fake_video, fake_detector) -> None:
    video = fake_video(20.0)
    progress: List[ProcessingProgress] = []
    with pytest.raises(DurationTooShort):
        analyze(video, fake_detector(), progress.append, _cfg())
    assert video.requested == []
    assert progress == []


def test_no_face_video(fake_video, fake_detector) -> None:
    detector = fake_detector(face_every=0)
    with pytest.raises(DetectionInconsistent):
        analyze(fake_video(40.0), detector, None, _cfg())
    assert detector.calls == 800


def test_sparse_faces_below_minimum(fake_video, fake_detector) -> None:
    # one face every third frame -> 266 samples < 300 required
    with pytest.raises(DetectionInconsistent):
        analyze(fake_video(40.0), fake_detector(face_every=3), None, _cfg())


def test_detector_errors_count_as_missing_faces(fake_video, fake_detector) -> None:
    signal = extract_signal(fake_video(40.0), fake_detector(fail_every=2), None, _cfg())
    assert len(signal) == 400


def test_unreadable_frames_are_skipped(fake_video, fake_detector) -> None:
    video = fake_video(31.0)
    video.frame_at = lambda t: None  # type: ignore[assignment]
    detector = fake_detector()
    with pytest.raises(DetectionInconsistent):
        analyze(video, detector, None, _cfg())
    assert detector.calls == 0


def test_cancellation_between_frames(fake_video, fake_detector) -> None:
    cancel = threading.Event()
    seen: List[ProcessingProgress] = []

    def on_progress(p: ProcessingProgress) -> None:
        seen.append(p)
        if len(seen) == 10:
            cancel.set()

    with pytest.raises(AnalysisCancelled):
        analyze(fake_video(40.0), fake_detector(), on_progress, _cfg(), cancel)
    assert len(seen) == 10


def test_flat_signal_has_too_few_peaks() -> None:
    signal = [SignalPoint(t=i * 50.0, v=100.0) for i in range(400)]
    with pytest.raises(SignalQualityTooLow):
        process_signal(signal, cfg=_cfg())


def test_process_signal_rejects_short_signal() -> None:
    signal = [SignalPoint(t=i * 50.0, v=100.0) for i in range(299)]
    with pytest.raises(DetectionInconsistent):
        process_signal(signal, cfg=_cfg())
