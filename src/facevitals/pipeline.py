"""End-to-end vitals estimation from a recorded face video.

Frames are sampled at a fixed rate, the mean green value of the forehead ROI
forms the raw signal, which is then detrended, band-passed to the heart band,
peak-picked, and reduced to heart rate, HRV and respiratory rate.

Progress is reported through an optional callable that receives a
``ProcessingProgress`` snapshot at every frame and once per downstream stage.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterator, List, Optional, Sequence

import numpy as np

from .capture import VideoSource
from .config import AnalysisConfig, round_half_up
from .errors import (
    AnalysisCancelled,
    DetectionInconsistent,
    DurationTooShort,
    SignalQualityTooLow,
)
from .models import FrameSample, ProcessingProgress, SignalPoint, VitalSignsResults
from .peaks import find_peaks
from .preprocess import bandpass, detrend
from .roi import FaceDetector, forehead_box, mean_green, render_previews
from .vitals import compute_vitals

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProcessingProgress], None]

STAGE_EXTRACT = "Step 1/3: Extracting Color Signal from Video"
STAGE_PROCESS = "Step 2/3: Processing Signal for Heartbeats"
STAGE_VITALS = "Step 3/3: Calculating Vital Signs"
STAGE_DONE = "Analysis Complete"


def _emit(on_progress: Optional[ProgressCallback], progress: ProcessingProgress) -> None:
    if on_progress is not None:
        on_progress(progress)


def check_duration(duration: float, cfg: AnalysisConfig) -> None:
    if duration < cfg.min_duration_s:
        raise DurationTooShort(
            f"Video duration is {duration:.1f}s. A minimum of "
            f"{cfg.min_duration_s:.0f} seconds is required for accurate analysis."
        )


def sample_frames(
    video: VideoSource,
    detector: FaceDetector,
    cfg: Optional[AnalysisConfig] = None,
) -> Iterator[FrameSample]:
    """Yield one FrameSample per sampling instant, in time order.

    Instants are k / fps for k = 0, 1, ... while below the video duration.
    The detector is called exactly once per decoded frame; an exception from
    it counts as "no face" for that frame.
    """
    cfg = cfg or AnalysisConfig()
    duration = float(video.duration)
    k = 0
    while True:
        t = k / cfg.fps
        if t >= duration:
            return
        k += 1
        t_ms = t * 1000.0
        frame = video.frame_at(t)
        if frame is None:
            logger.debug("No frame decoded at %.3fs", t)
            yield FrameSample(t_ms)
            continue
        try:
            keypoints = detector.estimate_faces(frame)
        except Exception:
            logger.exception("Face detector failed at %.3fs", t)
            keypoints = None
        if keypoints is None or len(keypoints) == 0:
            yield FrameSample(t_ms)
            continue

        box = forehead_box(keypoints, frame.shape)
        frame_jpg = roi_jpg = None
        if cfg.previews:
            frame_jpg, roi_jpg = render_previews(frame, keypoints, box, cfg.jpeg_quality)
        if box is None:
            yield FrameSample(t_ms, None, frame_jpg, None)
            continue
        point = SignalPoint(t=t_ms, v=mean_green(frame, box))
        yield FrameSample(t_ms, point, frame_jpg, roi_jpg)


def extract_signal(
    video: VideoSource,
    detector: FaceDetector,
    on_progress: Optional[ProgressCallback] = None,
    cfg: Optional[AnalysisConfig] = None,
    cancel: Optional[threading.Event] = None,
) -> List[SignalPoint]:
    """Sample the whole video and return the raw green-channel signal.

    Raises DurationTooShort before sampling when the video is too short, and
    DetectionInconsistent when fewer than ``cfg.min_samples`` frames yielded
    a usable face.
    """
    cfg = cfg or AnalysisConfig()
    duration = float(video.duration)
    check_duration(duration, cfg)

    signal: List[SignalPoint] = []
    _emit(on_progress, ProcessingProgress(STAGE_EXTRACT, 0))
    frames = 0
    for sample in sample_frames(video, detector, cfg):
        if cancel is not None and cancel.is_set():
            raise AnalysisCancelled("Analysis was cancelled.")
        frames += 1
        if sample.point is not None:
            signal.append(sample.point)
        pct = round_half_up(sample.t_ms / 1000.0 / duration * cfg.extraction_share)
        _emit(
            on_progress,
            ProcessingProgress(
                STAGE_EXTRACT,
                min(pct, cfg.extraction_share),
                sample.frame_image,
                sample.roi_image,
                tuple(signal),
            ),
        )
    logger.info("Sampled %d frames, %d with a usable face", frames, len(signal))
    return signal


def check_signal(signal: Sequence[SignalPoint], cfg: AnalysisConfig) -> None:
    if len(signal) < cfg.min_samples:
        raise DetectionInconsistent(
            "Could not detect a face consistently. Please try again with "
            "better lighting and a stable position."
        )


def filter_signal(values: Sequence[float], cfg: Optional[AnalysisConfig] = None) -> np.ndarray:
    """Detrend then band-pass the raw values to the heart band."""
    cfg = cfg or AnalysisConfig()
    detrended = detrend(np.asarray(values, dtype=np.float64), cfg.detrend_window)
    return bandpass(detrended, cfg.fps, cfg.band_low_hz, cfg.band_high_hz)


def process_signal(
    signal: Sequence[SignalPoint],
    on_progress: Optional[ProgressCallback] = None,
    cfg: Optional[AnalysisConfig] = None,
) -> VitalSignsResults:
    """Run the downstream stages on a complete raw signal."""
    cfg = cfg or AnalysisConfig()
    check_signal(signal, cfg)
    snapshot = tuple(signal)

    _emit(on_progress, ProcessingProgress(STAGE_PROCESS, 65, signal=snapshot))
    filtered = filter_signal([p.v for p in signal], cfg)

    _emit(on_progress, ProcessingProgress(STAGE_VITALS, 80, signal=snapshot))
    peaks = find_peaks(filtered, cfg.min_peak_distance)
    logger.info("Detected %d peaks in %d samples", len(peaks), filtered.size)
    if len(peaks) < cfg.min_peaks:
        raise SignalQualityTooLow(
            "Signal quality was too low to find reliable heartbeat peaks. "
            "Please try again."
        )
    results = compute_vitals(peaks, cfg)

    _emit(on_progress, ProcessingProgress(STAGE_DONE, 100, signal=snapshot))
    return results


def analyze(
    video: VideoSource,
    detector: FaceDetector,
    on_progress: Optional[ProgressCallback] = None,
    cfg: Optional[AnalysisConfig] = None,
    cancel: Optional[threading.Event] = None,
) -> VitalSignsResults:
    """Estimate vital signs from a recorded face video.

    Args:
        video: seekable recording (see ``capture.VideoSource``).
        detector: ready-to-use landmark detector (see ``roi.FaceDetector``).
        on_progress: called synchronously with each progress snapshot.
        cfg: analysis parameters.
        cancel: optional event checked between frames.

    Raises:
        AnalysisError subclasses; no partial result is returned.
    """
    cfg = cfg or AnalysisConfig()
    signal = extract_signal(video, detector, on_progress, cfg, cancel)
    results = process_signal(signal, on_progress, cfg)
    logger.info("Analysis complete: %s", results.to_dict())
    return results
