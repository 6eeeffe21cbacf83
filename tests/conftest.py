"""Shared fakes for the video source and the face-landmark detector."""

from __future__ import annotations

from typing import List, Optional

import numpy as np
import pytest

from facevitals.roi import FOREHEAD_LANDMARKS

PULSE_HZ = 1.2  # 72 BPM


def pulse_green(t: float) -> float:
    return 120.0 + 3.0 * np.sin(2 * np.pi * PULSE_HZ * t + 0.3) + 0.5 * t / 40.0


class FakeVideo:
    """64x64 float frames whose forehead green value pulses over time."""

    def __init__(self, duration: float) -> None:
        self.duration = duration
        self.requested: List[float] = []

    def frame_at(self, t: float) -> Optional[np.ndarray]:
        self.requested.append(t)
        frame = np.full((64, 64, 3), 100.0, dtype=np.float32)
        frame[10:22, 20:44, 1] = pulse_green(t)
        return frame

    def close(self) -> None:
        pass


class FakeDetector:
    """Forehead landmarks spanning x 20..44, y 10..22 on every ``face_every``-th call."""

    def __init__(self, face_every: int = 1, fail_every: int = 0) -> None:
        self.calls = 0
        self.closed = False
        self.face_every = face_every
        self.fail_every = fail_every

    def estimate_faces(self, frame_rgb: np.ndarray) -> Optional[np.ndarray]:
        self.calls += 1
        if self.fail_every and self.calls % self.fail_every == 0:
            raise RuntimeError("transient detector failure")
        if self.face_every == 0 or self.calls % self.face_every:
            return None
        pts = np.zeros((468, 2), dtype=np.float64)
        for j, idx in enumerate(FOREHEAD_LANDMARKS):
            pts[idx] = (20.0 + (j % 5) * 6.0, 10.0 + (j % 3) * 6.0)
        return pts

    def load(self) -> "FakeDetector":
        return self

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_video():
    return FakeVideo


@pytest.fixture
def fake_detector():
    return FakeDetector
