"""Recorded video access (OpenCV-based)."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Protocol, Union

import numpy as np

logger = logging.getLogger(__name__)


class VideoSource(Protocol):
    """Seekable recording with a known duration."""

    @property
    def duration(self) -> float:
        """Length of the recording in seconds."""
        ...

    def frame_at(self, t: float) -> Optional[np.ndarray]:
        """Decode the frame shown at ``t`` seconds as HxWx3 RGB, or None."""
        ...


class VideoFile:
    """Thin wrapper around OpenCV VideoCapture for a file on disk.

    Imports cv2 lazily to avoid import-time side effects when only the signal
    processing is used.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._cap = None
        self._duration: Optional[float] = None
        self._fps = 0.0

    def open(self) -> "VideoFile":
        import cv2  # local import

        self._cap = cv2.VideoCapture(str(self.path))
        if not self._cap.isOpened():  # type: ignore[union-attr]
            self._cap = None
            raise RuntimeError(f"Failed to open video: {self.path}")
        fps = float(self._cap.get(cv2.CAP_PROP_FPS) or 0.0)  # type: ignore[union-attr]
        self._fps = fps
        frames = float(self._cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0)  # type: ignore[union-attr]
        self._duration = frames / fps if fps > 0 else 0.0
        logger.info(
            "Opened %s: %.0f frames at %.2f fps (%.1fs)",
            self.path,
            frames,
            fps,
            self._duration,
        )
        return self

    @property
    def duration(self) -> float:
        if self._duration is None:
            raise RuntimeError("Video is not opened")
        return self._duration

    def frame_at(self, t: float) -> Optional[np.ndarray]:
        import cv2  # local import

        if self._cap is None:
            raise RuntimeError("Video is not opened")
        if self._fps > 0:
            # index of the frame on screen at t
            index = int(math.floor(float(t) * self._fps + 1e-6))
            self._cap.set(cv2.CAP_PROP_POS_FRAMES, index)  # type: ignore[union-attr]
        else:
            self._cap.set(cv2.CAP_PROP_POS_MSEC, float(t) * 1000.0)  # type: ignore[union-attr]
        ok, frame = self._cap.read()  # type: ignore[union-attr]
        if not ok or frame is None:
            return None
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()  # type: ignore[union-attr]
            self._cap = None

    def __enter__(self) -> "VideoFile":
        if self._cap is None:
            self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
