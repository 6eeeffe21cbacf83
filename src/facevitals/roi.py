"""Forehead ROI extraction, preview rendering and the face-landmark detector.

The ROI is the axis-aligned bounding box of a fixed set of forehead landmarks
from the 468-point face-mesh topology. The pipeline only needs keypoints in
pixel space, so any detector honouring ``FaceDetector`` can be plugged in;
``FaceMeshDetector`` is the MediaPipe-backed default.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np

# Hairline (left to right), eyebrow line, glabella, center, lower boundary.
FOREHEAD_LANDMARKS: Tuple[int, ...] = (
    103, 67, 109, 10, 338, 297, 332,
    70, 63, 105, 66, 107, 55, 65,
    9,
    8,
    295, 285, 336, 334, 293, 300,
)

# Face oval contour as a closed polyline of landmark indices.
FACE_OVAL: Tuple[int, ...] = (
    10, 338, 297, 332, 284, 251, 389, 356, 454, 323, 361, 288, 397, 365,
    379, 378, 400, 377, 152, 148, 176, 149, 150, 136, 172, 58, 132, 93,
    234, 127, 162, 21, 54, 103, 67, 109,
)

Box = Tuple[int, int, int, int]  # (x, y, w, h) in pixels


class FaceDetector(Protocol):
    def estimate_faces(self, frame_rgb: np.ndarray) -> Optional[Sequence[Sequence[float]]]:
        """Return the (x, y) pixel keypoints of one face, or None/empty."""
        ...


def forehead_box(
    keypoints: Sequence[Sequence[float]],
    frame_shape: Tuple[int, ...],
    indices: Sequence[int] = FOREHEAD_LANDMARKS,
) -> Optional[Box]:
    """Bounding box of the forehead landmarks, clipped to the frame.

    Indices missing from ``keypoints`` are skipped. Returns None when no
    landmark is available or the box has zero width or height.
    """
    h, w = int(frame_shape[0]), int(frame_shape[1])
    pts = np.asarray(keypoints, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] == 0 or pts.shape[1] < 2:
        return None
    sel = [i for i in indices if 0 <= i < pts.shape[0]]
    if not sel:
        return None
    xy = pts[sel, :2]
    min_x, min_y = float(xy[:, 0].min()), float(xy[:, 1].min())
    max_x, max_y = float(xy[:, 0].max()), float(xy[:, 1].max())
    if not (min_x < max_x and min_y < max_y):
        return None
    x0 = int(math.floor(min_x))
    y0 = int(math.floor(min_y))
    x1 = x0 + int(math.floor(max_x - min_x + 0.5))
    y1 = y0 + int(math.floor(max_y - min_y + 0.5))
    # Clamp
    x0, x1 = max(0, x0), min(w, x1)
    y0, y1 = max(0, y0), min(h, y1)
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1 - x0, y1 - y0


def mean_green(frame_rgb: np.ndarray, box: Optional[Box] = None) -> float:
    """Mean of the green channel over an optional (x, y, w, h) box.

    Args:
        frame_rgb: HxWx3 uint8 or float array in RGB order.
        box: region to average; the whole frame when None.
    """
    if frame_rgb.ndim != 3 or frame_rgb.shape[2] < 3:
        raise ValueError("frame_rgb must be HxWx3 array")
    if box is None:
        sel = frame_rgb[:, :, 1]
    else:
        x, y, bw, bh = box
        sel = frame_rgb[y : y + bh, x : x + bw, 1]
    if sel.size == 0:
        raise ValueError("ROI is empty")
    return float(np.mean(sel, dtype=np.float64))


def encode_jpeg(image_rgb: np.ndarray, quality: int = 80) -> Optional[bytes]:
    import cv2  # local import

    bgr = cv2.cvtColor(np.ascontiguousarray(image_rgb), cv2.COLOR_RGB2BGR)
    ok, buf = cv2.imencode(".jpg", bgr, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        return None
    return buf.tobytes()


def render_previews(
    frame_rgb: np.ndarray,
    keypoints: Sequence[Sequence[float]],
    box: Optional[Box],
    quality: int = 80,
) -> Tuple[Optional[bytes], Optional[bytes]]:
    """JPEG previews: the frame with the face contour, and the ROI crop."""
    import cv2  # local import

    pts = np.asarray(keypoints, dtype=np.float64)
    overlay = frame_rgb.copy()
    oval = [i for i in FACE_OVAL if i < pts.shape[0]]
    if len(oval) >= 2:
        poly = np.round(pts[oval, :2]).astype(np.int32).reshape(-1, 1, 2)
        cv2.polylines(overlay, [poly], isClosed=True, color=(50, 205, 255), thickness=2)
    frame_jpg = encode_jpeg(overlay, quality)
    roi_jpg = None
    if box is not None:
        x, y, bw, bh = box
        roi_jpg = encode_jpeg(frame_rgb[y : y + bh, x : x + bw], quality)
    return frame_jpg, roi_jpg


@dataclass
class FaceMeshConfig:
    static_image_mode: bool = False  # frames arrive in time order
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


class FaceMeshDetector:
    """468-point face landmarks via MediaPipe FaceMesh (single face).

    The model is created on first use; ``estimate_faces`` returns an Nx2 array
    of pixel coordinates or None when no face is found.
    """

    def __init__(self, cfg: Optional[FaceMeshConfig] = None) -> None:
        self.cfg = cfg or FaceMeshConfig()
        self._mesh = None

    def load(self) -> "FaceMeshDetector":
        """Create the model now instead of on the first frame."""
        if self._mesh is None:
            try:
                import mediapipe as mp  # type: ignore

                self._mesh = mp.solutions.face_mesh.FaceMesh(
                    static_image_mode=self.cfg.static_image_mode,
                    max_num_faces=1,
                    refine_landmarks=False,
                    min_detection_confidence=self.cfg.min_detection_confidence,
                    min_tracking_confidence=self.cfg.min_tracking_confidence,
                )
            except Exception as exc:  # pragma: no cover - optional path
                raise RuntimeError(
                    f"Failed to initialize MediaPipe FaceMesh (install the facemesh extra): {exc}"
                ) from exc
        return self

    def estimate_faces(self, frame_rgb: np.ndarray) -> Optional[np.ndarray]:
        self.load()
        h, w = frame_rgb.shape[:2]
        # MediaPipe expects RGB
        result = self._mesh.process(frame_rgb)  # type: ignore[union-attr]
        if not result.multi_face_landmarks:
            return None
        lm = result.multi_face_landmarks[0].landmark
        return np.array([(p.x * w, p.y * h) for p in lm], dtype=np.float64)

    def close(self) -> None:
        if self._mesh is not None:
            self._mesh.close()  # type: ignore[union-attr]
            self._mesh = None
