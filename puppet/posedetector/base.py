"""Base classes for landmark detection.

Defines the LandmarkDetector interface the host drives once per video
frame. The animator core never imports a detector; it only consumes the
raw arrays in DetectorResult.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class DetectorResult:
    """Raw output of one detection callback.

    Attributes:
        pose_landmarks: (33, 4) normalized x, y, z, visibility; None if no body.
        face_landmarks: (468 or 478, 3) normalized x, y, z; None if no face.
        width, height: Size of the analysed image in pixels.
        timestamp_ms: Capture time of the frame.
    """

    pose_landmarks: Optional[np.ndarray]
    face_landmarks: Optional[np.ndarray]
    width: int
    height: int
    timestamp_ms: int = 0

    @property
    def has_subject(self) -> bool:
        return self.pose_landmarks is not None and self.face_landmarks is not None


class LandmarkDetector(ABC):
    """Produces body and face landmarks for a single RGB image."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier of the backend."""

    @abstractmethod
    def detect(self, rgb: np.ndarray, timestamp_ms: int = 0) -> DetectorResult:
        """Run detection on one (H, W, 3) uint8 RGB frame."""

    def close(self) -> None:
        """Release model resources."""

    def __enter__(self) -> "LandmarkDetector":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
