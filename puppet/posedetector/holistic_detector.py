"""MediaPipe Holistic detector implementation.

Wraps MediaPipe Holistic (body pose + refined face mesh) to implement the
LandmarkDetector interface. Landmarks are returned as plain numpy arrays
so the rest of the package never touches protobuf types.
"""

from __future__ import annotations

import numpy as np
import mediapipe as mp

from .base import DetectorResult, LandmarkDetector


def landmarks_to_array(landmark_list, with_visibility: bool) -> np.ndarray:
    """Convert a MediaPipe NormalizedLandmarkList to an (N, 3|4) array."""
    if with_visibility:
        return np.array(
            [[lm.x, lm.y, lm.z, lm.visibility] for lm in landmark_list.landmark],
            dtype=float,
        )
    return np.array([[lm.x, lm.y, lm.z] for lm in landmark_list.landmark], dtype=float)


class HolisticDetector(LandmarkDetector):
    """MediaPipe Holistic in streaming mode.

    Options mirror the live demo defaults: model complexity 1, landmark
    smoothing on, refined face landmarks (478 points with irises).
    """

    def __init__(
        self,
        model_complexity: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        refine_face_landmarks: bool = True,
    ) -> None:
        self._holistic = mp.solutions.holistic.Holistic(
            static_image_mode=False,
            model_complexity=int(model_complexity),
            smooth_landmarks=True,
            enable_segmentation=False,
            refine_face_landmarks=refine_face_landmarks,
            min_detection_confidence=float(min_detection_confidence),
            min_tracking_confidence=float(min_tracking_confidence),
        )

    @property
    def name(self) -> str:
        return "mediapipe_holistic"

    def detect(self, rgb: np.ndarray, timestamp_ms: int = 0) -> DetectorResult:
        if rgb.ndim != 3 or rgb.shape[-1] != 3:
            raise ValueError(f"Expected (H, W, 3) RGB frame, got {rgb.shape}")

        height, width = int(rgb.shape[0]), int(rgb.shape[1])
        results = self._holistic.process(rgb)

        pose = None
        if results.pose_landmarks is not None:
            pose = landmarks_to_array(results.pose_landmarks, with_visibility=True)
        face = None
        if results.face_landmarks is not None:
            face = landmarks_to_array(results.face_landmarks, with_visibility=False)

        return DetectorResult(
            pose_landmarks=pose,
            face_landmarks=face,
            width=width,
            height=height,
            timestamp_ms=timestamp_ms,
        )

    def close(self) -> None:
        if self._holistic is not None:
            self._holistic.close()
            self._holistic = None
