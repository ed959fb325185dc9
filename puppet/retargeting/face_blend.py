"""Facial expression blend weights and head placement from a FaceFrame.

Each weight is a distance ratio between feature landmarks, made scale
invariant by dividing by another feature distance, then compared with a
calibrated rest ratio:

- eye open:   (lid gap / eye width) / eye_open_ratio
- mouth open: (lip gap / mouth width) / mouth_open_ratio
- brow raise: (brow-to-lid gap / face height) / brow_rest_ratio - 1

All weights are clipped to [0, 1].
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict

import numpy as np

from puppet.posedetector.frames import FaceFrame, Landmark

# Ratios below this are treated as degenerate (collapsed face mesh)
_EPS = 1e-6


@dataclass(frozen=True)
class FaceCalibration:
    """Rest ratios the blend weights are measured against.

    Attributes:
        eye_open_ratio: Lid gap / eye width of a fully open eye.
        mouth_open_ratio: Lip gap / mouth width of a fully open mouth.
        brow_rest_ratio: Brow-to-lid gap / face height of a neutral brow.
    """

    eye_open_ratio: float = 0.28
    mouth_open_ratio: float = 0.6
    brow_rest_ratio: float = 0.08

    def __post_init__(self) -> None:
        for name in ("eye_open_ratio", "mouth_open_ratio", "brow_rest_ratio"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value}")

    @classmethod
    def from_neutral_face(
        cls, face: FaceFrame, mouth_open_ratio: float = 0.6
    ) -> "FaceCalibration":
        """Calibrate eyes and brows from a neutral face (eyes open, brows relaxed).

        The mouth is closed on a neutral face, so its ratio is kept.
        """
        ratios = measure_ratios(face)
        eye = (ratios["leftEye"] + ratios["rightEye"]) / 2.0
        brow = (ratios["leftBrow"] + ratios["rightBrow"]) / 2.0
        if eye <= _EPS or brow <= _EPS:
            raise ValueError("Neutral face is degenerate; cannot calibrate")
        return cls(eye_open_ratio=eye, mouth_open_ratio=mouth_open_ratio, brow_rest_ratio=brow)


def _ratio(numerator: float, denominator: float) -> float:
    if denominator <= _EPS:
        return 0.0
    return numerator / denominator


def eye_center(face: FaceFrame, side: str) -> Landmark:
    return face[f"{side}EyeInner"].midpoint(face[f"{side}EyeOuter"])


def mouth_center(face: FaceFrame) -> Landmark:
    return face["mouthLeft"].midpoint(face["mouthRight"])


def face_center(face: FaceFrame) -> Landmark:
    """Midpoint between the two eye centers."""
    return eye_center(face, "left").midpoint(eye_center(face, "right"))


def eye_line_angle(face: FaceFrame) -> float:
    """Direction of the leftEye -> rightEye line, radians."""
    left = eye_center(face, "left")
    right = eye_center(face, "right")
    return math.atan2(right.y - left.y, right.x - left.x)


def measure_ratios(face: FaceFrame) -> Dict[str, float]:
    """Raw (uncalibrated) feature ratios."""
    face_height = face["faceTop"].distance_to(face["faceBottom"])
    ratios: Dict[str, float] = {}
    for side in ("left", "right"):
        lid_gap = face[f"{side}EyeTop"].distance_to(face[f"{side}EyeBottom"])
        eye_width = face[f"{side}EyeInner"].distance_to(face[f"{side}EyeOuter"])
        ratios[f"{side}Eye"] = _ratio(lid_gap, eye_width)
        brow_gap = face[f"{side}Brow"].distance_to(face[f"{side}EyeTop"])
        ratios[f"{side}Brow"] = _ratio(brow_gap, face_height)

    lip_gap = face["mouthTop"].distance_to(face["mouthBottom"])
    mouth_width = face["mouthLeft"].distance_to(face["mouthRight"])
    ratios["mouth"] = _ratio(lip_gap, mouth_width)
    return ratios


def compute_blend_weights(face: FaceFrame, calibration: FaceCalibration) -> Dict[str, float]:
    """Expression blend weights in [0, 1] for one face frame."""
    ratios = measure_ratios(face)
    weights = {
        "leftEyeOpen": ratios["leftEye"] / calibration.eye_open_ratio,
        "rightEyeOpen": ratios["rightEye"] / calibration.eye_open_ratio,
        "mouthOpen": ratios["mouth"] / calibration.mouth_open_ratio,
        "leftBrowRaise": ratios["leftBrow"] / calibration.brow_rest_ratio - 1.0,
        "rightBrowRaise": ratios["rightBrow"] / calibration.brow_rest_ratio - 1.0,
    }
    return {name: float(np.clip(value, 0.0, 1.0)) for name, value in weights.items()}


def facial_bone_anchors(face: FaceFrame) -> Dict[str, Landmark]:
    """Control point each facial bone role follows."""
    return {
        "leftEye": eye_center(face, "left"),
        "rightEye": eye_center(face, "right"),
        "nose": face["noseTip"],
        "mouth": mouth_center(face),
        "leftBrow": face["leftBrow"],
        "rightBrow": face["rightBrow"],
    }
