"""Synthetic rigs and detector outputs shared by the tests."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

import numpy as np

from puppet.rig.scene_graph import RestTransform, SceneNode
from puppet.shared.constants import FACE_PART_TO_INDEX, POSE_PART_TO_INDEX

WIDTH = 500
HEIGHT = 500

# Raw (unmirrored, normalized) body of a subject facing the camera: the
# subject's left side appears on the image's right.
NEUTRAL_POSE = {
    "nose": (0.50, 0.30),
    "leftEye": (0.52, 0.28),
    "rightEye": (0.48, 0.28),
    "leftEar": (0.54, 0.29),
    "rightEar": (0.46, 0.29),
    "leftShoulder": (0.60, 0.40),
    "rightShoulder": (0.40, 0.40),
    "leftElbow": (0.65, 0.55),
    "rightElbow": (0.35, 0.55),
    "leftWrist": (0.67, 0.70),
    "rightWrist": (0.33, 0.70),
    "leftHip": (0.56, 0.70),
    "rightHip": (0.44, 0.70),
    "leftKnee": (0.56, 0.85),
    "rightKnee": (0.44, 0.85),
    "leftAnkle": (0.56, 0.98),
    "rightAnkle": (0.44, 0.98),
}

# Neutral face: eyes open at the default ratio (0.28), brows at rest (0.08),
# mouth closed.
NEUTRAL_FACE = {
    "leftEyeOuter": (0.60, 0.40),
    "leftEyeInner": (0.54, 0.40),
    "leftEyeTop": (0.57, 0.3916),
    "leftEyeBottom": (0.57, 0.4084),
    "rightEyeOuter": (0.40, 0.40),
    "rightEyeInner": (0.46, 0.40),
    "rightEyeTop": (0.43, 0.3916),
    "rightEyeBottom": (0.43, 0.4084),
    "leftBrow": (0.57, 0.3516),
    "rightBrow": (0.43, 0.3516),
    "noseTip": (0.50, 0.50),
    "mouthTop": (0.50, 0.62),
    "mouthBottom": (0.50, 0.62),
    "mouthLeft": (0.55, 0.62),
    "mouthRight": (0.45, 0.62),
    "faceTop": (0.50, 0.25),
    "faceBottom": (0.50, 0.75),
    "leftCheek": (0.65, 0.45),
    "rightCheek": (0.35, 0.45),
}


def pose_array(
    overrides: Optional[Dict[str, Tuple[float, float]]] = None,
    visibility: float = 0.95,
    low: Iterable[str] = (),
    low_visibility: float = 0.01,
    count: int = 33,
) -> np.ndarray:
    """(count, 4) BlazePose-style array built from NEUTRAL_POSE."""
    arr = np.zeros((count, 4), dtype=float)
    arr[:, :2] = 0.5
    arr[:, 3] = visibility
    points = dict(NEUTRAL_POSE)
    points.update(overrides or {})
    for role, (x, y) in points.items():
        index = POSE_PART_TO_INDEX[role]
        if index < count:
            arr[index, 0] = x
            arr[index, 1] = y
    for role in low:
        arr[POSE_PART_TO_INDEX[role], 3] = low_visibility
    return arr


def face_array(
    overrides: Optional[Dict[str, Tuple[float, float]]] = None,
    count: int = 478,
) -> np.ndarray:
    """(count, 3) face mesh array built from NEUTRAL_FACE."""
    arr = np.full((count, 3), 0.5, dtype=float)
    arr[:, 2] = 0.0
    points = dict(NEUTRAL_FACE)
    points.update(overrides or {})
    for name, (x, y) in points.items():
        index = FACE_PART_TO_INDEX[name]
        if index < count:
            arr[index, 0] = x
            arr[index, 1] = y
    return arr


def mirrored_px(x: float, width: int = WIDTH) -> float:
    return width - x * width


def node(name, x=0.0, y=0.0, children=(), rotation=0.0) -> SceneNode:
    return SceneNode(
        name=name,
        transform=RestTransform(x=x, y=y, rotation=rotation),
        children=list(children),
    )


def full_rig() -> SceneNode:
    """Rig drawn in mirrored space: the subject's left side is on the left."""
    head = node(
        "head",
        100,
        60,
        [
            node("hair", 0, -20),
            node("leftEye", -10, -5),
            node("rightEye", 10, -5),
            node("leftBrow", -10, -12),
            node("rightBrow", 10, -12),
            node("nose", 0, 5),
            node("mouth", 0, 15),
        ],
    )
    body = node(
        None,
        children=[
            node("torso", 100, 140),
            node("leftUpperArm", 80, 100, [node("leftSleeve", 0, 10)]),
            node("leftLowerArm", 70, 140),
            node("rightUpperArm", 120, 100, [node("rightSleeve", 0, 10)]),
            node("rightLowerArm", 130, 140),
            node("leftShoulder", 80, 100),
            node("rightShoulder", 120, 100),
            node("leftElbow", 70, 140),
            node("rightElbow", 130, 140),
            node("leftWrist", 65, 180),
            node("rightWrist", 135, 180),
            node("leftHip", 90, 200),
            node("rightHip", 110, 200),
        ],
    )
    return node("illustration", children=[body, head])


def minimal_rig() -> SceneNode:
    return node(
        "illustration",
        children=[
            node("leftShoulder", 80, 100),
            node("rightShoulder", 120, 100),
            node("head", 100, 60),
        ],
    )


SVG_RIG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="200" height="260" viewBox="0 0 200 260">
  <defs>
    <linearGradient id="skin"><stop offset="0" stop-color="#fc9"/></linearGradient>
  </defs>
  <g id="body">
    <path id="torso" d="M80 100 L120 100 L110 200 L90 200 Z"/>
    <g id="leftUpperArm" transform="translate(80,100)">
      <path id="leftSleeve" d="M0 0 L-10 40"/>
    </g>
    <circle id="leftShoulder" cx="80" cy="100" r="2"/>
    <circle id="rightShoulder" cx="120" cy="100" r="2"/>
    <circle id="leftElbow" cx="70" cy="140" r="2"/>
  </g>
  <g id="head" transform="translate(100,60)">
    <ellipse id="leftEye" cx="-10" cy="-5" rx="3" ry="2"/>
    <ellipse id="rightEye" cx="10" cy="-5" rx="3" ry="2"/>
    <path id="mouth" d="M-5 15 L5 15"/>
  </g>
</svg>
"""
