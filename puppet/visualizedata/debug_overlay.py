"""Detection debug overlay drawn onto the (mirrored) video frame."""

from __future__ import annotations

from typing import Mapping, Optional, Tuple

import cv2
import numpy as np

from puppet.posedetector.frames import PoseFrame
from puppet.retargeting.transforms import FrameTransforms
from puppet.shared.constants import DEBUG_SKELETON_CONNECTIONS

KEYPOINT_COLOR = (0, 255, 255)
SKELETON_COLOR = (0, 200, 255)
FACE_COLOR = (255, 0, 0)
BONE_COLOR = (255, 0, 255)

Color = Tuple[int, int, int]


def mirror_frame(rgb: np.ndarray) -> np.ndarray:
    """Flip the video horizontally, as shown to the subject."""
    return cv2.flip(rgb, 1)


def _point(x: float, y: float) -> Tuple[int, int]:
    return int(round(x)), int(round(y))


def draw_keypoints(
    image: np.ndarray,
    frame: PoseFrame,
    min_part_confidence: float,
    color: Color = KEYPOINT_COLOR,
) -> None:
    for landmark in frame.joints.values():
        if landmark.score < min_part_confidence:
            continue
        cv2.circle(image, _point(landmark.x, landmark.y), 3, color, -1)


def draw_skeleton(
    image: np.ndarray,
    frame: PoseFrame,
    min_part_confidence: float,
    color: Color = SKELETON_COLOR,
) -> None:
    for start_role, end_role in DEBUG_SKELETON_CONNECTIONS:
        start = frame.get(start_role)
        end = frame.get(end_role)
        if start is None or end is None:
            continue
        if start.score < min_part_confidence or end.score < min_part_confidence:
            continue
        cv2.line(image, _point(start.x, start.y), _point(end.x, end.y), color, 2)


def draw_face_points(image: np.ndarray, frame: PoseFrame, color: Color = FACE_COLOR) -> None:
    if frame.face is None:
        return
    for landmark in frame.face.points.values():
        cv2.circle(image, _point(landmark.x, landmark.y), 2, color, -1)


def draw_bone_origins(
    image: np.ndarray,
    transforms: FrameTransforms,
    names: Optional[Mapping[int, str]] = None,
    color: Color = BONE_COLOR,
) -> None:
    """Mark every bone origin, labelled with its name when given."""
    for bone_id in transforms.draw_sequence():
        transform = transforms[bone_id]
        x, y = _point(*transform.translation)
        cv2.drawMarker(image, (x, y), color, cv2.MARKER_CROSS, 8, 1)
        if names is not None and bone_id in names:
            cv2.putText(image, names[bone_id], (x + 4, y - 4), cv2.FONT_HERSHEY_SIMPLEX, 0.35, color, 1)


def render_debug_frame(
    rgb: np.ndarray,
    frame: Optional[PoseFrame],
    transforms: Optional[FrameTransforms],
    min_part_confidence: float,
    mirrored: bool = True,
    names: Optional[Mapping[int, str]] = None,
) -> np.ndarray:
    """Annotated copy of ``rgb``.

    Landmarks of a mirrored session are already in mirrored space, so the
    video is flipped to match.
    """
    image = mirror_frame(rgb) if mirrored else rgb.copy()
    if frame is not None:
        draw_skeleton(image, frame, min_part_confidence)
        draw_keypoints(image, frame, min_part_confidence)
        draw_face_points(image, frame)
    if transforms is not None:
        draw_bone_origins(image, transforms, names)
    return image
