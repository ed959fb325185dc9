"""Facing direction detection from 2D shoulder positions.

Visibility scores are unreliable for back views (the detector often
reports high visibility for occluded joints), so the shoulder order in
the image is used instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional

from puppet.posedetector.frames import Landmark


class FacingDirection(Enum):
    """Facing direction of the subject relative to the camera."""

    FRONTAL = 0       # Subject facing toward camera
    BACK = 1          # Subject facing away from camera
    CAMERA_LEFT = 2   # Subject turned toward the image's left edge
    CAMERA_RIGHT = 3  # Subject turned toward the image's right edge


def detect_facing_from_pose(
    joints: Mapping[str, Landmark],
    width: float,
    min_confidence: float = 0.1,
    shoulder_threshold: float = 0.02,
) -> Optional[FacingDirection]:
    """Detect facing direction from shoulder and nose positions.

    Joints are in the rig's (mirrored) space, where a subject facing the
    camera shows their left side on the image's left:
    - Left shoulder appears to the LEFT of the right shoulder -> FRONTAL
    - Left shoulder appears to the RIGHT of the right shoulder -> BACK
    - Shoulders at similar x -> profile, decided by the nose offset

    Args:
        joints: Body joints in pixel space.
        width: Image width, used to scale the thresholds.
        min_confidence: Minimum score for shoulders/nose to be used.
        shoulder_threshold: Minimum x difference (fraction of width).

    Returns:
        FacingDirection, or None when the shoulders are not confident.
    """
    left = joints.get("leftShoulder")
    right = joints.get("rightShoulder")
    if left is None or right is None:
        return None
    if left.score < min_confidence or right.score < min_confidence:
        return None

    x_diff = right.x - left.x
    threshold = shoulder_threshold * width

    if x_diff > threshold:
        return FacingDirection.FRONTAL
    if x_diff < -threshold:
        return FacingDirection.BACK

    # Shoulders at similar x -> profile view
    nose = joints.get("nose")
    if nose is None or nose.score < min_confidence:
        return FacingDirection.FRONTAL

    shoulder_mid_x = (left.x + right.x) / 2.0
    if nose.x < shoulder_mid_x - threshold:
        return FacingDirection.CAMERA_LEFT
    if nose.x > shoulder_mid_x + threshold:
        return FacingDirection.CAMERA_RIGHT
    # Can't determine clearly, default to frontal
    return FacingDirection.FRONTAL
