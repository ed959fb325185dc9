"""Convert raw detector output into PoseFrames.

The mirror policy is applied here and nowhere else. The rig is drawn in
the same (mirrored) space as the selfie video, and every landmark leaves
this module in that space:

- mirroring on: x coordinates are flipped, roles are kept;
- mirroring off: x coordinates are kept, left/right roles are swapped.

Body and face go through the same policy, so they cannot drift apart.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import numpy as np

from puppet.posedetector.frames import FaceFrame, Landmark, PoseFrame, as_landmark_array
from puppet.rig.skeleton import Skeleton
from puppet.shared.constants import POSE_PART_TO_INDEX

logger = logging.getLogger(__name__)

POSE_LANDMARKS_REQUIRED = max(POSE_PART_TO_INDEX.values()) + 1

_SIDE_RE = re.compile(r"^(left|right)|(Left|Right)$")
_OPPOSITE_SIDE = {"left": "right", "right": "left", "Left": "Right", "Right": "Left"}


def opposite_side(name: str) -> str:
    """``leftWrist`` -> ``rightWrist``, ``mouthLeft`` -> ``mouthRight``."""
    return _SIDE_RE.sub(lambda match: _OPPOSITE_SIDE[match.group(0)], name)


@dataclass(frozen=True)
class MirrorPolicy:
    """Maps detector landmarks into the rig's (mirrored) space."""

    enabled: bool = True

    def apply_landmark(self, landmark: Landmark, width: float) -> Landmark:
        if not self.enabled:
            return landmark
        return Landmark(
            x=width - landmark.x, y=landmark.y, z=landmark.z, score=landmark.score
        )

    def apply_points(self, points: Mapping[str, Landmark], width: float) -> Dict[str, Landmark]:
        """Flip x when enabled, otherwise swap the sides of the role names."""
        if self.enabled:
            return {name: self.apply_landmark(lm, width) for name, lm in points.items()}
        return {opposite_side(name): lm for name, lm in points.items()}

    def apply_face(self, face: FaceFrame, width: float) -> FaceFrame:
        return FaceFrame(self.apply_points(face.points, width))


def select_pose_landmarks(raw_pose, width: float, height: float) -> Dict[str, Landmark]:
    """Pick the body joints out of the 33-point BlazePose output.

    Args:
        raw_pose: (N, 4) normalized x, y, z, visibility.
        width, height: Image size used to scale into pixel space.

    Raises:
        InsufficientLandmarksError: If N is too small for the index table.
    """
    arr = as_landmark_array(
        raw_pose, "pose", required=POSE_LANDMARKS_REQUIRED, min_columns=4
    )
    return {
        role: Landmark(
            x=float(arr[index, 0]) * width,
            y=float(arr[index, 1]) * height,
            z=float(arr[index, 2]),
            score=float(arr[index, 3]),
        )
        for role, index in POSE_PART_TO_INDEX.items()
    }


class PoseFrameBuilder:
    """Builds one PoseFrame per detector callback."""

    def __init__(self, width: int, height: int, mirror: MirrorPolicy | bool = True) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.mirror = mirror if isinstance(mirror, MirrorPolicy) else MirrorPolicy(bool(mirror))

    def resize(self, width: int, height: int) -> None:
        """Track a change of the source image size."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)

    def build(self, raw_pose, raw_face) -> Optional[PoseFrame]:
        """Build a frame, or None when the detector found no subject.

        A landmark array that violates the index-table contract only
        drops its own feature (no joints, or no face) for this frame.
        """
        if raw_pose is None or raw_face is None:
            return None

        joints: Dict[str, Landmark] = {}
        try:
            selected = select_pose_landmarks(raw_pose, self.width, self.height)
        except ValueError as exc:
            logger.warning(f"Skipping pose update for this frame: {exc}")
        else:
            joints = self.mirror.apply_points(selected, self.width)

        face: Optional[FaceFrame] = None
        try:
            face = Skeleton.to_face_frame(raw_face, self.width, self.height)
        except ValueError as exc:
            logger.warning(f"Skipping face update for this frame: {exc}")
        else:
            face = self.mirror.apply_face(face, self.width)

        score = float(np.mean([lm.score for lm in joints.values()])) if joints else 0.0
        return PoseFrame(
            joints=joints,
            face=face,
            width=self.width,
            height=self.height,
            mirrored=self.mirror.enabled,
            score=score,
        )
