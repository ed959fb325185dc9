"""Shared constants and errors for the pose animator.

- constants: detector index tables, rig role names, limb segments
- exceptions: setup and contract errors raised to the host
"""

from .constants import (
    ALL_ROLES,
    FACE_PART_TO_INDEX,
    LIMB_SEGMENTS,
    POSE_PART_TO_INDEX,
    REQUIRED_ROLES,
)
from .exceptions import (
    InsufficientLandmarksError,
    MissingRigError,
    PuppetError,
    RigError,
    RigParseError,
)

__all__ = [
    # Constants
    "ALL_ROLES",
    "FACE_PART_TO_INDEX",
    "LIMB_SEGMENTS",
    "POSE_PART_TO_INDEX",
    "REQUIRED_ROLES",
    # Errors
    "InsufficientLandmarksError",
    "MissingRigError",
    "PuppetError",
    "RigError",
    "RigParseError",
]
