"""Retargeting engine: maps PoseFrames onto a Skeleton's bones.

Example:
    >>> from puppet.retargeting import PoseIllustration
    >>> engine = PoseIllustration(skeleton)
    >>> result = engine.update(frame)
    >>> result[skeleton.bone_for("leftUpperArm")].rotation
"""

from .config import EngineConfig
from .face_blend import FaceCalibration, compute_blend_weights
from .facing import FacingDirection, detect_facing_from_pose
from .illustration import PoseIllustration
from .layering import DrawOrderPolicy
from .smoothing import ExponentialSmoother
from .transforms import BoneTransform, FrameTransforms, normalize_angle

__all__ = [
    "BoneTransform",
    "DrawOrderPolicy",
    "EngineConfig",
    "ExponentialSmoother",
    "FaceCalibration",
    "FacingDirection",
    "FrameTransforms",
    "PoseIllustration",
    "compute_blend_weights",
    "detect_facing_from_pose",
    "normalize_angle",
]
