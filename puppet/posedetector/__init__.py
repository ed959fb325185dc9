"""Landmark detection and per-frame normalization.

Provides the detector interface, the MediaPipe Holistic backend and the
PoseFrameBuilder that turns raw detector arrays into PoseFrames.

Example:
    >>> from puppet.posedetector import PoseFrameBuilder
    >>> builder = PoseFrameBuilder(width=1280, height=720, mirror=True)
    >>> frame = builder.build(result.pose_landmarks, result.face_landmarks)

Note: The builder and the MediaPipe backend are imported lazily. The
      builder depends on puppet.rig, and MediaPipe is slow to load.
"""

from .base import DetectorResult, LandmarkDetector
from .frames import FaceFrame, Landmark, PoseFrame


def __getattr__(name):
    """Lazy import for the builder and the detector backend."""
    if name in ("PoseFrameBuilder", "MirrorPolicy", "select_pose_landmarks"):
        from . import frame_builder
        return getattr(frame_builder, name)
    elif name in ("HolisticDetector",):
        from . import holistic_detector
        return getattr(holistic_detector, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Base classes
    "DetectorResult",
    "LandmarkDetector",
    # Frames
    "FaceFrame",
    "Landmark",
    "PoseFrame",
    # Builder (lazy)
    "PoseFrameBuilder",
    "MirrorPolicy",
    "select_pose_landmarks",
    # MediaPipe (lazy)
    "HolisticDetector",
]
