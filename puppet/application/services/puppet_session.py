"""Host-side callback wiring: detector output -> engine -> transforms."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from puppet.posedetector.base import DetectorResult
from puppet.posedetector.frame_builder import MirrorPolicy, PoseFrameBuilder
from puppet.posedetector.frames import PoseFrame
from puppet.retargeting.config import EngineConfig
from puppet.retargeting.face_blend import FaceCalibration
from puppet.retargeting.illustration import PoseIllustration
from puppet.retargeting.transforms import FrameTransforms
from puppet.rig.scene_graph import SceneNode
from puppet.rig.skeleton import Skeleton
from puppet.shared.exceptions import PuppetError

logger = logging.getLogger(__name__)


class PuppetSession:
    """Owns the active avatar and processes frames strictly in arrival order.

    Frames are never queued: each call works on the frame it was given.
    A lock keeps two callbacks (e.g. from a threaded web server) from
    mutating engine state at the same time.
    """

    def __init__(
        self,
        skeleton: Skeleton,
        width: int,
        height: int,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config or EngineConfig.from_settings()
        self.builder = PoseFrameBuilder(width, height, MirrorPolicy(self.config.mirror))
        self._calibration: Optional[FaceCalibration] = None
        self._lock = threading.Lock()
        self.last_frame: Optional[PoseFrame] = None
        self._skeleton = skeleton
        self._engine = PoseIllustration(skeleton, self.config)

    @classmethod
    def from_svg(
        cls,
        source,
        width: int,
        height: int,
        config: Optional[EngineConfig] = None,
    ) -> "PuppetSession":
        return cls(Skeleton.from_svg(source), width, height, config)

    @property
    def skeleton(self) -> Skeleton:
        return self._skeleton

    @property
    def engine(self) -> PoseIllustration:
        return self._engine

    def on_results(self, raw_pose, raw_face) -> FrameTransforms:
        """Detector callback: build the frame, retarget, return transforms.

        When the detector found no subject the previous transforms are
        returned unchanged.
        """
        with self._lock:
            frame = self.builder.build(raw_pose, raw_face)
            self.last_frame = frame
            return self._engine.update(frame)

    def on_detection(self, result: DetectorResult) -> FrameTransforms:
        """Callback variant taking a DetectorResult (tracks image size changes)."""
        with self._lock:
            if (result.width, result.height) != (self.builder.width, self.builder.height):
                self.builder.resize(result.width, result.height)
            frame = self.builder.build(result.pose_landmarks, result.face_landmarks)
            self.last_frame = frame
            return self._engine.update(frame)

    def current(self) -> FrameTransforms:
        with self._lock:
            return self._engine.current()

    def switch_avatar(self, scene_graph: SceneNode) -> Skeleton:
        """Replace the active avatar.

        The new skeleton is built before anything is torn down, so an
        invalid rig leaves the current avatar active.

        Raises:
            MissingRigError: If the new illustration lacks a required role.
        """
        skeleton = Skeleton.build(scene_graph)
        return self.switch_skeleton(skeleton)

    def switch_skeleton(self, skeleton: Skeleton) -> Skeleton:
        with self._lock:
            self._skeleton = skeleton
            self._engine = PoseIllustration(skeleton, self.config, self._calibration)
        logger.info(f"Switched avatar ({len(skeleton)} bones); engine state reset")
        return skeleton

    def reset(self) -> None:
        """Forget held values and smoothing history without switching avatars."""
        with self._lock:
            self._engine.reset()

    def calibrate_face(self, raw_face) -> FaceCalibration:
        """Calibrate blend weights from a neutral face.

        The calibration describes the subject, so it survives avatar switches.

        Raises:
            PuppetError: If the face landmarks violate the index table.
        """
        with self._lock:
            face = Skeleton.to_face_frame(raw_face, self.builder.width, self.builder.height)
            face = self.builder.mirror.apply_face(face, self.builder.width)
            try:
                self._calibration = self._engine.calibrate_face(face)
            except ValueError as exc:
                raise PuppetError(str(exc)) from exc
            return self._calibration
