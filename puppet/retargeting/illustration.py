"""Retargeting engine: PoseFrames -> per-bone transforms.

One PoseIllustration drives one Skeleton. It owns all cross-frame state
(smoothing history, held values, blend weights), so several engines can
run side by side and a fresh instance always starts from the rest pose.

Per bound bone and frame:

1. Joint bones move to their landmark. Below ``min_part_confidence`` the
   bone keeps its previous pose (hold-last-value).
2. Limb segments rotate by atan2 of the measured segment minus the rig's
   rest angle, normalized to (-pi, pi]. No joint limits are enforced.
3. The head follows the face center and the eye-line angle. Facial bones
   follow their control point; eyes and mouth carry their blend weight
   in scale y.
4. Every component is smoothed exponentially against the previous output.
   A bone's first sample after a reset is used raw.
5. Draw order comes from DrawOrderPolicy for every bone, held or not.

Unbound bones copy their parent's transform; an unbound root stays at rest.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Mapping, Optional, Set, Tuple

from puppet.posedetector.frames import FaceFrame, Landmark, PoseFrame
from puppet.retargeting.config import EngineConfig
from puppet.retargeting.face_blend import (
    FaceCalibration,
    compute_blend_weights,
    eye_line_angle,
    face_center,
    facial_bone_anchors,
)
from puppet.retargeting.facing import FacingDirection, detect_facing_from_pose
from puppet.retargeting.layering import DrawOrderPolicy
from puppet.retargeting.smoothing import ExponentialSmoother
from puppet.retargeting.transforms import BoneTransform, FrameTransforms, normalize_angle
from puppet.rig.skeleton import Skeleton
from puppet.shared.constants import (
    BLEND_NAMES,
    FACE_BONE_ROLES,
    HEAD_ROLE,
    LIMB_SEGMENTS,
    POSE_PART_TO_INDEX,
)

logger = logging.getLogger(__name__)

# (translation, rotation, scale) computed from this frame's data
Target = Tuple[Tuple[float, float], float, Tuple[float, float]]

NEUTRAL_BLEND_WEIGHTS = {
    "leftEyeOpen": 1.0,
    "rightEyeOpen": 1.0,
    "mouthOpen": 0.0,
    "leftBrowRaise": 0.0,
    "rightBrowRaise": 0.0,
}


class PoseIllustration:
    """Retargets a stream of PoseFrames onto one skeleton."""

    def __init__(
        self,
        skeleton: Skeleton,
        config: Optional[EngineConfig] = None,
        calibration: Optional[FaceCalibration] = None,
    ) -> None:
        self.skeleton = skeleton
        self.config = config or EngineConfig.default()
        self.calibration = calibration or self.config.face_calibration()
        self._smoother = ExponentialSmoother(self.config.smoothing_factor)
        self._layering = DrawOrderPolicy(skeleton, self.config.crossing_margin)
        self.reset()

    # --- State ---

    def reset(self) -> None:
        """Drop smoothing history and held values; the next frame is used raw."""
        self._previous: Dict[int, BoneTransform] = {}
        self._tracked: Set[int] = set()
        self._blend_weights: Dict[str, float] = dict(NEUTRAL_BLEND_WEIGHTS)
        self._facing = FacingDirection.FRONTAL
        self._frame_index = 0
        self._last: Optional[FrameTransforms] = None

    def calibrate_face(self, face: FaceFrame) -> FaceCalibration:
        """Use a neutral face as the rest reference for eye and brow weights."""
        self.calibration = FaceCalibration.from_neutral_face(
            face, mouth_open_ratio=self.calibration.mouth_open_ratio
        )
        logger.info(
            f"Face calibrated: eye ratio {self.calibration.eye_open_ratio:.3f}, "
            f"brow ratio {self.calibration.brow_rest_ratio:.3f}"
        )
        return self.calibration

    def rest_transform(self, bone_id: int) -> BoneTransform:
        bone = self.skeleton.bone(bone_id)
        return BoneTransform(translation=bone.rest_world.position, order=bone.base_order)

    def current(self) -> FrameTransforms:
        """Latest output; the rest pose before the first frame."""
        if self._last is None:
            base_orders = {bone.bone_id: bone.base_order for bone in self.skeleton.bones}
            self._last = self._compose({}, base_orders, commit=False)
        return self._last

    # --- Per frame ---

    def update(self, frame: Optional[PoseFrame]) -> FrameTransforms:
        """Process one frame. ``None`` (no subject) leaves all state unchanged."""
        if frame is None:
            return self.current()

        cfg = self.config
        body_ok = frame.has_pose and frame.score >= cfg.min_pose_confidence
        joints: Mapping[str, Landmark] = frame.joints if body_ok else {}
        if frame.has_pose and not body_ok:
            logger.debug(
                f"Pose score {frame.score:.2f} below {cfg.min_pose_confidence}; "
                "holding body bones"
            )

        facing = None
        if body_ok:
            facing = detect_facing_from_pose(joints, frame.width, cfg.min_part_confidence)
            if facing is not None:
                self._facing = facing

        if frame.face is not None:
            self._blend_weights = compute_blend_weights(frame.face, self.calibration)

        targets = self._targets(frame, joints)
        orders = self._layering.resolve(joints, facing, cfg.min_part_confidence)

        self._frame_index += 1
        return self._compose(targets, orders, commit=True)

    def _compose(
        self,
        targets: Dict[int, Target],
        orders: Dict[int, int],
        commit: bool,
    ) -> FrameTransforms:
        out: Dict[int, BoneTransform] = {}
        held = 0

        # Ids are in depth-first order, so parents resolve before children
        for bone in self.skeleton.bones:
            bone_id = bone.bone_id
            if bone.role is not None:
                if bone_id in targets:
                    translation, rotation, scale = targets[bone_id]
                    raw = BoneTransform(
                        translation=translation,
                        rotation=rotation,
                        scale=scale,
                        order=orders[bone_id],
                        confident=True,
                    )
                    if bone_id in self._tracked and bone_id in self._previous:
                        out[bone_id] = self._smoother.smooth(self._previous[bone_id], raw)
                    else:
                        out[bone_id] = raw
                    if commit:
                        self._tracked.add(bone_id)
                elif bone_id in self._previous:
                    # Pose is held; draw order follows this frame so the
                    # bone stays layered with its unbound children
                    out[bone_id] = self._previous[bone_id].held().with_order(orders[bone_id])
                    held += 1
                else:
                    out[bone_id] = self.rest_transform(bone_id).with_order(orders[bone_id])
            elif bone.parent is None:
                out[bone_id] = self.rest_transform(bone_id).with_order(orders[bone_id])
            else:
                parent = out[bone.parent]
                out[bone_id] = BoneTransform(
                    translation=parent.translation,
                    rotation=parent.rotation,
                    scale=parent.scale,
                    order=orders[bone_id],
                    confident=parent.confident,
                )

        result = FrameTransforms(
            transforms=out,
            blend_weights={name: self._blend_weights[name] for name in BLEND_NAMES},
            facing=self._facing,
            frame_index=self._frame_index,
        )
        if commit:
            if held:
                logger.debug(f"Frame {self._frame_index}: holding {held} bones")
            self._previous = out
            self._last = result
        return result

    # --- Targets ---

    def _confident(self, joints: Mapping[str, Landmark], role: str) -> Optional[Landmark]:
        landmark = joints.get(role)
        if landmark is None or landmark.score < self.config.min_part_confidence:
            return None
        return landmark

    def _targets(self, frame: PoseFrame, joints: Mapping[str, Landmark]) -> Dict[int, Target]:
        head = self._head_target(frame, joints)
        head_rotation = head[1] if head is not None else 0.0
        anchors = facial_bone_anchors(frame.face) if frame.face is not None else {}

        targets: Dict[int, Target] = {}
        for role, bone_id in self.skeleton.roles.items():
            if role == HEAD_ROLE:
                target = head
            elif role in LIMB_SEGMENTS:
                target = self._segment_target(role, joints)
            elif role in FACE_BONE_ROLES and role in anchors:
                target = (anchors[role].position, head_rotation, self._facial_scale(role))
            elif role in POSE_PART_TO_INDEX:
                landmark = self._confident(joints, role)
                target = None if landmark is None else (landmark.position, 0.0, (1.0, 1.0))
            else:
                target = None

            if target is not None:
                targets[bone_id] = target
        return targets

    def _segment_target(self, segment: str, joints: Mapping[str, Landmark]) -> Optional[Target]:
        rest_angle = self.skeleton.rest_angle(segment)
        if rest_angle is None:
            return None
        start_role, end_role = LIMB_SEGMENTS[segment]
        start = self._confident(joints, start_role)
        end = self._confident(joints, end_role)
        if start is None or end is None:
            return None
        angle = math.atan2(end.y - start.y, end.x - start.x)
        return (start.position, normalize_angle(angle - rest_angle), (1.0, 1.0))

    def _head_rest_angle(self) -> float:
        rest = self.skeleton.rest_eye_angle
        # Without rigged eyes, assume an upright head facing the viewer
        return 0.0 if rest is None else rest

    def _head_target(self, frame: PoseFrame, joints: Mapping[str, Landmark]) -> Optional[Target]:
        rest = self._head_rest_angle()
        if frame.face is not None:
            center = face_center(frame.face)
            angle = eye_line_angle(frame.face)
            return (center.position, normalize_angle(angle - rest), (1.0, 1.0))

        # Fall back to the body detector's eye joints
        left = self._confident(joints, "leftEye")
        right = self._confident(joints, "rightEye")
        if left is None or right is None:
            return None
        angle = math.atan2(right.y - left.y, right.x - left.x)
        return (left.midpoint(right).position, normalize_angle(angle - rest), (1.0, 1.0))

    def _facial_scale(self, role: str) -> Tuple[float, float]:
        if role == "leftEye":
            return (1.0, self._blend_weights["leftEyeOpen"])
        if role == "rightEye":
            return (1.0, self._blend_weights["rightEyeOpen"])
        if role == "mouth":
            return (1.0, 1.0 + self._blend_weights["mouthOpen"])
        return (1.0, 1.0)
