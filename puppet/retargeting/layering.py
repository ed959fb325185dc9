"""Draw-order resolution for the puppet.

The rig's document order is the static layering (e.g. the far arm sits
behind the torso). Two dynamic overrides approximate depth, since the
detector gives no usable ground-truth depth:

- Crossing: when a wrist passes the torso centerline (midpoint of the
  shoulders) and ends up on the opposite side from its own shoulder by
  more than ``crossing_margin * shoulder_width``, that arm and every part
  hanging below it is drawn in front of all other parts.
- Facing away: when the shoulder order says the subject shows their back,
  both arms are drawn behind all other parts.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Set

from puppet.posedetector.frames import Landmark
from puppet.retargeting.facing import FacingDirection
from puppet.rig.skeleton import Skeleton
from puppet.shared.constants import ARM_ROLES


def wrist_crosses_centerline(
    joints: Mapping[str, Landmark],
    side: str,
    min_confidence: float,
    crossing_margin: float,
) -> bool:
    """Whether the ``side`` wrist is across the torso centerline."""
    names = ("leftShoulder", "rightShoulder", f"{side}Wrist")
    points = [joints.get(name) for name in names]
    if any(p is None or p.score < min_confidence for p in points):
        return False

    left_shoulder, right_shoulder, wrist = points
    center_x = (left_shoulder.x + right_shoulder.x) / 2.0
    shoulder_width = abs(left_shoulder.x - right_shoulder.x)
    own_shoulder = left_shoulder if side == "left" else right_shoulder

    own_side = own_shoulder.x - center_x
    offset = wrist.x - center_x
    if own_side == 0.0:
        return False
    # Opposite side of the centerline and past the margin
    return own_side * offset < 0.0 and abs(offset) > crossing_margin * shoulder_width


class DrawOrderPolicy:
    """Computes per-bone draw-order keys for one skeleton."""

    def __init__(self, skeleton: Skeleton, crossing_margin: float = 0.1) -> None:
        self.skeleton = skeleton
        self.crossing_margin = crossing_margin
        self._span = len(skeleton)
        self._arm_bones: Dict[str, Set[int]] = {}
        for side, roles in ARM_ROLES.items():
            ids: Set[int] = set()
            for role in roles:
                bone_id = skeleton.bone_for(role)
                if bone_id is None:
                    continue
                ids.add(bone_id)
                ids.update(skeleton.descendants(bone_id))
            self._arm_bones[side] = ids

    def arm_bones(self, side: str) -> Set[int]:
        return set(self._arm_bones[side])

    def resolve(
        self,
        joints: Mapping[str, Landmark],
        facing: Optional[FacingDirection],
        min_confidence: float,
    ) -> Dict[int, int]:
        """Draw-order key for every bone (lower is further back)."""
        orders = {bone.bone_id: bone.base_order for bone in self.skeleton.bones}

        if facing is FacingDirection.BACK:
            for side in ("left", "right"):
                for bone_id in self._arm_bones[side]:
                    orders[bone_id] = orders[bone_id] - self._span
            return orders

        for side in ("left", "right"):
            if wrist_crosses_centerline(joints, side, min_confidence, self.crossing_margin):
                for bone_id in self._arm_bones[side]:
                    orders[bone_id] = orders[bone_id] + self._span
        return orders
