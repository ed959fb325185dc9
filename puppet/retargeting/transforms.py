"""Per-frame engine output."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from puppet.retargeting.facing import FacingDirection


def normalize_angle(angle: float) -> float:
    """Wrap an angle in radians to (-pi, pi]."""
    wrapped = math.remainder(angle, math.tau)
    if wrapped <= -math.pi:
        wrapped += math.tau
    return wrapped


@dataclass(frozen=True)
class BoneTransform:
    """Pose of one bone for one frame.

    Attributes:
        translation: Bone origin in image pixel space.
        rotation: Rotation relative to the rest pose, radians in (-pi, pi].
        scale: Non-uniform scale relative to the rest pose.
        order: Draw-order key, lower is drawn first (further back).
        confident: Whether fresh, confident data drove the bone this frame.
            Not part of equality: a held bone equals its previous value.
    """

    translation: Tuple[float, float]
    rotation: float = 0.0
    scale: Tuple[float, float] = (1.0, 1.0)
    order: int = 0
    confident: bool = field(default=False, compare=False)

    def with_order(self, order: int) -> "BoneTransform":
        return BoneTransform(
            translation=self.translation,
            rotation=self.rotation,
            scale=self.scale,
            order=order,
            confident=self.confident,
        )

    def held(self) -> "BoneTransform":
        """Same pose, flagged as not refreshed this frame."""
        return BoneTransform(
            translation=self.translation,
            rotation=self.rotation,
            scale=self.scale,
            order=self.order,
            confident=False,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "translation": list(self.translation),
            "rotation": self.rotation,
            "scale": list(self.scale),
            "order": self.order,
            "confident": self.confident,
        }


@dataclass(frozen=True)
class FrameTransforms:
    """Complete transform set for one frame, consumed by the renderer."""

    transforms: Dict[int, BoneTransform]
    blend_weights: Dict[str, float] = field(default_factory=dict)
    facing: FacingDirection = FacingDirection.FRONTAL
    frame_index: int = 0

    def __getitem__(self, bone_id: int) -> BoneTransform:
        return self.transforms[bone_id]

    def __len__(self) -> int:
        return len(self.transforms)

    def draw_sequence(self) -> list[int]:
        """Bone ids sorted back to front."""
        return sorted(self.transforms, key=lambda bone_id: (self.transforms[bone_id].order, bone_id))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame_index": self.frame_index,
            "facing": self.facing.name.lower(),
            "blend_weights": dict(self.blend_weights),
            "bones": {str(bone_id): t.to_dict() for bone_id, t in self.transforms.items()},
        }
