"""Bone hierarchy extracted from a rigged illustration.

Bones live in an arena (a list indexed by integer id) with the parent
stored as an index. Ids follow depth-first document order, so a parent's
id is always smaller than its children's and the list can be walked
front to back to resolve parent-before-child.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from puppet.posedetector.frames import FaceFrame, Landmark, as_landmark_array
from puppet.rig.scene_graph import RestTransform, SceneNode, load_svg, parse_svg
from puppet.shared.constants import (
    ALL_ROLES,
    FACE_PART_TO_INDEX,
    LIMB_SEGMENTS,
    REQUIRED_ROLES,
)
from puppet.shared.exceptions import MissingRigError, RigError

logger = logging.getLogger(__name__)

FACE_LANDMARKS_REQUIRED = max(FACE_PART_TO_INDEX.values()) + 1


@dataclass(frozen=True)
class Bone:
    """One node of the rig.

    Attributes:
        bone_id: Index in the skeleton's arena.
        name: Part id from the illustration (generated for anonymous parts).
        parent: Parent bone id, None for the root.
        rest_local: Rest placement relative to the parent.
        rest_world: Rest placement in illustration space.
        role: Semantic role, None for structural/decorative parts.
        base_order: Static draw order (document order, back to front).
    """

    bone_id: int
    name: str
    parent: Optional[int]
    rest_local: RestTransform
    rest_world: RestTransform
    role: Optional[str] = None
    base_order: int = 0


class Skeleton:
    """Immutable bone tree plus role -> bone lookup."""

    def __init__(self, bones: List[Bone], role_to_bone: Dict[str, int]) -> None:
        self._bones: Tuple[Bone, ...] = tuple(bones)
        self._role_to_bone = MappingProxyType(dict(role_to_bone))
        children: Dict[int, List[int]] = {bone.bone_id: [] for bone in bones}
        for bone in bones:
            if bone.parent is not None:
                children[bone.parent].append(bone.bone_id)
        self._children = {k: tuple(v) for k, v in children.items()}
        self._rest_angles = self._compute_rest_angles()

    # --- Construction ---

    @classmethod
    def build(cls, scene_graph: SceneNode) -> "Skeleton":
        """Walk a scene graph and bind semantic roles by part name.

        Raises:
            MissingRigError: If a required role (head, shoulders) is absent.
            RigError: If two parts claim the same role.
        """
        bones: List[Bone] = []
        role_to_bone: Dict[str, int] = {}

        stack: List[Tuple[SceneNode, Optional[int], np.ndarray]] = [
            (scene_graph, None, np.eye(3))
        ]
        while stack:
            node, parent_id, parent_world = stack.pop()
            bone_id = len(bones)
            world = parent_world @ node.transform.to_matrix()
            role = node.name if node.name in ALL_ROLES else None

            if role is not None:
                if role in role_to_bone:
                    raise RigError(
                        f"Role {role!r} is bound twice "
                        f"(bones {role_to_bone[role]} and {bone_id})"
                    )
                role_to_bone[role] = bone_id

            bones.append(
                Bone(
                    bone_id=bone_id,
                    name=node.name or f"part{bone_id}",
                    parent=parent_id,
                    rest_local=node.transform,
                    rest_world=RestTransform.from_matrix(world),
                    role=role,
                    base_order=bone_id,
                )
            )
            # Reversed so children pop in document order
            for child in reversed(node.children):
                stack.append((child, bone_id, world))

        missing = [role for role in REQUIRED_ROLES if role not in role_to_bone]
        if missing:
            raise MissingRigError(missing)

        skeleton = cls(bones, role_to_bone)
        logger.info(
            f"Built skeleton with {len(bones)} bones, "
            f"{len(role_to_bone)} bound roles"
        )
        return skeleton

    @classmethod
    def from_svg(cls, source: Path | str | bytes) -> "Skeleton":
        """Build from an SVG file path or SVG markup."""
        if isinstance(source, bytes) or (
            isinstance(source, str) and source.lstrip().startswith("<")
        ):
            return cls.build(parse_svg(source))
        return cls.build(load_svg(source))

    def _compute_rest_angles(self) -> Dict[str, float]:
        angles: Dict[str, float] = {}
        for segment, (start, end) in LIMB_SEGMENTS.items():
            if segment not in self._role_to_bone:
                continue
            if start not in self._role_to_bone or end not in self._role_to_bone:
                logger.warning(
                    f"Segment {segment!r} needs both {start!r} and {end!r} "
                    "in the rig; it will stay at rest"
                )
                continue
            sx, sy = self.bone(self._role_to_bone[start]).rest_world.position
            ex, ey = self.bone(self._role_to_bone[end]).rest_world.position
            angles[segment] = math.atan2(ey - sy, ex - sx)

        if "leftEye" in self._role_to_bone and "rightEye" in self._role_to_bone:
            lx, ly = self.bone(self._role_to_bone["leftEye"]).rest_world.position
            rx, ry = self.bone(self._role_to_bone["rightEye"]).rest_world.position
            angles["eyeLine"] = math.atan2(ry - ly, rx - lx)
        return angles

    # --- Lookup ---

    @property
    def bones(self) -> Tuple[Bone, ...]:
        return self._bones

    @property
    def roles(self) -> Mapping[str, int]:
        return self._role_to_bone

    def __len__(self) -> int:
        return len(self._bones)

    def bone(self, bone_id: int) -> Bone:
        return self._bones[bone_id]

    def bone_for(self, role: str) -> Optional[int]:
        """Bone id bound to ``role``, or None if this avatar lacks it."""
        return self._role_to_bone.get(role)

    def children(self, bone_id: int) -> Tuple[int, ...]:
        return self._children[bone_id]

    def descendants(self, bone_id: int) -> List[int]:
        """All bones below ``bone_id`` (excluding itself)."""
        found: List[int] = []
        pending = list(self._children[bone_id])
        while pending:
            current = pending.pop()
            found.append(current)
            pending.extend(self._children[current])
        return found

    def rest_angle(self, segment: str) -> Optional[float]:
        """Rest direction of a limb segment, None if it cannot be driven."""
        return self._rest_angles.get(segment)

    @property
    def rest_eye_angle(self) -> Optional[float]:
        """Rest direction of the leftEye -> rightEye line, if both are rigged."""
        return self._rest_angles.get("eyeLine")

    # --- Face mesh projection ---

    @staticmethod
    def to_face_frame(raw_face, width: float, height: float) -> FaceFrame:
        """Project a dense face mesh onto the named facial control points.

        Args:
            raw_face: (N, >=2) normalized face mesh landmarks (x, y[, z]).
            width, height: Image size used to scale into pixel space.

        Raises:
            InsufficientLandmarksError: If N is not larger than the highest
                index in the face index table.
        """
        arr = as_landmark_array(
            raw_face, "face", required=FACE_LANDMARKS_REQUIRED, min_columns=2
        )
        has_depth = arr.shape[1] >= 3
        points = {
            name: Landmark(
                x=float(arr[index, 0]) * width,
                y=float(arr[index, 1]) * height,
                z=float(arr[index, 2]) if has_depth else None,
                score=1.0,
            )
            for name, index in FACE_PART_TO_INDEX.items()
        }
        return FaceFrame(points)
