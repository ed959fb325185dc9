"""Per-frame landmark containers.

Everything here is immutable: a frame is built once per detector callback
and superseded by the next one.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np

from puppet.shared.exceptions import InsufficientLandmarksError


@dataclass(frozen=True)
class Landmark:
    """A detected point in image pixel space.

    Attributes:
        x, y: Pixel coordinates (x to the right, y down).
        z: Detector depth, unitless and relative; None when unavailable.
        score: Confidence/visibility in [0, 1].
    """

    x: float
    y: float
    z: Optional[float] = None
    score: float = 1.0

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: "Landmark") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def midpoint(self, other: "Landmark") -> "Landmark":
        return Landmark(
            x=(self.x + other.x) / 2.0,
            y=(self.y + other.y) / 2.0,
            z=None if self.z is None or other.z is None else (self.z + other.z) / 2.0,
            score=min(self.score, other.score),
        )


def _freeze(points: Mapping[str, Landmark]) -> Mapping[str, Landmark]:
    return MappingProxyType(dict(points))


@dataclass(frozen=True)
class FaceFrame:
    """Named facial control points projected from the dense face mesh."""

    points: Mapping[str, Landmark] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", _freeze(self.points))

    def get(self, name: str) -> Optional[Landmark]:
        return self.points.get(name)

    def __getitem__(self, name: str) -> Landmark:
        return self.points[name]

    def __contains__(self, name: object) -> bool:
        return name in self.points


@dataclass(frozen=True)
class PoseFrame:
    """Normalized snapshot of all tracked landmarks for one detection cycle.

    Attributes:
        joints: Body joint role -> Landmark, pixel space, in the rig's (mirrored) space.
        face: Facial control points, or None when the face feature was skipped.
        width, height: Source image size in pixels.
        mirrored: Whether x was flipped (otherwise left/right roles were swapped).
        score: Overall pose confidence (mean joint visibility).
    """

    joints: Mapping[str, Landmark]
    face: Optional[FaceFrame]
    width: int
    height: int
    mirrored: bool = False
    score: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "joints", _freeze(self.joints))

    def get(self, role: str) -> Optional[Landmark]:
        return self.joints.get(role)

    @property
    def has_pose(self) -> bool:
        return bool(self.joints)


def as_landmark_array(
    raw,
    kind: str,
    required: int,
    min_columns: int,
) -> np.ndarray:
    """Convert a raw landmark sequence to a float array and check its length.

    Args:
        raw: (N, C) array-like of normalized landmark values.
        kind: Label used in error messages ("pose" or "face").
        required: Minimum number of landmarks the index table references.
        min_columns: Minimum number of values per landmark.

    Raises:
        InsufficientLandmarksError: If fewer than ``required`` landmarks.
        ValueError: If the array does not have the expected 2D shape.
    """
    arr = np.asarray(raw, dtype=float)
    if arr.size == 0:
        raise InsufficientLandmarksError(kind, 0, required)
    if arr.ndim != 2 or arr.shape[1] < min_columns:
        raise ValueError(
            f"Expected (N, >={min_columns}) {kind} landmarks, got shape {arr.shape}"
        )
    if arr.shape[0] < required:
        raise InsufficientLandmarksError(kind, arr.shape[0], required)
    return arr
