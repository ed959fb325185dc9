"""Tunable constants of the retargeting engine."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, fields
from typing import Any, Mapping

from puppet.retargeting.face_blend import FaceCalibration


@dataclass(frozen=True)
class EngineConfig:
    """Fixed configuration for one engine instance.

    Attributes:
        min_part_confidence: Joints scoring below this hold their last value.
        min_pose_confidence: Frames whose mean joint score is below this
            hold every body bone.
        smoothing_factor: Weight of the new sample in exponential smoothing,
            in (0, 1]; 1 disables smoothing.
        mirror: Flip x so the puppet moves like a mirror image.
        crossing_margin: Fraction of shoulder width a wrist must pass the
            torso centerline by before its arm is drawn in front.
        eye_open_ratio, mouth_open_ratio, brow_rest_ratio: Default face
            calibration (see FaceCalibration).
    """

    min_part_confidence: float = 0.1
    min_pose_confidence: float = 0.15
    smoothing_factor: float = 0.6
    mirror: bool = True
    crossing_margin: float = 0.1
    eye_open_ratio: float = 0.28
    mouth_open_ratio: float = 0.6
    brow_rest_ratio: float = 0.08

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for name in ("min_part_confidence", "min_pose_confidence"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if not 0.0 < self.smoothing_factor <= 1.0:
            raise ValueError(
                f"smoothing_factor must be in (0, 1], got {self.smoothing_factor}"
            )
        if self.crossing_margin < 0.0:
            raise ValueError(f"crossing_margin must be >= 0, got {self.crossing_margin}")
        # Validates the ratios
        self.face_calibration()

    def face_calibration(self) -> FaceCalibration:
        return FaceCalibration(
            eye_open_ratio=self.eye_open_ratio,
            mouth_open_ratio=self.mouth_open_ratio,
            brow_rest_ratio=self.brow_rest_ratio,
        )

    @classmethod
    def default(cls) -> EngineConfig:
        return cls()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EngineConfig:
        """Create from a mapping with upper- or lower-case field names.

        Raises:
            ValueError: On unknown keys or out-of-range values.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = key.lower()
            if name not in known:
                raise ValueError(f"Unknown engine setting: {key}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_settings(cls) -> EngineConfig:
        """Read ``settings.POSE_ANIMATOR``; defaults when Django is not configured."""
        from django.conf import settings

        if not settings.configured:
            return cls.default()
        return cls.from_mapping(getattr(settings, "POSE_ANIMATOR", {}))

    def replace(self, **changes: Any) -> EngineConfig:
        """Copy with ``changes`` applied; validated like a new instance."""
        return dataclasses.replace(self, **changes)
