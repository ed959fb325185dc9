"""Exponential smoothing of bone transforms."""

from __future__ import annotations

from puppet.retargeting.transforms import BoneTransform, normalize_angle


def _lerp(prev: float, raw: float, factor: float) -> float:
    return prev + factor * (raw - prev)


class ExponentialSmoother:
    """Low-pass filter applied against the previous frame's output.

    ``factor`` is the weight of the new sample: 1.0 passes raw values
    through, smaller values smooth more. Angles move along the shortest
    arc so a wrap at +-pi does not spin the bone.
    """

    def __init__(self, factor: float) -> None:
        if not 0.0 < factor <= 1.0:
            raise ValueError(f"Smoothing factor must be in (0, 1], got {factor}")
        self.factor = float(factor)

    def smooth_angle(self, prev: float, raw: float) -> float:
        return normalize_angle(prev + self.factor * normalize_angle(raw - prev))

    def smooth_value(self, prev: float, raw: float) -> float:
        return _lerp(prev, raw, self.factor)

    def smooth(self, prev: BoneTransform, raw: BoneTransform) -> BoneTransform:
        if self.factor == 1.0:
            return raw
        return BoneTransform(
            translation=(
                _lerp(prev.translation[0], raw.translation[0], self.factor),
                _lerp(prev.translation[1], raw.translation[1], self.factor),
            ),
            rotation=self.smooth_angle(prev.rotation, raw.rotation),
            scale=(
                _lerp(prev.scale[0], raw.scale[0], self.factor),
                _lerp(prev.scale[1], raw.scale[1], self.factor),
            ),
            order=raw.order,
            confident=raw.confident,
        )
