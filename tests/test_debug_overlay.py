"""
Tests for the detection debug overlay.
"""

from __future__ import annotations

import numpy as np

from puppet.posedetector.frames import Landmark, PoseFrame
from puppet.retargeting.transforms import BoneTransform, FrameTransforms
from puppet.visualizedata.debug_overlay import (
    BONE_COLOR,
    KEYPOINT_COLOR,
    render_debug_frame,
)


def _image() -> np.ndarray:
    image = np.zeros((40, 60, 3), dtype=np.uint8)
    image[5, 2] = (10, 20, 30)
    return image


def _frame(**joints) -> PoseFrame:
    return PoseFrame(joints=joints, face=None, width=60, height=40, mirrored=True, score=0.9)


def test_mirrored_render_flips_a_copy():
    image = _image()
    out = render_debug_frame(image, None, None, 0.1, mirrored=True)

    assert out.shape == image.shape
    assert tuple(out[5, 57]) == (10, 20, 30)
    assert tuple(out[5, 2]) == (0, 0, 0)
    # Input untouched
    assert tuple(image[5, 2]) == (10, 20, 30)


def test_unmirrored_render_without_data_is_a_plain_copy():
    image = _image()
    out = render_debug_frame(image, None, None, 0.1, mirrored=False)

    assert out is not image
    assert np.array_equal(out, image)


def test_keypoints_below_confidence_are_skipped():
    frame = _frame(
        nose=Landmark(20.0, 20.0, score=0.9),
        leftWrist=Landmark(45.0, 30.0, score=0.01),
    )
    out = render_debug_frame(np.zeros((40, 60, 3), dtype=np.uint8), frame, None, 0.1, mirrored=False)

    assert tuple(out[20, 20]) == KEYPOINT_COLOR
    assert not out[30, 45].any()


def test_bone_origins_are_marked():
    transforms = FrameTransforms(transforms={0: BoneTransform(translation=(30.0, 10.0))})
    out = render_debug_frame(np.zeros((40, 60, 3), dtype=np.uint8), None, transforms, 0.1)

    assert tuple(out[10, 30]) == BONE_COLOR
    assert not out[30, 10].any()
