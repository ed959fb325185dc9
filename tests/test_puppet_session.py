"""
Tests for the host-side session: callbacks, avatar switching and calibration.
"""

from __future__ import annotations

import pytest

from puppet.application.services.puppet_session import PuppetSession
from puppet.posedetector.base import DetectorResult
from puppet.retargeting.config import EngineConfig
from puppet.retargeting.illustration import PoseIllustration
from puppet.rig.skeleton import Skeleton
from puppet.shared.exceptions import InsufficientLandmarksError, MissingRigError, PuppetError

from helpers import HEIGHT, SVG_RIG, WIDTH, face_array, full_rig, node, pose_array


@pytest.fixture
def session(skeleton) -> PuppetSession:
    return PuppetSession(skeleton, WIDTH, HEIGHT, EngineConfig(smoothing_factor=0.5))


def test_on_results_returns_complete_transforms(session, skeleton):
    result = session.on_results(pose_array(), face_array())

    assert len(result) == len(skeleton)
    assert result.frame_index == 1
    assert session.last_frame is not None


def test_on_results_without_subject(session):
    first = session.on_results(pose_array(), face_array())

    assert session.on_results(None, face_array()) is first
    assert session.on_results(pose_array(), None) is first
    assert session.last_frame is None
    assert session.current() is first


def test_default_config_comes_from_settings(skeleton):
    session = PuppetSession(skeleton, WIDTH, HEIGHT)
    assert session.config == EngineConfig.from_settings()


def test_on_detection_tracks_image_size(session):
    result = DetectorResult(pose_array(), face_array(), width=1000, height=800)
    session.on_detection(result)

    assert (session.builder.width, session.builder.height) == (1000, 800)
    assert session.last_frame.width == 1000


def test_switch_avatar_resets_engine(session, raw_config):
    """After a switch, the first frame is used raw, with no smoothing history."""
    moved = pose_array({"leftWrist": (0.70, 0.60), "rightElbow": (0.30, 0.50)})
    session.on_results(pose_array(), face_array())
    smoothed = session.on_results(moved, face_array())

    new_skeleton = session.switch_avatar(full_rig())
    after_switch = session.on_results(moved, face_array())

    fresh = PoseIllustration(new_skeleton, raw_config)
    expected = fresh.update(session.builder.build(moved, face_array()))
    assert session.skeleton is new_skeleton
    assert after_switch.transforms == expected.transforms
    assert after_switch.transforms != smoothed.transforms
    assert after_switch.frame_index == 1


def test_switch_to_invalid_avatar_keeps_current(session, skeleton):
    engine = session.engine
    broken = node("illustration", children=[node("leftShoulder"), node("rightShoulder")])

    with pytest.raises(MissingRigError):
        session.switch_avatar(broken)

    assert session.skeleton is skeleton
    assert session.engine is engine


def test_switch_to_a_smaller_rig(session):
    session.on_results(pose_array(), face_array())
    skeleton = session.switch_skeleton(Skeleton.from_svg(SVG_RIG))

    result = session.on_results(pose_array(), face_array())
    assert len(result) == len(skeleton)


def test_reset(session, skeleton):
    session.on_results(pose_array(), face_array())
    session.reset()

    assert session.current().frame_index == 0


def test_calibration_survives_avatar_switch(session):
    squint = face_array(
        {
            "leftEyeTop": (0.57, 0.394),
            "leftEyeBottom": (0.57, 0.406),
            "rightEyeTop": (0.43, 0.394),
            "rightEyeBottom": (0.43, 0.406),
        }
    )
    calibration = session.calibrate_face(squint)
    assert calibration.eye_open_ratio == pytest.approx(0.2)

    session.switch_avatar(full_rig())
    result = session.on_results(pose_array(), squint)
    assert result.blend_weights["leftEyeOpen"] == pytest.approx(1.0)


def test_calibrate_with_short_face(session):
    engine = session.engine
    before = session.current()

    with pytest.raises(InsufficientLandmarksError):
        session.calibrate_face(face_array(count=10))

    assert session.engine is engine
    assert session.current() is before


def test_calibrate_with_degenerate_face(session):
    collapsed = face_array()
    collapsed[:, :2] = 0.5

    with pytest.raises(PuppetError):
        session.calibrate_face(collapsed)
