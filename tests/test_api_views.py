"""
Tests for the HTTP API views.
"""

from __future__ import annotations

import json

import pytest
from django.test import RequestFactory, override_settings

from puppet.api import views

from helpers import SVG_RIG, face_array, pose_array


@pytest.fixture(autouse=True)
def fresh_sessions():
    views._SESSIONS.clear()
    yield
    views._SESSIONS.clear()


@pytest.fixture
def rf() -> RequestFactory:
    return RequestFactory()


def _load_avatar(rf, markup=SVG_RIG):
    request = rf.post("/api/avatar/", data=markup, content_type="image/svg+xml")
    return views.AvatarView.as_view()(request)


def _post_json(rf, view, path, payload):
    request = rf.post(path, data=json.dumps(payload), content_type="application/json")
    return view.as_view()(request)


def _frame_payload(**overrides):
    payload = {
        "pose_landmarks": pose_array().tolist(),
        "face_landmarks": face_array().tolist(),
        "width": 640,
        "height": 480,
    }
    payload.update(overrides)
    return payload


def test_no_avatar_loaded(rf):
    response = views.AvatarView.as_view()(rf.get("/api/avatar/"))
    assert response.status_code == 409

    response = _post_json(rf, views.FrameView, "/api/frames/", _frame_payload())
    assert response.status_code == 409


def test_load_avatar(rf):
    response = _load_avatar(rf)
    payload = json.loads(response.content)

    assert response.status_code == 201
    assert len(payload["bones"]) == 12
    assert set(payload["roles"]) >= {"head", "leftShoulder", "rightShoulder"}

    response = views.AvatarView.as_view()(rf.get("/api/avatar/"))
    assert response.status_code == 200
    assert json.loads(response.content)["roles"] == payload["roles"]


def test_reject_avatar_missing_required_part(rf):
    response = _load_avatar(rf, SVG_RIG.replace('id="head"', 'id="face"'))
    payload = json.loads(response.content)

    assert response.status_code == 400
    assert "head" in payload["errors"][0]


def test_reject_invalid_svg(rf):
    assert _load_avatar(rf, "<svg><g></svg>").status_code == 400
    assert _load_avatar(rf, "").status_code == 400


def test_post_frame(rf):
    _load_avatar(rf)
    response = _post_json(rf, views.FrameView, "/api/frames/", _frame_payload())
    payload = json.loads(response.content)

    assert response.status_code == 200
    assert payload["updated"] is True
    assert payload["frame_index"] == 1
    assert payload["facing"] == "frontal"
    assert len(payload["bones"]) == 12
    assert set(payload["blend_weights"]) == {
        "leftEyeOpen",
        "rightEyeOpen",
        "mouthOpen",
        "leftBrowRaise",
        "rightBrowRaise",
    }


def test_post_frame_without_subject(rf):
    _load_avatar(rf)
    response = _post_json(rf, views.FrameView, "/api/frames/", _frame_payload(pose_landmarks=None))
    payload = json.loads(response.content)

    assert response.status_code == 200
    assert payload["updated"] is False
    assert payload["frame_index"] == 0


def test_post_frame_with_malformed_body(rf):
    _load_avatar(rf)
    request = rf.post("/api/frames/", data="not json", content_type="application/json")
    assert views.FrameView.as_view()(request).status_code == 400

    response = _post_json(rf, views.FrameView, "/api/frames/", _frame_payload(width=-5))
    assert response.status_code == 400
    assert json.loads(response.content)["errors"] == ["width must be positive."]


def test_calibrate_and_reset(rf):
    _load_avatar(rf)

    response = _post_json(rf, views.CalibrateView, "/api/calibrate/", _frame_payload())
    assert response.status_code == 200
    assert json.loads(response.content)["eye_open_ratio"] > 0

    response = _post_json(
        rf, views.CalibrateView, "/api/calibrate/", _frame_payload(face_landmarks=None)
    )
    assert response.status_code == 400

    response = _post_json(
        rf, views.CalibrateView, "/api/calibrate/", _frame_payload(face_landmarks=[[0.5, 0.5]])
    )
    assert response.status_code == 400

    response = views.ResetView.as_view()(rf.post("/api/reset/"))
    assert response.status_code == 200
    assert json.loads(response.content) == {"reset": True}


def test_switching_avatar_keeps_session(rf):
    _load_avatar(rf)
    _post_json(rf, views.FrameView, "/api/frames/", _frame_payload())

    assert _load_avatar(rf).status_code == 201
    response = _post_json(rf, views.FrameView, "/api/frames/", _frame_payload())
    assert json.loads(response.content)["frame_index"] == 1


@pytest.mark.parametrize("content", [None, "<svg><g id='torso'"])
def test_unusable_default_avatar_means_no_avatar(rf, tmp_path, content):
    """A missing or broken default avatar is logged and reported as 409."""
    avatar = tmp_path / "default.svg"
    if content is not None:
        avatar.write_text(content, encoding="utf-8")

    with override_settings(POSE_ANIMATOR_DEFAULT_AVATAR=str(avatar)):
        response = views.AvatarView.as_view()(rf.get("/api/avatar/"))
        assert response.status_code == 409

        response = _post_json(rf, views.FrameView, "/api/frames/", _frame_payload())
        assert response.status_code == 409


def test_default_avatar_is_loaded_on_first_use(rf, tmp_path):
    avatar = tmp_path / "default.svg"
    avatar.write_text(SVG_RIG, encoding="utf-8")

    with override_settings(POSE_ANIMATOR_DEFAULT_AVATAR=str(avatar)):
        response = views.AvatarView.as_view()(rf.get("/api/avatar/"))

    assert response.status_code == 200
    assert len(json.loads(response.content)["bones"]) == 12
