"""HTTP API endpoints for driving the puppet frame by frame."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from puppet.application.dto.frame_request import FrameRequestData
from puppet.application.services.puppet_session import PuppetSession
from puppet.posedetector.base import DetectorResult
from puppet.retargeting.config import EngineConfig
from puppet.rig.skeleton import Skeleton
from puppet.shared.exceptions import PuppetError

logger = logging.getLogger(__name__)


class SessionHolder:
    """Lazily created session shared by the API views."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._session: Optional[PuppetSession] = None

    def get(self) -> Optional[PuppetSession]:
        with self._lock:
            if self._session is None:
                avatar = getattr(settings, "POSE_ANIMATOR_DEFAULT_AVATAR", None)
                if avatar:
                    try:
                        skeleton = Skeleton.from_svg(avatar)
                    except (PuppetError, OSError) as exc:
                        logger.error(f"Default avatar {avatar!r} could not be loaded: {exc}")
                        return None
                    self._session = self._create(skeleton)
            return self._session

    def load(self, skeleton: Skeleton) -> PuppetSession:
        with self._lock:
            if self._session is None:
                self._session = self._create(skeleton)
            else:
                self._session.switch_skeleton(skeleton)
            return self._session

    def clear(self) -> None:
        with self._lock:
            self._session = None

    @staticmethod
    def _create(skeleton: Skeleton) -> PuppetSession:
        width, height = getattr(settings, "POSE_ANIMATOR_IMAGE_SIZE", (1280, 720))
        return PuppetSession(skeleton, width, height, EngineConfig.from_settings())


_SESSIONS = SessionHolder()


def _json_error(message: str | list[str], status: int = 400) -> JsonResponse:
    payload = {"errors": message if isinstance(message, list) else [message]}
    return JsonResponse(payload, status=status)


def _skeleton_payload(skeleton: Skeleton) -> dict:
    return {
        "bones": [
            {
                "id": bone.bone_id,
                "name": bone.name,
                "parent": bone.parent,
                "role": bone.role,
                "rest": {
                    "translation": list(bone.rest_world.position),
                    "rotation": bone.rest_world.rotation,
                    "scale": [bone.rest_world.scale_x, bone.rest_world.scale_y],
                },
            }
            for bone in skeleton.bones
        ],
        "roles": dict(skeleton.roles),
    }


def _no_avatar() -> JsonResponse:
    return _json_error("No avatar loaded. POST an SVG illustration to /api/avatar/.", status=409)


@method_decorator(csrf_exempt, name="dispatch")
class AvatarView(View):
    """Inspect or switch the active avatar."""

    def get(self, request: HttpRequest) -> HttpResponse:
        session = _SESSIONS.get()
        if session is None:
            return _no_avatar()
        return JsonResponse(_skeleton_payload(session.skeleton))

    def post(self, request: HttpRequest) -> HttpResponse:
        if not request.body:
            return _json_error("Request body must contain SVG markup.")
        try:
            skeleton = Skeleton.from_svg(request.body)
        except PuppetError as exc:
            logger.warning(f"Rejected avatar: {exc}")
            return _json_error(str(exc))

        session = _SESSIONS.load(skeleton)
        return JsonResponse(_skeleton_payload(session.skeleton), status=201)


@method_decorator(csrf_exempt, name="dispatch")
class FrameView(View):
    """Retarget one detector result and return the transform set."""

    def post(self, request: HttpRequest) -> HttpResponse:
        session = _SESSIONS.get()
        if session is None:
            return _no_avatar()
        try:
            data = FrameRequestData.from_django_request(request)
        except ValueError as exc:
            return _json_error(str(exc))

        result = DetectorResult(
            pose_landmarks=data.pose_landmarks,
            face_landmarks=data.face_landmarks,
            width=data.width or session.builder.width,
            height=data.height or session.builder.height,
        )
        transforms = session.on_detection(result)
        payload = transforms.to_dict()
        payload["updated"] = result.has_subject
        return JsonResponse(payload)


@method_decorator(csrf_exempt, name="dispatch")
class CalibrateView(View):
    """Use the posted face as the neutral expression."""

    def post(self, request: HttpRequest) -> HttpResponse:
        session = _SESSIONS.get()
        if session is None:
            return _no_avatar()
        try:
            data = FrameRequestData.from_django_request(request)
            if data.face_landmarks is None:
                return _json_error("face_landmarks is required.")
            calibration = session.calibrate_face(data.face_landmarks)
        except ValueError as exc:
            return _json_error(str(exc))

        return JsonResponse(
            {
                "eye_open_ratio": calibration.eye_open_ratio,
                "mouth_open_ratio": calibration.mouth_open_ratio,
                "brow_rest_ratio": calibration.brow_rest_ratio,
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class ResetView(View):
    """Drop held values and smoothing history."""

    def post(self, request: HttpRequest) -> HttpResponse:
        session = _SESSIONS.get()
        if session is None:
            return _no_avatar()
        session.reset()
        return JsonResponse({"reset": True})
