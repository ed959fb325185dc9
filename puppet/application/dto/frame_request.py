"""DTO for detector results posted to the API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
from django.http import HttpRequest


@dataclass(frozen=True)
class FrameRequestData:
    """One detector callback as received over HTTP."""

    pose_landmarks: Optional[np.ndarray]
    face_landmarks: Optional[np.ndarray]
    width: Optional[int]
    height: Optional[int]

    @classmethod
    def from_payload(cls, payload: Any) -> "FrameRequestData":
        """Parse a decoded JSON body.

        Raises:
            ValueError: If the body is not an object or fields are malformed.
        """
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object.")

        def _array(key: str) -> Optional[np.ndarray]:
            value = payload.get(key)
            if value is None:
                return None
            try:
                return np.asarray(value, dtype=float)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{key} must be a list of numeric rows.") from exc

        def _size(key: str) -> Optional[int]:
            value = payload.get(key)
            if value is None:
                return None
            try:
                size = int(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{key} must be an integer.") from exc
            if size <= 0:
                raise ValueError(f"{key} must be positive.")
            return size

        return cls(
            pose_landmarks=_array("pose_landmarks"),
            face_landmarks=_array("face_landmarks"),
            width=_size("width"),
            height=_size("height"),
        )

    @classmethod
    def from_django_request(cls, request: HttpRequest) -> "FrameRequestData":
        try:
            payload = json.loads(request.body or b"{}")
        except json.JSONDecodeError as exc:
            raise ValueError(f"Request body is not valid JSON: {exc.msg}") from exc
        return cls.from_payload(payload)
