"""Errors surfaced to the hosting application."""

from __future__ import annotations


class PuppetError(ValueError):
    """Base class for rig and landmark contract errors."""


class RigError(PuppetError):
    """The illustration cannot be used as a rig."""


class MissingRigError(RigError):
    """A required role is absent from the illustration."""

    def __init__(self, missing: list[str] | tuple[str, ...]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Rig is missing required parts: {', '.join(self.missing)}")


class RigParseError(RigError):
    """The illustration source could not be parsed into a part hierarchy."""


class InsufficientLandmarksError(PuppetError):
    """A landmark array is shorter than its index table requires."""

    def __init__(self, kind: str, received: int, required: int) -> None:
        self.kind = kind
        self.received = received
        self.required = required
        super().__init__(
            f"{kind} landmarks: received {received}, index table needs at least {required}"
        )
