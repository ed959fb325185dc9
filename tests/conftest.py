"""Shared fixtures; Django settings are configured for the API view tests."""

from __future__ import annotations

import os

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "poseanimator.settings")
django.setup()

from puppet.posedetector.frame_builder import PoseFrameBuilder  # noqa: E402
from puppet.retargeting.config import EngineConfig  # noqa: E402
from puppet.rig.skeleton import Skeleton  # noqa: E402

from helpers import HEIGHT, WIDTH, full_rig, minimal_rig  # noqa: E402


@pytest.fixture
def skeleton() -> Skeleton:
    return Skeleton.build(full_rig())


@pytest.fixture
def minimal_skeleton() -> Skeleton:
    return Skeleton.build(minimal_rig())


@pytest.fixture
def builder() -> PoseFrameBuilder:
    return PoseFrameBuilder(WIDTH, HEIGHT, mirror=True)


@pytest.fixture
def raw_config() -> EngineConfig:
    """Engine config with smoothing disabled."""
    return EngineConfig(smoothing_factor=1.0)
