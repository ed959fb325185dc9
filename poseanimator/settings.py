"""Django settings for the pose animator backend."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "replace-me-with-a-secret-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "1") == "1"

ALLOWED_HOSTS = ["*"]

CSRF_TRUSTED_ORIGINS = [
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]

DJANGO_APPS = [
    "django.contrib.staticfiles",
]

LOCAL_APPS = [
    "puppet.application.apps.ApplicationConfig",
    "puppet.api.apps.ApiConfig",
    "puppet.cli.apps.CliConfig",
    "puppet.mediastream.apps.MediastreamConfig",
    "puppet.pipeline.apps.PipelineConfig",
    "puppet.posedetector.apps.PosedetectorConfig",
    "puppet.retargeting.apps.RetargetingConfig",
    "puppet.rig.apps.RigConfig",
    "puppet.visualizedata.apps.VisualizedataConfig",
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "poseanimator.urls"

WSGI_APPLICATION = "poseanimator.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.dummy",
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Retargeting engine tunables (see puppet.retargeting.config.EngineConfig)
POSE_ANIMATOR = {
    "MIN_PART_CONFIDENCE": float(os.environ.get("POSE_ANIMATOR_MIN_PART_CONFIDENCE", "0.1")),
    "MIN_POSE_CONFIDENCE": float(os.environ.get("POSE_ANIMATOR_MIN_POSE_CONFIDENCE", "0.15")),
    "SMOOTHING_FACTOR": float(os.environ.get("POSE_ANIMATOR_SMOOTHING_FACTOR", "0.6")),
    "MIRROR": os.environ.get("POSE_ANIMATOR_MIRROR", "1") == "1",
    "CROSSING_MARGIN": float(os.environ.get("POSE_ANIMATOR_CROSSING_MARGIN", "0.1")),
}

# Avatar loaded by the API on first use (path to an SVG), and the image
# size assumed until a request reports its own
POSE_ANIMATOR_DEFAULT_AVATAR = os.environ.get("POSE_ANIMATOR_DEFAULT_AVATAR") or None
POSE_ANIMATOR_IMAGE_SIZE = (1280, 720)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"console": {"class": "logging.StreamHandler"}},
    "loggers": {
        "puppet": {
            "handlers": ["console"],
            "level": os.environ.get("POSE_ANIMATOR_LOG_LEVEL", "INFO"),
        },
    },
}
