"""Django app configuration for the media stream module."""

from django.apps import AppConfig


class MediastreamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "puppet.mediastream"
    verbose_name = "Media Stream"
