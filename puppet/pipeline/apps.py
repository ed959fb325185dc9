"""Django app configuration for the animation pipeline module."""

from django.apps import AppConfig


class PipelineConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "puppet.pipeline"
    verbose_name = "Animation Pipeline"
