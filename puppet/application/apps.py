"""Django app configuration for the pose animator application layer."""

from django.apps import AppConfig


class ApplicationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "puppet.application"
    verbose_name = "Pose Animator"
