"""Django app configuration for the HTTP API."""

from django.apps import AppConfig


class ApiConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "puppet.api"
    verbose_name = "Pose Animator API"
