"""Django app configuration for CLI commands."""

from django.apps import AppConfig


class CliConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "puppet.cli"
    verbose_name = "Pose Animator CLI"
