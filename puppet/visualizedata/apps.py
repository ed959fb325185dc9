"""Django app configuration for the debug visualization module."""

from django.apps import AppConfig


class VisualizedataConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "puppet.visualizedata"
    verbose_name = "Debug Visualization"
