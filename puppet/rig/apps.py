"""Django app configuration for the rig module."""

from django.apps import AppConfig


class RigConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "puppet.rig"
    verbose_name = "Rig"
