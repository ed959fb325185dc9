"""Django app configuration for the retargeting module."""

from django.apps import AppConfig


class RetargetingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "puppet.retargeting"
    verbose_name = "Retargeting"
