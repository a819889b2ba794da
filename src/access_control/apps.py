"""App configuration for the access_control Django application."""

from django.apps import AppConfig


class AccessControlConfig(AppConfig):
    """Roles and the visibility policy shared by the content services."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "access_control"
