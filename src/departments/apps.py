"""App configuration for the department/category hierarchy."""

from django.apps import AppConfig


class DepartmentsConfig(AppConfig):
    """Departments app owns Department and Category."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "departments"
