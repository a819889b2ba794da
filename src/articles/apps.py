"""App configuration for articles and their tags."""

from django.apps import AppConfig


class ArticlesConfig(AppConfig):
    """Articles app owns Article, Tag, search, and tag reconciliation."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "articles"
