"""Caller roles recognised by the visibility policy."""

from django.db import models


class Role(models.TextChoices):
    """Role supplied by the session collaborator for each call."""

    ADMIN = "admin", "Admin"
    EDITOR = "editor", "Editor"
    ANONYMOUS = "anonymous", "Anonymous"

    @classmethod
    def parse(cls, raw) -> "Role":
        """Map a raw role value to a Role; unknown or missing values are anonymous."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.ANONYMOUS


__all__ = ["Role"]
