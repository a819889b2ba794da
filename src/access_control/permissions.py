"""Role and ownership rules gating article visibility and content mutation.

This module is the only place that compares roles. Services ask the policy a
question and raise ``PermissionDenied`` themselves through ``ensure``.
"""

import logging
import uuid
from dataclasses import dataclass

from core.exceptions import PermissionDenied, ValidationFailed
from .models import Role

logger = logging.getLogger(__name__)

_PRIVILEGED = frozenset({Role.ADMIN, Role.EDITOR})


@dataclass(frozen=True)
class Caller:
    """Identity and role of whoever is invoking a service method."""

    id: uuid.UUID | None = None
    role: Role = Role.ANONYMOUS

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", Role.parse(self.role))
        if self.id is not None and not isinstance(self.id, uuid.UUID):
            try:
                object.__setattr__(self, "id", uuid.UUID(str(self.id)))
            except ValueError:
                raise ValidationFailed({"id": [f"'{self.id}' is not a valid UUID."]})

    @classmethod
    def anonymous(cls) -> "Caller":
        return cls()


class VisibilityPolicy:
    """Answer who may see and change knowledge-base content."""

    @staticmethod
    def is_privileged(role: Role) -> bool:
        return Role.parse(role) in _PRIVILEGED

    def can_view(self, article, role: Role | None) -> bool:
        """Published articles are public; drafts are visible to admins and editors only."""
        return bool(article.is_published) or self.is_privileged(role)

    def can_view_unpublished(self, role: Role | None) -> bool:
        return self.is_privileged(role)

    def can_create_article(self, role: Role | None) -> bool:
        return self.is_privileged(role)

    def can_mutate(self, article, caller: Caller) -> bool:
        """Admins and editors may change any article; others only their own."""
        if self.is_privileged(caller.role):
            return True
        return caller.id is not None and article.author_id == caller.id

    @staticmethod
    def can_manage_hierarchy(role: Role | None) -> bool:
        return Role.parse(role) == Role.ADMIN

    @staticmethod
    def ensure(allowed: bool, message: str | None = None) -> None:
        """Raise PermissionDenied unless ``allowed``."""
        if not allowed:
            logger.warning("Permission denied: %s", message or "policy check failed")
            raise PermissionDenied(message)


visibility_policy = VisibilityPolicy()

__all__ = ["Caller", "VisibilityPolicy", "visibility_policy"]
