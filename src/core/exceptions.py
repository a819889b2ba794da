"""Typed failures raised by the knowledge-base services and stores.

Outer layers (HTTP handlers, management commands) translate these into their
own envelopes using ``status_code``; the core never formats responses.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from django.db import DatabaseError, IntegrityError


class KnowledgeBaseError(Exception):
    """Base class for every failure the knowledge-base core reports."""

    status_code = 500
    default_message = "Knowledge base error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(KnowledgeBaseError):
    """An entity, id, or slug does not exist."""

    status_code = 404
    default_message = "Resource not found."


class PermissionDenied(KnowledgeBaseError):
    """The caller's role or ownership does not allow the operation."""

    status_code = 403
    default_message = "You do not have permission to perform this action on this resource."


class ValidationFailed(KnowledgeBaseError):
    """Payload failed validation; ``errors`` maps field names to messages."""

    status_code = 400
    default_message = "Validation failed."

    def __init__(self, errors: dict[str, Any], message: str | None = None):
        super().__init__(message)
        self.errors = _normalize_errors(errors)


class Conflict(KnowledgeBaseError):
    """A unique constraint was violated (e.g. duplicate slug)."""

    status_code = 409
    default_message = "Conflict occurred."


class Unavailable(KnowledgeBaseError):
    """The database could not serve the request."""

    status_code = 503
    default_message = "Service temporarily unavailable."


def _normalize_errors(payload: Any) -> dict[str, list[str]]:
    """Flatten DRF-style error detail into ``{field: [message, ...]}``."""

    if isinstance(payload, dict):
        normalized: dict[str, list[str]] = {}
        for field, detail in payload.items():
            if isinstance(detail, dict):
                # Nested serializer errors, e.g. tags.0.name
                for sub_field, messages in _normalize_errors(detail).items():
                    normalized[f"{field}.{sub_field}"] = messages
            elif isinstance(detail, (list, tuple)):
                messages: list[str] = []
                for index, item in enumerate(detail):
                    if isinstance(item, dict):
                        for sub_field, sub_messages in _normalize_errors(item).items():
                            normalized[f"{field}.{index}.{sub_field}"] = sub_messages
                    else:
                        messages.append(str(item))
                if messages:
                    normalized[str(field)] = messages
            else:
                normalized[str(field)] = [str(detail)]
        return normalized
    if isinstance(payload, (list, tuple)):
        return {"non_field_errors": [str(item) for item in payload]}
    return {"non_field_errors": [str(payload)]}


@contextmanager
def translate_database_errors(conflict_message: str) -> Iterator[None]:
    """Surface integrity violations as Conflict and outages as Unavailable."""

    try:
        yield
    except IntegrityError as exc:
        raise Conflict(conflict_message) from exc
    except DatabaseError as exc:
        raise Unavailable() from exc


__all__ = [
    "KnowledgeBaseError",
    "NotFound",
    "PermissionDenied",
    "ValidationFailed",
    "Conflict",
    "Unavailable",
    "translate_database_errors",
]
