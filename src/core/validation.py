"""Run DRF serializers as payload validators for the service layer."""

from typing import Any, Mapping

from rest_framework import serializers

from .exceptions import ValidationFailed


def validate_payload(
    serializer_class: type[serializers.Serializer],
    payload: Mapping[str, Any] | None,
    *,
    partial: bool = False,
) -> dict[str, Any]:
    """Return validated data or raise ValidationFailed with field-level detail."""

    serializer = serializer_class(data=dict(payload or {}), partial=partial)
    if not serializer.is_valid():
        raise ValidationFailed(serializer.errors)
    return dict(serializer.validated_data)


__all__ = ["validate_payload"]
