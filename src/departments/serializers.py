"""Payload validation for department and category writes."""

from rest_framework import serializers

from core.slugs import slug_service


class DepartmentFormSerializer(serializers.Serializer):
    """Department fields editors may set; the slug is always derived from the name."""

    name = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    image = serializers.CharField(max_length=2048, required=False, allow_blank=True, allow_null=True)

    @staticmethod
    def validate_name(value):
        """Reject names that leave nothing to build a slug from."""
        if not slug_service.generate(value):
            raise serializers.ValidationError("Name must contain at least one letter or digit.")
        return value


class CategoryFormSerializer(serializers.Serializer):
    """Category fields; the slug is chosen by the editor, not derived."""

    name = serializers.CharField(min_length=2, max_length=100)
    slug = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    department_id = serializers.IntegerField(min_value=1)

    @staticmethod
    def validate_slug(value):
        if not slug_service.is_valid_category_slug(value):
            raise serializers.ValidationError(
                "Slug can only contain lowercase letters, numbers, and hyphens."
            )
        return value


__all__ = ["DepartmentFormSerializer", "CategoryFormSerializer"]
