"""Payload validation for article writes and article searches."""

from django.conf import settings
from rest_framework import serializers

from core.slugs import slug_service


class TagInputSerializer(serializers.Serializer):
    """A submitted tag; ``id`` is present when the tag already exists."""

    id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(min_length=1, max_length=50)


class ArticleFormSerializer(serializers.Serializer):
    """Validate article create/update payloads, including the tag set."""

    title = serializers.CharField(min_length=3, max_length=255)
    content = serializers.CharField(min_length=10, trim_whitespace=False)
    summary = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    category_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    is_pinned = serializers.BooleanField(default=False)
    is_published = serializers.BooleanField(default=False)
    tags = TagInputSerializer(many=True, default=list)

    @staticmethod
    def validate_title(value):
        if not slug_service.generate(value):
            raise serializers.ValidationError("Title must contain at least one letter or digit.")
        return value

    @staticmethod
    def validate_tags(value):
        """Enforce the per-article tag limit and case-insensitive uniqueness."""
        limit = settings.KB_MAX_TAGS_PER_ARTICLE
        if len(value) > limit:
            raise serializers.ValidationError(f"An article can have at most {limit} tags.")
        seen: set[str] = set()
        for tag in value:
            key = tag["name"].casefold()
            if key in seen:
                raise serializers.ValidationError(f"Duplicate tag: {tag['name']}.")
            seen.add(key)
        return [dict(tag) for tag in value]


class ArticleSearchSerializer(serializers.Serializer):
    """Filters accepted by article listing."""

    query = serializers.CharField(required=False, allow_blank=True, max_length=200)
    author_id = serializers.UUIDField(required=False)
    department_slug = serializers.CharField(required=False, max_length=120)
    category_id = serializers.IntegerField(required=False, min_value=1)
    include_unpublished = serializers.BooleanField(required=False, allow_null=True)
    limit = serializers.IntegerField(required=False, min_value=1)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)

    @staticmethod
    def validate_limit(value):
        if value > settings.KB_MAX_PAGE_SIZE:
            raise serializers.ValidationError(
                f"Ensure this value is less than or equal to {settings.KB_MAX_PAGE_SIZE}."
            )
        return value


class HighlightLimitSerializer(serializers.Serializer):
    """Size of the pinned and recent article lists."""

    limit = serializers.IntegerField(min_value=1)

    validate_limit = staticmethod(ArticleSearchSerializer.validate_limit)


__all__ = ["TagInputSerializer", "ArticleFormSerializer", "ArticleSearchSerializer", "HighlightLimitSerializer"]
