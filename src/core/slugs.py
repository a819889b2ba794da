"""Slug generation and validation for departments, categories, and articles."""

import re

# Applied after lowercasing, so only ASCII letters, digits and separators survive.
_INVALID_CHARS = re.compile(r"[^0-9a-z_\s-]")
_SEPARATOR_RUNS = re.compile(r"[\s_-]+")
_CATEGORY_SLUG = re.compile(r"[a-z0-9-]{2,100}")


class SlugService:
    """Deterministic text -> URL slug transform."""

    @staticmethod
    def generate(text: str) -> str:
        """Return the slug for ``text``; ``generate(generate(x)) == generate(x)``."""
        slug = (text or "").lower().strip()
        slug = _INVALID_CHARS.sub("", slug)
        slug = _SEPARATOR_RUNS.sub("-", slug)
        return slug.strip("-")

    @staticmethod
    def is_valid_category_slug(slug: str) -> bool:
        """Category slugs are editor-assigned and must match ``[a-z0-9-]{2,100}``."""
        return bool(slug) and _CATEGORY_SLUG.fullmatch(slug) is not None


slug_service = SlugService()

__all__ = ["SlugService", "slug_service"]
