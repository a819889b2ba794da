"""System checks for knowledge-base settings."""

from django.conf import settings
from django.core.checks import Error, register

_POSITIVE_INT_SETTINGS = (
    "KB_MAX_TAGS_PER_ARTICLE",
    "KB_DEFAULT_PAGE_SIZE",
    "KB_MAX_PAGE_SIZE",
    "KB_HIGHLIGHT_LIMIT",
)


@register()
def knowledge_base_limits_are_sane(app_configs, **kwargs):
    """Ensure the KB_* limits are positive and the default page fits the max."""
    errors: list[Error] = []

    for name in _POSITIVE_INT_SETTINGS:
        value = getattr(settings, name, None)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            errors.append(
                Error(
                    f"{name} must be a positive integer, got {value!r}.",
                    id="core.E001",
                )
            )

    if not errors and settings.KB_DEFAULT_PAGE_SIZE > settings.KB_MAX_PAGE_SIZE:
        errors.append(
            Error(
                "KB_DEFAULT_PAGE_SIZE must not exceed KB_MAX_PAGE_SIZE.",
                id="core.E002",
            )
        )

    return errors
