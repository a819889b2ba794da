"""Article and Tag models: the leaf content of the knowledge base."""

from django.db import models

from departments.models import Category


class Article(models.Model):
    """Knowledge-base article with independent publish and pin flags."""

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    content = models.TextField()
    summary = models.TextField(blank=True, null=True)
    author_id = models.UUIDField(db_index=True, editable=False)
    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name="articles",
        blank=True,
        null=True,
    )
    is_pinned = models.BooleanField(default=False)
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


class Tag(models.Model):
    """Free-text label attached to an article."""

    article = models.ForeignKey(Article, on_delete=models.CASCADE, related_name="tags")
    name = models.CharField(max_length=50)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


__all__ = ["Article", "Tag"]
