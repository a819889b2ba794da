"""Department and Category models forming the upper levels of the hierarchy."""

from django.db import models


class Department(models.Model):
    """Top-level grouping; slug is derived from the name and globally unique."""

    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.TextField(blank=True, null=True)
    image = models.CharField(max_length=2048, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class Category(models.Model):
    """Mid-level grouping owned by one department; slug is unique within it."""

    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100)
    description = models.TextField(blank=True, null=True)
    department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name="categories")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]
        verbose_name_plural = "categories"
        constraints = [
            models.UniqueConstraint(fields=["department", "slug"], name="department_slug_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.department.name} / {self.name}"


__all__ = ["Department", "Category"]
