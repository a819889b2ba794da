"""Persistence and cascading lifecycle for departments and categories.

Stores never check permissions; services call the visibility policy first.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from django.db import transaction
from django.db.models import Count

from articles.models import Article, Tag
from core.exceptions import NotFound, translate_database_errors
from core.slugs import slug_service
from .models import Category, Department

logger = logging.getLogger(__name__)

DEPARTMENT_FIELDS = ("name", "description", "image")
CATEGORY_FIELDS = ("name", "slug", "description", "department_id")


@dataclass
class DepartmentTree:
    """A department together with its categories and their article counts."""

    department: Department
    categories: list[Category] = field(default_factory=list)

    @property
    def article_count(self) -> int:
        return sum(category.article_count for category in self.categories)


class HierarchyStore:
    """Department/Category persistence backed by the Django ORM."""

    # Departments

    def get_department(self, department_id) -> Department:
        try:
            return Department.objects.get(pk=department_id)
        except (Department.DoesNotExist, ValueError, TypeError):
            raise NotFound("Department not found")

    def get_department_by_slug(self, slug: str) -> Department:
        try:
            return Department.objects.get(slug=slug)
        except Department.DoesNotExist:
            raise NotFound("Department not found")

    @staticmethod
    def department_slug_taken(slug: str, exclude_id=None) -> bool:
        qs = Department.objects.filter(slug=slug)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    def list_departments(self) -> list[Department]:
        """All departments by name, each with ``article_count`` rolled up from its categories."""
        departments = list(Department.objects.all())
        category_to_department = dict(
            Category.objects.filter(department__in=departments).values_list("id", "department_id")
        )
        per_category = self._article_counts(category_to_department.keys())

        totals = {department.pk: 0 for department in departments}
        for category_id, count in per_category.items():
            department_id = category_to_department.get(category_id)
            if department_id is not None:
                totals[department_id] += count

        for department in departments:
            department.article_count = totals.get(department.pk, 0)
        return departments

    def get_department_with_categories(self, department_id) -> DepartmentTree:
        return self._tree(self.get_department(department_id))

    def get_department_with_categories_by_slug(self, slug: str) -> DepartmentTree:
        return self._tree(self.get_department_by_slug(slug))

    def create_department(self, data: dict[str, Any]) -> Department:
        values = {key: data[key] for key in DEPARTMENT_FIELDS if key in data}
        values["slug"] = slug_service.generate(values["name"])
        with translate_database_errors("A department with this slug already exists."):
            with transaction.atomic():
                department = Department.objects.create(**values)
        logger.info("Created department %s (%s)", department.pk, department.slug)
        return department

    def update_department(self, department: Department, data: dict[str, Any]) -> Department:
        """Apply a partial update; the slug follows the name only when the name changes."""
        name = data.get("name")
        if name is not None and name != department.name:
            department.slug = slug_service.generate(name)
        for key in DEPARTMENT_FIELDS:
            if key in data:
                setattr(department, key, data[key])
        with translate_database_errors("A department with this slug already exists."):
            with transaction.atomic():
                department.save()
        logger.info("Updated department %s (%s)", department.pk, department.slug)
        return department

    def delete_department(self, department_id) -> dict[str, int]:
        """Delete a department with its categories, their articles and tags."""
        department = self.get_department(department_id)
        with translate_database_errors("Department could not be deleted."):
            with transaction.atomic():
                removed = self._delete_articles(Article.objects.filter(category__department=department))
                _, per_model = Category.objects.filter(department=department).delete()
                removed["categories"] = per_model.get(Category._meta.label, 0)
                department.delete()
                removed["departments"] = 1
        logger.info("Deleted department %s: %s", department_id, removed)
        return removed

    # Categories

    def get_category(self, category_id) -> Category:
        try:
            return Category.objects.select_related("department").get(pk=category_id)
        except (Category.DoesNotExist, ValueError, TypeError):
            raise NotFound("Category not found")

    def get_category_by_slug(self, department_id, slug: str) -> Category:
        try:
            return Category.objects.select_related("department").get(department_id=department_id, slug=slug)
        except (Category.DoesNotExist, ValueError, TypeError):
            raise NotFound("Category not found")

    @staticmethod
    def category_slug_taken(department_id, slug: str, exclude_id=None) -> bool:
        qs = Category.objects.filter(department_id=department_id, slug=slug)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    @staticmethod
    def list_categories(department_id) -> list[Category]:
        return list(
            Category.objects.filter(department_id=department_id).annotate(article_count=Count("articles"))
        )

    def create_category(self, data: dict[str, Any]) -> Category:
        values = {key: data[key] for key in CATEGORY_FIELDS if key in data}
        with translate_database_errors("A category with this slug already exists in the department."):
            with transaction.atomic():
                category = Category.objects.create(**values)
        logger.info("Created category %s (%s) in department %s", category.pk, category.slug, category.department_id)
        return category

    def update_category(self, category: Category, data: dict[str, Any]) -> Category:
        for key in CATEGORY_FIELDS:
            if key in data:
                setattr(category, key, data[key])
        with translate_database_errors("A category with this slug already exists in the department."):
            with transaction.atomic():
                category.save()
        logger.info("Updated category %s (%s)", category.pk, category.slug)
        return category

    def delete_category(self, category_id) -> dict[str, int]:
        """Delete a category together with its articles and their tags."""
        category = self.get_category(category_id)
        with translate_database_errors("Category could not be deleted."):
            with transaction.atomic():
                removed = self._delete_articles(Article.objects.filter(category=category))
                category.delete()
                removed["categories"] = 1
        logger.info("Deleted category %s: %s", category_id, removed)
        return removed

    # Helpers

    @staticmethod
    def _delete_articles(articles) -> dict[str, int]:
        """Delete articles (tags cascade first) and report both counts."""
        _, per_model = articles.delete()
        return {
            "articles": per_model.get(Article._meta.label, 0),
            "tags": per_model.get(Tag._meta.label, 0),
        }

    @staticmethod
    def _article_counts(category_ids: Iterable) -> dict[Any, int]:
        ids = list(category_ids)
        if not ids:
            return {}
        rows = (
            Article.objects.filter(category_id__in=ids)
            .order_by()
            .values("category_id")
            .annotate(count=Count("id"))
        )
        return {row["category_id"]: row["count"] for row in rows}

    def _tree(self, department: Department) -> DepartmentTree:
        tree = DepartmentTree(department=department, categories=self.list_categories(department.pk))
        department.article_count = tree.article_count
        return tree


__all__ = ["DepartmentTree", "HierarchyStore"]
