"""Department and category lifecycle through DepartmentsService."""

from __future__ import annotations

from django.test import TestCase

from articles.models import Article, Tag
from core.exceptions import Conflict, NotFound, PermissionDenied, ValidationFailed
from departments.models import Category, Department
from departments.services import DepartmentsService
from tests.utils import ADMIN, ANON, EDITOR, make_article, make_category, make_department


def row_count() -> int:
    return sum(model.objects.count() for model in (Department, Category, Article, Tag))


class DepartmentLifecycleTests(TestCase):
    """Create, update, and cascade-delete departments."""

    @classmethod
    def setUpTestData(cls):
        """One populated department and one empty one."""
        cls.facilities = make_department("Facilities", description="Buildings")
        cls.hvac = make_category(cls.facilities, "HVAC", "hvac")
        cls.elevators = make_category(cls.facilities, "Elevators", "elevators")
        cls.hr = make_department("Human Resources")

        make_article("Replacing an Air Filter", category=cls.hvac, tags=["Air Filter", "Maintenance"])
        make_article("Rooftop Unit Reset", category=cls.hvac, is_published=False)
        make_article("Elevator Maintenance Checklist", category=cls.elevators, tags=["Safety"])
        make_article("Uncategorised Notes")

    def setUp(self):
        self.service = DepartmentsService()

    def test_create_derives_slug_from_name(self):
        """Admins create departments; the slug comes from the name."""
        department = self.service.create_department(ADMIN, {"name": "Information Technology!"})

        self.assertEqual(department.slug, "information-technology")
        self.assertEqual(self.service.get_department_by_slug("information-technology").pk, department.pk)

    def test_create_requires_admin(self):
        """Editors and anonymous callers cannot change the hierarchy."""
        for caller in [EDITOR, ANON, None]:
            with self.subTest(caller=caller):
                with self.assertRaises(PermissionDenied):
                    self.service.create_department(caller, {"name": "Legal"})
        self.assertFalse(Department.objects.filter(slug="legal").exists())

    def test_validation_runs_before_permission(self):
        """A bad payload reports field errors even for callers who would be denied."""
        with self.assertRaises(ValidationFailed) as ctx:
            self.service.create_department(ANON, {"name": "x"})

        self.assertIn("name", ctx.exception.errors)

    def test_duplicate_name_conflicts(self):
        """A name that slugs to an existing department's slug is a conflict."""
        with self.assertRaises(Conflict):
            self.service.create_department(ADMIN, {"name": "facilities!!"})

    def test_update_recomputes_slug_only_when_name_changes(self):
        """Changing other fields keeps the slug; renaming regenerates it."""
        department = self.service.update_department(ADMIN, self.hr.pk, {"description": "People team"})
        self.assertEqual(department.slug, "human-resources")
        self.assertEqual(department.description, "People team")

        department = self.service.update_department(ADMIN, self.hr.pk, {"name": "People Operations"})
        self.assertEqual(department.slug, "people-operations")

    def test_update_missing_department(self):
        with self.assertRaises(NotFound):
            self.service.update_department(ADMIN, 999999, {"name": "Ghost"})

    def test_list_rolls_up_article_counts(self):
        """Each listed department carries the total over its categories, drafts included."""
        counts = {department.slug: department.article_count for department in self.service.list_departments()}

        self.assertEqual(counts, {"facilities": 3, "human-resources": 0})

    def test_tree_includes_category_counts(self):
        """Department with categories exposes per-category and total article counts."""
        tree = self.service.get_department_with_categories_by_slug("facilities")

        self.assertEqual({c.slug: c.article_count for c in tree.categories}, {"hvac": 2, "elevators": 1})
        self.assertEqual(tree.article_count, 3)
        self.assertEqual(tree.department.article_count, 3)

    def test_missing_department_lookups(self):
        with self.assertRaises(NotFound):
            self.service.get_department(999999)
        with self.assertRaises(NotFound):
            self.service.get_department_with_categories_by_slug("nowhere")

    def test_malformed_ids_are_not_found(self):
        """Non-numeric ids raise NotFound rather than a conversion error."""
        with self.assertRaises(NotFound):
            self.service.get_department("abc")
        with self.assertRaises(NotFound):
            self.service.get_category("abc")
        with self.assertRaises(NotFound):
            self.service.delete_department(ADMIN, "abc")

    def test_delete_cascades_children_first(self):
        """Deleting a department with N categories and M articles removes N + M + 1 rows plus tags."""
        before_articles = Article.objects.count()
        before_tags = Tag.objects.count()
        before_rows = row_count()

        removed = self.service.delete_department(ADMIN, self.facilities.pk)

        self.assertEqual(removed, {"articles": 3, "tags": 3, "categories": 2, "departments": 1})
        self.assertEqual(Article.objects.count(), before_articles - 3)
        self.assertEqual(Tag.objects.count(), before_tags - 3)
        self.assertEqual(row_count(), before_rows - (2 + 3 + 1) - 3)
        self.assertTrue(Article.objects.filter(slug="uncategorised-notes").exists())

    def test_delete_requires_admin(self):
        with self.assertRaises(PermissionDenied):
            self.service.delete_department(EDITOR, self.facilities.pk)
        self.assertTrue(Department.objects.filter(pk=self.facilities.pk).exists())


class CategoryLifecycleTests(TestCase):
    """Category writes scoped to their department."""

    @classmethod
    def setUpTestData(cls):
        cls.facilities = make_department("Facilities")
        cls.hr = make_department("Human Resources")
        cls.hvac = make_category(cls.facilities, "HVAC", "hvac")
        make_article("Replacing an Air Filter", category=cls.hvac, tags=["Air Filter"])

    def setUp(self):
        self.service = DepartmentsService()

    def test_create_with_missing_department_is_not_found(self):
        """A dangling department reference is NotFound, never Conflict."""
        with self.assertRaises(NotFound):
            self.service.create_category(ADMIN, {"name": "Orphans", "slug": "orphans", "department_id": 999999})

    def test_slug_must_match_pattern(self):
        with self.assertRaises(ValidationFailed) as ctx:
            self.service.create_category(
                ADMIN, {"name": "Bad Slug", "slug": "Bad Slug", "department_id": self.facilities.pk}
            )
        self.assertIn("slug", ctx.exception.errors)

    def test_slug_unique_within_department_only(self):
        """The same slug is a conflict in one department and fine in another."""
        with self.assertRaises(Conflict):
            self.service.create_category(
                ADMIN, {"name": "Heating", "slug": "hvac", "department_id": self.facilities.pk}
            )

        category = self.service.create_category(
            ADMIN, {"name": "HVAC Benefits", "slug": "hvac", "department_id": self.hr.pk}
        )
        self.assertEqual(category.department_id, self.hr.pk)

    def test_create_requires_admin(self):
        with self.assertRaises(PermissionDenied):
            self.service.create_category(
                EDITOR, {"name": "Plumbing", "slug": "plumbing", "department_id": self.facilities.pk}
            )

    def test_update_moves_category(self):
        """A category can be renamed and moved to another department."""
        category = self.service.update_category(
            ADMIN, self.hvac.pk, {"name": "Climate", "department_id": self.hr.pk}
        )

        self.assertEqual(category.name, "Climate")
        self.assertEqual(category.slug, "hvac")
        self.assertEqual(self.service.get_category_by_slug(self.hr.pk, "hvac").pk, self.hvac.pk)

    def test_update_into_missing_department(self):
        with self.assertRaises(NotFound):
            self.service.update_category(ADMIN, self.hvac.pk, {"department_id": 999999})

    def test_list_categories_for_department(self):
        categories = self.service.list_categories_for_department(self.facilities.pk)

        self.assertEqual([(c.slug, c.article_count) for c in categories], [("hvac", 1)])
        with self.assertRaises(NotFound):
            self.service.list_categories_for_department(999999)

    def test_delete_category_removes_articles_and_tags(self):
        removed = self.service.delete_category(ADMIN, self.hvac.pk)

        self.assertEqual(removed, {"articles": 1, "tags": 1, "categories": 1})
        self.assertFalse(Article.objects.exists())
        self.assertTrue(Department.objects.filter(pk=self.facilities.pk).exists())
