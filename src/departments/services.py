"""Department and category operations: validate, authorize, then persist."""

import logging
from typing import Any, Mapping

from access_control.permissions import Caller, VisibilityPolicy, visibility_policy
from core.exceptions import Conflict
from core.slugs import slug_service
from core.validation import validate_payload
from .models import Category, Department
from .serializers import CategoryFormSerializer, DepartmentFormSerializer
from .stores import DepartmentTree, HierarchyStore

logger = logging.getLogger(__name__)


class DepartmentsService:
    """Orchestrate hierarchy reads and admin-only hierarchy writes.

    Checks run in a fixed order: payload validation, then existence of the
    target and of any referenced parent (NotFound), then the policy
    (PermissionDenied), and only then the store call.
    """

    def __init__(self, store: HierarchyStore | None = None, policy: VisibilityPolicy | None = None):
        self.store = store or HierarchyStore()
        self.policy = policy or visibility_policy

    # Departments

    def create_department(self, caller: Caller, payload: Mapping[str, Any]) -> Department:
        data = validate_payload(DepartmentFormSerializer, payload)
        self._ensure_admin(caller, "Only admins can create departments")
        self._ensure_department_slug_free(slug_service.generate(data["name"]))
        return self.store.create_department(data)

    def update_department(self, caller: Caller, department_id, payload: Mapping[str, Any]) -> Department:
        data = validate_payload(DepartmentFormSerializer, payload, partial=True)
        department = self.store.get_department(department_id)
        self._ensure_admin(caller, "Only admins can update departments")
        if "name" in data and data["name"] != department.name:
            self._ensure_department_slug_free(slug_service.generate(data["name"]), exclude_id=department.pk)
        return self.store.update_department(department, data)

    def delete_department(self, caller: Caller, department_id) -> dict[str, int]:
        self.store.get_department(department_id)
        self._ensure_admin(caller, "Only admins can delete departments")
        return self.store.delete_department(department_id)

    def list_departments(self) -> list[Department]:
        return self.store.list_departments()

    def get_department(self, department_id) -> Department:
        return self.store.get_department(department_id)

    def get_department_by_slug(self, slug: str) -> Department:
        return self.store.get_department_by_slug(slug)

    def get_department_with_categories(self, department_id) -> DepartmentTree:
        return self.store.get_department_with_categories(department_id)

    def get_department_with_categories_by_slug(self, slug: str) -> DepartmentTree:
        return self.store.get_department_with_categories_by_slug(slug)

    # Categories

    def create_category(self, caller: Caller, payload: Mapping[str, Any]) -> Category:
        data = validate_payload(CategoryFormSerializer, payload)
        department = self.store.get_department(data["department_id"])
        self._ensure_admin(caller, "Only admins can create categories")
        self._ensure_category_slug_free(department.pk, data["slug"])
        return self.store.create_category(data)

    def update_category(self, caller: Caller, category_id, payload: Mapping[str, Any]) -> Category:
        data = validate_payload(CategoryFormSerializer, payload, partial=True)
        category = self.store.get_category(category_id)
        department_id = data.get("department_id", category.department_id)
        if department_id != category.department_id:
            self.store.get_department(department_id)
        self._ensure_admin(caller, "Only admins can update categories")
        slug = data.get("slug", category.slug)
        if (slug, department_id) != (category.slug, category.department_id):
            self._ensure_category_slug_free(department_id, slug, exclude_id=category.pk)
        return self.store.update_category(category, data)

    def delete_category(self, caller: Caller, category_id) -> dict[str, int]:
        self.store.get_category(category_id)
        self._ensure_admin(caller, "Only admins can delete categories")
        return self.store.delete_category(category_id)

    def list_categories_for_department(self, department_id) -> list[Category]:
        self.store.get_department(department_id)
        return self.store.list_categories(department_id)

    def get_category(self, category_id) -> Category:
        return self.store.get_category(category_id)

    def get_category_by_slug(self, department_id, slug: str) -> Category:
        self.store.get_department(department_id)
        return self.store.get_category_by_slug(department_id, slug)

    def _ensure_department_slug_free(self, slug: str, exclude_id=None) -> None:
        # Friendly early answer; the unique constraint remains authoritative.
        if self.store.department_slug_taken(slug, exclude_id=exclude_id):
            logger.warning("Department slug %s is already taken", slug)
            raise Conflict(f"A department with slug '{slug}' already exists.")

    def _ensure_category_slug_free(self, department_id, slug: str, exclude_id=None) -> None:
        if self.store.category_slug_taken(department_id, slug, exclude_id=exclude_id):
            logger.warning("Category slug %s is already taken in department %s", slug, department_id)
            raise Conflict(f"Category slug '{slug}' is already used in this department.")

    def _ensure_admin(self, caller: Caller | None, message: str) -> None:
        caller = caller or Caller.anonymous()
        self.policy.ensure(self.policy.can_manage_hierarchy(caller.role), message)


__all__ = ["DepartmentsService"]
