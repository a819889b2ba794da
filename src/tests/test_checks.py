"""System checks guarding the knowledge-base limits."""

from __future__ import annotations

from django.apps import apps
from django.test import SimpleTestCase, override_settings

from core.checks import knowledge_base_limits_are_sane


class LimitChecksTests(SimpleTestCase):
    """``knowledge_base_limits_are_sane`` flags misconfigured limits."""

    def test_defaults_pass(self):
        self.assertEqual(knowledge_base_limits_are_sane(None), [])

    @override_settings(KB_MAX_TAGS_PER_ARTICLE=0)
    def test_non_positive_limit(self):
        errors = knowledge_base_limits_are_sane(None)
        self.assertEqual([error.id for error in errors], ["core.E001"])

    @override_settings(KB_DEFAULT_PAGE_SIZE=50, KB_MAX_PAGE_SIZE=20)
    def test_default_page_larger_than_max(self):
        errors = knowledge_base_limits_are_sane(None)
        self.assertEqual([error.id for error in errors], ["core.E002"])


class InstalledAppsTests(SimpleTestCase):
    """Only the apps the knowledge base uses are installed."""

    def test_auth_apps_not_installed(self):
        """User accounts and permissions live outside this project."""
        self.assertFalse(apps.is_installed("django.contrib.auth"))
        self.assertFalse(apps.is_installed("django.contrib.contenttypes"))
        self.assertTrue(apps.is_installed("rest_framework"))
