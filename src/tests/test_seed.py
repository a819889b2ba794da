"""The ``seed_knowledge_base`` management command."""

from __future__ import annotations

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from articles.models import Article
from departments.models import Category, Department
from scripts.management.commands.seed_knowledge_base import SEED_ARTICLES, SEED_AUTHOR_ID


class SeedCommandTests(TestCase):
    """Seeding is idempotent and ``--reset`` clears seeded content."""

    def run_seed(self, *args):
        out = StringIO()
        call_command("seed_knowledge_base", *args, stdout=out)
        return out.getvalue()

    def test_seed_is_idempotent(self):
        self.run_seed()
        counts = (Department.objects.count(), Category.objects.count(), Article.objects.count())

        output = self.run_seed()

        self.assertEqual((Department.objects.count(), Category.objects.count(), Article.objects.count()), counts)
        self.assertEqual(counts, (2, 3, len(SEED_ARTICLES)))
        self.assertIn("0 new articles", output)

    def test_seeded_articles_belong_to_seed_author(self):
        self.run_seed()

        self.assertFalse(Article.objects.exclude(author_id=SEED_AUTHOR_ID).exists())
        self.assertTrue(Article.objects.filter(is_published=False).exists())

    def test_reset_recreates_content(self):
        self.run_seed()
        Article.objects.filter(slug="your-first-week").update(summary="Edited")

        self.run_seed("--reset")

        self.assertEqual(Article.objects.count(), len(SEED_ARTICLES))
        self.assertEqual(Article.objects.get(slug="your-first-week").summary, "What to expect when you join.")
