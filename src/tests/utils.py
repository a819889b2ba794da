"""Shared helpers for tests (callers, hierarchy and article factories)."""

from __future__ import annotations

import uuid
from typing import Iterable

from access_control.models import Role
from access_control.permissions import Caller
from articles.models import Article, Tag
from core.slugs import slug_service
from departments.models import Category, Department

ADMIN = Caller(id=uuid.UUID("11111111-1111-4111-8111-111111111111"), role=Role.ADMIN)
EDITOR = Caller(id=uuid.UUID("22222222-2222-4222-8222-222222222222"), role=Role.EDITOR)
OTHER_EDITOR = Caller(id=uuid.UUID("33333333-3333-4333-8333-333333333333"), role=Role.EDITOR)
READER = Caller(id=uuid.UUID("44444444-4444-4444-8444-444444444444"), role=Role.ANONYMOUS)
ANON = Caller.anonymous()


def make_department(name: str, **extra) -> Department:
    """Insert a department directly, bypassing the service layer."""

    return Department.objects.create(name=name, slug=slug_service.generate(name), **extra)


def make_category(department: Department, name: str, slug: str | None = None, **extra) -> Category:
    """Insert a category under ``department``."""

    return Category.objects.create(
        department=department,
        name=name,
        slug=slug or slug_service.generate(name),
        **extra,
    )


def make_article(
    title: str,
    *,
    author: Caller = EDITOR,
    category: Category | None = None,
    tags: Iterable[str] = (),
    content: str = "Long enough article body.",
    **extra,
) -> Article:
    """Insert an article (published unless told otherwise) with plain tag names."""

    extra.setdefault("is_published", True)
    article = Article.objects.create(
        title=title,
        slug=slug_service.generate(title),
        content=content,
        author_id=author.id,
        category=category,
        **extra,
    )
    Tag.objects.bulk_create([Tag(article=article, name=name) for name in tags])
    return article
