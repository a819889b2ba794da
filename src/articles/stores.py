"""Article persistence, denormalized joins, tag application, and search."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Sequence

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Exists, F, OuterRef, Q, QuerySet

from core.exceptions import NotFound, translate_database_errors
from core.slugs import slug_service
from .models import Article, Tag
from .tags import TagPlan, tag_reconciler

logger = logging.getLogger(__name__)

ARTICLE_FIELDS = ("title", "content", "summary", "category_id", "is_pinned", "is_published")

# Left joins through the nullable category FK; category-less articles get None.
LOCATION_FIELDS = {
    "category_name": F("category__name"),
    "category_slug": F("category__slug"),
    "department_name": F("category__department__name"),
    "department_slug": F("category__department__slug"),
}

SLUG_CONFLICT = "An article with this slug already exists."


@dataclass
class ArticleFilter:
    """Listing filters; ``limit`` falls back to ``KB_DEFAULT_PAGE_SIZE``."""

    query: str | None = None
    author_id: uuid.UUID | None = None
    department_slug: str | None = None
    category_id: int | None = None
    include_unpublished: bool = False
    limit: int | None = None
    offset: int = 0


@dataclass
class ArticlePage:
    items: list[Article] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class ArticleStats:
    total: int
    published: int
    pinned_and_published: int


class ArticleStore:
    """Article/Tag persistence backed by the Django ORM."""

    @staticmethod
    def _enriched() -> QuerySet:
        return Article.objects.annotate(**LOCATION_FIELDS).prefetch_related("tags")

    def get_by_id(self, article_id) -> Article:
        try:
            return self._enriched().get(pk=article_id)
        except (Article.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Article not found with ID: {article_id}")

    def get_by_slug(self, slug: str) -> Article:
        try:
            return self._enriched().get(slug=slug)
        except Article.DoesNotExist:
            raise NotFound(f"Article not found with slug: {slug}")

    @staticmethod
    def slug_taken(slug: str, exclude_id=None) -> bool:
        qs = Article.objects.filter(slug=slug)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    def create_article(self, author_id: uuid.UUID, data: dict[str, Any], tags: Sequence[dict[str, Any]]) -> Article:
        """Insert the article and its initial tags in one transaction."""
        values = {key: data[key] for key in ARTICLE_FIELDS if key in data}
        values["slug"] = slug_service.generate(values["title"])
        with translate_database_errors(SLUG_CONFLICT):
            with transaction.atomic():
                article = Article.objects.create(author_id=author_id, **values)
                self.apply_tags(article, tag_reconciler.reconcile([], tags))
        logger.info("Created article %s (%s)", article.pk, article.slug)
        return self.get_by_id(article.pk)

    def update_article(self, article: Article, data: dict[str, Any], tags: Sequence[dict[str, Any]]) -> Article:
        """Apply a partial update and reconcile the tag set against the stored tags."""
        if "title" in data:
            article.slug = slug_service.generate(data["title"])
        for key in ARTICLE_FIELDS:
            if key in data:
                setattr(article, key, data[key])
        with translate_database_errors(SLUG_CONFLICT):
            with transaction.atomic():
                # auto_now refreshes updated_at on every save
                article.save()
                existing = list(Tag.objects.filter(article=article))
                plan = tag_reconciler.reconcile(existing, tags)
                self.apply_tags(article, plan)
        logger.info(
            "Updated article %s (%s): +%d ~%d -%d tags",
            article.pk,
            article.slug,
            len(plan.to_create),
            len(plan.to_update),
            len(plan.to_delete),
        )
        return self.get_by_id(article.pk)

    @staticmethod
    def apply_tags(article: Article, plan: TagPlan) -> None:
        for change in plan.to_update:
            Tag.objects.filter(pk=change["id"], article=article).update(name=change["name"])
        if plan.to_delete:
            Tag.objects.filter(article=article, pk__in=plan.to_delete).delete()
        if plan.to_create:
            Tag.objects.bulk_create([Tag(article=article, name=change["name"]) for change in plan.to_create])

    def delete_article(self, article: Article) -> None:
        article_id = article.pk
        with translate_database_errors("Article could not be deleted."):
            article.delete()
        logger.info("Deleted article %s", article_id)

    def list_articles(self, filters: ArticleFilter) -> ArticlePage:
        """Filter, count, then paginate; ``total`` ignores limit/offset."""
        qs = self._enriched()

        if filters.query:
            term = filters.query
            tag_match = Tag.objects.filter(article=OuterRef("pk"), name__icontains=term)
            qs = qs.filter(Q(title__icontains=term) | Q(summary__icontains=term) | Exists(tag_match))
        if filters.author_id:
            qs = qs.filter(author_id=filters.author_id)
        if not filters.include_unpublished:
            qs = qs.filter(is_published=True)
        if filters.department_slug:
            qs = qs.filter(category__department__slug=filters.department_slug)
        if filters.category_id:
            qs = qs.filter(category_id=filters.category_id)

        limit = filters.limit or settings.KB_DEFAULT_PAGE_SIZE
        offset = filters.offset or 0
        total = qs.count()
        items = list(qs.order_by("-created_at", "-id")[offset:offset + limit])
        return ArticlePage(items=items, total=total)

    def get_pinned_articles(self, limit: int) -> list[Article]:
        qs = self._enriched().filter(is_pinned=True, is_published=True)
        return list(qs.order_by("-updated_at", "-id")[:limit])

    def get_recent_articles(self, limit: int) -> list[Article]:
        qs = self._enriched().filter(is_published=True)
        return list(qs.order_by("-created_at", "-id")[:limit])

    @staticmethod
    def get_article_stats() -> ArticleStats:
        counts = Article.objects.aggregate(
            total=Count("id"),
            published=Count("id", filter=Q(is_published=True)),
            pinned_and_published=Count("id", filter=Q(is_published=True, is_pinned=True)),
        )
        return ArticleStats(**counts)

    @staticmethod
    def get_tags(article_id) -> list[Tag]:
        return list(Tag.objects.filter(article_id=article_id).order_by("name", "id"))


__all__ = ["ArticleFilter", "ArticlePage", "ArticleStats", "ArticleStore"]
