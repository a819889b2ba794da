"""Article operations composing validation, the visibility policy, and the stores."""

import logging
from typing import Any, Mapping

from django.conf import settings

from access_control.permissions import Caller, VisibilityPolicy, visibility_policy
from core.exceptions import Conflict, PermissionDenied
from core.slugs import slug_service
from core.validation import validate_payload
from departments.stores import HierarchyStore
from .models import Article, Tag
from .serializers import ArticleFormSerializer, ArticleSearchSerializer, HighlightLimitSerializer
from .stores import ArticleFilter, ArticlePage, ArticleStats, ArticleStore

logger = logging.getLogger(__name__)


class ArticlesService:
    """Entry point for every article read and write."""

    def __init__(
        self,
        store: ArticleStore | None = None,
        hierarchy: HierarchyStore | None = None,
        policy: VisibilityPolicy | None = None,
    ):
        self.store = store or ArticleStore()
        self.hierarchy = hierarchy or HierarchyStore()
        self.policy = policy or visibility_policy

    def create_article(self, caller: Caller, payload: Mapping[str, Any]) -> Article:
        """Validate, check the category exists, authorize, then insert with tags."""
        data = validate_payload(ArticleFormSerializer, payload)
        tags = data.pop("tags", [])
        if data.get("category_id") is not None:
            self.hierarchy.get_category(data["category_id"])
        self.policy.ensure(
            self.policy.can_create_article(caller.role),
            "Only admins and editors can create articles",
        )
        if caller.id is None:
            raise PermissionDenied("An identified caller is required to author articles")
        self._ensure_slug_free(data["title"])
        return self.store.create_article(caller.id, data, tags)

    def update_article(self, caller: Caller, article_id, payload: Mapping[str, Any]) -> Article:
        """Partial update; an omitted ``tags`` key clears the article's tags."""
        data = validate_payload(ArticleFormSerializer, payload, partial=True)
        tags = data.pop("tags", [])
        article = self.store.get_by_id(article_id)
        if data.get("category_id") is not None:
            self.hierarchy.get_category(data["category_id"])
        self.policy.ensure(
            self.policy.can_mutate(article, caller),
            "User does not have sufficient permissions to perform this operation",
        )
        if "title" in data:
            self._ensure_slug_free(data["title"], exclude_id=article.pk)
        return self.store.update_article(article, data, tags)

    def delete_article(self, caller: Caller, article_id) -> None:
        article = self.store.get_by_id(article_id)
        self.policy.ensure(
            self.policy.can_mutate(article, caller),
            "User does not have sufficient permissions to perform this operation",
        )
        self.store.delete_article(article)

    def get_article(self, article_id, caller: Caller | None = None) -> Article:
        return self._visible(self.store.get_by_id(article_id), caller)

    def get_article_by_slug(self, slug: str, caller: Caller | None = None) -> Article:
        return self._visible(self.store.get_by_slug(slug), caller)

    def list_articles(self, filters: Mapping[str, Any] | None = None, caller: Caller | None = None) -> ArticlePage:
        """Search articles; drafts are only ever included for admins and editors.

        Privileged callers see drafts unless they pass
        ``include_unpublished=False``; for everyone else the flag is ignored.
        """
        caller = caller or Caller.anonymous()
        data = validate_payload(ArticleSearchSerializer, filters)
        requested = data.pop("include_unpublished", None)
        may_see_drafts = self.policy.can_view_unpublished(caller.role)
        include_unpublished = may_see_drafts and requested is not False
        return self.store.list_articles(ArticleFilter(include_unpublished=include_unpublished, **data))

    def get_pinned_articles(self, limit: int | None = None) -> list[Article]:
        return self.store.get_pinned_articles(self._highlight_limit(limit))

    def get_recent_articles(self, limit: int | None = None) -> list[Article]:
        return self.store.get_recent_articles(self._highlight_limit(limit))

    def get_article_stats(self) -> ArticleStats:
        """Counts over every article, drafts included; open to any caller."""
        return self.store.get_article_stats()

    def get_article_tags(self, article_id, caller: Caller | None = None) -> list[Tag]:
        article = self.get_article(article_id, caller)
        return self.store.get_tags(article.pk)

    def _visible(self, article: Article, caller: Caller | None) -> Article:
        caller = caller or Caller.anonymous()
        self.policy.ensure(
            self.policy.can_view(article, caller.role),
            "User does not have sufficient permissions to perform this operation",
        )
        return article

    def _ensure_slug_free(self, title: str, exclude_id=None) -> None:
        # Fast path for a friendly message; the unique constraint still decides.
        slug = slug_service.generate(title)
        if self.store.slug_taken(slug, exclude_id=exclude_id):
            logger.warning("Article slug %s is already taken", slug)
            raise Conflict(f"An article with slug '{slug}' already exists.")

    @staticmethod
    def _highlight_limit(limit) -> int:
        if limit is None:
            return settings.KB_HIGHLIGHT_LIMIT
        return validate_payload(HighlightLimitSerializer, {"limit": limit})["limit"]


__all__ = ["ArticlesService"]
