"""Article listing, filtering and navigation over repository records."""

import math
from typing import Any

from inkpress.content.models import ArticleRecord


def published_newest_first(records: list[ArticleRecord]) -> list[ArticleRecord]:
    """Published records sorted by publish date, newest first."""
    return sorted(
        (record for record in records if record.is_published),
        key=lambda record: record.published_at,
        reverse=True,
    )


def list_articles(
    records: list[ArticleRecord],
    *,
    category: str | None = None,
    tag: str | None = None,
    page: int = 1,
    limit: int | None = None,
) -> list[dict[str, Any]] | dict[str, Any]:
    """
    Build the article list response.

    Without ``limit`` the result is a bare list of list items. With
    ``limit`` it is a page envelope carrying ``total`` and ``totalPages``.
    An unknown category or tag yields an empty result rather than an error.

    Args:
        records: Every record from the repository
        category: Category slug filter
        tag: Tag slug filter
        page: 1-based page number, used only with ``limit``
        limit: Page size

    Returns:
        List items, or a page envelope when paginating
    """
    page = max(page, 1)
    selected = published_newest_first(records)

    if category:
        selected = [r for r in selected if r.category and r.category.slug == category]
    if tag:
        selected = [r for r in selected if any(t.slug == tag for t in r.tags)]

    if not limit or limit <= 0:
        return [record.to_list_item() for record in selected]

    total = len(selected)
    start = (page - 1) * limit
    return {
        "articles": [record.to_list_item() for record in selected[start : start + limit]],
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit),
    }


def list_archive(records: list[ArticleRecord]) -> list[dict[str, str]]:
    """Lightweight list of published articles for the archive page."""
    return [record.to_archive_item() for record in published_newest_first(records)]


def adjacent_articles(
    records: list[ArticleRecord], current: ArticleRecord
) -> tuple[ArticleRecord | None, ArticleRecord | None]:
    """
    Find the published articles created just before and just after ``current``.

    Drafts never appear as neighbours.

    Returns:
        Tuple of (previous, next); either may be None
    """
    candidates = [r for r in records if r.is_published and r.slug != current.slug]
    older = [r for r in candidates if r.created_at < current.created_at]
    newer = [r for r in candidates if r.created_at > current.created_at]
    previous = max(older, key=lambda r: r.created_at, default=None)
    following = min(newer, key=lambda r: r.created_at, default=None)
    return previous, following
