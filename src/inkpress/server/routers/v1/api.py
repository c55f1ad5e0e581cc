"""API router for JSON endpoints.

This router handles the public read path: article lists, article detail
with rendered HTML and table of contents, and a render preview endpoint.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from inkpress.content.listing import adjacent_articles, list_archive, list_articles
from inkpress.content.models import ArticleRecord
from inkpress.content.repository import ContentError, ContentRepository
from inkpress.renderer.engine import MarkdownRenderer
from inkpress.renderer.highlighter import highlighter_ready
from inkpress.security.path_validator import SecurityError
from inkpress.server.dependencies import get_markdown_renderer, get_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


class RenderRequest(BaseModel):
    """Body of a render preview request."""

    content: str = ""


async def _load_article(repository: ContentRepository, slug: str) -> ArticleRecord:
    """Fetch a published article or raise the matching HTTP error."""
    try:
        article = await repository.get_article(slug)
    except SecurityError:
        raise HTTPException(status_code=403, detail="Access forbidden")
    except ContentError as e:
        logger.exception(f"Error loading article {slug}")
        raise HTTPException(status_code=500, detail=str(e))

    if article is None or not article.is_published:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@router.get("/health")
async def health() -> dict[str, Any]:
    """Report liveness and whether the highlighter is warm."""
    return {"status": "ok", "highlighter": highlighter_ready()}


@router.get("/articles", response_model=None)
async def api_articles(
    category: str | None = None,
    tag: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    mode: str | None = None,
    repository: ContentRepository = Depends(get_repository),
) -> list[dict[str, Any]] | dict[str, Any]:
    """List published articles, newest first.

    Args:
        category: Category slug filter
        tag: Tag slug filter
        page: Page number when paginating
        limit: Page size; omit for an unpaginated list
        mode: ``archive`` for title/slug/date only
        repository: Content repository (injected)

    Returns:
        List items, or a page envelope when ``limit`` is given
    """
    records = await repository.list_articles()
    if mode == "archive":
        return list_archive(records)
    return list_articles(records, category=category, tag=tag, page=page, limit=limit)


@router.get("/articles/{slug}/toc")
async def api_article_toc(
    slug: str,
    repository: ContentRepository = Depends(get_repository),
    renderer: MarkdownRenderer = Depends(get_markdown_renderer),
) -> list[dict[str, Any]]:
    """Get the table of contents for an article."""
    article = await _load_article(repository, slug)
    return [entry.to_dict() for entry in renderer.extract_toc(article.content)]


@router.get("/articles/{slug}")
async def api_article_detail(
    slug: str,
    repository: ContentRepository = Depends(get_repository),
    renderer: MarkdownRenderer = Depends(get_markdown_renderer),
) -> dict[str, Any]:
    """Get an article with rendered content, TOC and neighbours.

    Args:
        slug: Article slug
        repository: Content repository (injected)
        renderer: Markdown renderer (injected)

    Returns:
        ``{"success": True, "data": {...}}`` envelope

    Raises:
        HTTPException: 404 for unknown or unpublished slugs, 403 for slugs escaping the root
    """
    article = await _load_article(repository, slug)
    document = renderer.render_document(article.content)

    previous, following = adjacent_articles(await repository.list_articles(), article)
    return {
        "success": True,
        "data": {
            "article": article.to_detail(document.html, document.toc),
            "prevArticle": previous.to_link() if previous else None,
            "nextArticle": following.to_link() if following else None,
        },
    }


@router.post("/render")
async def api_render(
    body: RenderRequest,
    renderer: MarkdownRenderer = Depends(get_markdown_renderer),
) -> dict[str, Any]:
    """Render a Markdown preview to HTML and TOC."""
    return renderer.render_document(body.content).to_dict()
