"""Request dependencies shared by the API routers."""

import logging

from fastapi import HTTPException, Request

from inkpress.content.repository import ContentRepository
from inkpress.renderer.engine import MarkdownRenderer, get_renderer
from inkpress.renderer.highlighter import RendererError

logger = logging.getLogger(__name__)


def get_repository(request: Request) -> ContentRepository:
    """Content repository stored on the app."""
    return request.app.state.repository


async def get_markdown_renderer(request: Request) -> MarkdownRenderer:
    """Return the renderer, initializing the process-wide one on first use.

    Raises:
        HTTPException: 503 if the highlighter cannot be initialized
    """
    renderer: MarkdownRenderer | None = request.app.state.renderer
    if renderer is not None:
        return renderer

    try:
        return await get_renderer()
    except RendererError as e:
        logger.error(f"Renderer unavailable: {e}")
        raise HTTPException(status_code=503, detail="Renderer unavailable") from e
