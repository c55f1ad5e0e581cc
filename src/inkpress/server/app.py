"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request

from inkpress import __version__
from inkpress.config.models import ServerConfig
from inkpress.content.repository import ContentRepository, FileContentRepository
from inkpress.renderer.engine import MarkdownRenderer, get_renderer
from inkpress.renderer.highlighter import RendererError
from inkpress.server.routers.v1 import api

logger = logging.getLogger(__name__)

# KaTeX is loaded from the CDN to typeset arithmatex output client-side
CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https:; "
    "font-src 'self' data: https://cdn.jsdelivr.net"
)


def create_app(
    config: ServerConfig,
    repository: ContentRepository | None = None,
    renderer: MarkdownRenderer | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        config: Server configuration
        repository: Article source; defaults to the configured content directory
        renderer: Renderer to use; defaults to the process-wide renderer

    Returns:
        Configured FastAPI app
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Warm the renderer so the first request does not pay for it."""
        if app.state.renderer is None:
            try:
                await get_renderer()
            except RendererError as e:
                # Requests that need rendering will answer 503 until a retry succeeds
                logger.error(f"Renderer warm-up failed: {e}")
        yield

    app = FastAPI(
        title="inkpress",
        description="Blog content API with Markdown rendering and table of contents",
        version=__version__,
        lifespan=lifespan,
    )

    # Store shared objects on app state
    app.state.config = config
    app.state.repository = repository or FileContentRepository(config.content_path)
    app.state.renderer = renderer

    # Add security headers middleware
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):  # type: ignore
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        return response

    app.include_router(api.router)

    return app
