"""Markdown rendering engine."""

import logging
from dataclasses import dataclass
from functools import lru_cache
from html import escape
from typing import Any

import markdown

from inkpress.config.models import RenderConfig
from inkpress.config.settings import get_default_render_config
from inkpress.renderer.extensions import HeadingAnchorExtension, TocEntry
from inkpress.renderer.highlighter import Highlighter, get_highlighter
from inkpress.renderer.lazy import SingleFlight
from inkpress.renderer.slug import slugify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedDocument:
    """HTML body and table of contents produced by one conversion."""

    html: str
    toc: tuple[TocEntry, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "htmlContent": self.html,
            "toc": [entry.to_dict() for entry in self.toc],
        }


EMPTY_DOCUMENT = RenderedDocument(html="")


class MarkdownRenderer:
    """Renders Markdown to HTML and extracts its table of contents."""

    def __init__(self, highlighter: Highlighter, config: RenderConfig | None = None) -> None:
        """Initialize renderer with a highlighter and configuration."""
        self.config = config or RenderConfig.default()
        self.config.validate()
        self.highlighter = highlighter
        self._render_cached = lru_cache(maxsize=self.config.cache_size)(self._convert)

    def _create_markdown_instance(self) -> markdown.Markdown:
        """Create configured markdown instance shared by rendering and TOC extraction."""
        extension_configs = dict(self.config.extension_configs)
        extension_configs["pymdownx.superfences"] = {
            "custom_fences": [
                {
                    "name": "*",
                    "class": "highlight",
                    "format": self._format_fence,
                }
            ]
        }
        return markdown.Markdown(
            extensions=[
                *self.config.extensions,
                HeadingAnchorExtension(levels=self.config.anchor_levels, slugify=slugify),
            ],
            extension_configs=extension_configs,
        )

    def _format_fence(
        self,
        src: str,
        language: str,
        class_name: str | None = None,
        options: dict[str, Any] | None = None,
        md: markdown.Markdown | None = None,
        **kwargs: Any,
    ) -> str:
        """Delegate a fenced block to the highlighter."""
        # Fence bodies arrive without their final newline
        if src and not src.endswith("\n"):
            src += "\n"
        return self.highlighter.highlight(src, language)

    def _convert(self, content: str) -> RenderedDocument:
        md = self._create_markdown_instance()
        try:
            html = md.convert(content)
        except Exception:
            # Keep the page up; show the source rather than failing the request
            logger.exception("Markdown conversion failed, falling back to plain text")
            return RenderedDocument(html=f"<pre>{escape(content)}</pre>")

        toc = tuple(md.heading_entries)  # type: ignore[attr-defined]
        return RenderedDocument(html=html, toc=toc)

    def render_document(self, content: str | None) -> RenderedDocument:
        """
        Render Markdown and collect its headings in one pass.

        Args:
            content: Raw Markdown string, possibly empty or None

        Returns:
            Rendered HTML and table-of-contents entries
        """
        if not content:
            return EMPTY_DOCUMENT
        return self._render_cached(content)

    def render(self, content: str | None) -> str:
        """
        Render Markdown content to HTML.

        Args:
            content: Raw Markdown string

        Returns:
            Rendered HTML string, empty for empty input
        """
        return self.render_document(content).html

    def extract_toc(self, content: str | None) -> list[TocEntry]:
        """
        Extract level 1-3 headings in document order.

        Args:
            content: Raw Markdown string

        Returns:
            TOC entries whose ids match the anchors in the rendered HTML
        """
        return list(self.render_document(content).toc)

    def clear_cache(self) -> None:
        """Drop cached renders."""
        self._render_cached.cache_clear()


def _build_default_renderer() -> MarkdownRenderer:
    return MarkdownRenderer(get_highlighter(), get_default_render_config())


_renderer = SingleFlight(_build_default_renderer, name="markdown renderer")


async def get_renderer() -> MarkdownRenderer:
    """Return the process-wide renderer, initializing it on first use."""
    return await _renderer.aget()


async def render_markdown(content: str | None) -> str:
    """Render Markdown with the process-wide renderer."""
    renderer = await get_renderer()
    return renderer.render(content)


async def extract_toc(content: str | None) -> list[TocEntry]:
    """Extract the table of contents with the process-wide renderer."""
    renderer = await get_renderer()
    return renderer.extract_toc(content)


async def render_document(content: str | None) -> RenderedDocument:
    """Render HTML and TOC together with the process-wide renderer."""
    renderer = await get_renderer()
    return renderer.render_document(content)
