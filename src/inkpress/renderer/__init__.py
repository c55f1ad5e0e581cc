"""Markdown rendering pipeline for inkpress."""

from .engine import (
    MarkdownRenderer,
    RenderedDocument,
    extract_toc,
    get_renderer,
    render_document,
    render_markdown,
)
from .extensions import HeadingAnchorExtension, TocEntry
from .highlighter import (
    Highlighter,
    HighlighterInitError,
    RendererError,
    aget_highlighter,
    get_highlighter,
)
from .slug import slugify

__all__ = [
    "HeadingAnchorExtension",
    "Highlighter",
    "HighlighterInitError",
    "MarkdownRenderer",
    "RenderedDocument",
    "RendererError",
    "TocEntry",
    "aget_highlighter",
    "extract_toc",
    "get_highlighter",
    "get_renderer",
    "render_document",
    "render_markdown",
    "slugify",
]
