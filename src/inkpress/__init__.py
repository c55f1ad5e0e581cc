"""inkpress: Markdown rendering and read API for a personal blog."""

__version__ = "0.1.0"
__author__ = "inkpress contributors"
__license__ = "MIT"

from inkpress.config.models import RenderConfig, ServerConfig
from inkpress.content.models import ArticleRecord, CategoryRef, TagRef
from inkpress.renderer.extensions import TocEntry

__all__ = [
    "ArticleRecord",
    "CategoryRef",
    "RenderConfig",
    "ServerConfig",
    "TagRef",
    "TocEntry",
    "__version__",
]
