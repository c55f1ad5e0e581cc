"""Article content models and repositories."""

from .models import ArticleRecord, CategoryRef, TagRef
from .repository import (
    ContentError,
    ContentRepository,
    FileContentRepository,
    InMemoryContentRepository,
)

__all__ = [
    "ArticleRecord",
    "CategoryRef",
    "ContentError",
    "ContentRepository",
    "FileContentRepository",
    "InMemoryContentRepository",
    "TagRef",
]
