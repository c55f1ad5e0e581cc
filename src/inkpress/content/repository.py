"""Content repositories supplying article records."""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from inkpress.config.settings import MARKDOWN_SUFFIXES, MAX_FILE_SIZE_BYTES
from inkpress.content.models import ArticleRecord
from inkpress.security.path_validator import validate_path

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"


class ContentError(Exception):
    """Raised when an article source cannot be parsed."""

    pass


class ContentRepository(Protocol):
    """Source of article records for the read path."""

    async def get_article(self, slug: str) -> ArticleRecord | None:
        """Return the article with ``slug``, or None."""
        ...

    async def list_articles(self) -> list[ArticleRecord]:
        """Return every article, published or not."""
        ...


def parse_front_matter(raw: str) -> tuple[dict[str, str], str]:
    """
    Split ``key: value`` front matter from a Markdown body.

    Front matter is optional; without a leading ``---`` line the whole text
    is the body.

    Raises:
        ContentError: If the block is unterminated or a line has no colon
    """
    lines = raw.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, raw

    end_index: int | None = None
    for idx in range(1, len(lines)):
        if lines[idx].strip() == FRONT_MATTER_DELIMITER:
            end_index = idx
            break

    if end_index is None:
        raise ContentError("Front matter is not closed with '---'")

    metadata: dict[str, str] = {}
    for line in lines[1:end_index]:
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        if ":" not in line:
            raise ContentError(f"Invalid front matter line: {line}")
        key, value = line.split(":", 1)
        metadata[key.strip().lower()] = value.strip().strip("\"'")

    body = "\n".join(lines[end_index + 1 :]).lstrip("\n")
    return metadata, body


class FileContentRepository:
    """Articles stored as Markdown files under a content directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _record_from_file(self, path: Path) -> ArticleRecord:
        """Load one article file."""
        stat = path.stat()
        if stat.st_size > MAX_FILE_SIZE_BYTES:
            raise ContentError(f"Article too large: {path.name}")

        raw = path.read_text(encoding="utf-8")
        metadata, body = parse_front_matter(raw)

        modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
        data: dict[str, Any] = {
            "slug": path.stem,
            "title": path.stem.replace("-", " ").title(),
            "created_at": modified,
            "updated_at": modified,
            **metadata,
            "content": body,
        }
        try:
            return ArticleRecord.from_mapping(data)
        except ValueError as e:
            raise ContentError(f"{path.name}: {e}") from e

    def _article_files(self) -> list[Path]:
        return sorted(
            item
            for item in self.root.rglob("*")
            if item.is_file()
            and item.suffix.lower() in MARKDOWN_SUFFIXES
            and not any(part.startswith(".") for part in item.relative_to(self.root).parts)
        )

    def _load_all(self) -> list[ArticleRecord]:
        records = []
        for path in self._article_files():
            try:
                records.append(self._record_from_file(path))
            except ContentError:
                # One broken file must not hide the rest of the site
                logger.warning(f"Skipping unreadable article {path}", exc_info=True)
        return records

    def _find(self, slug: str) -> ArticleRecord | None:
        # Fast path: the file stem is the slug
        for suffix in MARKDOWN_SUFFIXES:
            try:
                path = validate_path(Path(f"{slug}{suffix}"), self.root)
            except FileNotFoundError:
                continue
            record = self._record_from_file(path)
            if record.slug == slug:
                return record

        # Slow path: a front matter slug overrides the file name
        for record in self._load_all():
            if record.slug == slug:
                return record
        return None

    async def get_article(self, slug: str) -> ArticleRecord | None:
        """Return the article with ``slug``, or None."""
        return await asyncio.to_thread(self._find, slug)

    async def list_articles(self) -> list[ArticleRecord]:
        """Return every article under the content root."""
        return await asyncio.to_thread(self._load_all)


class InMemoryContentRepository:
    """Articles held in memory, for previews and tests."""

    def __init__(self, records: list[ArticleRecord] | None = None) -> None:
        self._records = {record.slug: record for record in records or []}

    def add(self, record: ArticleRecord) -> None:
        """Insert or replace an article."""
        self._records[record.slug] = record

    async def get_article(self, slug: str) -> ArticleRecord | None:
        """Return the article with ``slug``, or None."""
        return self._records.get(slug)

    async def list_articles(self) -> list[ArticleRecord]:
        """Return every article."""
        return list(self._records.values())
