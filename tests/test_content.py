"""Tests for article records, file repository and listing."""

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

from inkpress.content.listing import adjacent_articles, list_archive, list_articles
from inkpress.content.models import ArticleRecord, CategoryRef, TagRef
from inkpress.content.repository import (
    ContentError,
    FileContentRepository,
    InMemoryContentRepository,
    parse_front_matter,
)
from inkpress.security.path_validator import SecurityError, is_safe_path, validate_path


class TestArticleRecord:
    """Defaulting at the data-access boundary."""

    def test_minimal_mapping_gets_defaults(self) -> None:
        record = ArticleRecord.from_mapping({"slug": "hello"})

        assert record.id == "hello"
        assert record.title == ""
        assert record.content == ""
        assert record.category is None
        assert record.tags == []
        assert record.views == 0
        assert record.is_top is False
        assert record.is_published is True
        assert record.published_at.tzinfo is not None

    def test_only_explicit_false_unpublishes(self) -> None:
        assert ArticleRecord.from_mapping({"slug": "a", "is_published": ""}).is_published
        assert ArticleRecord.from_mapping({"slug": "a", "isPublished": None}).is_published
        assert not ArticleRecord.from_mapping({"slug": "a", "is_published": "false"}).is_published
        assert not ArticleRecord.from_mapping({"slug": "a", "isPublished": False}).is_published

    def test_camel_case_keys_and_refs(self) -> None:
        record = ArticleRecord.from_mapping(
            {
                "_id": "64f0",
                "slug": "post",
                "coverImage": "/img/cover.png",
                "isTop": True,
                "views": "12",
                "category": {"_id": "c1", "name": "Notes", "slug": "notes"},
                "tags": [{"_id": "t1", "name": "Python", "slug": "python"}, None],
                "publishedAt": "2024-03-01T08:00:00Z",
            }
        )

        assert record.id == "64f0"
        assert record.cover_image == "/img/cover.png"
        assert record.is_top is True
        assert record.views == 12
        assert record.category == CategoryRef(id="c1", name="Notes", slug="notes")
        assert record.tags == [TagRef(id="t1", name="Python", slug="python")]
        assert record.published_at == datetime(2024, 3, 1, 8, tzinfo=timezone.utc)

    def test_bare_names_become_refs(self) -> None:
        record = ArticleRecord.from_mapping(
            {"slug": "post", "category": "Deep Dives", "tags": "Python, Web Dev"}
        )
        assert record.category == CategoryRef(id="deep-dives", name="Deep Dives", slug="deep-dives")
        assert [tag.slug for tag in record.tags] == ["python", "web-dev"]

    def test_missing_slug_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            ArticleRecord.from_mapping({"title": "No slug"})

    def test_bad_date_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            ArticleRecord.from_mapping({"slug": "a", "published_at": "yesterday"})

    def test_list_item_shape(self) -> None:
        record = ArticleRecord.from_mapping(
            {"slug": "post", "title": "Post", "created_at": "2024-01-02", "content": "# Body"}
        )
        item = record.to_list_item()

        assert "content" not in item
        assert item["createdAt"] == "2024-01-02T00:00:00Z"
        assert item["publishedAt"] == item["createdAt"]
        assert set(item) == {
            "_id", "title", "slug", "summary", "coverImage", "category", "tags",
            "views", "isTop", "isPublished", "publishedAt", "createdAt", "updatedAt",
        }


class TestFrontMatter:
    """Front matter parsing."""

    def test_parses_keys_and_body(self) -> None:
        metadata, body = parse_front_matter("---\nTitle: Hello\ntags: a, b\n---\n\n# Hello\n")
        assert metadata == {"title": "Hello", "tags": "a, b"}
        assert body == "# Hello"

    def test_without_front_matter(self) -> None:
        assert parse_front_matter("# Just text\n") == ({}, "# Just text\n")

    def test_unterminated_block(self) -> None:
        with pytest.raises(ContentError):
            parse_front_matter("---\ntitle: x\n# body\n")

    def test_line_without_colon(self) -> None:
        with pytest.raises(ContentError):
            parse_front_matter("---\njust words\n---\nbody\n")


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Content directory with a few article files."""
    (tmp_path / "hello-world.md").write_text(
        "---\ntitle: Hello World\ncategory: Notes\ntags: python\n"
        "created_at: 2024-01-01\n---\n\n# Hello World\n\nBody.\n",
        encoding="utf-8",
    )
    (tmp_path / "renamed.md").write_text(
        "---\nslug: custom-slug\ntitle: Custom\ncreated_at: 2024-01-02\n---\n\nText\n",
        encoding="utf-8",
    )
    nested = tmp_path / "2024"
    nested.mkdir()
    (nested / "nested-post.markdown").write_text("No front matter here.\n", encoding="utf-8")
    (tmp_path / "broken.md").write_text("---\ntitle: never closed\n", encoding="utf-8")
    hidden = tmp_path / ".drafts"
    hidden.mkdir()
    (hidden / "secret.md").write_text("# Secret\n", encoding="utf-8")
    return tmp_path


class TestFileContentRepository:
    """Articles loaded from disk."""

    @pytest.mark.asyncio
    async def test_lists_valid_articles(self, content_dir: Path) -> None:
        repository = FileContentRepository(content_dir)
        records = await repository.list_articles()
        assert sorted(record.slug for record in records) == [
            "custom-slug",
            "hello-world",
            "nested-post",
        ]

    @pytest.mark.asyncio
    async def test_get_by_file_stem(self, content_dir: Path) -> None:
        record = await FileContentRepository(content_dir).get_article("hello-world")

        assert record is not None
        assert record.title == "Hello World"
        assert record.category is not None and record.category.slug == "notes"
        assert record.content.startswith("# Hello World")
        assert record.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_get_by_front_matter_slug(self, content_dir: Path) -> None:
        record = await FileContentRepository(content_dir).get_article("custom-slug")
        assert record is not None
        assert record.title == "Custom"

    @pytest.mark.asyncio
    async def test_defaults_come_from_the_file(self, content_dir: Path) -> None:
        path = content_dir / "2024" / "nested-post.markdown"
        os.utime(path, (1_700_000_000, 1_700_000_000))

        records = await FileContentRepository(content_dir).list_articles()
        (record,) = [r for r in records if r.slug == "nested-post"]

        assert record.title == "Nested Post"
        assert record.created_at == datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)

    @pytest.mark.asyncio
    async def test_unknown_slug(self, content_dir: Path) -> None:
        assert await FileContentRepository(content_dir).get_article("missing") is None

    @pytest.mark.asyncio
    async def test_traversal_is_refused(self, content_dir: Path) -> None:
        with pytest.raises(SecurityError):
            await FileContentRepository(content_dir / "2024").get_article("../hello-world")

    @pytest.mark.asyncio
    async def test_broken_file_raises_on_direct_lookup(self, content_dir: Path) -> None:
        with pytest.raises(ContentError):
            await FileContentRepository(content_dir).get_article("broken")


class TestPathValidator:
    """Path checks used for slug lookups."""

    def test_inside_root(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("x", encoding="utf-8")
        assert validate_path(Path("a.md"), tmp_path) == (tmp_path / "a.md").resolve()

    def test_outside_root(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        root.mkdir()
        (tmp_path / "outside.md").write_text("x", encoding="utf-8")
        with pytest.raises(SecurityError):
            validate_path(Path("../outside.md"), root)
        assert not is_safe_path(Path("../outside.md"), root)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            validate_path(Path("nope.md"), tmp_path)


class TestListing:
    """List, archive and neighbour queries."""

    def test_published_newest_first(self, sample_records: list[ArticleRecord]) -> None:
        items = list_articles(sample_records)
        assert [item["slug"] for item in items] == ["third-post", "second-post", "first-post"]

    def test_category_and_tag_filters(self, sample_records: list[ArticleRecord]) -> None:
        notes = list_articles(sample_records, category="notes")
        assert [item["slug"] for item in notes] == ["third-post", "first-post"]

        markdown_tagged = list_articles(sample_records, tag="markdown")
        assert [item["slug"] for item in markdown_tagged] == ["third-post", "second-post"]

        assert list_articles(sample_records, category="unknown") == []

    def test_pagination_envelope(self, sample_records: list[ArticleRecord]) -> None:
        page = list_articles(sample_records, page=2, limit=2)

        assert page["total"] == 3
        assert page["page"] == 2
        assert page["limit"] == 2
        assert page["totalPages"] == 2
        assert [item["slug"] for item in page["articles"]] == ["first-post"]

    def test_archive(self, sample_records: list[ArticleRecord]) -> None:
        archive = list_archive(sample_records)
        assert archive[0] == {
            "title": "Third Post",
            "slug": "third-post",
            "publishedAt": "2024-01-03T00:00:00Z",
        }
        assert len(archive) == 3

    def test_adjacent_articles(self, sample_records: list[ArticleRecord]) -> None:
        by_slug = {record.slug: record for record in sample_records}

        previous, following = adjacent_articles(sample_records, by_slug["second-post"])
        assert previous is by_slug["first-post"]
        assert following is by_slug["third-post"]

        previous, following = adjacent_articles(sample_records, by_slug["first-post"])
        assert previous is None
        assert following is by_slug["second-post"]

    def test_adjacent_articles_skip_drafts(self, sample_records: list[ArticleRecord]) -> None:
        by_slug = {record.slug: record for record in sample_records}

        previous, following = adjacent_articles(sample_records, by_slug["third-post"])
        assert previous is by_slug["second-post"]
        assert following is None

    @pytest.mark.asyncio
    async def test_in_memory_repository(self, sample_records: list[ArticleRecord]) -> None:
        repository = InMemoryContentRepository(sample_records[:1])
        repository.add(sample_records[1])

        assert await repository.get_article("second-post") is sample_records[1]
        assert len(await repository.list_articles()) == 2
