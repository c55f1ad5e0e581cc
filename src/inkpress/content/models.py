"""Article records and their wire view models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from inkpress.renderer.extensions import TocEntry


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _text(value: Any) -> str:
    """Coerce a possibly missing value to a string."""
    if value is None:
        return ""
    return str(value).strip()


def _flag(value: Any, default: bool) -> bool:
    """Parse a boolean that may arrive as text."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ("false", "0", "no", "off")


def _count(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


def _timestamp(value: Any, default: datetime | None = None) -> datetime:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""
    if value is None or value == "":
        return default or _now()
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"Invalid date: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class CategoryRef:
    """Category an article is filed under."""

    id: str = ""
    name: str = ""
    slug: str = ""

    @classmethod
    def from_value(cls, value: Any) -> "CategoryRef | None":
        """Build from a mapping, a bare name, or nothing."""
        if not value:
            return None
        if isinstance(value, Mapping):
            slug = _text(value.get("slug"))
            return cls(
                id=_text(value.get("_id") or value.get("id") or slug),
                name=_text(value.get("name")),
                slug=slug,
            )
        name = _text(value)
        slug = ref_slug(name)
        return cls(id=slug, name=name, slug=slug)

    def to_dict(self) -> dict[str, str]:
        """Serialize for JSON responses."""
        return {"_id": self.id, "name": self.name, "slug": self.slug}


@dataclass(frozen=True)
class TagRef(CategoryRef):
    """Tag attached to an article."""

    pass


def ref_slug(name: str) -> str:
    """Slug used for category and tag filters."""
    return "-".join(name.lower().split())


@dataclass
class ArticleRecord:
    """
    An article as supplied by a content repository.

    Only ``slug`` is required; every other field has the default the read
    path expects. Use ``from_mapping`` to build records from partial data so
    defaulting happens once, at the data-access boundary.
    """

    slug: str
    id: str = ""
    title: str = ""
    summary: str = ""
    content: str = ""  # Raw Markdown body
    cover_image: str = ""
    category: CategoryRef | None = None
    tags: list[TagRef] = field(default_factory=list)
    views: int = 0
    is_top: bool = False
    is_published: bool = True
    published_at: datetime = field(default_factory=_now)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ArticleRecord":
        """
        Build a record from a loosely-typed mapping.

        Accepts snake_case or camelCase keys. Tags may be a list or a
        comma-separated string.

        Raises:
            ValueError: If the slug is missing or a date cannot be parsed
        """
        slug = _text(data.get("slug"))
        if not slug:
            raise ValueError("Article slug is required")

        raw_tags = data.get("tags") or []
        if isinstance(raw_tags, str):
            raw_tags = [part for part in raw_tags.split(",") if part.strip()]
        tags = [tag for tag in (TagRef.from_value(item) for item in raw_tags) if tag]

        created_at = _timestamp(data.get("created_at") or data.get("createdAt"))
        return cls(
            slug=slug,
            id=_text(data.get("_id") or data.get("id") or slug),
            title=_text(data.get("title")),
            summary=_text(data.get("summary")),
            content=data.get("content") or "",
            cover_image=_text(data.get("cover_image") or data.get("coverImage")),
            category=CategoryRef.from_value(data.get("category")),
            tags=tags,
            views=_count(data.get("views")),
            is_top=_flag(data.get("is_top", data.get("isTop")), False),
            is_published=_flag(data.get("is_published", data.get("isPublished")), True),
            published_at=_timestamp(data.get("published_at") or data.get("publishedAt"), created_at),
            created_at=created_at,
            updated_at=_timestamp(data.get("updated_at") or data.get("updatedAt"), created_at),
        )

    def to_list_item(self) -> dict[str, Any]:
        """Serialize without content for article lists."""
        return {
            "_id": self.id,
            "title": self.title,
            "slug": self.slug,
            "summary": self.summary,
            "coverImage": self.cover_image,
            "category": self.category.to_dict() if self.category else None,
            "tags": [tag.to_dict() for tag in self.tags],
            "views": self.views,
            "isTop": self.is_top,
            "isPublished": self.is_published,
            "publishedAt": _iso(self.published_at),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def to_archive_item(self) -> dict[str, str]:
        """Serialize the lightweight archive shape."""
        return {
            "title": self.title,
            "slug": self.slug,
            "publishedAt": _iso(self.published_at),
        }

    def to_detail(self, html: str, toc: list[TocEntry] | tuple[TocEntry, ...]) -> dict[str, Any]:
        """Serialize with rendered content and table of contents."""
        detail = self.to_list_item()
        detail["content"] = html
        detail["cover"] = self.cover_image
        detail["toc"] = [entry.to_dict() for entry in toc]
        return detail

    def to_link(self) -> dict[str, str]:
        """Serialize as a previous/next navigation link."""
        return {"slug": self.slug, "title": self.title}
