"""Pytest configuration and shared fixtures."""

from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from inkpress.config.models import RenderConfig, ServerConfig
from inkpress.content.models import ArticleRecord
from inkpress.content.repository import InMemoryContentRepository
from inkpress.renderer.engine import MarkdownRenderer
from inkpress.renderer.highlighter import Highlighter
from inkpress.server.app import create_app

SAMPLE_ARTICLE = """\
# Getting Started

Intro with a link to https://example.com and some math $a^2 + b^2 = c^2$.

## Install

```bash
pip install inkpress
```

### Verify

```fooscript
x=1
```

#### Too deep for the outline

## 你好 世界

Done.
"""


@pytest.fixture(scope="session")
def highlighter() -> Highlighter:
    """A highlighter with the default theme and languages."""
    return Highlighter()


@pytest.fixture
def renderer(highlighter: Highlighter) -> MarkdownRenderer:
    """A renderer with default configuration."""
    return MarkdownRenderer(highlighter, RenderConfig.default())


def make_record(slug: str, day: int, **fields) -> ArticleRecord:
    """Build a record created and published on day ``day`` of January 2024."""
    stamp = datetime(2024, 1, day, tzinfo=timezone.utc)
    data = {
        "slug": slug,
        "title": slug.replace("-", " ").title(),
        "created_at": stamp,
        "published_at": stamp,
        **fields,
    }
    return ArticleRecord.from_mapping(data)


@pytest.fixture
def sample_records() -> list[ArticleRecord]:
    """Three published articles and one draft."""
    return [
        make_record("first-post", 1, category="Notes", tags="python"),
        make_record("second-post", 2, content=SAMPLE_ARTICLE, category="Guides", tags="python, markdown"),
        make_record("third-post", 3, category="Notes", tags=["markdown"]),
        make_record("draft-post", 4, is_published="false"),
    ]


@pytest.fixture
def server_config(tmp_path: Path) -> ServerConfig:
    """Server configuration rooted in a temporary content directory."""
    return ServerConfig(content_path=tmp_path)


@pytest.fixture
def client(
    server_config: ServerConfig,
    sample_records: list[ArticleRecord],
    renderer: MarkdownRenderer,
) -> Generator[TestClient]:
    """API client over an in-memory repository."""
    app = create_app(
        server_config,
        repository=InMemoryContentRepository(sample_records),
        renderer=renderer,
    )
    with TestClient(app) as test_client:
        yield test_client
