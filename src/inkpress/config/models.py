"""Configuration models for inkpress."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Fence language aliases accepted by the highlighter, mapped to Pygments lexer names
SUPPORTED_LANGUAGES: dict[str, str] = {
    "js": "javascript",
    "javascript": "javascript",
    "ts": "typescript",
    "typescript": "typescript",
    "vue": "html",
    "py": "python",
    "python": "python",
    "bash": "bash",
    "sh": "bash",
    "shell": "bash",
    "json": "json",
    "html": "html",
    "css": "css",
    "scss": "scss",
    "md": "markdown",
    "markdown": "markdown",
    "yaml": "yaml",
    "yml": "yaml",
    "sql": "sql",
    "go": "go",
    "rust": "rust",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
}

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class RenderConfig:
    """Configuration for the Markdown rendering pipeline."""

    extensions: list[str] = field(default_factory=list)  # Markdown extensions to enable
    extension_configs: dict[str, Any] = field(
        default_factory=dict
    )  # Extension-specific settings
    syntax_theme: str = "one-dark"  # Pygments style name
    anchor_levels: tuple[int, ...] = (1, 2, 3)  # Heading levels that get ids and TOC entries
    languages: dict[str, str] = field(default_factory=lambda: dict(SUPPORTED_LANGUAGES))
    cache_size: int = 128  # Max number of rendered documents to cache

    @classmethod
    def default(cls) -> "RenderConfig":
        """Create default configuration for blog article bodies."""
        return cls(
            extensions=[
                "markdown.extensions.smarty",
                "markdown.extensions.tables",
                "pymdownx.magiclink",
                "pymdownx.tilde",
                "pymdownx.arithmatex",
                "pymdownx.superfences",
            ],
            extension_configs={
                "markdown.extensions.smarty": {
                    "smart_quotes": True,
                    "smart_dashes": True,
                    "smart_ellipses": True,
                },
                "pymdownx.magiclink": {
                    "hide_protocol": False,
                },
                "pymdownx.tilde": {
                    "subscript": False,
                },
                "pymdownx.arithmatex": {
                    "generic": True,  # works with KaTeX auto-render
                },
            },
            syntax_theme="one-dark",
            anchor_levels=(1, 2, 3),
            cache_size=128,
        )

    def validate(self) -> None:
        """Validate configuration values."""
        if not self.anchor_levels:
            raise ValueError("At least one anchor level is required")
        if any(level < 1 or level > 6 for level in self.anchor_levels):
            raise ValueError(f"Anchor levels must be 1-6: {self.anchor_levels}")
        if self.cache_size < 0:
            raise ValueError("Cache size must not be negative")


@dataclass
class ServerConfig:
    """Configuration for the API server."""

    host: str = "127.0.0.1"  # Bind address
    port: int = 8000  # Port number
    content_path: Path = Path("content")  # Directory of Markdown articles
    log_level: str = "INFO"  # Logging level
    render: RenderConfig = field(default_factory=RenderConfig.default)

    def validate(self) -> None:
        """Validate configuration values."""
        if not (1024 <= self.port <= 65535):
            raise ValueError("Port must be 1024-65535")
        if not self.content_path.is_dir():
            raise ValueError(f"Content directory does not exist: {self.content_path}")
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")
        self.render.validate()
