"""Application settings and configuration."""

import os
from pathlib import Path

from inkpress.config.models import SUPPORTED_LANGUAGES, RenderConfig, ServerConfig

# Default settings
DEFAULT_HOST = os.getenv("INKPRESS_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("INKPRESS_PORT", "8000"))
DEFAULT_LOG_LEVEL = os.getenv("INKPRESS_LOG_LEVEL", "INFO")
DEFAULT_CONTENT_DIR = Path(os.getenv("INKPRESS_CONTENT_DIR", "content"))
DEFAULT_SYNTAX_THEME = os.getenv("INKPRESS_SYNTAX_THEME", "one-dark")


# Rendering defaults
def get_default_render_config() -> RenderConfig:
    """Get default render configuration with environment overrides applied."""
    config = RenderConfig.default()
    config.syntax_theme = DEFAULT_SYNTAX_THEME
    return config


# Server defaults
def get_default_server_config(content_path: Path | None = None) -> ServerConfig:
    """Get default server configuration."""
    return ServerConfig(
        host=DEFAULT_HOST,
        port=DEFAULT_PORT,
        content_path=content_path or DEFAULT_CONTENT_DIR,
        log_level=DEFAULT_LOG_LEVEL,
        render=get_default_render_config(),
    )


# Content settings
MARKDOWN_SUFFIXES = (".md", ".markdown")
MAX_FILE_SIZE_MB = 10
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024

__all__ = [
    "SUPPORTED_LANGUAGES",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_CONTENT_DIR",
    "DEFAULT_SYNTAX_THEME",
    "get_default_render_config",
    "get_default_server_config",
    "MARKDOWN_SUFFIXES",
    "MAX_FILE_SIZE_BYTES",
]
