"""Configuration for inkpress."""

from .models import SUPPORTED_LANGUAGES, RenderConfig, ServerConfig

__all__ = ["SUPPORTED_LANGUAGES", "RenderConfig", "ServerConfig"]
