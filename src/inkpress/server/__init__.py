"""FastAPI server components for inkpress."""

from .app import create_app

__all__ = ["create_app"]
