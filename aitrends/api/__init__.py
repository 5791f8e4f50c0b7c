"""HTTP service for aitrends.

This module exposes the fetchers and the summarizer as a FastAPI application.
"""

from .app import create_app

__all__ = ["create_app"]
