"""Command-line interface for aitrends.

This module provides the CLI for fetching, summarizing and serving.
"""

from .main import main

__all__ = ["main"]
