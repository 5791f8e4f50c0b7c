"""Trending AI/ML projects from GitHub and Hugging Face, with LLM summaries.

This package can be used as a command-line tool, as an HTTP service and as a
Python SDK.

Features:
    - GitHub topic search for repositories active in the last 24 hours
    - Most liked Hugging Face Spaces
    - One merged ranking by stars/likes
    - On-demand summaries via OpenAI, Anthropic or Groq, cached for 5 minutes
    - FastAPI service and argparse CLI

Quick Start:
    ```python
    import asyncio
    import aitrends

    projects = asyncio.run(aitrends.aggregate_projects())

    summarizer = aitrends.Summarizer()
    result = asyncio.run(summarizer.summarize(projects[0].description, api_key="sk-..."))
    ```

CLI Usage:
    ```bash
    aitrends fetch --format md
    aitrends summarize "A tool for fast vector search." --provider groq
    aitrends serve
    ```
"""

__version__ = "0.1.0"

# Re-export main functionality for easy importing
from .core import (
    aggregate_projects,
    summarize_project,
    fetch_github_projects,
    fetch_huggingface_projects,
    Summarizer,
    SummaryCache,
    Project,
    FetchResult,
    SummaryResult,
    load_settings,
    Settings,
)

__all__ = [
    "aggregate_projects",
    "summarize_project",
    "fetch_github_projects",
    "fetch_huggingface_projects",
    "Summarizer",
    "SummaryCache",
    "Project",
    "FetchResult",
    "SummaryResult",
    "load_settings",
    "Settings",
]
