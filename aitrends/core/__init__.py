"""Core functionality for AI/ML trend aggregation.

This module contains the core business logic for:
- GitHub and Hugging Face project fetching
- Merging and ranking across sources
- Cached LLM summarization
- Configuration management
"""

from .aggregator import aggregate_projects, summarize_project
from .cache import SummaryCache, hash_text
from .config import Settings, get_settings, load_settings
from .errors import (
    AggregationError,
    AitrendsError,
    CredentialRequiredError,
    UnsupportedProviderError,
    UpstreamError,
    ValidationError,
)
from .github import fetch_github_projects
from .huggingface import fetch_huggingface_projects
from .models import FetchResult, Project, Source, SummaryResult
from .providers import PROVIDERS, Provider, get_provider
from .summarizer import Summarizer

__all__ = [
    "aggregate_projects",
    "summarize_project",
    "SummaryCache",
    "hash_text",
    "Settings",
    "get_settings",
    "load_settings",
    "AggregationError",
    "AitrendsError",
    "CredentialRequiredError",
    "UnsupportedProviderError",
    "UpstreamError",
    "ValidationError",
    "fetch_github_projects",
    "fetch_huggingface_projects",
    "FetchResult",
    "Project",
    "Source",
    "SummaryResult",
    "PROVIDERS",
    "Provider",
    "get_provider",
    "Summarizer",
]
