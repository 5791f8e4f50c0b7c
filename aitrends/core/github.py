"""GitHub search client for trending AI/ML repositories.

Runs one repository search per AI/ML topic, restricted to repositories
pushed in the last 24 hours with more than `min_stars` stars, then merges,
filters and ranks the results into `Project` records.

Environment Variables:
    GITHUB_TOKEN: Optional GitHub personal access token for higher rate limits.
                  If not provided, requests will use unauthenticated rate limits.

Rate Limits:
    - Unauthenticated: 10 search requests/minute per IP
    - Authenticated: 30 search requests/minute per token

Example:
    ```python
    import asyncio
    from aitrends.core.github import fetch_github_projects

    result = asyncio.run(fetch_github_projects())
    for project in result.projects[:5]:
        print(project.stars, project.name)
    ```
"""
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional
import asyncio
import logging

import httpx

from .config import Settings, get_settings
from .models import FetchResult, Project, Source

logger = logging.getLogger(__name__)

GH_API = "https://api.github.com"

# Query order matters: the first query to return a repository wins the merge.
AI_TOPICS = (
    "AI",
    "machine-learning",
    "artificial-intelligence",
    "deep-learning",
    "llm",
    "nlp",
)

AI_KEYWORDS = (
    "ai",
    "machine-learning",
    "artificial-intelligence",
    "ml",
    "deep-learning",
    "neural-network",
    "llm",
    "nlp",
)

NO_DESCRIPTION = "No description available"
UNKNOWN_LANGUAGE = "Unknown"
FAILURE_MESSAGE = "Failed to fetch GitHub projects"


def _headers(token: str | None = None) -> Dict[str, str]:
    """Construct HTTP headers for GitHub API requests.

    Returns:
        Headers including Accept, and Authorization if a token is given.
    """
    h = {"Accept": "application/vnd.github.v3+json"}
    if token:
        h["Authorization"] = f"Bearer {token}"
    return h


def cutoff_date(now: datetime | None = None) -> str:
    """Return the UTC calendar date 24 hours before `now` as YYYY-MM-DD."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return (now - timedelta(days=1)).date().isoformat()


def build_queries(cutoff: str, min_stars: int = 10) -> List[str]:
    """Return one search query per topic in `AI_TOPICS`, in order."""
    return [f"topic:{topic} pushed:>{cutoff} stars:>{min_stars}" for topic in AI_TOPICS]


async def search_repositories(client: httpx.AsyncClient, query: str,
                              per_page: int = 30, token: str | None = None) -> List[Dict[str, Any]]:
    """Run one repository search and return its `items`.

    Raises:
        httpx.HTTPError: On transport failure or a non-2xx response.
    """
    r = await client.get(
        f"{GH_API}/search/repositories",
        params={"q": query, "sort": "stars", "order": "desc", "per_page": per_page},
        headers=_headers(token),
    )
    r.raise_for_status()
    return r.json().get("items") or []


async def _run_query(client: httpx.AsyncClient, query: str,
                     per_page: int, token: str | None) -> Optional[List[Dict[str, Any]]]:
    """Run a query, returning None instead of raising when it fails."""
    try:
        return await search_repositories(client, query, per_page=per_page, token=token)
    except httpx.HTTPStatusError as e:
        logger.error("GitHub API error %d for query %r", e.response.status_code, query)
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Error fetching query %r: %s", query, e)
    return None


def merge_repos(batches: Iterable[Iterable[Dict[str, Any]]]) -> Dict[str, Dict[str, Any]]:
    """Merge search batches by `full_name`; the first occurrence wins."""
    merged: Dict[str, Dict[str, Any]] = {}
    for batch in batches:
        for repo in batch:
            full_name = repo.get("full_name")
            if full_name and full_name not in merged:
                merged[full_name] = repo
    return merged


def has_ai_topic(repo: Dict[str, Any]) -> bool:
    """True if the repository's topics mention any of `AI_KEYWORDS`.

    Topics are lower-cased and joined before a substring test, so a topic
    such as `generative-ai` or `mlops` also counts.
    """
    joined = " ".join(t.lower() for t in repo.get("topics") or [])
    return any(keyword in joined for keyword in AI_KEYWORDS)


def to_project(repo: Dict[str, Any]) -> Project:
    return Project(
        id=str(repo["id"]),
        name=repo["full_name"],
        description=repo.get("description") or NO_DESCRIPTION,
        url=repo.get("html_url") or f"https://github.com/{repo['full_name']}",
        stars=repo.get("stargazers_count") or 0,
        language=repo.get("language") or UNKNOWN_LANGUAGE,
        topics=list(repo.get("topics") or []),
        source=Source.GITHUB,
    )


def repos_to_projects(repos: Iterable[Dict[str, Any]]) -> List[Project]:
    """Map AI/ML repositories to projects, most starred first.

    A malformed item is logged and skipped without affecting its siblings.
    """
    projects: List[Project] = []
    for repo in repos:
        try:
            if has_ai_topic(repo):
                projects.append(to_project(repo))
        except Exception as e:
            logger.error("Error processing repo %.80r: %s", repo, e)
    projects.sort(key=lambda p: p.stars, reverse=True)
    return projects


async def fetch_github_projects(client: httpx.AsyncClient | None = None,
                                settings: Settings | None = None,
                                now: datetime | None = None) -> FetchResult:
    """Fetch trending AI/ML repositories updated in the last 24 hours.

    Queries are sent concurrently and merged in topic order. A failed query
    is logged and skipped; only when every query fails does the result carry
    an error. Nothing is raised to the caller.

    Args:
        client: Shared HTTP client. A private one is created when omitted.
        settings: Overrides `get_settings()`.
        now: Reference time for the 24 hour window.

    Returns:
        FetchResult with at most `github_max_results` projects, most starred first.
    """
    settings = settings or get_settings()
    own_client = client is None
    if own_client:
        client = httpx.AsyncClient(timeout=20.0)
    try:
        queries = build_queries(cutoff_date(now), settings.github_min_stars)
        batches = await asyncio.gather(*(
            _run_query(client, q, settings.github_per_page, settings.github_token)
            for q in queries
        ))

        succeeded = [b for b in batches if b is not None]
        if not succeeded:
            logger.error("All %d GitHub queries failed", len(queries))
            return FetchResult.failed(FAILURE_MESSAGE)

        merged = merge_repos(succeeded)
        projects = repos_to_projects(merged.values())
        projects = projects[: settings.github_max_results]

        logger.info("Fetched %d GitHub projects (%d unique repos from %d/%d queries)",
                    len(projects), len(merged), len(succeeded), len(queries))
        return FetchResult.of(projects)
    except Exception:
        logger.exception("Unexpected error while fetching GitHub projects")
        return FetchResult.failed(FAILURE_MESSAGE)
    finally:
        if own_client:
            await client.aclose()
