"""Fan-out over all project sources and merge into one ranked list."""
from __future__ import annotations
from functools import partial
from typing import Awaitable, Callable, Dict, List, Mapping, Sequence, Tuple, Union
import asyncio
import logging

import httpx

from .config import Settings
from .errors import AggregationError
from .github import fetch_github_projects
from .huggingface import fetch_huggingface_projects
from .models import FetchResult, Project
from .summarizer import Summarizer

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[FetchResult]]

AGGREGATE_FAILURE = "Failed to fetch projects"


def default_fetchers(client: httpx.AsyncClient | None = None,
                     settings: Settings | None = None) -> Dict[str, Fetcher]:
    return {
        "github": partial(fetch_github_projects, client=client, settings=settings),
        "huggingface": partial(fetch_huggingface_projects, client=client, settings=settings),
    }


def merge_results(outcomes: Sequence[Tuple[str, Union[FetchResult, BaseException]]]) -> List[Project]:
    """Concatenate successful source lists and rank them by popularity.

    Projects are not de-duplicated across sources: a repository that is also
    a Space appears twice.

    Raises:
        AggregationError: If every source failed.
    """
    merged: List[Project] = []
    succeeded = 0
    for name, outcome in outcomes:
        if isinstance(outcome, BaseException):
            logger.error("[%s] source failed entirely: %s", name, outcome)
            continue
        if not outcome.ok:
            logger.warning("[%s] source reported an error: %s", name, outcome.error)
            continue
        logger.info("[%s] %d projects", name, len(outcome.projects))
        merged.extend(outcome.projects)
        succeeded += 1

    if outcomes and not succeeded:
        raise AggregationError(AGGREGATE_FAILURE)

    merged.sort(key=lambda p: p.stars, reverse=True)
    return merged


async def aggregate_projects(client: httpx.AsyncClient | None = None,
                             settings: Settings | None = None,
                             fetchers: Mapping[str, Fetcher] | None = None) -> List[Project]:
    """Run every source concurrently and return the merged ranking.

    One source failing, by error value or by exception, never hides the
    results of the others.

    Raises:
        AggregationError: If all sources failed.
    """
    if fetchers is None:
        fetchers = default_fetchers(client, settings)
    names = list(fetchers)
    results = await asyncio.gather(*(fetchers[n]() for n in names), return_exceptions=True)
    projects = merge_results(list(zip(names, results)))
    logger.info("Total projects: %d", len(projects))
    return projects


async def summarize_project(project: Project, summarizer: Summarizer,
                            api_key: str | None = None,
                            provider: str | None = None) -> Project:
    """Summarize one project's description on demand.

    Returns a copy of `project` carrying the summary. If summarization fails
    the exception propagates and `project` is left as it was.
    """
    result = await summarizer.summarize(project.description, api_key=api_key, provider=provider)
    return project.with_summary(result.summary)
