"""Hugging Face Hub client for popular Spaces.

Fetches a single page of Spaces sorted by likes and maps them to `Project`
records. The Hub returns loosely shaped items, so descriptions, likes and
SDK labels are resolved from several candidate fields in order.

Papers are not fetched: the Hub has no stable JSON listing for them.
"""
from __future__ import annotations
from typing import Any, Dict, List
import logging

import httpx

from .config import Settings, get_settings
from .models import FetchResult, Project, Source

logger = logging.getLogger(__name__)

HF_API = "https://huggingface.co/api"
HF_SPACES_URL = "https://huggingface.co/spaces"

SPACE_TOPICS = ("space", "demo", "ai")
DEFAULT_SDK = "Gradio"
FAILURE_MESSAGE = "Failed to fetch Hugging Face content"


def _card(space: Dict[str, Any]) -> Dict[str, Any]:
    card = space.get("card") or space.get("cardData") or {}
    return card if isinstance(card, dict) else {}


def space_description(space: Dict[str, Any]) -> str:
    """Resolve a description: description, card short/long, title, id."""
    card = _card(space)
    return (
        space.get("description")
        or card.get("short_description")
        or card.get("description")
        or space.get("title")
        or space.get("id")
        or ""
    )


def space_likes(space: Dict[str, Any]) -> int:
    likes = space.get("likes") or space.get("likeCount") or space.get("like_count") or 0
    try:
        return int(likes)
    except (TypeError, ValueError):
        return 0


def space_id(space: Dict[str, Any]) -> str:
    return space.get("id") or space.get("name") or ""


def to_project(space: Dict[str, Any]) -> Project:
    sid = space_id(space)
    owner = sid.split("/")[0] or "Hugging Face"
    return Project(
        id=f"hf_space_{sid.replace('/', '_')}",
        name=sid,
        description=space_description(space) or f"Interactive AI demo by {owner}",
        url=f"{HF_SPACES_URL}/{sid}",
        stars=space_likes(space),
        language=space.get("sdk") or _card(space).get("sdk") or DEFAULT_SDK,
        topics=list(SPACE_TOPICS),
        source=Source.HUGGINGFACE_SPACES,
    )


def spaces_to_projects(spaces: List[Dict[str, Any]]) -> List[Project]:
    """Map raw Spaces to projects, keeping only liked items with an id.

    Most Spaces on the Hub are AI/ML demos, so no topic filter is applied.
    """
    projects: List[Project] = []
    for space in spaces:
        try:
            if space_likes(space) > 0 and space_id(space):
                projects.append(to_project(space))
        except Exception as e:
            logger.error("Error processing space %.80r: %s", space, e)
    projects.sort(key=lambda p: p.stars, reverse=True)
    return projects


async def fetch_huggingface_projects(client: httpx.AsyncClient | None = None,
                                     settings: Settings | None = None) -> FetchResult:
    """Fetch the most liked Hugging Face Spaces.

    The request is bounded by `settings.hf_timeout`. A timeout, network error
    or non-2xx response yields a failed `FetchResult`; nothing is raised.
    """
    settings = settings or get_settings()
    own_client = client is None
    if own_client:
        client = httpx.AsyncClient()
    try:
        r = await client.get(
            f"{HF_API}/spaces",
            params={"sort": "likes", "direction": -1, "limit": settings.hf_limit},
            headers={"Accept": "application/json"},
            timeout=settings.hf_timeout,
        )
        if r.is_error:
            logger.error("HF API error: %d %s %s", r.status_code, r.reason_phrase, r.text[:200])
            return FetchResult.failed(FAILURE_MESSAGE)

        spaces = r.json()
        if not isinstance(spaces, list):
            logger.error("HF API returned %s instead of a list", type(spaces).__name__)
            return FetchResult.failed(FAILURE_MESSAGE)
        logger.info("Fetched %d spaces from Hugging Face", len(spaces))

        projects = spaces_to_projects(spaces)
        logger.info("Returning %d Hugging Face projects", len(projects))
        return FetchResult.of(projects)
    except httpx.TimeoutException:
        logger.error("HF API request timed out after %.1fs", settings.hf_timeout)
        return FetchResult.failed(FAILURE_MESSAGE)
    except Exception:
        logger.exception("Error fetching Hugging Face spaces")
        return FetchResult.failed(FAILURE_MESSAGE)
    finally:
        if own_client:
            await client.aclose()
