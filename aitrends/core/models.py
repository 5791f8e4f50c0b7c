"""Data models shared by the fetchers, the summarizer and the HTTP service.

`Project` is the unifying record for anything discovered on GitHub or
Hugging Face. Its JSON form is wire-stable:

    {id, name, description, url, stars, language, topics, source?, summary?}

Optional fields are omitted rather than sent as null, see `Project.to_wire`.
"""
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Source(str, Enum):
    """Origin system of a project."""

    GITHUB = "github"
    HUGGINGFACE_SPACES = "huggingface_spaces"
    HUGGINGFACE_PAPERS = "huggingface_papers"


class Project(BaseModel):
    """A discovered repository or demo, normalized across sources."""

    id: str
    name: str
    description: str
    url: str
    stars: int = Field(ge=0)
    language: str
    topics: List[str] = Field(default_factory=list)
    source: Optional[Source] = None
    summary: Optional[str] = None

    def with_summary(self, summary: str) -> "Project":
        """Return a copy with `summary` attached; this instance is unchanged."""
        return self.model_copy(update={"summary": summary})

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class FetchResult(BaseModel):
    """Outcome of one source fetch.

    A failed fetch is still a value: `error` is set and `projects` holds
    whatever could be salvaged (normally nothing).
    """

    projects: List[Project] = Field(default_factory=list)
    count: int = 0
    error: Optional[str] = None

    @classmethod
    def of(cls, projects: List[Project]) -> "FetchResult":
        return cls(projects=projects, count=len(projects))

    @classmethod
    def failed(cls, message: str) -> "FetchResult":
        return cls(projects=[], count=0, error=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "projects": [p.to_wire() for p in self.projects],
            "count": self.count,
        }
        if self.error:
            payload["error"] = self.error
        return payload


class SummaryResult(BaseModel):
    summary: str
    cached: bool = False


class SummarizeRequest(BaseModel):
    """Body of `POST /api/summarize`.

    Every field is optional at the schema level so that a missing `text`
    is reported by the summarizer as a validation error rather than by
    the framework.
    """

    model_config = {"populate_by_name": True}

    text: Optional[str] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    provider: Optional[str] = None
