"""Shared fixtures: settings without files or env, and mock HTTP clients."""

import os
from typing import Callable, List

import httpx
import pytest

from aitrends.core.cache import SummaryCache
from aitrends.core.config import Settings

# Keep test runs out of any Langfuse project configured in .env
os.environ.setdefault("LANGFUSE_TRACING_ENABLED", "false")


class FakeClock:
    """Manually advanced clock for cache TTL tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of config.toml and the environment."""
    return Settings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> SummaryCache:
    return SummaryCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by `handler`.

    Every request seen is appended to `client.requests` for inspection.
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        seen: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        client.requests = seen
        return client

    return _make


