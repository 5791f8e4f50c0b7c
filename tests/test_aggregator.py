"""Tests for cross-source merging and on-demand project summaries."""

import asyncio

import httpx
import pytest

from aitrends.core.aggregator import aggregate_projects, merge_results, summarize_project
from aitrends.core.errors import AggregationError, UpstreamError
from aitrends.core.models import FetchResult, Project, Source
from aitrends.core.summarizer import Summarizer


def project(name, stars, source=Source.GITHUB):
    return Project(
        id=f"{source.value}:{name}",
        name=name,
        description=f"{name} does things",
        url=f"https://example.com/{name}",
        stars=stars,
        language="Python",
        topics=["ai"],
        source=source,
    )


def returning(result):
    async def fetcher():
        return result
    return fetcher


def raising(exc):
    async def fetcher():
        raise exc
    return fetcher


def aggregate(**fetchers):
    return asyncio.run(aggregate_projects(fetchers=fetchers))


GITHUB = FetchResult.of([project("org/a", 500), project("org/b", 20)])
HUB = FetchResult.of([
    project("space/x", 300, Source.HUGGINGFACE_SPACES),
    project("space/y", 10, Source.HUGGINGFACE_SPACES),
])


class TestAggregate:
    """Test fan-out, failure isolation and ranking."""

    def test_merged_and_sorted_by_popularity(self):
        projects = aggregate(github=returning(GITHUB), huggingface=returning(HUB))
        assert [p.name for p in projects] == ["org/a", "space/x", "org/b", "space/y"]

    def test_github_failure_keeps_hub_results(self):
        projects = aggregate(
            github=returning(FetchResult.failed("Failed to fetch GitHub projects")),
            huggingface=returning(HUB),
        )
        assert projects == HUB.projects
        assert projects

    def test_hub_exception_keeps_github_results(self):
        projects = aggregate(
            github=returning(GITHUB),
            huggingface=raising(httpx.ConnectError("down")),
        )
        assert [p.name for p in projects] == ["org/a", "org/b"]

    def test_both_failing_is_one_aggregate_error(self):
        with pytest.raises(AggregationError, match="Failed to fetch projects"):
            aggregate(
                github=raising(RuntimeError("boom")),
                huggingface=returning(FetchResult.failed("Failed to fetch Hugging Face content")),
            )

    def test_empty_but_successful_sources_are_not_an_error(self):
        assert aggregate(github=returning(FetchResult.of([])), huggingface=returning(FetchResult.of([]))) == []

    def test_no_cross_source_deduplication(self):
        """The same project from both sources is listed twice."""
        same_gh = project("org/model", 42)
        same_hf = project("org/model", 42, Source.HUGGINGFACE_SPACES)
        projects = aggregate(
            github=returning(FetchResult.of([same_gh])),
            huggingface=returning(FetchResult.of([same_hf])),
        )
        assert [p.name for p in projects] == ["org/model", "org/model"]
        assert [p.source for p in projects] == [Source.GITHUB, Source.HUGGINGFACE_SPACES]

    def test_fetchers_run_concurrently(self):
        started = []

        def slow(name, result):
            async def fetcher():
                started.append(name)
                await asyncio.sleep(0.05)
                assert len(started) == 2, "other source should start before this one finishes"
                return result
            return fetcher

        projects = aggregate(github=slow("github", GITHUB), huggingface=slow("huggingface", HUB))
        assert len(projects) == 4

    def test_empty_fetcher_mapping_is_respected(self):
        """An explicit empty mapping runs no source instead of the default ones."""
        assert asyncio.run(aggregate_projects(fetchers={})) == []

    def test_merge_results_direct(self):
        merged = merge_results([("github", GITHUB), ("huggingface", ValueError("bad json"))])
        assert [p.name for p in merged] == ["org/a", "org/b"]


class TestSummarizeProject:
    """Test lazy, per-item summarization."""

    def test_returns_copy_with_summary(self, cache, settings, make_client):
        client = make_client(lambda r: httpx.Response(200, json={"choices": [{"message": {"content": "Short."}}]}))
        summarizer = Summarizer(cache=cache, settings=settings, client=client)
        original = project("org/a", 10)

        summarized = asyncio.run(summarize_project(original, summarizer, api_key="sk-test"))

        assert summarized.summary == "Short."
        assert summarized.name == original.name
        assert original.summary is None
        assert summarized.to_wire()["summary"] == "Short."
        assert "summary" not in original.to_wire()

    def test_failure_leaves_project_untouched(self, cache, settings, make_client):
        client = make_client(lambda r: httpx.Response(401, json={"error": {"message": "Invalid API key"}}))
        summarizer = Summarizer(cache=cache, settings=settings, client=client)
        original = project("org/a", 10)

        with pytest.raises(UpstreamError, match="Invalid API key"):
            asyncio.run(summarize_project(original, summarizer, api_key="sk-bad"))
        assert original.summary is None
