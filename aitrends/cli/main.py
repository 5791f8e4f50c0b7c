"""Command-line interface for aitrends.

This module provides the CLI for fetching trending AI/ML projects, summarizing
a description with an LLM provider, and serving the HTTP API.

Usage:
    ```bash
    # Both sources, merged and ranked, as JSON
    aitrends fetch

    # Top 10 GitHub repositories as Markdown
    aitrends fetch --source github --limit 10 --format md

    # Summarize a description (key from --api-key or OPENAI_API_KEY)
    aitrends summarize "A tool for fast vector search." --provider openai

    # Run the HTTP service
    aitrends serve --port 8000
    ```

Configuration:
    The CLI supports configuration via:
    - Command-line arguments (highest priority)
    - Environment variables
    - config.toml file (lowest priority)
"""
from __future__ import annotations
from typing import Any, Dict, List
import argparse
import asyncio
import json
import os
import sys

from ..core.aggregator import aggregate_projects
from ..core.config import CONFIG_PATH_ENV, Settings, load_settings
from ..core.errors import AitrendsError
from ..core.github import fetch_github_projects
from ..core.huggingface import fetch_huggingface_projects
from ..core.log import configure_logging
from ..core.models import Project
from ..core.providers import PROVIDERS
from ..core.summarizer import Summarizer

# Conventional environment variables holding each provider's key
API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "groq": "GROQ_API_KEY",
}


class CommandError(Exception):
    """A command failed in a way that should be reported, not traced."""


def to_markdown(items: List[Dict[str, Any]]) -> str:
    """Convert a list of project dictionaries to Markdown format.

    Args:
        items: Projects in their wire form.

    Returns:
        A Markdown-formatted string, one bullet per project.
    """
    lines = []
    for it in items:
        meta = f" ({it['stars']} ★, _{it['language']}_)"
        desc = f": {it['summary']}" if it.get("summary") else (f": {it['description']}" if it.get("description") else "")
        lines.append(f"- [{it['name']}]({it['url']}){meta}{desc}")
    return "\n".join(lines)


async def _fetch(source: str, settings: Settings) -> List[Project]:
    if source == "github":
        result = await fetch_github_projects(settings=settings)
    elif source == "huggingface":
        result = await fetch_huggingface_projects(settings=settings)
    else:
        return await aggregate_projects(settings=settings)
    if not result.ok:
        raise CommandError(result.error)
    return result.projects


def run_fetch(args: argparse.Namespace, settings: Settings) -> None:
    projects = asyncio.run(_fetch(args.source, settings))
    if args.limit:
        projects = projects[: args.limit]
    items = [p.to_wire() for p in projects]

    if args.format == "json":
        payload = json.dumps(items, ensure_ascii=False, indent=2)
    else:
        payload = to_markdown(items)

    if args.out:
        os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(payload)
        print(f"wrote {args.out} ({len(items)} projects)")
    else:
        print(payload)


async def _summarize(text: str, api_key: str | None, provider: str, settings: Settings) -> str:
    summarizer = Summarizer(settings=settings)
    try:
        result = await summarizer.summarize(text, api_key=api_key, provider=provider)
    finally:
        await summarizer.aclose()
    return result.summary


def run_summarize(args: argparse.Namespace, settings: Settings) -> None:
    provider = args.provider or settings.default_provider
    api_key = args.api_key or os.getenv(API_KEY_ENV.get(provider, ""), "") or None
    print(asyncio.run(_summarize(args.text, api_key, provider, settings)))


def run_serve(args: argparse.Namespace, settings: Settings) -> None:
    import uvicorn

    from ..api.app import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    log_level = settings.log_level.lower()
    configure_logging(settings.log_level)

    if args.reload:
        # Reloaded workers rebuild the app from the environment
        if args.config:
            os.environ[CONFIG_PATH_ENV] = args.config
        os.environ["LOG_LEVEL"] = settings.log_level
        uvicorn.run("aitrends.api.app:serve_app", factory=True, host=host, port=port,
                    reload=True, log_level=log_level)
    else:
        uvicorn.run(create_app(settings), host=host, port=port, log_level=log_level)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="aitrends", description="Trending AI/ML projects from GitHub and Hugging Face.")
    p.add_argument("--config", help="Path to config.toml (defaults to ./config.toml if present)")
    p.add_argument("--log-level", help="Logging level (default from config, INFO)")
    sub = p.add_subparsers(dest="command", required=True)

    f = sub.add_parser("fetch", help="Fetch and print trending projects")
    f.add_argument("--source", choices=["all", "github", "huggingface"], default="all",
                   help="Which source to query (default: all, merged)")
    f.add_argument("--format", choices=["json", "md"], default="json", help="Output format")
    f.add_argument("--limit", type=int, default=0, help="Print at most N projects (0 = all)")
    f.add_argument("--out", help="Write to file instead of stdout")
    f.set_defaults(handler=run_fetch)

    s = sub.add_parser("summarize", help="Summarize a text with an LLM provider")
    s.add_argument("text", help="Text to summarize")
    s.add_argument("--provider", choices=sorted(PROVIDERS), help="Provider (default from config: openai)")
    s.add_argument("--api-key", help="Provider API key (default: provider's environment variable)")
    s.set_defaults(handler=run_summarize)

    v = sub.add_parser("serve", help="Run the HTTP API")
    v.add_argument("--host", help="Bind host (default from config)")
    v.add_argument("--port", type=int, help="Bind port (default from config)")
    v.add_argument("--reload", action="store_true", help="Reload on code changes")
    v.set_defaults(handler=run_serve)

    return p


def main(argv: List[str] | None = None) -> int:
    """Entry point for the CLI.

    Returns:
        Process exit code: 0 on success, 1 when the command reported an error.
    """
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config or "config.toml")
    if args.log_level:
        settings.log_level = args.log_level.upper()
    configure_logging(settings.log_level, stream=sys.stderr)

    try:
        args.handler(args, settings)
    except (AitrendsError, CommandError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
