"""FastAPI application exposing the fetchers and the summarizer.

Endpoints:
    GET  /health            liveness probe
    GET  /api/github        trending GitHub repositories
    GET  /api/huggingface   popular Hugging Face Spaces
    GET  /api/projects      both sources merged and ranked
    POST /api/summarize     cached LLM summary of a text

Error Response Format:
    {"error": "Human-readable error message"}

One `Summarizer`, and so one summary cache, lives on `app.state` for the
lifetime of the process.
"""
from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aitrends import __version__
from aitrends.core.aggregator import aggregate_projects
from aitrends.core.config import Settings, get_settings
from aitrends.core.errors import AggregationError, UpstreamError, ValidationError
from aitrends.core.github import FAILURE_MESSAGE as GITHUB_FAILURE, fetch_github_projects
from aitrends.core.huggingface import FAILURE_MESSAGE as HF_FAILURE, fetch_huggingface_projects
from aitrends.core.log import configure_logging
from aitrends.core.models import SummarizeRequest
from aitrends.core.summarizer import Summarizer

logger = logging.getLogger(__name__)

SUMMARIZE_FAILURE = "Failed to summarize text"


def _error(message: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def setup_exception_handlers(app: FastAPI) -> None:
    """Map aitrends errors to HTTP responses."""

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(_: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected request body: %s", exc.errors())
        return _error("Invalid request body. Text is required", status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(ValidationError)
    async def _validation(_: Request, exc: ValidationError) -> JSONResponse:
        return _error(exc.message, status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(UpstreamError)
    async def _upstream(_: Request, exc: UpstreamError) -> JSONResponse:
        return _error(exc.message, status.HTTP_502_BAD_GATEWAY)

    @app.exception_handler(AggregationError)
    async def _aggregation(_: Request, exc: AggregationError) -> JSONResponse:
        return _error(exc.message, status.HTTP_502_BAD_GATEWAY)


def create_app(settings: Settings | None = None,
               summarizer: Summarizer | None = None,
               client: httpx.AsyncClient | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Overrides `get_settings()`.
        summarizer: Shared summarizer; one is created from settings when omitted.
        client: HTTP client for the source fetchers. When omitted, one is
            opened on startup and closed on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Starting aitrends API v%s...", __version__)
        own_client = app.state.client is None
        if own_client:
            app.state.client = httpx.AsyncClient(timeout=20.0)
        yield
        logger.info("Shutting down aitrends API...")
        if own_client:
            await app.state.client.aclose()
            app.state.client = None
        await app.state.summarizer.aclose()

    app = FastAPI(title="AI Trends Aggregator", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.summarizer = summarizer or Summarizer(settings=settings)
    app.state.client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    setup_exception_handlers(app)

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/api/github")
    async def github_projects(request: Request):
        try:
            result = await fetch_github_projects(request.app.state.client, settings)
        except Exception:
            logger.exception("Error in GitHub API route")
            return _error(GITHUB_FAILURE, status.HTTP_500_INTERNAL_SERVER_ERROR, projects=[])
        return result.to_wire()

    @app.get("/api/huggingface")
    async def huggingface_projects(request: Request):
        try:
            result = await fetch_huggingface_projects(request.app.state.client, settings)
        except Exception:
            logger.exception("Error in Hugging Face API route")
            return _error(HF_FAILURE, status.HTTP_500_INTERNAL_SERVER_ERROR, projects=[])
        return result.to_wire()

    @app.get("/api/projects")
    async def all_projects(request: Request):
        projects = await aggregate_projects(request.app.state.client, settings)
        return {"projects": [p.to_wire() for p in projects], "count": len(projects)}

    @app.post("/api/summarize")
    async def summarize(request: Request, body: SummarizeRequest):
        try:
            result = await request.app.state.summarizer.summarize(
                body.text, api_key=body.api_key, provider=body.provider
            )
        except (ValidationError, UpstreamError):
            raise
        except Exception:
            logger.exception("Error in summarize API")
            return _error(SUMMARIZE_FAILURE, status.HTTP_500_INTERNAL_SERVER_ERROR)
        return result.model_dump()

    return app


def serve_app() -> FastAPI:
    """Application factory for `uvicorn --factory`.

    Settings come from `get_settings()`, so `AITRENDS_CONFIG` and `LOG_LEVEL`
    set by the parent process reach reloaded workers.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    return create_app(settings)


# Application instance for uvicorn
app = create_app()
