"""Cached, provider-agnostic text summarization.

`Summarizer` ties the summary cache to the provider registry:

1. reject empty text and unknown providers before anything else;
2. sweep expired cache entries and look the text up by hash;
3. on a hit, answer from the cache without needing an API key;
4. otherwise require an API key, call the provider once, cache the result.

Concurrent requests for the same uncached text may each reach the provider;
the cache does not coordinate in-flight calls.

Example:
    ```python
    summarizer = Summarizer()
    result = await summarizer.summarize(
        "A tool for fast vector search.", api_key="sk-...", provider="openai"
    )
    print(result.summary, result.cached)
    ```
"""
from __future__ import annotations
from typing import Any
import logging

import httpx
from langfuse import get_client

from .cache import SummaryCache, hash_text
from .config import Settings, get_settings
from .errors import CredentialRequiredError, ValidationError
from .models import SummaryResult
from .providers import Provider, get_provider, load_prompt_template

logger = logging.getLogger(__name__)

CREDENTIAL_REQUIRED = "API key is required. Please set it in Settings."


class Summarizer:
    """Summarization service owning one cache and one HTTP client.

    Attributes:
        cache: The shared summary cache.
        settings: Provider defaults and the prompt template.
    """

    def __init__(self, cache: SummaryCache | None = None,
                 settings: Settings | None = None,
                 client: httpx.AsyncClient | None = None):
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else SummaryCache(ttl_seconds=self.settings.cache_ttl_seconds)
        self._client = client
        self._prompt = load_prompt_template(self.settings.prompt_template)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=60.0)
        return self._client

    async def aclose(self) -> None:
        """Close the owned HTTP client and flush pending Langfuse traces."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        get_client().flush()

    def provider(self, name: str | None = None) -> Provider:
        """Resolve a provider configured from settings.

        Raises:
            UnsupportedProviderError: If `name` is not registered.
        """
        return get_provider(
            self.settings.default_provider if name is None else name,
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
            prompt=self._prompt,
        )

    async def summarize(self, text: Any, api_key: str | None = None,
                        provider: str | None = None) -> SummaryResult:
        """Summarize `text`, answering from the cache when possible.

        Args:
            text: Text to summarize; must be a non-empty string.
            api_key: Credential for the provider; needed only on a cache miss.
            provider: Registry name, defaults to `settings.default_provider`.

        Returns:
            SummaryResult with `cached=True` when served from the cache.

        Raises:
            ValidationError: Empty text.
            UnsupportedProviderError: Unknown provider name.
            CredentialRequiredError: Cache miss without an API key.
            UpstreamError: The provider call failed; nothing is cached.
        """
        if not text or not isinstance(text, str):
            raise ValidationError("Text is required")

        backend = self.provider(provider)

        self.cache.sweep()
        key = hash_text(text)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Summary cache hit for key %s", key)
            return SummaryResult(summary=cached, cached=True)

        if not api_key:
            raise CredentialRequiredError(CREDENTIAL_REQUIRED)

        summary = await backend.generate_summary(text, api_key, self._get_client())
        self.cache.set(key, summary)
        logger.info("Summarized %d chars with %s (%s)", len(text), backend.name, backend.model)
        return SummaryResult(summary=summary, cached=False)
