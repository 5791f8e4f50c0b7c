"""Exception hierarchy shared by the summarizer, aggregator and HTTP layer.

Fetchers do not raise these; they report failures inside `FetchResult`.
The HTTP layer maps each class to a status code:

    ValidationError (and subclasses)  -> 400
    UpstreamError, AggregationError   -> 502
"""
from __future__ import annotations


class AitrendsError(Exception):
    """Base class for errors reported to callers of aitrends."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AitrendsError):
    """The request was rejected before any network call."""


class CredentialRequiredError(ValidationError):
    """A summary was requested without an API key and was not cached."""


class UnsupportedProviderError(ValidationError):
    """The provider name is not in the registry."""

    def __init__(self, provider: str):
        super().__init__(f"Unsupported provider: {provider}")
        self.provider = provider


class UpstreamError(AitrendsError):
    """A text-generation provider rejected the call or could not be reached."""

    def __init__(self, message: str, provider: str, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class AggregationError(AitrendsError):
    """Every project source failed."""
