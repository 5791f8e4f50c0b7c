"""Text-generation providers used to summarize project descriptions.

Every provider fulfils the same contract, `generate_summary(text, api_key,
client)`, and differs only in wire shape: endpoint, authentication headers,
request envelope and where the answer sits in the response.

Adding a provider means subclassing `Provider` (or `OpenAICompatibleProvider`
for services that mirror OpenAI's chat completions API) and registering the
class in `PROVIDERS`.

Example:
    ```python
    provider = get_provider("anthropic", max_tokens=150)
    async with httpx.AsyncClient() as client:
        summary = await provider.generate_summary(text, api_key, client)
    ```
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Type
import logging

import httpx
from langchain_core.prompts import PromptTemplate
from langfuse import get_client, observe

from .errors import UnsupportedProviderError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = (
    "Summarize the following text in up to 3 lines. "
    "Be concise and informative:\n\n{text}"
)
SUMMARY_NOT_AVAILABLE = "Summary not available"


def load_prompt_template(template: str | None = None) -> PromptTemplate:
    """Build the summary PromptTemplate; `template` must contain `{text}`."""
    return PromptTemplate.from_template((template or DEFAULT_PROMPT).strip())


def load_prompt_file(path: str | Path) -> PromptTemplate:
    """Load a single-block PromptTemplate from a .txt file."""
    return load_prompt_template(Path(path).read_text(encoding="utf-8"))


class Provider(ABC):
    """One upstream text-generation API.

    Subclasses set `name`, `label`, `url` and `default_model` and implement
    the three wire-shape hooks.
    """

    name: str
    label: str
    url: str
    default_model: str

    def __init__(self, model: str | None = None, max_tokens: int = 150,
                 temperature: float = 0.7, prompt: PromptTemplate | None = None):
        self.model = model or self.default_model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.prompt = prompt or load_prompt_template()

    @abstractmethod
    def headers(self, api_key: str) -> Dict[str, str]:
        ...

    @abstractmethod
    def payload(self, prompt: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    def extract(self, data: Dict[str, Any]) -> Optional[str]:
        """Return the generated text from a successful response body."""

    def error_message(self, response: httpx.Response) -> str:
        """Return the provider's own error message, or a generic one."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            err = body.get("error")
            if isinstance(err, dict) and err.get("message"):
                return str(err["message"])
        return f"{self.label} API error"

    def usage(self, data: Dict[str, Any]) -> Dict[str, int]:
        """Return token counts from a successful response body, if reported."""
        return {}

    @observe(name="generate_summary", as_type="generation", capture_input=False)
    async def generate_summary(self, text: str, api_key: str, client: httpx.AsyncClient) -> str:
        """Summarize `text` in at most three lines.

        Each call is traced as a Langfuse generation carrying the model, its
        parameters, the rendered prompt and token usage. The API key is never
        part of the trace.

        Raises:
            UpstreamError: The provider rejected the call or was unreachable.
        """
        prompt = self.prompt.format(text=text)
        body = self.payload(prompt)
        langfuse = get_client()
        langfuse.update_current_generation(
            model=self.model,
            input=prompt,
            model_parameters={k: body[k] for k in ("max_tokens", "temperature") if k in body},
            metadata={"provider": self.name},
        )
        try:
            r = await client.post(self.url, headers=self.headers(api_key), json=body)
        except httpx.HTTPError as e:
            logger.error("Error calling %s API: %s", self.name, e)
            raise UpstreamError(f"{self.label} API request failed: {e}", provider=self.name) from e

        if r.is_error:
            message = self.error_message(r)
            logger.error("%s API returned %d: %s", self.label, r.status_code, message)
            raise UpstreamError(message, provider=self.name, status_code=r.status_code)

        try:
            data = r.json()
            content = self.extract(data)
            langfuse.update_current_generation(usage_details=self.usage(data))
        except (ValueError, LookupError, TypeError, AttributeError):
            content = None
        return (content or "").strip() or SUMMARY_NOT_AVAILABLE


class OpenAICompatibleProvider(Provider):
    """Chat-completions wire shape with bearer authentication."""

    def headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    def payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def extract(self, data: Dict[str, Any]) -> Optional[str]:
        return data["choices"][0]["message"]["content"]

    def usage(self, data: Dict[str, Any]) -> Dict[str, int]:
        u = data.get("usage") or {}
        return {"input": u.get("prompt_tokens", 0), "output": u.get("completion_tokens", 0)}


class OpenAIProvider(OpenAICompatibleProvider):
    name = "openai"
    label = "OpenAI"
    url = "https://api.openai.com/v1/chat/completions"
    default_model = "gpt-3.5-turbo"


class GroqProvider(OpenAICompatibleProvider):
    name = "groq"
    label = "Groq"
    url = "https://api.groq.com/openai/v1/chat/completions"
    default_model = "llama-3.3-70b-versatile"


class AnthropicProvider(Provider):
    """Messages API: `x-api-key` plus a pinned `anthropic-version` header."""

    name = "anthropic"
    label = "Anthropic"
    url = "https://api.anthropic.com/v1/messages"
    default_model = "claude-3-5-sonnet-20241022"
    api_version = "2023-06-01"

    def headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": self.api_version,
        }

    def payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    def extract(self, data: Dict[str, Any]) -> Optional[str]:
        return data["content"][0]["text"]

    def usage(self, data: Dict[str, Any]) -> Dict[str, int]:
        u = data.get("usage") or {}
        return {"input": u.get("input_tokens", 0), "output": u.get("output_tokens", 0)}


PROVIDERS: Dict[str, Type[Provider]] = {
    OpenAIProvider.name: OpenAIProvider,
    AnthropicProvider.name: AnthropicProvider,
    GroqProvider.name: GroqProvider,
}

DEFAULT_PROVIDER = OpenAIProvider.name


def get_provider(name: str | None, **kwargs) -> Provider:
    """Factory that returns a provider instance by registry name.

    Only `None` selects the default; names match exactly.

    Raises:
        UnsupportedProviderError: If `name` is not registered.
    """
    key = DEFAULT_PROVIDER if name is None else name
    cls = PROVIDERS.get(key)
    if cls is None:
        raise UnsupportedProviderError(key)
    return cls(**kwargs)
