"""Configuration management for aitrends.

This module handles loading and merging configuration from multiple sources:
1. Environment variables (highest priority)
2. TOML configuration file (medium priority)
3. Default values (lowest priority)

Configuration Sources:
    - config.toml: TOML file with structured configuration
    - .env: loaded into the environment by python-dotenv
    - Environment variables: Override config file values
    - Default values: Fallback when no config is provided

Example config.toml:
    ```toml
    [github]
    per_page = 30
    max_results = 50

    [huggingface]
    limit = 30
    timeout = 10.0

    [summarizer]
    provider = "anthropic"
    max_tokens = 150

    [cache]
    ttl_seconds = 300

    [server]
    host = "0.0.0.0"
    port = 8000
    cors_origins = ["http://localhost:3000"]
    ```

Environment Variables:
    GITHUB_TOKEN: Optional token that raises the GitHub search rate limit
    HF_TIMEOUT: Override the Hugging Face request timeout (seconds)
    SUMMARY_PROVIDER: Override the default summarization provider
    SUMMARY_CACHE_TTL: Override the summary cache TTL (seconds)
    CORS_ORIGINS: Comma-separated list of allowed origins
    HOST, PORT: Bind address for `aitrends serve`
    LOG_LEVEL: Logging level name
    AITRENDS_CONFIG: Config file read by `get_settings()` (default ./config.toml)
"""
from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List
import os
import tomllib  # Python 3.11+

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PROMPT_PATH = Path(__file__).resolve().parents[1] / "prompts" / "summary.txt"
CONFIG_PATH_ENV = "AITRENDS_CONFIG"


@dataclass
class Settings:
    """Runtime configuration derived from `config.toml` and environment.

    Values are merged with precedence: environment > config file > defaults.

    Attributes:
        github_token: Token sent to the GitHub search API, if any.
        github_per_page: Results requested per topic query.
        github_max_results: Cap on the merged GitHub list.
        github_min_stars: Star threshold used in the search query.
        hf_limit: Number of Spaces requested from Hugging Face.
        hf_timeout: Timeout for the Hugging Face request, in seconds.
        default_provider: Provider used when a request names none.
        max_tokens: Generation cap sent to every provider.
        temperature: Sampling temperature for OpenAI-compatible providers.
        cache_ttl_seconds: Lifetime of a cached summary.
        prompt_template: Summary prompt with a `{text}` placeholder.
        cors_origins: Origins allowed to call the HTTP service.
        host: Bind host for the HTTP service.
        port: Bind port for the HTTP service.
        log_level: Logging level name.
    """

    # Sources
    github_token: str | None = None
    github_per_page: int = 30
    github_max_results: int = 50
    github_min_stars: int = 10
    hf_limit: int = 30
    hf_timeout: float = 10.0

    # Summarizer configuration
    default_provider: str = "openai"
    max_tokens: int = 150
    temperature: float = 0.7
    cache_ttl_seconds: float = 300.0

    # Prompt configuration
    prompt_template: str | None = None

    # Server configuration
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"


def read_prompt(path: Path | None) -> str | None:
    """Return the prompt template stored at `path`, or None when absent."""
    if path is None or not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def load_config(path: str = "config.toml") -> dict:
    """Parse `path` as TOML; a missing file is an empty config."""
    config_file = Path(path)
    if not config_file.is_file():
        return {}
    with config_file.open("rb") as f:
        return tomllib.load(f)


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def load_settings(config_path: str | None = None) -> Settings:
    """Create a `Settings` object from config file and environment variables.

    Args:
        config_path: Path to TOML config file. Defaults to "config.toml".

    Returns:
        Settings object with merged configuration from all sources.

    Example:
        ```python
        from aitrends.core.config import load_settings

        settings = load_settings()
        settings = load_settings("custom.toml")
        ```
    """
    cfg = load_config(config_path or "config.toml")

    s = Settings()

    # github section
    gh = cfg.get("github", {})
    s.github_token = os.getenv("GITHUB_TOKEN") or None
    s.github_per_page = int(gh.get("per_page", s.github_per_page))
    s.github_max_results = int(gh.get("max_results", s.github_max_results))
    s.github_min_stars = int(gh.get("min_stars", s.github_min_stars))

    # huggingface section
    hf = cfg.get("huggingface", {})
    s.hf_limit = int(hf.get("limit", s.hf_limit))
    s.hf_timeout = float(os.getenv("HF_TIMEOUT", hf.get("timeout", s.hf_timeout)))

    # summarizer section
    summ = cfg.get("summarizer", {})
    s.default_provider = os.getenv("SUMMARY_PROVIDER", summ.get("provider", s.default_provider)).lower()
    s.max_tokens = int(summ.get("max_tokens", s.max_tokens))
    s.temperature = float(summ.get("temperature", s.temperature))

    # cache section
    ch = cfg.get("cache", {})
    s.cache_ttl_seconds = float(os.getenv("SUMMARY_CACHE_TTL", ch.get("ttl_seconds", s.cache_ttl_seconds)))

    # prompt section
    pr = cfg.get("prompt", {})
    tmpl_path = pr.get("template_file")
    s.prompt_template = read_prompt(Path(tmpl_path) if tmpl_path else DEFAULT_PROMPT_PATH)

    # server section
    srv = cfg.get("server", {})
    env_origins = os.getenv("CORS_ORIGINS")
    if env_origins:
        s.cors_origins = _split_origins(env_origins)
    elif "cors_origins" in srv:
        s.cors_origins = list(srv["cors_origins"])
    s.host = os.getenv("HOST", srv.get("host", s.host))
    s.port = int(os.getenv("PORT", srv.get("port", s.port)))

    # logging section
    lg = cfg.get("logging", {})
    s.log_level = os.getenv("LOG_LEVEL", lg.get("level", s.log_level)).upper()

    return s


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once.

    The config file is `$AITRENDS_CONFIG` when set, else ./config.toml.
    """
    return load_settings(os.getenv(CONFIG_PATH_ENV))
