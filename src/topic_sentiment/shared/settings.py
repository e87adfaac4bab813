"""
Runtime settings, read from environment variables.

Environment Variables:
    GNEWS_API_KEY: API token for the GNews search API
    REDDIT_CLIENT_ID / REDDIT_CLIENT_SECRET: Reddit app credentials
    REDDIT_USER_AGENT: User-Agent sent to Reddit (required by its API rules)
    EMBEDDING_MODEL: sentence-transformers model name
    HTTP_TIMEOUT: Per-request timeout in seconds
    MAX_RESULTS: Result cap after ranking
    SENTIMENT_API_HOST / SENTIMENT_API_PORT: HTTP server bind address

Missing credentials are allowed; the affected source fails at request time
and the analysis degrades without it.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from .exceptions import ConfigurationError

DEFAULT_USER_AGENT = "sentiment-dashboard/1.0"
DEFAULT_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
DEFAULT_MAX_RESULTS = 50


@dataclass(frozen=True, slots=True)
class Settings:
    gnews_api_key: str | None = None
    reddit_client_id: str | None = None
    reddit_client_secret: str | None = None
    reddit_user_agent: str = DEFAULT_USER_AGENT
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    http_timeout: float = 30.0
    max_results: int = DEFAULT_MAX_RESULTS
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(
            gnews_api_key=_optional(env, "GNEWS_API_KEY"),
            reddit_client_id=_optional(env, "REDDIT_CLIENT_ID"),
            reddit_client_secret=_optional(env, "REDDIT_CLIENT_SECRET"),
            reddit_user_agent=_optional(env, "REDDIT_USER_AGENT") or DEFAULT_USER_AGENT,
            embedding_model=_optional(env, "EMBEDDING_MODEL") or DEFAULT_EMBEDDING_MODEL,
            http_timeout=_number(env, "HTTP_TIMEOUT", 30.0, float),
            max_results=_number(env, "MAX_RESULTS", DEFAULT_MAX_RESULTS, int),
            api_host=_optional(env, "SENTIMENT_API_HOST") or "127.0.0.1",
            api_port=_number(env, "SENTIMENT_API_PORT", 8000, int),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _optional(env: Mapping[str, str], name: str) -> str | None:
    return env.get(name, "").strip() or None


def _number[N: (int, float)](env: Mapping[str, str], name: str, default: N, kind: type[N]) -> N:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = kind(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a {kind.__name__}, got {raw!r}") from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {raw!r}")
    return value
