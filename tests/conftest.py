"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import asyncio
import re
import zlib
from collections.abc import Awaitable, Callable, Sequence

import httpx
import pytest

from topic_sentiment.domain.entities import RawItem, SourceKind, SourceResult

# ============================================================
# Fake embedding model
# ============================================================

_TOKEN_RE = re.compile(r"[a-z0-9]+")
_DIM = 64


class FakeEmbedder:
    """
    Deterministic bag-of-words embedder.

    Each token increments one bucket chosen by CRC32, so texts sharing
    words have a higher cosine similarity. All components are >= 0, so
    similarities land in [0, 1].
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.model_name = "fake-embedder"
        self.is_loaded = True

    def vector(self, text: str) -> list[float]:
        vec = [0.0] * _DIM
        for token in _TOKEN_RE.findall(text.lower()):
            vec[zlib.crc32(token.encode()) % _DIM] += 1.0
        return vec

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self.vector(t) for t in texts]


class FailingEmbedder:
    """Embedder whose model never loads."""

    model_name = "broken-model"
    is_loaded = False

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        from topic_sentiment.shared.exceptions import RankingUnavailableError

        raise RankingUnavailableError("model failed to load")


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def failing_embedder():
    return FailingEmbedder()


# ============================================================
# Items & sources
# ============================================================


@pytest.fixture
def make_item():
    """Factory for RawItem with sensible defaults."""

    def _create(
        title: str = "A reasonably long headline",
        source: SourceKind = SourceKind.NEWS,
        body: str | None = None,
        url: str | None = None,
    ) -> RawItem:
        return RawItem(source=source, title=title, body=body, url=url)

    return _create


class FakeSource:
    """Source adapter stand-in with a canned SourceResult."""

    def __init__(
        self,
        source: SourceKind,
        items: list[RawItem] | None = None,
        error: str | None = None,
        raises: Exception | None = None,
        retryable: bool = False,
        gate: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.source = source
        self._items = items or []
        self._error = error
        self._raises = raises
        self._retryable = retryable
        self._gate = gate
        self.queries: list[str] = []

    async def fetch(self, query: str) -> SourceResult:
        self.queries.append(query)
        if self._gate is not None:
            await self._gate()
        if self._raises is not None:
            raise self._raises
        if self._error is not None:
            return SourceResult.failure(self.source, self._error, retryable=self._retryable)
        return SourceResult.success(self.source, self._items)


@pytest.fixture
def fake_source():
    """Factory for FakeSource."""
    return FakeSource


# ============================================================
# Concurrency helpers
# ============================================================


@pytest.fixture
def rendezvous():
    """
    Factory for a gate that only opens once ``parties`` callers are waiting.

    Callers that run one after another never fill the gate, so the first
    one times out with TimeoutError.
    """

    def _create(parties: int, timeout: float = 1.0) -> Callable[[], Awaitable[None]]:
        arrived = 0
        everyone_in = asyncio.Event()

        async def wait() -> None:
            nonlocal arrived
            arrived += 1
            if arrived == parties:
                everyone_in.set()
            await asyncio.wait_for(everyone_in.wait(), timeout=timeout)

        return wait

    return _create


# ============================================================
# HTTP helpers
# ============================================================


@pytest.fixture
def make_response():
    """Factory for real httpx.Response objects bound to a request."""

    def _create(
        status_code: int = 200,
        json: object | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        url: str = "https://example.test/api",
    ) -> httpx.Response:
        request = httpx.Request("GET", url)
        if content is not None:
            return httpx.Response(status_code, content=content, headers=headers, request=request)
        return httpx.Response(status_code, json=json, headers=headers, request=request)

    return _create
