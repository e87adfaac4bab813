"""
Item domain entities for one sentiment analysis run.

- RawItem: normalized text produced by a source adapter
- ScoredItem: RawItem annotated with sentiment and (after ranking) relevance
- SourceResult: explicit success/failure outcome of one adapter call

All entities are frozen; annotation produces new objects instead of mutating
the ones created by adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class SourceKind(Enum):
    """External sources, valued by the label shown to callers."""

    NEWS = "GNews"
    ENCYCLOPEDIA = "Wikipedia"
    DISCUSSION = "Reddit"


class Sentiment(Enum):
    """Three-way sentiment label."""

    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"


@dataclass(frozen=True, slots=True)
class RawItem:
    """Short text pulled from a source, before any scoring."""

    source: SourceKind
    title: str
    body: str | None = None
    url: str | None = None

    @property
    def sentiment_text(self) -> str:
        """Body when present and non-empty, otherwise the title."""
        if self.body and self.body.strip():
            return self.body
        return self.title

    @property
    def ranking_text(self) -> str:
        """Title first; body only when the title is empty."""
        return self.title or self.body or ""


@dataclass(frozen=True, slots=True)
class ScoredItem:
    """RawItem plus sentiment label and optional relevance."""

    item: RawItem
    sentiment: Sentiment
    relevance: float | None = None

    @property
    def source(self) -> SourceKind:
        return self.item.source

    @property
    def title(self) -> str:
        return self.item.title

    def with_relevance(self, relevance: float) -> ScoredItem:
        return replace(self, relevance=relevance)

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the response shape; optional fields are omitted when absent."""
        data: dict[str, Any] = {
            "source": self.item.source.value,
            "title": self.item.title,
        }
        if self.item.body is not None:
            data["text"] = self.item.body
        if self.item.url is not None:
            data["url"] = self.item.url
        data["sentiment"] = self.sentiment.value
        data["relevance"] = self.relevance
        return data


@dataclass(frozen=True, slots=True)
class SourceResult:
    """Outcome of one adapter call: items on success, a reason on failure."""

    source: SourceKind
    items: tuple[RawItem, ...] = field(default_factory=tuple)
    error: str | None = None
    retryable: bool = False

    @classmethod
    def success(cls, source: SourceKind, items: list[RawItem] | tuple[RawItem, ...]) -> SourceResult:
        return cls(source=source, items=tuple(items))

    @classmethod
    def failure(cls, source: SourceKind, reason: str, retryable: bool = False) -> SourceResult:
        return cls(source=source, error=reason, retryable=retryable)

    @property
    def ok(self) -> bool:
        return self.error is None
