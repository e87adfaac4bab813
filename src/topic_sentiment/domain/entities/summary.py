"""
Summary and report entities derived from the final, truncated item list.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from .item import ScoredItem, Sentiment, SourceKind


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class Summary:
    """
    Sentiment counts and percentages over a result set.

    Percentages are rounded independently, so they need not sum to 100.
    """

    total: int
    counts: dict[Sentiment, int]
    percentages: dict[Sentiment, int]

    @classmethod
    def from_items(cls, items: list[ScoredItem] | tuple[ScoredItem, ...]) -> Summary:
        tally = Counter(item.sentiment for item in items)
        counts = {label: tally.get(label, 0) for label in Sentiment}
        total = len(items)
        divisor = total or 1
        percentages = {label: _round_half_up(count / divisor * 100) for label, count in counts.items()}
        return cls(total=total, counts=counts, percentages=percentages)


@dataclass(frozen=True, slots=True)
class DegradedSource:
    """A source that contributed no items because its adapter failed."""

    source: SourceKind
    reason: str
    retryable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source.value, "reason": self.reason, "retryable": self.retryable}


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Full output of one pipeline run."""

    query: str
    summary: Summary
    results: tuple[ScoredItem, ...]
    degraded_sources: tuple[DegradedSource, ...] = field(default_factory=tuple)
    ranking_degraded: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "total": self.summary.total,
            "counts": {label.value: n for label, n in self.summary.counts.items()},
            "percentages": {label.value: n for label, n in self.summary.percentages.items()},
            "results": [item.to_dict() for item in self.results],
            "degraded_sources": [d.to_dict() for d in self.degraded_sources],
            "ranking_degraded": self.ranking_degraded,
        }
