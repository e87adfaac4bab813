"""
SentimentAggregator - one query in, one AnalysisReport out.

Pipeline:
1. Validate the query (the only step that can fail the request up front)
2. Fan out to every source adapter concurrently; each yields a SourceResult
3. Classify sentiment for every retrieved item
4. Merge and rank by relevance to the query
5. Truncate to the result cap and compute the Summary

Failure policy:
    A failed source contributes zero items and is listed in
    ``degraded_sources``. A ranking failure keeps merged source order,
    leaves ``relevance`` unset and sets ``ranking_degraded``. There are no
    retries at this layer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from topic_sentiment.application.ranking.ranker import RelevanceRanker
from topic_sentiment.application.sentiment.classifier import SentimentClassifier
from topic_sentiment.domain.entities import (
    AnalysisReport,
    DegradedSource,
    ScoredItem,
    SourceKind,
    SourceResult,
    Summary,
)
from topic_sentiment.shared.async_utils import gather_with_errors
from topic_sentiment.shared.exceptions import InvalidQueryError, RankingUnavailableError
from topic_sentiment.shared.settings import DEFAULT_MAX_RESULTS

logger = logging.getLogger(__name__)


class SourceAdapter(Protocol):
    """What the aggregator needs from a source client."""

    @property
    def source(self) -> SourceKind: ...

    async def fetch(self, query: str) -> SourceResult: ...


def validate_query(query: object) -> str:
    """Return the stripped query, or raise InvalidQueryError."""
    if not isinstance(query, str) or not query.strip():
        raise InvalidQueryError(query if isinstance(query, str) else None)
    return query.strip()


class SentimentAggregator:
    """
    Runs the full retrieval -> classification -> ranking -> summary pipeline.

    Example:
        aggregator = SentimentAggregator(
            sources=[gnews, wikipedia, reddit],
            classifier=SentimentClassifier(),
            ranker=RelevanceRanker(embedder),
        )
        report = await aggregator.run("Technology")
    """

    def __init__(
        self,
        sources: Sequence[SourceAdapter],
        classifier: SentimentClassifier,
        ranker: RelevanceRanker,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self._sources = tuple(sources)
        self._classifier = classifier
        self._ranker = ranker
        self._max_results = max_results

    async def run(self, query: object) -> AnalysisReport:
        """
        Analyze public sentiment about ``query``.

        Raises:
            InvalidQueryError: query missing or blank; no source is contacted
        """
        query = validate_query(query)

        source_results = await self._fetch_all(query)
        degraded = tuple(
            DegradedSource(source=r.source, reason=r.error or "unknown error", retryable=r.retryable)
            for r in source_results
            if not r.ok
        )

        scored = self._classifier.score_items(
            item for result in source_results if result.ok for item in result.items
        )

        ranked, ranking_degraded = await self._rank(query, scored)
        results = tuple(ranked[: self._max_results])
        summary = Summary.from_items(results)

        logger.info(
            f"Analyzed {query!r}: {summary.total} results from "
            f"{len(source_results) - len(degraded)}/{len(source_results)} sources"
            + (", ranking degraded" if ranking_degraded else "")
        )

        return AnalysisReport(
            query=query,
            summary=summary,
            results=results,
            degraded_sources=degraded,
            ranking_degraded=ranking_degraded,
        )

    async def _fetch_all(self, query: str) -> list[SourceResult]:
        outcomes = await gather_with_errors(
            *[source.fetch(query) for source in self._sources],
            return_exceptions=True,
        )

        results: list[SourceResult] = []
        for source, outcome in zip(self._sources, outcomes, strict=True):
            if isinstance(outcome, Exception):
                # Adapters are expected to absorb their own failures
                logger.error(f"{source.source.value} adapter raised past its boundary: {outcome}")
                results.append(SourceResult.failure(source.source, str(outcome)))
            else:
                results.append(outcome)
        return results

    async def _rank(self, query: str, items: list[ScoredItem]) -> tuple[list[ScoredItem], bool]:
        try:
            return await self._ranker.rank(query, items), False
        except RankingUnavailableError as e:
            logger.warning(f"Ranking unavailable, returning source order: {e}")
            return items, True
