"""
GNews Integration

News source adapter: headline search via the GNews API.

API Documentation: https://gnews.io/docs/v4

Items carry a title only; GNews descriptions are not used for scoring.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from itertools import islice
from typing import Any

from topic_sentiment.domain.entities import RawItem, SourceKind
from topic_sentiment.infrastructure.sources.base_client import BaseAPIClient
from topic_sentiment.shared.exceptions import AuthenticationError, ParseError

logger = logging.getLogger(__name__)

GNEWS_SEARCH_URL = "https://gnews.io/api/v4/search"

MAX_ARTICLES = 10


class GNewsClient(BaseAPIClient):
    """
    GNews search client.

    Usage:
        async with GNewsClient(api_key="...") as client:
            result = await client.fetch("electric cars")
    """

    _source = SourceKind.NEWS

    def __init__(self, api_key: str | None = None, timeout: float = 30.0, language: str = "en"):
        self._api_key = api_key
        self._language = language
        super().__init__(timeout=timeout, headers={"Accept": "application/json"})

    async def search(self, query: str) -> list[RawItem]:
        if not self._api_key:
            raise AuthenticationError("GNEWS_API_KEY is not set", source=self.service_name)

        params = {
            "q": query,
            "lang": self._language,
            "max": MAX_ARTICLES,
            "token": self._api_key,
        }
        data = await self._make_request(GNEWS_SEARCH_URL, params=params)
        return list(islice(self._iter_articles(data), MAX_ARTICLES))

    def _iter_articles(self, data: Any) -> Iterator[RawItem]:
        if not isinstance(data, dict) or not isinstance(data.get("articles"), list):
            raise ParseError("missing 'articles' list", source=self.service_name)

        for article in data["articles"]:
            if not isinstance(article, dict) or not article.get("title"):
                continue
            yield RawItem(source=self._source, title=article["title"])
