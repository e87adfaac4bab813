"""
Wikipedia Integration

Encyclopedia source adapter via the MediaWiki Action API.

API Documentation: https://www.mediawiki.org/wiki/API:Main_page

Two-stage retrieval:
1. ``list=search`` returns candidate pages (up to 5 are kept)
2. ``prop=extracts`` fetches each page's plain-text intro, concurrently

A failed intro lookup fails the whole adapter for this run.
"""

from __future__ import annotations

import logging
from typing import Any

from topic_sentiment.domain.entities import RawItem, SourceKind
from topic_sentiment.infrastructure.sources.base_client import BaseAPIClient
from topic_sentiment.shared.async_utils import gather_with_errors
from topic_sentiment.shared.exceptions import ParseError

logger = logging.getLogger(__name__)

WIKI_API_URL = "https://en.wikipedia.org/w/api.php"

MAX_PAGES = 5


class WikipediaClient(BaseAPIClient):
    """
    MediaWiki search + extract client.

    Usage:
        async with WikipediaClient() as client:
            result = await client.fetch("renewable energy")
    """

    _source = SourceKind.ENCYCLOPEDIA

    def __init__(self, timeout: float = 30.0, user_agent: str | None = None):
        headers = {"Accept": "application/json"}
        if user_agent:
            headers["User-Agent"] = user_agent
        super().__init__(timeout=timeout, headers=headers)

    async def search(self, query: str) -> list[RawItem]:
        candidates = await self._search_pages(query)
        if not candidates:
            return []

        pages = await gather_with_errors(
            *[self._fetch_page(page_id, title) for page_id, title in candidates]
        )
        return list(pages)

    async def _search_pages(self, query: str) -> list[tuple[int, str]]:
        params = {
            "action": "query",
            "format": "json",
            "list": "search",
            "srsearch": query,
            "srlimit": MAX_PAGES,
            "utf8": 1,
        }
        data = await self._make_request(WIKI_API_URL, params=params)
        try:
            hits = data["query"]["search"]
        except (KeyError, TypeError) as e:
            raise ParseError("missing 'query.search' list", source=self.service_name) from e
        if not isinstance(hits, list):
            raise ParseError("'query.search' is not a list", source=self.service_name)

        candidates: list[tuple[int, str]] = []
        for hit in hits[:MAX_PAGES]:
            if not isinstance(hit, dict) or "pageid" not in hit:
                continue
            candidates.append((hit["pageid"], hit.get("title") or ""))
        return candidates

    async def _fetch_page(self, page_id: int, title: str) -> RawItem:
        params = {
            "action": "query",
            "format": "json",
            "prop": "extracts",
            "exintro": 1,
            "explaintext": 1,
            "pageids": page_id,
        }
        data = await self._make_request(WIKI_API_URL, params=params)
        extract = _extract_text(data, page_id)
        if not extract:
            logger.debug(f"Wikipedia: empty extract for page {page_id}, using title")
        return RawItem(
            source=self._source,
            title=title,
            body=extract or title,
        )


def _extract_text(data: Any, page_id: int) -> str | None:
    try:
        pages = data["query"]["pages"]
    except (KeyError, TypeError) as e:
        raise ParseError("missing 'query.pages' mapping", source=SourceKind.ENCYCLOPEDIA.value) from e
    if not isinstance(pages, dict):
        raise ParseError("'query.pages' is not a mapping", source=SourceKind.ENCYCLOPEDIA.value)

    page = pages.get(str(page_id)) or pages.get(page_id) or {}
    extract = page.get("extract")
    if isinstance(extract, str) and extract.strip():
        return extract
    return None
