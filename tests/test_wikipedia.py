"""Tests for WikipediaClient two-stage retrieval."""

from unittest.mock import AsyncMock, patch

import pytest

from topic_sentiment.domain.entities import SourceKind
from topic_sentiment.infrastructure.sources.wikipedia import WIKI_API_URL, WikipediaClient, _extract_text
from topic_sentiment.shared.exceptions import NetworkError, ParseError


def _fake_api(hits, extracts, fail_page=None, gate=None):
    """Build a _make_request side effect dispatching on the action."""

    async def _request(url, *, params=None, **kwargs):
        assert url == WIKI_API_URL
        if params.get("list") == "search":
            return {"query": {"search": hits}}
        page_id = params["pageids"]
        if gate is not None:
            await gate()
        if page_id == fail_page:
            raise NetworkError("timed out", source="Wikipedia")
        page = {"pageid": page_id, "title": "t"}
        if page_id in extracts:
            page["extract"] = extracts[page_id]
        return {"query": {"pages": {str(page_id): page}}}

    return _request


class TestWikipediaSearch:
    async def test_body_is_extract(self):
        client = WikipediaClient()
        api = _fake_api([{"pageid": 1, "title": "Technology"}], {1: "Technology is the application of knowledge."})
        with patch.object(client, "_make_request", side_effect=api):
            items = await client.search("Technology")
        assert len(items) == 1
        assert items[0].title == "Technology"
        assert items[0].body == "Technology is the application of knowledge."
        assert items[0].source is SourceKind.ENCYCLOPEDIA

    async def test_empty_extract_falls_back_to_title(self):
        client = WikipediaClient()
        api = _fake_api([{"pageid": 7, "title": "Obscure page"}], {7: "   "})
        with patch.object(client, "_make_request", side_effect=api):
            items = await client.search("x")
        assert items[0].body == "Obscure page"

    async def test_keeps_search_order_and_caps_at_five(self):
        hits = [{"pageid": i, "title": f"Page {i}"} for i in range(1, 9)]
        client = WikipediaClient()
        api = _fake_api(hits, {i: f"Extract {i}" for i in range(1, 9)})
        with patch.object(client, "_make_request", side_effect=api) as mock_request:
            items = await client.search("x")
        assert [i.title for i in items] == ["Page 1", "Page 2", "Page 3", "Page 4", "Page 5"]
        assert mock_request.call_count == 1 + 5

    async def test_extract_lookups_run_concurrently(self, rendezvous):
        hits = [{"pageid": i, "title": f"Page {i}"} for i in range(1, 6)]
        client = WikipediaClient()
        api = _fake_api(hits, {i: f"Extract {i}" for i in range(1, 6)}, gate=rendezvous(5))
        with patch.object(client, "_make_request", side_effect=api):
            items = await client.search("x")
        assert [i.body for i in items] == [f"Extract {i}" for i in range(1, 6)]

    async def test_search_params(self):
        client = WikipediaClient()
        with patch.object(client, "_make_request", new_callable=AsyncMock, return_value={"query": {"search": []}}) as mock_request:
            items = await client.search("renewable energy")
        assert items == []
        params = mock_request.call_args.kwargs["params"]
        assert params["list"] == "search"
        assert params["srsearch"] == "renewable energy"
        assert params["format"] == "json"

    async def test_failed_intro_fails_adapter(self):
        hits = [{"pageid": 1, "title": "A"}, {"pageid": 2, "title": "B"}]
        client = WikipediaClient()
        api = _fake_api(hits, {1: "fine"}, fail_page=2)
        with patch.object(client, "_make_request", side_effect=api):
            result = await client.fetch("x")
        assert not result.ok
        assert result.items == ()
        assert "timed out" in result.error

    async def test_malformed_search(self):
        client = WikipediaClient()
        with patch.object(client, "_make_request", new_callable=AsyncMock, return_value={"batchcomplete": ""}):
            with pytest.raises(ParseError):
                await client.search("x")


class TestExtractText:
    def test_integer_keys(self):
        assert _extract_text({"query": {"pages": {5: {"extract": "text"}}}}, 5) == "text"

    def test_missing_page(self):
        assert _extract_text({"query": {"pages": {}}}, 5) is None

    def test_missing_pages(self):
        with pytest.raises(ParseError):
            _extract_text({"query": {}}, 5)
