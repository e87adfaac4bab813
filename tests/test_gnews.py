"""Tests for GNewsClient."""

from unittest.mock import AsyncMock, patch

import pytest

from topic_sentiment.domain.entities import SourceKind
from topic_sentiment.infrastructure.sources.gnews import GNEWS_SEARCH_URL, MAX_ARTICLES, GNewsClient
from topic_sentiment.shared.exceptions import ParseError


def _articles(n):
    return {"totalArticles": n, "articles": [{"title": f"Headline number {i}", "url": f"https://n/{i}"} for i in range(n)]}


class TestGNewsSearch:
    async def test_missing_key_fails_without_request(self):
        client = GNewsClient(api_key=None)
        with patch.object(client, "_make_request", new_callable=AsyncMock) as mock_request:
            result = await client.fetch("Technology")
        mock_request.assert_not_called()
        assert not result.ok
        assert "GNEWS_API_KEY" in result.error

    async def test_request_params(self):
        client = GNewsClient(api_key="secret")
        with patch.object(client, "_make_request", new_callable=AsyncMock, return_value=_articles(1)) as mock_request:
            await client.search("electric cars")
        args, kwargs = mock_request.call_args
        assert args[0] == GNEWS_SEARCH_URL
        assert kwargs["params"] == {"q": "electric cars", "lang": "en", "max": 10, "token": "secret"}

    async def test_items_are_titles(self):
        client = GNewsClient(api_key="secret")
        with patch.object(client, "_make_request", new_callable=AsyncMock, return_value=_articles(2)):
            items = await client.search("x")
        assert [i.title for i in items] == ["Headline number 0", "Headline number 1"]
        assert all(i.source is SourceKind.NEWS for i in items)
        assert all(i.body is None for i in items)

    async def test_caps_at_ten(self):
        client = GNewsClient(api_key="secret")
        with patch.object(client, "_make_request", new_callable=AsyncMock, return_value=_articles(15)):
            items = await client.search("x")
        assert len(items) == MAX_ARTICLES == 10

    async def test_skips_untitled_articles(self):
        data = {"articles": [{"title": ""}, {"description": "no title"}, "junk", {"title": "Kept headline"}]}
        client = GNewsClient(api_key="secret")
        with patch.object(client, "_make_request", new_callable=AsyncMock, return_value=data):
            items = await client.search("x")
        assert [i.title for i in items] == ["Kept headline"]

    @pytest.mark.parametrize("data", [{}, {"articles": None}, [], {"errors": ["bad token"]}])
    async def test_malformed_response(self, data):
        client = GNewsClient(api_key="secret")
        with patch.object(client, "_make_request", new_callable=AsyncMock, return_value=data):
            with pytest.raises(ParseError):
                await client.search("x")

    async def test_http_round_trip(self, make_response):
        client = GNewsClient(api_key="secret")
        client._client.get = AsyncMock(return_value=make_response(json=_articles(3)))
        result = await client.fetch("Technology")
        assert result.ok
        assert len(result.items) == 3
        await client.close()
