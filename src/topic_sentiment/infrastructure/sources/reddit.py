"""
Reddit Integration

Discussion source adapter via the Reddit OAuth API.

API Documentation: https://www.reddit.com/dev/api/

Flow:
1. Exchange client credentials for an application-only bearer token
2. Search posts (up to 50, relevance-sorted, past month)
3. Run each post through the admission filter, keep the first 10 survivors

Token acquisition failure is treated as adapter failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from itertools import islice
from typing import Any

from topic_sentiment.domain.entities import RawItem, SourceKind
from topic_sentiment.infrastructure.sources.base_client import BaseAPIClient
from topic_sentiment.shared.exceptions import AuthenticationError, ParseError
from topic_sentiment.shared.settings import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

REDDIT_TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
REDDIT_SEARCH_URL = "https://oauth.reddit.com/search"
REDDIT_PERMALINK_BASE = "https://reddit.com"

SEARCH_LIMIT = 50
MAX_POSTS = 10

MIN_TITLE_LENGTH = 15
MIN_UPVOTE_RATIO = 0.5
BLOCKED_SUBREDDITS: frozenset[str] = frozenset({"anime", "memes", "funny", "pics"})


# =============================================================================
# Admission filter
# =============================================================================

def _has_title(post: dict[str, Any]) -> bool:
    return bool(post.get("title"))


def _title_long_enough(post: dict[str, Any]) -> bool:
    return len(post.get("title") or "") >= MIN_TITLE_LENGTH


def _subreddit_allowed(post: dict[str, Any]) -> bool:
    subreddit = post.get("subreddit")
    return not (subreddit and subreddit.lower() in BLOCKED_SUBREDDITS)


def _well_received(post: dict[str, Any]) -> bool:
    ratio = post.get("upvote_ratio")
    return ratio is None or ratio >= MIN_UPVOTE_RATIO


ADMISSION_FILTERS: tuple[Callable[[dict[str, Any]], bool], ...] = (
    _has_title,
    _title_long_enough,
    _subreddit_allowed,
    _well_received,
)


def admit_post(post: dict[str, Any]) -> bool:
    """True if ``post`` passes every admission predicate."""
    return all(check(post) for check in ADMISSION_FILTERS)


def admitted_posts(posts: Iterable[dict[str, Any]]) -> Iterator[dict[str, Any]]:
    """Lazily yield the posts that pass the admission filter, in order."""
    return (post for post in posts if admit_post(post))


# =============================================================================
# Client
# =============================================================================

class RedditClient(BaseAPIClient):
    """
    Reddit search client using application-only OAuth.

    Usage:
        async with RedditClient(client_id="...", client_secret="...") as client:
            result = await client.fetch("space exploration")
    """

    _source = SourceKind.DISCUSSION

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._user_agent = user_agent
        super().__init__(timeout=timeout, headers={"User-Agent": user_agent})

    async def search(self, query: str) -> list[RawItem]:
        token = await self._get_token()
        params = {
            "q": query,
            "limit": SEARCH_LIMIT,
            "sort": "relevance",
            "t": "month",
        }
        data = await self._make_request(
            REDDIT_SEARCH_URL,
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )
        posts = self._iter_posts(data)
        return [self._to_item(post) for post in islice(admitted_posts(posts), MAX_POSTS)]

    async def _get_token(self) -> str:
        if not self._client_id or not self._client_secret:
            raise AuthenticationError(
                "REDDIT_CLIENT_ID / REDDIT_CLIENT_SECRET are not set", source=self.service_name
            )

        data = await self._make_request(
            REDDIT_TOKEN_URL,
            method="POST",
            data={"grant_type": "client_credentials"},
            auth=(self._client_id, self._client_secret),
        )
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            reason = data.get("error", "no access_token in response") if isinstance(data, dict) else "bad response"
            raise AuthenticationError(f"token exchange failed: {reason}", source=self.service_name)
        return token

    def _iter_posts(self, data: Any) -> Iterator[dict[str, Any]]:
        try:
            children = data["data"]["children"]
        except (KeyError, TypeError) as e:
            raise ParseError("missing 'data.children' list", source=self.service_name) from e
        if not isinstance(children, list):
            raise ParseError("'data.children' is not a list", source=self.service_name)

        for child in children:
            post = child.get("data") if isinstance(child, dict) else None
            if isinstance(post, dict):
                yield post

    def _to_item(self, post: dict[str, Any]) -> RawItem:
        permalink = post.get("permalink")
        return RawItem(
            source=self._source,
            title=post["title"],
            url=f"{REDDIT_PERMALINK_BASE}{permalink}" if permalink else None,
        )
