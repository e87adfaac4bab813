"""
Application DI Container (dependency-injector).

Centralizes service creation and lifecycle management. The embedding model
handle is a Singleton constructed here and injected into the ranker, so
there is exactly one per container (one per process in the server).

Usage::

    from topic_sentiment.container import create_container

    container = create_container()          # reads Settings.from_env()
    aggregator = container.aggregator()
    report = await aggregator.run("Technology")

    # In tests, override any provider:
    container.embedder.override(providers.Object(fake_embedder))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

from topic_sentiment.application.pipeline import SentimentAggregator
from topic_sentiment.application.ranking import RelevanceRanker, SentenceTransformerEmbedder
from topic_sentiment.application.sentiment import SentimentClassifier
from topic_sentiment.infrastructure.sources import GNewsClient, RedditClient, WikipediaClient
from topic_sentiment.shared.settings import Settings

logger = logging.getLogger(__name__)


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for the sentiment analysis service.

    Manages creation and lifecycle of all core services:
    - ``embedder``: lazily loaded sentence-transformers model
    - ``classifier`` / ``ranker``: stateless scoring components
    - ``gnews_client`` / ``wikipedia_client`` / ``reddit_client``: source adapters
    - ``aggregator``: the end-to-end pipeline
    """

    config = providers.Configuration()

    embedder = providers.Singleton(
        SentenceTransformerEmbedder,
        model_name=config.embedding_model,
    )

    classifier = providers.Singleton(SentimentClassifier)

    ranker = providers.Singleton(
        RelevanceRanker,
        embedder=embedder,
    )

    gnews_client = providers.Singleton(
        GNewsClient,
        api_key=config.gnews_api_key,
        timeout=config.http_timeout,
    )

    wikipedia_client = providers.Singleton(
        WikipediaClient,
        timeout=config.http_timeout,
    )

    reddit_client = providers.Singleton(
        RedditClient,
        client_id=config.reddit_client_id,
        client_secret=config.reddit_client_secret,
        user_agent=config.reddit_user_agent,
        timeout=config.http_timeout,
    )

    sources = providers.List(gnews_client, wikipedia_client, reddit_client)

    aggregator = providers.Singleton(
        SentimentAggregator,
        sources=sources,
        classifier=classifier,
        ranker=ranker,
        max_results=config.max_results,
    )


def create_container(settings: Settings | None = None) -> ApplicationContainer:
    """Build a container configured from ``settings`` (default: environment)."""
    settings = settings or Settings.from_env()
    container = ApplicationContainer()
    container.config.from_dict(settings.to_dict())
    logger.debug(f"Container configured with embedding model {settings.embedding_model}")
    return container


async def close_sources(container: ApplicationContainer) -> None:
    """Close the HTTP clients of every source adapter."""
    for client in container.sources():
        close = getattr(client, "close", None)
        if close is not None:
            await close()


__all__ = ["ApplicationContainer", "create_container", "close_sources"]
