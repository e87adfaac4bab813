"""
Sentence embeddings for relevance ranking.

SentenceTransformerEmbedder wraps one sentence-transformers model, loaded
lazily on first use and then shared read-only for the process lifetime.
The default model (all-MiniLM-L6-v2) mean-pools token vectors; embeddings
are L2-normalized on output.

The load is guarded by a lock so concurrent first requests instantiate the
model at most once. A failed load is not cached; the next call tries again.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from topic_sentiment.shared.exceptions import ErrorContext, RankingUnavailableError
from topic_sentiment.shared.settings import DEFAULT_EMBEDDING_MODEL

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    """Anything that turns texts into fixed-dimension vectors."""

    async def embed(self, texts: Sequence[str]) -> list[list[float]]: ...


def _load_sentence_transformer(model_name: str) -> Any:
    """Lazy import keeps torch out of startup and out of tests."""
    from sentence_transformers import SentenceTransformer

    return SentenceTransformer(model_name)


class SentenceTransformerEmbedder:
    """
    Lazily loaded, process-wide sentence-transformers model.

    Example:
        embedder = SentenceTransformerEmbedder()
        vectors = await embedder.embed(["electric cars", "battery recycling"])
    """

    def __init__(
        self,
        model_name: str = DEFAULT_EMBEDDING_MODEL,
        model_factory: Callable[[str], Any] | None = None,
    ) -> None:
        self._model_name = model_name
        self._model_factory = model_factory or _load_sentence_transformer
        self._model: Any = None
        self._lock = threading.Lock()

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def _get_model(self) -> Any:
        if self._model is not None:
            return self._model

        with self._lock:
            if self._model is None:
                logger.info(f"Loading embedding model {self._model_name}")
                try:
                    self._model = self._model_factory(self._model_name)
                except Exception as e:
                    logger.exception(f"Embedding model {self._model_name} failed to load")
                    raise RankingUnavailableError(
                        f"Failed to load embedding model {self._model_name}: {e}",
                        context=ErrorContext(operation="load_model", input_value=self._model_name),
                    ) from e
                logger.info(f"Embedding model {self._model_name} loaded")
        return self._model

    def encode(self, texts: Sequence[str]) -> list[list[float]]:
        """Blocking encode; normalized vectors as plain float lists."""
        model = self._get_model()
        try:
            vectors = model.encode(
                list(texts),
                normalize_embeddings=True,
                convert_to_numpy=True,
            )
        except Exception as e:
            raise RankingUnavailableError(
                f"Embedding failed: {e}",
                context=ErrorContext(operation="encode", metadata={"batch_size": len(texts)}),
            ) from e
        return [list(map(float, vector)) for vector in vectors]

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Encode ``texts`` in a worker thread so the event loop keeps serving."""
        if not texts:
            return []
        return await asyncio.to_thread(self.encode, texts)
