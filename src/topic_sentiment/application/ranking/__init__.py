"""Embedding-based relevance ranking."""

from .embedder import Embedder, SentenceTransformerEmbedder
from .ranker import RelevanceRanker, cosine_similarity

__all__ = [
    "Embedder",
    "SentenceTransformerEmbedder",
    "RelevanceRanker",
    "cosine_similarity",
]
