"""Sentence-embedding model client."""

from .client import DEFAULT_MODEL_NAME, EmbeddingClient, load_sentence_transformer

__all__ = ["DEFAULT_MODEL_NAME", "EmbeddingClient", "load_sentence_transformer"]
