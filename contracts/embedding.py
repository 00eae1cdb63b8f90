"""Embedding provider contracts.

Defines the abstract interface for embedding generation backends.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Embeddings(ABC):
    """Abstract base class for embedding generation backends."""

    @abstractmethod
    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Generate one embedding per text, in input order."""
        ...

    @abstractmethod
    async def embed_query(self, text: str) -> list[float]:
        """Generate the embedding for a search query."""
        ...
