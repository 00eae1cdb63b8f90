"""Vector store contracts.

Defines the document model shared by every backend and the abstract
store interface the retrieval pipeline talks to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict

from contracts.embedding import Embeddings


# ── Data models ──────────────────────────────────────────────────────


class Document(BaseModel):
    """A piece of text plus the metadata it travels with."""

    model_config = ConfigDict(frozen=True)

    page_content: str
    metadata: dict[str, Any] = {}


# ── Abstract store ───────────────────────────────────────────────────


class VectorStore(ABC):
    """Abstract base class for vector store backends.

    Subclasses implement the vector-level operations; the text-level
    helpers here embed through the configured ``Embeddings`` and delegate.
    """

    def __init__(self, embeddings: Embeddings) -> None:
        self.embeddings = embeddings

    @abstractmethod
    async def add_vectors(
        self,
        vectors: list[list[float]],
        documents: list[Document],
        ids: list[str] | None = None,
    ) -> list[str]:
        """Store precomputed vectors. Returns keys aligned with ``documents``."""
        ...

    @abstractmethod
    async def similarity_search_vector_with_score(
        self,
        query_vector: list[float],
        k: int = 4,
        filter: dict[str, Any] | None = None,
    ) -> list[tuple[Document, float]]:
        """Return the ``k`` nearest documents with the backend's scores."""
        ...

    @abstractmethod
    async def delete(self, ids: list[str]) -> None:
        """Delete records by key."""
        ...

    async def add_documents(
        self, documents: list[Document], ids: list[str] | None = None
    ) -> list[str]:
        texts = [doc.page_content for doc in documents]
        vectors = await self.embeddings.embed_documents(texts)
        return await self.add_vectors(vectors, documents, ids=ids)

    async def add_texts(
        self,
        texts: list[str],
        metadatas: list[dict[str, Any]] | dict[str, Any] | None = None,
        ids: list[str] | None = None,
    ) -> list[str]:
        return await self.add_documents(build_documents(texts, metadatas), ids=ids)

    async def similarity_search(
        self, query: str, k: int = 4, filter: dict[str, Any] | None = None
    ) -> list[Document]:
        results = await self.similarity_search_with_score(query, k, filter)
        return [doc for doc, _ in results]

    async def similarity_search_with_score(
        self, query: str, k: int = 4, filter: dict[str, Any] | None = None
    ) -> list[tuple[Document, float]]:
        query_vector = await self.embeddings.embed_query(query)
        return await self.similarity_search_vector_with_score(query_vector, k, filter)


def build_documents(
    texts: list[str],
    metadatas: list[dict[str, Any]] | dict[str, Any] | None = None,
) -> list[Document]:
    """Pair texts with metadata.

    ``metadatas`` is either one mapping shared by every text or a list
    aligned with ``texts``.
    """
    if metadatas is None:
        return [Document(page_content=text) for text in texts]
    if isinstance(metadatas, dict):
        return [Document(page_content=text, metadata=metadatas) for text in texts]
    if len(metadatas) != len(texts):
        raise ValueError(
            f"Got {len(metadatas)} metadatas for {len(texts)} texts"
        )
    return [
        Document(page_content=text, metadata=meta)
        for text, meta in zip(texts, metadatas)
    ]
