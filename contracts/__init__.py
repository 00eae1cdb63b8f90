"""Shared contracts — source of truth for the vector store interfaces."""

from contracts.config import (
    AzureSearchConfig,
    EmbeddingConfig,
    FieldNames,
    HnswParameters,
    StoreSettings,
    VectorSearchAlgorithmConfig,
)
from contracts.embedding import Embeddings
from contracts.vector_store import Document, VectorStore, build_documents

__all__ = [
    # config
    "AzureSearchConfig",
    "EmbeddingConfig",
    "FieldNames",
    "HnswParameters",
    "StoreSettings",
    "VectorSearchAlgorithmConfig",
    # embedding
    "Embeddings",
    # vector store
    "Document",
    "VectorStore",
    "build_documents",
]
