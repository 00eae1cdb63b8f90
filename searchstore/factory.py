"""Build embeddings providers and stores from validated settings."""

from __future__ import annotations

from contracts.config import EmbeddingConfig, StoreSettings
from contracts.embedding import Embeddings
from searchstore.embedding_adapters.ollama import OllamaEmbeddings
from searchstore.vector_stores.azure_search import AzureSearchVectorStore


def create_embeddings(config: EmbeddingConfig) -> Embeddings:
    """Create an embeddings provider from settings."""
    if config.backend == "ollama":
        return OllamaEmbeddings(base_url=config.base_url, model=config.model)
    raise ValueError(f"Unknown embedding backend: {config.backend}")


def create_store(
    settings: StoreSettings, embeddings: Embeddings | None = None
) -> AzureSearchVectorStore:
    """Create a store attached to the configured index."""
    if embeddings is None:
        embeddings = create_embeddings(settings.embedding)
    return AzureSearchVectorStore.from_existing_index(embeddings, settings.search)
