"""Unit tests for building components from settings."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from contracts.config import AzureSearchConfig, EmbeddingConfig, StoreSettings
from searchstore.embedding_adapters.ollama import OllamaEmbeddings
from searchstore.factory import create_embeddings, create_store
from searchstore.vector_stores.azure_search import AzureSearchVectorStore


def _settings() -> StoreSettings:
    return StoreSettings(
        search=AzureSearchConfig(endpoint="https://e", api_key="k", index_name="idx"),
        embedding=EmbeddingConfig(model="mxbai"),
    )


class TestFactory:
    def test_ollama_embeddings(self) -> None:
        emb = create_embeddings(EmbeddingConfig(model="mxbai"))
        assert isinstance(emb, OllamaEmbeddings)
        assert emb.model == "mxbai"

    def test_unknown_embedding_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown embedding backend"):
            create_embeddings(EmbeddingConfig(backend="nope"))

    def test_create_store(self) -> None:
        with patch("searchstore.vector_stores.azure_search.SearchIndexClient") as client_cls:
            client_cls.return_value = MagicMock()
            store = create_store(_settings())

        assert isinstance(store, AzureSearchVectorStore)
        assert store.index_name == "idx"
        assert isinstance(store.embeddings, OllamaEmbeddings)
        client_cls.assert_called_once()
        assert client_cls.call_args.args[0] == "https://e"
