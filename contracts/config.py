"""Store configuration schema — Pydantic models.

Mirrors the layout of the YAML file read by ``searchstore.config_loader``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


# ── Index schema ─────────────────────────────────────────────────────


class FieldNames(BaseModel):
    """Names of the four index fields, resolved once per store."""

    id: str = "id"
    content: str = "content"
    content_vector: str = "content_vector"
    metadata: str = "metadata"


class HnswParameters(BaseModel):
    m: int = 4
    ef_construction: int = 400
    ef_search: int = 500
    metric: Literal["cosine", "euclidean", "dotProduct"] = "cosine"


class VectorSearchAlgorithmConfig(BaseModel):
    name: str = "default"
    kind: Literal["hnsw"] = "hnsw"
    parameters: HnswParameters = HnswParameters()


# ── Connection ───────────────────────────────────────────────────────


class AzureSearchConfig(BaseModel):
    endpoint: str
    api_key: str
    index_name: str = "documents"
    semantic_configuration_name: str | None = None
    field_names: FieldNames = FieldNames()
    vector_search: VectorSearchAlgorithmConfig = VectorSearchAlgorithmConfig()
    vector_search_dimensions: int = 1536


# ── Embeddings ───────────────────────────────────────────────────────


class EmbeddingConfig(BaseModel):
    backend: str = "ollama"
    base_url: str = "http://localhost:11434"
    model: str = "nomic-embed-text"


# ── Root settings file ───────────────────────────────────────────────


class StoreSettings(BaseModel):
    search: AzureSearchConfig
    embedding: EmbeddingConfig = EmbeddingConfig()
