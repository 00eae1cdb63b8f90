"""Azure AI Search vector store.

Wraps the async ``azure-search-documents`` clients: provisions the index on
first write, uploads embedded documents in bounded batches and runs vector
nearest-neighbour queries.
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import ResourceNotFoundError
from azure.search.documents import IndexDocumentsBatch
from azure.search.documents.indexes.aio import SearchIndexClient
from azure.search.documents.indexes.models import (
    HnswAlgorithmConfiguration,
    HnswParameters,
    SearchableField,
    SearchField,
    SearchFieldDataType,
    SearchIndex,
    SemanticConfiguration,
    SemanticField,
    SemanticPrioritizedFields,
    SemanticSearch,
    SimpleField,
    VectorSearch,
    VectorSearchAlgorithmMetric,
    VectorSearchProfile,
)
from azure.search.documents.models import VectorizedQuery

from contracts.config import AzureSearchConfig, FieldNames
from contracts.embedding import Embeddings
from contracts.vector_store import Document, VectorStore, build_documents

logger = logging.getLogger(__name__)

MAX_UPLOAD_BATCH_SIZE = 1000


# ── Records ──────────────────────────────────────────────────────────


@dataclass
class Record:
    """One index document, before field names are applied."""

    key: str
    content: str
    vector: list[float]
    metadata: str  # JSON-encoded document metadata

    def to_payload(self, fields: FieldNames) -> dict[str, Any]:
        return {
            fields.id: self.key,
            fields.content: self.content,
            fields.content_vector: self.vector,
            fields.metadata: self.metadata,
        }


class _UploadBuffer:
    """Accumulates records from concurrent producers and flushes full batches.

    Append, size check and swap happen under one lock so each record lands
    in exactly one flushed batch.
    """

    def __init__(
        self,
        flush: Callable[[list[Record]], Awaitable[None]],
        batch_size: int = MAX_UPLOAD_BATCH_SIZE,
    ) -> None:
        self._flush = flush
        self._batch_size = batch_size
        self._records: list[Record] = []
        self._lock = asyncio.Lock()

    async def add(self, record: Record) -> None:
        async with self._lock:
            self._records.append(record)
            if len(self._records) < self._batch_size:
                return
            batch, self._records = self._records, []
        await self._flush(batch)

    async def drain(self) -> None:
        async with self._lock:
            batch, self._records = self._records, []
        if batch:
            await self._flush(batch)


# ── Store ────────────────────────────────────────────────────────────


class AzureSearchVectorStore(VectorStore):
    """Vector store backed by an Azure AI Search index."""

    def __init__(self, embeddings: Embeddings, config: AzureSearchConfig) -> None:
        super().__init__(embeddings)
        self._config = config
        self._index_name = config.index_name or "documents"
        self._fields = config.field_names
        self._index_client = SearchIndexClient(
            config.endpoint, AzureKeyCredential(config.api_key)
        )
        self._search_client = self._index_client.get_search_client(self._index_name)
        self._index_ready = False
        self._index_lock = asyncio.Lock()

    @property
    def index_name(self) -> str:
        return self._index_name

    # ── construction helpers ──────────────────────────────────────────

    @classmethod
    async def from_texts(
        cls,
        texts: list[str],
        metadatas: list[dict[str, Any]] | dict[str, Any] | None,
        embeddings: Embeddings,
        config: AzureSearchConfig,
    ) -> AzureSearchVectorStore:
        return await cls.from_documents(
            build_documents(texts, metadatas), embeddings, config
        )

    @classmethod
    async def from_documents(
        cls,
        documents: list[Document],
        embeddings: Embeddings,
        config: AzureSearchConfig,
    ) -> AzureSearchVectorStore:
        store = cls(embeddings, config)
        await store.add_documents(documents)
        return store

    @classmethod
    def from_existing_index(
        cls, embeddings: Embeddings, config: AzureSearchConfig
    ) -> AzureSearchVectorStore:
        """Attach to an index that is already populated. Nothing is uploaded."""
        return cls(embeddings, config)

    # ── add ───────────────────────────────────────────────────────────

    async def add_vectors(
        self,
        vectors: list[list[float]],
        documents: list[Document],
        ids: list[str] | None = None,
    ) -> list[str]:
        """Upload documents with precomputed vectors in batches of up to 1000.

        Returns keys aligned with ``documents``. A record the service rejects
        individually is logged, not raised, so a returned key does not
        guarantee that record was indexed.
        """
        if len(vectors) != len(documents):
            raise ValueError(
                f"Got {len(vectors)} vectors for {len(documents)} documents"
            )
        if ids is not None and len(ids) != len(documents):
            raise ValueError(f"Got {len(ids)} ids for {len(documents)} documents")

        await self._ensure_index_exists()

        keys: list[str] = [""] * len(documents)
        buffer = _UploadBuffer(self._upload_batch)

        async def _stage(i: int, doc: Document) -> None:
            key = ids[i] if ids is not None else str(uuid.uuid4())
            keys[i] = key
            await buffer.add(
                Record(
                    key=key,
                    content=doc.page_content,
                    vector=vectors[i],
                    metadata=json.dumps(doc.metadata),
                )
            )

        await asyncio.gather(*(_stage(i, doc) for i, doc in enumerate(documents)))
        await buffer.drain()
        return keys

    async def _upload_batch(self, records: list[Record]) -> None:
        batch = IndexDocumentsBatch()
        batch.add_upload_actions([r.to_payload(self._fields) for r in records])
        results = await self._search_client.index_documents(batch)
        failed = [r.key for r in results if not r.succeeded]
        if failed:
            logger.warning(
                f"Index '{self._index_name}' rejected {len(failed)} of "
                f"{len(records)} records: {failed[:10]}"
            )
        logger.debug(f"Uploaded {len(records)} records to '{self._index_name}'")

    # ── search ────────────────────────────────────────────────────────

    async def similarity_search_vector_with_score(
        self,
        query_vector: list[float],
        k: int = 4,
        filter: dict[str, Any] | None = None,
    ) -> list[tuple[Document, float]]:
        options: dict[str, Any] = {
            **(filter or {}),
            "search_text": None,
            "vector_queries": [
                VectorizedQuery(
                    vector=query_vector,
                    k_nearest_neighbors=k,
                    fields=self._fields.content_vector,
                )
            ],
        }
        response = await self._search_client.search(**options)

        results: list[tuple[Document, float]] = []
        async for item in response:
            raw_metadata = item.get(self._fields.metadata)
            results.append(
                (
                    Document(
                        page_content=item[self._fields.content],
                        metadata=json.loads(raw_metadata) if raw_metadata else {},
                    ),
                    item["@search.score"],
                )
            )
        return results

    # ── delete ────────────────────────────────────────────────────────

    async def delete(self, ids: list[str]) -> None:
        if not ids:
            return
        await self._search_client.delete_documents(
            documents=[{self._fields.id: key} for key in ids]
        )

    # ── lifecycle ─────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._search_client.close()
        await self._index_client.close()

    async def __aenter__(self) -> AzureSearchVectorStore:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ── index provisioning ────────────────────────────────────────────

    async def _ensure_index_exists(self) -> None:
        async with self._index_lock:
            if self._index_ready:
                return
            try:
                await self._index_client.get_index(self._index_name)
            except ResourceNotFoundError:
                logger.info(f"Creating search index '{self._index_name}'")
                await self._index_client.create_or_update_index(self._build_index())
            else:
                logger.debug(f"Search index '{self._index_name}' already exists")
            self._index_ready = True

    def _build_index(self) -> SearchIndex:
        fields = self._fields
        algorithm = self._config.vector_search
        profile_name = f"{algorithm.name}-profile"

        index = SearchIndex(
            name=self._index_name,
            fields=[
                SimpleField(
                    name=fields.id,
                    type=SearchFieldDataType.String,
                    key=True,
                    filterable=True,
                ),
                SearchableField(name=fields.content, type=SearchFieldDataType.String),
                SearchField(
                    name=fields.content_vector,
                    type=SearchFieldDataType.Collection(SearchFieldDataType.Single),
                    searchable=True,
                    vector_search_dimensions=self._config.vector_search_dimensions,
                    vector_search_profile_name=profile_name,
                ),
                SearchableField(name=fields.metadata, type=SearchFieldDataType.String),
            ],
            vector_search=VectorSearch(
                algorithms=[
                    HnswAlgorithmConfiguration(
                        name=algorithm.name,
                        parameters=HnswParameters(
                            m=algorithm.parameters.m,
                            ef_construction=algorithm.parameters.ef_construction,
                            ef_search=algorithm.parameters.ef_search,
                            metric=VectorSearchAlgorithmMetric(
                                algorithm.parameters.metric
                            ),
                        ),
                    )
                ],
                profiles=[
                    VectorSearchProfile(
                        name=profile_name,
                        algorithm_configuration_name=algorithm.name,
                    )
                ],
            ),
        )

        if self._config.semantic_configuration_name:
            index.semantic_search = SemanticSearch(
                configurations=[
                    SemanticConfiguration(
                        name=self._config.semantic_configuration_name,
                        prioritized_fields=SemanticPrioritizedFields(
                            content_fields=[SemanticField(field_name=fields.content)]
                        ),
                    )
                ]
            )

        return index
