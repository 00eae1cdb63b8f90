"""Ollama embeddings provider.

Proxies embedding requests to a local Ollama instance via httpx.
"""

from __future__ import annotations

import httpx

from contracts.embedding import Embeddings


class OllamaEmbeddings(Embeddings):
    """Async client for the Ollama /api/embed endpoint."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "nomic-embed-text",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        return await self._embed(texts)

    async def embed_query(self, text: str) -> list[float]:
        embeddings = await self._embed([text])
        return embeddings[0]

    async def _embed(self, texts: list[str]) -> list[list[float]]:
        payload = {"model": self._model, "input": texts}

        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                resp = await client.post(
                    f"{self._base_url}/api/embed", json=payload
                )
        except httpx.ConnectError as exc:
            raise RuntimeError(
                f"Cannot connect to Ollama at {self._base_url}: {exc}"
            ) from exc

        if resp.status_code != 200:
            raise RuntimeError(
                f"Ollama embed request failed ({resp.status_code}): {resp.text}"
            )

        embeddings = resp.json().get("embeddings") or []
        if len(embeddings) != len(texts):
            raise RuntimeError(
                f"Ollama returned {len(embeddings)} embeddings for {len(texts)} texts"
            )
        return embeddings
