from typing import Any

import httpx
import numpy as np
from numpy.typing import NDArray

from ..config import DEFAULT_TOP_K, HTTP_TIMEOUT
from ..embedding import EmbeddingProvider
from .base import Retriever
from .models import RetrievedDocument


def parse_query_response(response: dict[str, Any]) -> list[RetrievedDocument]:
    """Turn a Pinecone `/query` response into documents.

    Missing metadata falls back to the model defaults.
    """
    documents = []
    for match in response.get("matches") or []:
        metadata = match.get("metadata") or {}
        fields = {
            key: metadata[key]
            for key in ("url", "title", "date", "assistant")
            if metadata.get(key)
        }
        documents.append(RetrievedDocument(
            id=str(match.get("id", "")),
            score=float(match.get("score", 0.0)),
            **fields,
        ))
    return documents


class PineconeRetriever(Retriever):
    """Retriever backed by a Pinecone index over its REST API.

    Hidden design decisions:
    - Query request format and authentication header
    - Metadata extraction from matches
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        api_key: str,
        base_url: str,
        top_k: int = DEFAULT_TOP_K,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the Pinecone retriever.

        Args:
            embedder: Embedding provider for query vectors
            api_key: Pinecone API key
            base_url: Index host URL (e.g. https://my-index-xyz.svc.pinecone.io)
            top_k: Number of nearest documents to return
            client: Optional HTTP client (owned by the caller)
        """
        self._embedder = embedder
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._top_k = top_k
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=HTTP_TIMEOUT)

    async def embed(self, text: str) -> NDArray[np.float32]:
        return await self._embedder.embed_text(text)

    async def query_nearest(self, text: str) -> list[RetrievedDocument]:
        vector = await self.embed(text)
        if vector.shape != (self._embedder.dimension,):
            raise ValueError(
                f"Query vector has shape {vector.shape}, "
                f"expected ({self._embedder.dimension},)"
            )
        response = await self._client.post(
            f"{self._base_url}/query",
            headers={"Api-Key": self._api_key},
            json={
                "vector": vector.tolist(),
                "topK": self._top_k,
                "includeMetadata": True,
            },
        )
        response.raise_for_status()
        return parse_query_response(response.json())

    async def close(self) -> None:
        await self._embedder.close()
        if self._owns_client:
            await self._client.aclose()
