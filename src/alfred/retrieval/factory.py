from typing import Any

from .base import Retriever
from .pinecone import PineconeRetriever


def create_retriever(backend: str, **config: Any) -> Retriever:
    """Create a retrieval client.

    Args:
        backend: Backend type ('pinecone')
        **config: Backend-specific configuration
            For Pinecone:
                - embedder: EmbeddingProvider (required)
                - api_key: str (required)
                - base_url: str (required)
                - top_k: int (default: 9)

    Raises:
        ValueError: If backend type is not supported
        TypeError: If required configuration is missing
    """
    backend_lower = backend.lower()

    if backend_lower == "pinecone":
        missing = [key for key in ("embedder", "api_key", "base_url") if key not in config]
        if missing:
            raise TypeError(f"Pinecone retriever requires {missing} in config")
        return PineconeRetriever(**config)

    raise ValueError(
        f"Unsupported retrieval backend: {backend}. "
        f"Supported backends: 'pinecone'"
    )
