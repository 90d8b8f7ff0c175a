from typing import Any

import numpy as np
from numpy.typing import NDArray
from openai import AsyncOpenAI

from ...config import DEFAULT_EMBEDDING_MODEL
from ..base import EmbeddingProvider


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI embedding provider implementation.

    Hidden design decisions:
    - OpenAI API client initialization
    - Response format handling
    """

    # Dimensions for different OpenAI embedding models
    _MODEL_DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_EMBEDDING_MODEL,
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI embedding provider.

        Args:
            api_key: OpenAI API key
            model: Embedding model to use (default: text-embedding-3-large)
            base_url: Optional custom API base URL
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        if model not in self._MODEL_DIMENSIONS:
            raise ValueError(
                f"Unknown model: {model}. "
                f"Supported models: {list(self._MODEL_DIMENSIONS.keys())}"
            )

        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            **client_kwargs
        )

    @property
    def dimension(self) -> int:
        return self._MODEL_DIMENSIONS[self._model]

    async def embed_text(self, text: str, **kwargs: Any) -> NDArray[np.float32]:
        """Generate embedding for a single text using OpenAI."""
        response = await self._client.embeddings.create(
            input=text,
            model=self._model,
            **kwargs
        )

        return np.array(response.data[0].embedding, dtype=np.float32)

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self._client.close()
