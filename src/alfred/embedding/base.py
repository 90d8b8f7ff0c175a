from abc import ABC, abstractmethod
from typing import Any

import numpy as np
from numpy.typing import NDArray


class EmbeddingProvider(ABC):
    """Abstract base class for embedding providers.

    This module hides the design decision of which embedding provider is
    used to turn a user message into a retrieval vector.
    """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension for this provider's model."""
        pass

    @abstractmethod
    async def embed_text(self, text: str, **kwargs: Any) -> NDArray[np.float32]:
        """Generate embedding for a single text.

        Args:
            text: Text to embed
            **kwargs: Provider-specific parameters

        Returns:
            Numpy array of shape (dimension,) with float32 dtype

        Raises:
            Exception: Provider-specific errors during embedding generation
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass
