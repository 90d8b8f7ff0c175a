from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray

from .models import RetrievedDocument


class Retriever(ABC):
    """Abstract retrieval client.

    This module hides the design decision of which vector database backs
    retrieval and how query text is embedded.
    """

    @abstractmethod
    async def embed(self, text: str) -> NDArray[np.float32]:
        """Convert free text into a query vector."""
        pass

    @abstractmethod
    async def query_nearest(self, text: str) -> list[RetrievedDocument]:
        """Return the top-K stored documents nearest to `text`.

        Raises:
            Exception: Embedding, transport or response errors
        """
        pass

    def format_for_prompt(self, documents: list[RetrievedDocument]) -> str:
        """Format documents as a context block for the system prompt."""
        return "".join(
            f"Source: {doc.url}, Date: {doc.date}\n Title: {doc.title}, Content: {doc.assistant}\n"
            for doc in documents
        )

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass
