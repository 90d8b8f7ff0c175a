from .base import EmbeddingProvider
from .factory import create_embedding_provider
from .providers import OpenAIEmbeddingProvider

__all__ = [
    "EmbeddingProvider",
    "create_embedding_provider",
    "OpenAIEmbeddingProvider",
]
