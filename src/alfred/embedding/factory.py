from typing import Any

from .base import EmbeddingProvider
from .providers import OpenAIEmbeddingProvider


def create_embedding_provider(provider: str, **config: Any) -> EmbeddingProvider:
    """Create an embedding provider instance.

    Args:
        provider: Provider type ('openai')
        **config: Provider-specific configuration
            For OpenAI:
                - api_key: str (required)
                - model: str (default: 'text-embedding-3-large')
                - base_url: str | None

    Returns:
        Initialized embedding provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing
    """
    provider_lower = provider.lower()

    if provider_lower == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAIEmbeddingProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'openai'"
    )
