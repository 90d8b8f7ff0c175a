"""Configuration constants and environment-backed settings.

Centralizes magic numbers and endpoint URLs. Secrets are only ever read
from the environment.
"""

import os
from dataclasses import dataclass


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Model configuration
DEFAULT_CHAT_MODEL = "gpt-4-0125-preview"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-large"
DEFAULT_TEMPERATURE = 1.2

# Retrieval configuration
DEFAULT_TOP_K = 9

# External data endpoints
FEDERAL_REGISTER_URL = "https://www.federalregister.gov/api/v1/documents.json"
FRED_OBSERVATIONS_URL = "https://api.stlouisfed.org/fred/series/observations"
GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"

# Transport timeout for every outbound HTTP call (seconds)
HTTP_TIMEOUT = 30.0

# Display configuration
MAX_DOCUMENTS_DISPLAYED = 20


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from environment variables."""

    openai_api_key: str | None = None
    chat_model: str = DEFAULT_CHAT_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    top_k: int = DEFAULT_TOP_K
    pinecone_api_key: str | None = None
    pinecone_base_url: str | None = None
    fred_api_key: str | None = None
    google_api_key: str | None = None
    google_cse_id: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment.

        Environment variables:
            OPENAI_API_KEY: OpenAI API key (chat and embeddings)
            OPENAI_CHAT_MODEL: Chat model (default: gpt-4-0125-preview)
            OPENAI_EMBEDDING_MODEL: Embedding model (default: text-embedding-3-large)
            ALFRED_TEMPERATURE: Sampling temperature (default: 1.2)
            ALFRED_TOP_K: Documents retrieved per turn (default: 9)
            PINECONE_API_KEY: Pinecone API key
            PINECONE_BASE_URL: Pinecone index host URL
            FRED_API_KEY: FRED API key
            GOOGLE_API_KEY: Google Custom Search API key
            GOOGLE_CSE_ID: Google Custom Search engine id
        """
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            chat_model=os.getenv("OPENAI_CHAT_MODEL", DEFAULT_CHAT_MODEL),
            embedding_model=os.getenv("OPENAI_EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL),
            temperature=_float_env("ALFRED_TEMPERATURE", DEFAULT_TEMPERATURE),
            top_k=_int_env("ALFRED_TOP_K", DEFAULT_TOP_K),
            pinecone_api_key=os.getenv("PINECONE_API_KEY"),
            pinecone_base_url=os.getenv("PINECONE_BASE_URL"),
            fred_api_key=os.getenv("FRED_API_KEY"),
            google_api_key=os.getenv("GOOGLE_API_KEY"),
            google_cse_id=os.getenv("GOOGLE_CSE_ID"),
        )
