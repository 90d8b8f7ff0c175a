"""Retrieval client: embed a message and fetch the nearest stored documents."""

from .base import Retriever
from .factory import create_retriever
from .models import RetrievedDocument
from .pinecone import PineconeRetriever, parse_query_response

__all__ = [
    "Retriever",
    "RetrievedDocument",
    "PineconeRetriever",
    "create_retriever",
    "parse_query_response",
]
