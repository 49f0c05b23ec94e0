"""Hybrid retrieval over document chunks."""

from documind.core.retrieval.models import RetrievalResult
from documind.core.retrieval.retriever import HybridRetriever

__all__ = ["HybridRetriever", "RetrievalResult"]
