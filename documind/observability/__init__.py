"""
Observability module.

Logging configuration and RAG latency reporting.
"""

from documind.observability.latency import RagLatency, log_rag_latency
from documind.observability.logger import configure_logging, get_logger

__all__ = ["RagLatency", "configure_logging", "get_logger", "log_rag_latency"]
