"""
DocuMind: question answering over uploaded PDF documents.

Layers: configs, boundary (persistence), core (ingestion, retrieval, RAG),
application (services), workers (Celery), api (FastAPI).
"""

__version__ = "0.1.0"
