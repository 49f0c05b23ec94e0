"""Service orchestrators."""

from .document_service import DocumentService, IngestionQueue

__all__ = ["DocumentService", "IngestionQueue"]
