"""ORM models."""

from documind.boundary.db.models.chunk_model import ChunkModel
from documind.boundary.db.models.document_model import DocumentModel, DocumentStatus

__all__ = ["ChunkModel", "DocumentModel", "DocumentStatus"]
