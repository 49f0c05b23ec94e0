"""
Document processing schemas.

Dependencies: pydantic
System role: Data contracts between the queue, the pipeline and notifiers
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from documind.boundary.db.models import DocumentStatus


class TextChunk(BaseModel):
    """One sliding-window slice of extracted text."""

    content: str
    index: int = Field(ge=0)


class IngestionJob(BaseModel):
    """Queue payload identifying the document to index and its owner."""

    document_id: UUID
    owner_id: str


class IngestionOutcome(str, Enum):
    """How an ingestion run ended."""

    COMPLETED = "completed"
    ABORTED = "aborted"
    SKIPPED = "skipped"
    DELETED = "deleted"


class IngestionResult(BaseModel):
    """
    Result of one pipeline run.

    Attributes:
        document_id: Processed document
        outcome: Terminal outcome of the run
        chunk_count: Chunks stored (0 unless COMPLETED)
        processing_time_ms: Wall time of the run
    """

    document_id: UUID
    outcome: IngestionOutcome
    chunk_count: int = 0
    processing_time_ms: float = 0.0


class DocumentUpdate(BaseModel):
    """Status/progress snapshot published to the owner after each persisted update."""

    document_id: UUID
    status: DocumentStatus
    progress: int = Field(ge=0, le=100)
    error_message: str | None = None
