"""
Document and retrieval API schemas.

Dependencies: pydantic
System role: API contract for document management and retrieval
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from documind.boundary.db.models import DocumentStatus


class DocumentResponse(BaseModel):
    """Document as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    status: DocumentStatus
    progress: int
    size_bytes: int
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime


class DocumentListResponse(BaseModel):
    """Documents owned by the caller."""

    documents: list[DocumentResponse]
    total: int


class RetrievalRequest(BaseModel):
    """Hybrid retrieval query."""

    query: str = Field(min_length=1, max_length=4000)
    top_k: int | None = Field(default=None, ge=1, le=20)


class RetrievedChunk(BaseModel):
    """One retrieval result."""

    model_config = ConfigDict(from_attributes=True)

    chunk_id: str
    content: str
    chunk_index: int
    score: float


class RetrievalResponse(BaseModel):
    results: list[RetrievedChunk]
