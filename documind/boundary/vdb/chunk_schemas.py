"""
Chunk store schemas.

Pydantic models returned by chunk store queries.

Dependencies: pydantic
System role: Type definitions for chunk store operations
"""

from pydantic import BaseModel, Field


class StoredChunk(BaseModel):
    """Chunk row as read back from a chunk store."""

    chunk_id: str = Field(description="Chunk identifier")
    content: str = Field(description="Chunk text content")
    chunk_index: int = Field(description="0-based position within the document", ge=0)


class ScoredChunk(StoredChunk):
    """Chunk returned by nearest-neighbour search."""

    score: float = Field(description="Cosine similarity (1 - cosine distance)")
