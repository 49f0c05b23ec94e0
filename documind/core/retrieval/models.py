"""
Retrieval schemas.

Dependencies: pydantic
System role: Result contract of the hybrid retriever
"""

from pydantic import BaseModel, Field


class RetrievalResult(BaseModel):
    """
    Chunk returned by hybrid retrieval.

    Attributes:
        chunk_id: Chunk identifier
        content: Chunk text
        chunk_index: 0-based position in the document
        score: Normalized relevance in [0, 1]
    """

    chunk_id: str
    content: str
    chunk_index: int = Field(ge=0)
    score: float = Field(ge=0.0, le=1.0)
