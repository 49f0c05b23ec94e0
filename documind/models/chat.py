"""
Chat request/response schemas.

Dependencies: pydantic
System role: API contract for question answering
"""

from pydantic import BaseModel, Field

from documind.models.streaming import ChatSource


class ChatRequest(BaseModel):
    """Question about one document."""

    question: str = Field(min_length=1, max_length=4000, description="Natural-language question")
    top_k: int | None = Field(default=None, ge=1, le=20, description="Chunks to retrieve")


class ChatAnswer(BaseModel):
    """
    Complete (non-streamed) answer.

    Attributes:
        answer: Generated or fixed fallback answer
        sources: Chunks included in the prompt, with retrieval scores
    """

    answer: str
    sources: list[ChatSource] = Field(default_factory=list)
