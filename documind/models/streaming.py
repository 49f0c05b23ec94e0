"""
Streaming event schemas for chat answers.

Protocol: zero or more `delta` events, at most one `error` event, then
exactly one terminal `done` event carrying the cited sources.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel


class StreamEventType(str, Enum):
    """Server-to-client event types for streaming chat."""

    DELTA = "delta"
    ERROR = "error"
    DONE = "done"


class ChatSource(BaseModel):
    """
    Chunk cited by an answer.

    Attributes:
        chunk_index: 0-based position of the chunk in the document
        score: Normalized retrieval score
    """

    chunk_index: int
    score: float


class StreamEvent(BaseModel):
    """
    Base streaming event model.

    Attributes:
        event: Event type identifier
        data: Event-specific payload
    """

    event: StreamEventType
    data: dict[str, Any]

    @classmethod
    def delta(cls, text: str) -> "StreamEvent":
        return cls(event=StreamEventType.DELTA, data={"text": text})

    @classmethod
    def error(cls, message: str) -> "StreamEvent":
        return cls(event=StreamEventType.ERROR, data={"message": message})

    @classmethod
    def done(cls, sources: list[ChatSource]) -> "StreamEvent":
        return cls(
            event=StreamEventType.DONE,
            data={"sources": [source.model_dump() for source in sources]},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {"event": self.event.value, "data": self.data}

    def to_sse(self) -> str:
        """Encode as one Server-Sent Events frame."""
        return f"event: {self.event.value}\ndata: {json.dumps(self.data)}\n\n"
