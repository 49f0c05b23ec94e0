"""
Document chunk ORM model.

One row per sliding-window passage of a document, with its embedding stored
in a pgvector column.

Dependencies: sqlalchemy, pgvector, documind.boundary.db.base
System role: Chunk and vector persistence for hybrid retrieval
"""

import secrets
import uuid
from datetime import datetime

from pgvector.sqlalchemy import Vector
from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from documind.boundary.db.base import Base, utc_now


def new_chunk_id() -> str:
    return f"chunk-{secrets.token_hex(8)}"


class ChunkModel(Base):
    """
    Chunk of extracted document text.

    Attributes:
        id: Opaque chunk identifier
        document_id: Parent document (ON DELETE CASCADE)
        content: Chunk text; may be empty for image-only documents
        embedding: Vector of the configured embedding dimension
        chunk_index: 0-based position within the document
        created_at: Insert timestamp (UTC)
    """

    __tablename__ = "document_chunks"
    __table_args__ = (
        Index("ix_document_chunks_document_id_chunk_index", "document_id", "chunk_index"),
    )

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=new_chunk_id,
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Dimension is enforced by the chunk store so the column follows configuration.
    embedding = mapped_column(Vector(), nullable=False)

    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
