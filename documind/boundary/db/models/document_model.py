"""
Document ORM model.

Represents uploaded documents with processing status and progress.
Tracks the ingestion lifecycle from upload to searchable chunks.

Dependencies: sqlalchemy, documind.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum

from sqlalchemy import CheckConstraint, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from documind.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    PENDING: Uploaded (or reset for retry), awaiting the ingestion job
    PROCESSING: Worker is extracting, chunking and embedding
    DONE: Every chunk is stored; ready for retrieval
    FAILED: Processing error; chunks rolled back, error_message holds details
    """

    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Lifecycle: Upload (PENDING) → worker (PROCESSING) → DONE or FAILED.
    FAILED documents may be reset to PENDING by an explicit retry.

    Attributes:
        id: UUID primary key (auto-generated)
        owner_id: Identifier of the uploading user
        name: Original filename (255 char limit)
        status: Current processing state
        progress: Integer percentage, non-decreasing within one run
        file_path: Storage-relative path of the uploaded file
        size_bytes: Upload size
        error_message: Null unless FAILED
        created_at: Upload timestamp (UTC)
        updated_at: Last status change timestamp (UTC)
    """

    __tablename__ = "documents"
    __table_args__ = (
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_documents_progress_range"),
    )

    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Original filename",
    )

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.PENDING,
    )

    progress: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    file_path: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        doc="Storage-relative path of the raw upload",
    )

    size_bytes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    error_message: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Error details if processing failed",
    )
