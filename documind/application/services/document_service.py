"""
Document service orchestrator.

Coordinates document upload, listing, deletion and ingestion retries.
Indexing itself runs in the background worker; this service only records
state and enqueues jobs.

Dependencies: sqlalchemy, documind.boundary, documind.core
System role: Document management orchestration
"""

import logging
from pathlib import PurePath
from typing import Protocol, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from documind.boundary.db import DocumentModel, DocumentStatus, document_crud
from documind.boundary.storage import LocalFileStorage
from documind.boundary.vdb import ChunkStore
from documind.configs.ingestion import IngestionSettings
from documind.core.document_processing.models import IngestionJob
from documind.core.exceptions import (
    DocumentAccessDeniedError,
    DocumentNotFoundError,
    RetryNotAllowedError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class IngestionQueue(Protocol):
    """Hands ingestion jobs to the background worker."""

    def enqueue(self, job: IngestionJob) -> None: ...


class DocumentService:
    """
    Document service orchestrator.

    Handles document lifecycle: upload, listing, deletion and retry.
    Owner checks are enforced on every per-document operation.
    """

    def __init__(
        self,
        db: AsyncSession,
        chunk_store: ChunkStore,
        storage: LocalFileStorage,
        queue: IngestionQueue,
        settings: IngestionSettings,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata
            chunk_store: Chunk store, cleared on delete and retry
            storage: Upload storage
            queue: Ingestion job queue
            settings: Upload limits
        """
        self.db = db
        self._chunk_store = chunk_store
        self._storage = storage
        self._queue = queue
        self._settings = settings

    def _validate_upload(self, filename: str, content_type: str | None, size: int) -> None:
        if not filename or not PurePath(filename).name:
            raise ValidationError("A file name is required", field="file")
        if content_type not in self._settings.allowed_content_types:
            raise ValidationError(
                f"Unsupported file type: {content_type}. Only PDF files are accepted.",
                field="file",
            )
        if size == 0:
            raise ValidationError("Uploaded file is empty", field="file")
        if size > self._settings.max_file_size_bytes:
            raise ValidationError(
                f"File exceeds the {self._settings.max_file_size_bytes // (1024 * 1024)} MB limit",
                field="file",
            )

    async def upload_document(
        self,
        owner_id: str,
        filename: str,
        content_type: str | None,
        data: bytes,
    ) -> DocumentModel:
        """
        Store an upload and queue it for ingestion.

        Steps:
        1. Validate type and size
        2. Create document record (PENDING, progress 0)
        3. Write the file to storage and record its path
        4. Commit, then enqueue the ingestion job

        Args:
            owner_id: Uploading user
            filename: Original file name
            content_type: MIME type reported by the client
            data: File bytes

        Returns:
            DocumentModel: The new PENDING document

        Raises:
            ValidationError: If the file is not an acceptable PDF
        """
        self._validate_upload(filename, content_type, len(data))

        document = await document_crud.create(
            self.db,
            owner_id=owner_id,
            name=PurePath(filename).name[:255],
            status=DocumentStatus.PENDING,
            progress=0,
            size_bytes=len(data),
        )
        document.file_path = self._storage.save(document.id, data)
        await self.db.commit()

        logger.info(
            f"{__name__}:upload_document - Document created ({len(data)} bytes)",
            extra={"document_id": str(document.id), "owner_id": owner_id},
        )
        await self._enqueue(document)
        return document

    async def list_documents(self, owner_id: str) -> Sequence[DocumentModel]:
        """Documents of one owner, newest first."""
        return await document_crud.get_by_owner(self.db, owner_id)

    async def get_document(self, document_id: UUID, owner_id: str) -> DocumentModel:
        """
        Fetch a document owned by the caller.

        Raises:
            DocumentNotFoundError: If the document does not exist
            DocumentAccessDeniedError: If it belongs to another owner
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        if document.owner_id != owner_id:
            raise DocumentAccessDeniedError(str(document_id))
        return document

    async def delete_document(self, document_id: UUID, owner_id: str) -> None:
        """
        Delete a document, its chunks and its stored file.

        A running ingestion notices the deletion at its next progress
        update and stops without error.
        """
        document = await self.get_document(document_id, owner_id)
        file_path = document.file_path

        await self._chunk_store.delete_by_document_id(document_id)
        await document_crud.delete_by_id(self.db, document_id)
        await self.db.commit()

        if file_path:
            self._storage.delete(file_path)
        logger.info(
            f"{__name__}:delete_document - Document deleted",
            extra={"document_id": str(document_id)},
        )

    async def retry_document(self, document_id: UUID, owner_id: str) -> DocumentModel:
        """
        Re-run ingestion for a FAILED document.

        Clears partial chunks, resets the document to PENDING with zero
        progress and enqueues a new job.

        Raises:
            DocumentNotFoundError: If the document does not exist
            DocumentAccessDeniedError: If it belongs to another owner
            RetryNotAllowedError: If it is not FAILED or has no stored file
        """
        document = await self.get_document(document_id, owner_id)
        if document.status != DocumentStatus.FAILED:
            raise RetryNotAllowedError(
                str(document_id),
                f"only failed documents can be retried (status: {document.status.value})",
            )
        if not document.file_path:
            raise RetryNotAllowedError(str(document_id), "the original file is not available")

        await self._chunk_store.delete_by_document_id(document_id)
        document = await document_crud.reset_for_retry(self.db, document_id)
        await self.db.commit()

        logger.info(
            f"{__name__}:retry_document - Document reset for retry",
            extra={"document_id": str(document_id)},
        )
        await self._enqueue(document)
        return document

    async def _enqueue(self, document: DocumentModel) -> None:
        job = IngestionJob(document_id=document.id, owner_id=document.owner_id)
        try:
            self._queue.enqueue(job)
        except Exception as e:
            logger.error(
                f"{__name__}:_enqueue - Could not queue ingestion: {e}",
                extra={"document_id": str(document.id)},
            )
            await document_crud.update_progress(
                self.db,
                document.id,
                progress=100,
                status=DocumentStatus.FAILED,
                error_message="Could not queue document for processing",
            )
            await self.db.commit()
            raise
