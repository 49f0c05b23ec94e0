"""
Document ingestion pipeline.

Runs one ingestion job through the state machine
PENDING → PROCESSING → DONE | FAILED:

    load → PROCESSING/0 → extract + chunk → 30 → embed/store each chunk
    (30..90) → DONE/100

Any failure while extracting, chunking or embedding deletes every chunk
written for the document and marks it FAILED/100 before the error is
re-raised for the job runner. If the chunks cannot be deleted even after
retrying, the document is left PROCESSING and the delete error propagates
so the job is redelivered. A document deleted mid-run ends the run
silently.

Dependencies: fastapi.concurrency, sqlalchemy, tenacity, documind.boundary, documind.core
System role: Background processing of uploaded documents
"""

import logging
import time

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import AsyncRetrying, stop_after_attempt, wait_fixed

from documind.boundary.db import DocumentStatus
from documind.boundary.storage import LocalFileStorage
from documind.boundary.vdb import ChunkStore
from documind.configs.ingestion import IngestionSettings
from documind.core.cancellation import CancellationToken
from documind.core.document_processing.chunker import chunk_text
from documind.core.document_processing.embedder import Embedder
from documind.core.document_processing.models import (
    IngestionJob,
    IngestionOutcome,
    IngestionResult,
)
from documind.core.document_processing.notifier import (
    DocumentUpdateNotifier,
    LoggingDocumentNotifier,
)
from documind.core.document_processing.status_updater import DocumentStatusUpdater
from documind.core.document_processing.text_extractor import TextExtractor
from documind.core.exceptions import IngestionAbortedError, ParsingError

logger = logging.getLogger(__name__)


class _DocumentGone(Exception):
    """Internal signal: the document was deleted while being processed."""


class IngestionPipeline:
    """Orchestrate document ingestion: extract -> chunk -> embed -> store."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        chunk_store: ChunkStore,
        embedder: Embedder,
        extractor: TextExtractor,
        storage: LocalFileStorage,
        settings: IngestionSettings,
        notifier: DocumentUpdateNotifier | None = None,
    ) -> None:
        self._chunk_store = chunk_store
        self._embedder = embedder
        self._extractor = extractor
        self._storage = storage
        self._settings = settings
        self._status = DocumentStatusUpdater(session_factory, notifier or LoggingDocumentNotifier())

    def embedding_progress(self, completed: int, total: int) -> int:
        """Progress after `completed` of `total` chunks are stored."""
        start = self._settings.progress_after_chunking
        end = self._settings.progress_embedding_end
        return min(end, start + round(completed / total * (end - start)))

    async def run(
        self,
        job: IngestionJob,
        cancellation: CancellationToken | None = None,
    ) -> IngestionResult:
        """
        Process one ingestion job.

        Args:
            job: Document and owner to process
            cancellation: Optional token; firing it aborts the run before the next chunk

        Returns:
            IngestionResult: COMPLETED, ABORTED, SKIPPED (missing or foreign
            document) or DELETED (document removed mid-run)

        Raises:
            Exception: Any extraction, embedding or storage failure, after the
                document has been rolled back and marked FAILED, or the
                rollback error itself when the chunks could not be deleted
        """
        started = time.perf_counter()
        document_id = job.document_id

        document = await self._status.load(document_id)
        if document is None or document.owner_id != job.owner_id:
            logger.warning(
                f"{__name__}:run - Skipping job for missing or foreign document",
                extra={"document_id": str(document_id), "owner_id": job.owner_id},
            )
            return self._result(job, IngestionOutcome.SKIPPED, started)

        logger.info(f"{__name__}:run - Starting ingestion", extra={"document_id": str(document_id)})

        try:
            await self._set(job, 0, DocumentStatus.PROCESSING)
            # Leftovers of an interrupted delivery of this job.
            await self._chunk_store.delete_by_document_id(document_id)
        except _DocumentGone:
            return self._result(job, IngestionOutcome.DELETED, started)

        try:
            chunk_count = await self._index(job, document.file_path, cancellation)
            await self._set(job, 100, DocumentStatus.DONE)
        except _DocumentGone:
            await self._rollback(job)
            logger.info(
                f"{__name__}:run - Document deleted during ingestion",
                extra={"document_id": str(document_id)},
            )
            return self._result(job, IngestionOutcome.DELETED, started)
        except IngestionAbortedError as e:
            logger.warning(f"{__name__}:run - {e.message}", extra={"document_id": str(document_id)})
            gone = await self._fail(job, e.message)
            outcome = IngestionOutcome.DELETED if gone else IngestionOutcome.ABORTED
            return self._result(job, outcome, started)
        except Exception as e:
            logger.error(
                f"{__name__}:run - Ingestion failed: {e}",
                extra={"document_id": str(document_id)},
            )
            if await self._fail(job, str(e)):
                return self._result(job, IngestionOutcome.DELETED, started)
            raise

        result = self._result(job, IngestionOutcome.COMPLETED, started, chunk_count)
        logger.info(
            f"{__name__}:run - Ingestion completed: {chunk_count} chunks "
            f"in {result.processing_time_ms:.0f}ms",
            extra={"document_id": str(document_id)},
        )
        return result

    async def _index(
        self,
        job: IngestionJob,
        file_path: str | None,
        cancellation: CancellationToken | None,
    ) -> int:
        if not file_path:
            raise ParsingError("Document has no stored file", document_id=str(job.document_id))

        path = self._storage.resolve(file_path)
        text = await run_in_threadpool(self._extractor.extract, str(path))
        chunks = chunk_text(text, self._settings.chunk_size, self._settings.chunk_overlap)
        if not text.strip():
            logger.warning(
                f"{__name__}:_index - No extractable text, storing a single empty chunk",
                extra={"document_id": str(job.document_id)},
            )

        await self._set(job, self._settings.progress_after_chunking)

        total = len(chunks)
        for position, chunk in enumerate(chunks):
            if cancellation is not None and cancellation.is_cancelled:
                raise IngestionAbortedError(
                    "Ingestion aborted", document_id=str(job.document_id)
                )
            embedding = await self._embedder.embed(chunk.content)
            await self._chunk_store.add_chunk(
                job.document_id,
                chunk.content,
                embedding,
                chunk.index,
            )
            await self._set(job, self.embedding_progress(position + 1, total))

        return total

    async def _set(self, job: IngestionJob, progress: int, status: DocumentStatus | None = None) -> None:
        document = await self._status.update(job.document_id, job.owner_id, progress, status)
        if document is None:
            raise _DocumentGone()

    async def _rollback(self, job: IngestionJob) -> None:
        """Delete every chunk written for the document, retrying transient store errors."""
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._settings.rollback_attempts),
                wait=wait_fixed(self._settings.rollback_wait_seconds),
                reraise=True,
            ):
                with attempt:
                    await self._chunk_store.delete_by_document_id(job.document_id)
        except Exception as e:
            logger.error(
                f"{__name__}:_rollback - Chunk rollback failed after "
                f"{self._settings.rollback_attempts} attempts: {e}",
                extra={"document_id": str(job.document_id)},
            )
            raise

    async def _fail(self, job: IngestionJob, error_message: str) -> bool:
        """
        Roll back chunks and mark FAILED. Returns True if the document is gone.

        The status is only written once the rollback succeeded; a rollback
        error propagates with the document still PROCESSING.
        """
        await self._rollback(job)
        document = await self._status.update(
            job.document_id,
            job.owner_id,
            100,
            DocumentStatus.FAILED,
            error_message=error_message,
        )
        return document is None

    @staticmethod
    def _result(
        job: IngestionJob,
        outcome: IngestionOutcome,
        started: float,
        chunk_count: int = 0,
    ) -> IngestionResult:
        return IngestionResult(
            document_id=job.document_id,
            outcome=outcome,
            chunk_count=chunk_count,
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )
