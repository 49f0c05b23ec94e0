"""
Document ingestion Celery task.

Task: ingest_document(document_id, owner_id)
Flow: extract -> chunk -> embed -> store -> update status (IngestionPipeline)

Each run gets its own event loop and database engine; the engine is
disposed before the task returns.

Dependencies: celery, sqlalchemy, documind.core, documind.boundary
System role: Async document processing task
"""

import asyncio
import logging
from uuid import UUID

from documind.boundary.db.connection import get_async_engine, get_async_session_factory
from documind.boundary.storage import LocalFileStorage
from documind.boundary.vdb import get_chunk_store
from documind.configs import Settings, get_settings
from documind.core.document_processing import (
    IngestionJob,
    IngestionPipeline,
    IngestionResult,
    PdfTextExtractor,
    build_embedder,
)
from documind.workers import celery_app

logger = logging.getLogger(__name__)


async def run_ingestion_job(job: IngestionJob, settings: Settings | None = None) -> IngestionResult:
    """
    Build a pipeline against a fresh engine and process one job.

    Args:
        job: Document and owner to process
        settings: Application settings (defaults to the cached settings)

    Returns:
        IngestionResult: Outcome of the run
    """
    settings = settings or get_settings()
    engine = get_async_engine()
    try:
        session_factory = get_async_session_factory(engine)
        pipeline = IngestionPipeline(
            session_factory=session_factory,
            chunk_store=get_chunk_store(settings, session_factory),
            embedder=build_embedder(settings.embedding),
            extractor=PdfTextExtractor(),
            storage=LocalFileStorage(uploads_dir=settings.ingestion.uploads_dir),
            settings=settings.ingestion,
        )
        return await pipeline.run(job)
    finally:
        await engine.dispose()


@celery_app.task(
    bind=True,
    name="documind.ingest_document",
    max_retries=get_settings().celery.task_max_retries,
    autoretry_for=(Exception,),
    retry_backoff=get_settings().celery.task_retry_backoff,
    retry_backoff_max=get_settings().celery.task_retry_backoff_max,
)
def ingest_document(self, document_id: str, owner_id: str) -> dict:
    """
    Ingest document asynchronously.

    Args:
        document_id: Document UUID as string
        owner_id: Owner of the document

    Returns:
        dict: Ingestion result with outcome and chunk count
    """
    job = IngestionJob(document_id=UUID(document_id), owner_id=owner_id)
    logger.info(
        f"{__name__}:ingest_document - attempt {self.request.retries + 1}",
        extra={"document_id": document_id},
    )
    result = asyncio.run(run_ingestion_job(job))
    return result.model_dump(mode="json")
