"""
Celery-backed ingestion queue.

Dependencies: celery, documind.workers.tasks
System role: Job dispatch from the API to the workers
"""

import logging

from documind.core.document_processing.models import IngestionJob
from documind.workers.tasks.document_ingestion import ingest_document

logger = logging.getLogger(__name__)


class CeleryIngestionQueue:
    """Dispatches ingestion jobs to the Celery worker pool."""

    def enqueue(self, job: IngestionJob) -> None:
        async_result = ingest_document.delay(str(job.document_id), job.owner_id)
        logger.info(
            f"{__name__}:enqueue - Queued ingestion task {async_result.id}",
            extra={"document_id": str(job.document_id)},
        )
