"""
Celery workers module.

Async task processing for document ingestion.

Dependencies: celery, documind.configs
System role: Background task processing
"""

from celery import Celery

from documind.configs import get_settings

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "documind",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["documind.workers.tasks.document_ingestion"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)
