"""
Document status updater.

Persists status/progress changes for the ingestion pipeline, each in its own
committed transaction, then publishes the new state to the notifier.

Dependencies: sqlalchemy, documind.boundary.db
System role: Database persistence of ingestion state
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from documind.boundary.db import DocumentModel, DocumentStatus, document_crud
from documind.core.document_processing.models import DocumentUpdate
from documind.core.document_processing.notifier import DocumentUpdateNotifier

logger = logging.getLogger(__name__)


class DocumentStatusUpdater:
    """Update document status in the database during processing."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: DocumentUpdateNotifier,
    ) -> None:
        self._session_factory = session_factory
        self._notifier = notifier

    async def load(self, document_id: UUID) -> DocumentModel | None:
        """Fetch the current document row, or None if it does not exist."""
        async with self._session_factory() as session:
            return await document_crud.get_by_id(session, document_id)

    async def update(
        self,
        document_id: UUID,
        owner_id: str,
        progress: int,
        status: DocumentStatus | None = None,
        error_message: str | None = None,
    ) -> DocumentModel | None:
        """
        Persist a progress (and optional status) change and notify the owner.

        Args:
            document_id: Document being processed
            owner_id: Owner to notify
            progress: New progress percentage
            status: New status, unchanged when None
            error_message: Failure details

        Returns:
            DocumentModel | None: Updated row, or None if the document was deleted
        """
        async with self._session_factory() as session:
            document = await document_crud.update_progress(
                session,
                document_id,
                progress=progress,
                status=status,
                error_message=error_message,
            )
            if document is None:
                await session.rollback()
                logger.info(
                    f"{__name__}:update - Document no longer exists",
                    extra={"document_id": str(document_id)},
                )
                return None
            await session.commit()

        await self._publish(owner_id, document)
        return document

    async def _publish(self, owner_id: str, document: DocumentModel) -> None:
        update = DocumentUpdate(
            document_id=document.id,
            status=document.status,
            progress=document.progress,
            error_message=document.error_message,
        )
        try:
            await self._notifier.document_updated(owner_id, update)
        except Exception as e:
            # Delivery is best-effort; the persisted state is authoritative.
            logger.warning(
                f"{__name__}:_publish - Notification failed: {e}",
                extra={"document_id": str(document.id)},
            )
