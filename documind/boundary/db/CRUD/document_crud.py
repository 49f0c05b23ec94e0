"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with owner filtering and processing-state transitions.

Dependencies: sqlalchemy, documind.boundary.db.models
System role: Document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from documind.boundary.db.CRUD.base_crud import BaseCRUD
from documind.boundary.db.models import DocumentModel, DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with owner-scoped listing and the state transitions
    used by the ingestion pipeline and retries.
    """

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def get_by_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve documents uploaded by one owner, newest first.

        Args:
            session: Async database session
            owner_id: Owner identifier
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels belonging to the owner
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.owner_id == owner_id)
            .order_by(DocumentModel.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_progress(
        self,
        session: AsyncSession,
        id: UUID,
        progress: int,
        status: DocumentStatus | None = None,
        error_message: str | None = None,
    ) -> DocumentModel | None:
        """
        Update progress and, optionally, status of a document.

        Args:
            session: Async database session
            id: Document UUID
            progress: New progress percentage (0-100)
            status: New processing status, unchanged when None
            error_message: Error details, only written when given

        Returns:
            Updated DocumentModel if found, None if the document is gone
        """
        update_fields: dict = {"progress": progress}
        if status is not None:
            update_fields["status"] = status
        if error_message is not None:
            update_fields["error_message"] = error_message[:2048]
        return await self.update_by_id(session, id, **update_fields)

    async def reset_for_retry(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> DocumentModel | None:
        """Put a document back to PENDING with zero progress and no error."""
        return await self.update_by_id(
            session,
            id,
            status=DocumentStatus.PENDING,
            progress=0,
            error_message=None,
        )


document_crud = DocumentCRUD()
