"""
pgvector chunk store for production retrieval.

Chunks live in the document_chunks table; nearest-neighbour search uses the
pgvector cosine distance operator and lexical search uses escaped ILIKE
patterns.

Dependencies: sqlalchemy, pgvector
System role: Production chunk store (PostgreSQL)
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from documind.boundary.db.models import ChunkModel
from documind.boundary.db.models.chunk_model import new_chunk_id
from documind.boundary.vdb.chunk_schemas import ScoredChunk, StoredChunk
from documind.boundary.vdb.chunk_store import ChunkStore

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(token: str) -> str:
    """Escape LIKE wildcards so a token matches literally."""
    return (
        token.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


class PgVectorChunkStore(ChunkStore):
    """
    Chunk store backed by PostgreSQL with the pgvector extension.

    Every operation opens its own session from the factory and commits
    before returning, so each chunk insert is its own transaction.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dimension: int,
    ) -> None:
        super().__init__(dimension)
        self._session_factory = session_factory

    async def add_chunk(
        self,
        document_id: UUID,
        content: str,
        embedding: list[float],
        chunk_index: int,
    ) -> str:
        self._check_dimension(embedding)
        chunk_id = new_chunk_id()
        async with self._session_factory() as session:
            chunk = ChunkModel(
                id=chunk_id,
                document_id=document_id,
                content=content,
                embedding=embedding,
                chunk_index=chunk_index,
            )
            session.add(chunk)
            await session.commit()
        return chunk_id

    async def delete_by_document_id(self, document_id: UUID) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(ChunkModel).where(ChunkModel.document_id == document_id)
            )
            await session.commit()
        removed = result.rowcount or 0
        logger.info(
            f"{__name__}:delete_by_document_id - Removed {removed} chunks",
            extra={"document_id": str(document_id)},
        )
        return removed

    async def count_by_document_id(self, document_id: UUID) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count()).select_from(ChunkModel).where(ChunkModel.document_id == document_id)
            )
            return int(result.scalar_one())

    async def nearest(
        self,
        document_id: UUID,
        embedding: list[float],
        limit: int,
    ) -> list[ScoredChunk]:
        self._check_dimension(embedding)
        async with self._session_factory() as session:
            result = await session.execute(self.nearest_statement(document_id, embedding, limit))
            rows = result.all()
        return [
            ScoredChunk(
                chunk_id=row.id,
                content=row.content,
                chunk_index=row.chunk_index,
                score=1.0 - float(row.distance),
            )
            for row in rows
        ]

    @staticmethod
    def nearest_statement(document_id: UUID, embedding: list[float], limit: int):
        """SELECT ordered by cosine distance (`<=>`) to the query embedding."""
        distance = ChunkModel.embedding.cosine_distance(embedding).label("distance")
        return (
            select(ChunkModel.id, ChunkModel.content, ChunkModel.chunk_index, distance)
            .where(ChunkModel.document_id == document_id)
            .order_by(distance.asc())
            .limit(limit)
        )

    async def first_chunks(self, document_id: UUID, limit: int) -> list[StoredChunk]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ChunkModel.id, ChunkModel.content, ChunkModel.chunk_index)
                .where(ChunkModel.document_id == document_id)
                .order_by(ChunkModel.chunk_index.asc())
                .limit(limit)
            )
            rows = result.all()
        return [StoredChunk(chunk_id=row.id, content=row.content, chunk_index=row.chunk_index) for row in rows]

    async def search_substring(
        self,
        document_id: UUID,
        tokens: list[str],
        limit: int,
    ) -> list[StoredChunk]:
        if not tokens:
            return []
        conditions = [
            ChunkModel.content.ilike(f"%{escape_like(token)}%", escape=LIKE_ESCAPE)
            for token in tokens
        ]
        async with self._session_factory() as session:
            result = await session.execute(
                select(ChunkModel.id, ChunkModel.content, ChunkModel.chunk_index)
                .where(ChunkModel.document_id == document_id, or_(*conditions))
                .order_by(ChunkModel.chunk_index.asc())
                .limit(limit)
            )
            rows = result.all()
        return [StoredChunk(chunk_id=row.id, content=row.content, chunk_index=row.chunk_index) for row in rows]
