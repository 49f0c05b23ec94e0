"""
Hybrid retriever.

Combines a dense (cosine nearest-neighbour) channel with a lexical
(substring) channel over one document's chunks, then normalizes, ranks and
trims the merged list at the first large score drop.

Dependencies: asyncio, sqlalchemy, documind.boundary, documind.core
System role: Context retrieval for answer generation
"""

import asyncio
import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from documind.boundary.db import DocumentModel, DocumentStatus, document_crud
from documind.boundary.vdb import ChunkStore, ScoredChunk, StoredChunk
from documind.configs.retrieval import RetrievalSettings
from documind.core.document_processing.embedder import Embedder
from documind.core.exceptions import DocumentNotReadyError
from documind.core.retrieval.models import RetrievalResult
from documind.core.retrieval.scoring import (
    merge_channels,
    normalize_scores,
    rank,
    tokenize_query,
    trim_by_score_drop,
)

logger = logging.getLogger(__name__)


class HybridRetriever:
    """
    Retrieve the most relevant chunks of one document for a query.

    Ownership is enforced here: a document that does not exist or belongs to
    another owner yields an empty result rather than an error, so callers
    cannot probe for other users' documents.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        embedder: Embedder,
        chunk_store: ChunkStore,
        settings: RetrievalSettings,
    ) -> None:
        self._session_factory = session_factory
        self._embedder = embedder
        self._chunk_store = chunk_store
        self._settings = settings

    def clamp_top_k(self, top_k: int | None) -> int:
        """Clamp a requested result count to [1, max_top_k]."""
        if top_k is None:
            top_k = self._settings.default_top_k
        return max(1, min(top_k, self._settings.max_top_k))

    async def retrieve(
        self,
        owner_id: str,
        document_id: UUID,
        query: str,
        top_k: int | None = None,
    ) -> list[RetrievalResult]:
        """
        Hybrid retrieval over one document.

        Args:
            owner_id: Caller identity
            document_id: Document to search
            query: Natural-language query
            top_k: Requested result count, clamped to [1, max_top_k]

        Returns:
            list[RetrievalResult]: Ranked, trimmed results with scores in [0, 1]

        Raises:
            DocumentNotReadyError: If the document is not DONE
            UpstreamUnavailableError: If the query cannot be embedded
        """
        k = self.clamp_top_k(top_k)
        query = (query or "").strip()
        if not query:
            return []

        document, query_embedding = await asyncio.gather(
            self._load_document(document_id),
            self._embedder.embed(query),
        )

        if document is None or document.owner_id != owner_id:
            logger.info(
                f"{__name__}:retrieve - Document not found for owner",
                extra={"document_id": str(document_id), "owner_id": owner_id},
            )
            return []

        if document.status != DocumentStatus.DONE:
            raise DocumentNotReadyError(str(document_id), document.status.value)

        dense = await self._dense_channel(document_id, query_embedding, k)
        lexical = await self._lexical_channel(document_id, query)

        merged = merge_channels(
            dense,
            lexical,
            lexical_base_score=self._settings.lexical_base_score,
            hybrid_boost=self._settings.hybrid_boost,
        )
        ranked = rank(normalize_scores(list(merged.values())), k)
        results = trim_by_score_drop(ranked, self._settings.score_drop_threshold)

        logger.debug(
            f"{__name__}:retrieve - dense={len(dense)} lexical={len(lexical)} "
            f"merged={len(merged)} returned={len(results)}",
            extra={"document_id": str(document_id)},
        )
        return results

    async def _load_document(self, document_id: UUID) -> DocumentModel | None:
        async with self._session_factory() as session:
            return await document_crud.get_by_id(session, document_id)

    async def _dense_channel(
        self,
        document_id: UUID,
        query_embedding: list[float],
        k: int,
    ) -> list[ScoredChunk]:
        dense = await self._chunk_store.nearest(document_id, query_embedding, k)
        if dense:
            return dense

        # Nearest-neighbour search can come back empty (e.g. an approximate
        # index with too few rows); fall back to document order.
        fallback = await self._chunk_store.first_chunks(document_id, k)
        if fallback:
            logger.warning(
                f"{__name__}:_dense_channel - Vector search returned no rows, "
                f"falling back to the first {len(fallback)} chunks by index",
                extra={"document_id": str(document_id)},
            )
        return [
            ScoredChunk(
                chunk_id=chunk.chunk_id,
                content=chunk.content,
                chunk_index=chunk.chunk_index,
                score=self._settings.dense_fallback_score,
            )
            for chunk in fallback
        ]

    async def _lexical_channel(self, document_id: UUID, query: str) -> list[StoredChunk]:
        tokens = tokenize_query(query, self._settings.min_token_length)
        if not tokens:
            return []
        return await self._chunk_store.search_substring(
            document_id,
            tokens,
            self._settings.lexical_max_chunks,
        )
