"""
In-process chunk store for local development and tests.

Wraps LangChain's InMemoryVectorStore and mirrors the PostgreSQL store's
semantics (cosine ordering, ordered fallback, case-insensitive substring
search) without a database.

Dependencies: langchain_core.vectorstores, numpy (cosine search)
System role: Development chunk store
"""

import logging
from uuid import UUID

from langchain_core.documents import Document
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.vectorstores import InMemoryVectorStore

from documind.boundary.db.models.chunk_model import new_chunk_id
from documind.boundary.vdb.chunk_schemas import ScoredChunk, StoredChunk
from documind.boundary.vdb.chunk_store import ChunkStore

logger = logging.getLogger(__name__)


def _to_stored(doc: Document) -> StoredChunk:
    return StoredChunk(
        chunk_id=doc.id,
        content=doc.page_content,
        chunk_index=doc.metadata["chunk_index"],
    )


class InMemoryChunkStore(ChunkStore):
    """
    Chunk store backed by an InMemoryVectorStore.

    Chunks carry `document_id` and `chunk_index` metadata; every query is
    filtered on `document_id`. Vectors always arrive precomputed, so the
    wrapped store's embedding model is only a dimension-matched placeholder.
    """

    def __init__(self, dimension: int) -> None:
        super().__init__(dimension)
        self._vectors = InMemoryVectorStore(DeterministicFakeEmbedding(size=dimension))

    def _documents_for(self, document_id: UUID) -> list[Document]:
        key = str(document_id)
        ids = [
            entry["id"]
            for entry in self._vectors.store.values()
            if entry["metadata"]["document_id"] == key
        ]
        return sorted(
            self._vectors.get_by_ids(ids),
            key=lambda doc: doc.metadata["chunk_index"],
        )

    async def add_chunk(
        self,
        document_id: UUID,
        content: str,
        embedding: list[float],
        chunk_index: int,
    ) -> str:
        self._check_dimension(embedding)
        chunk_id = new_chunk_id()
        # Same record layout InMemoryVectorStore.add_documents writes
        self._vectors.store[chunk_id] = {
            "id": chunk_id,
            "vector": list(embedding),
            "text": content,
            "metadata": {"document_id": str(document_id), "chunk_index": chunk_index},
        }
        return chunk_id

    async def delete_by_document_id(self, document_id: UUID) -> int:
        ids = [doc.id for doc in self._documents_for(document_id)]
        if ids:
            await self._vectors.adelete(ids)
        logger.debug(
            f"{__name__}:delete_by_document_id - Removed {len(ids)} chunks",
            extra={"document_id": str(document_id)},
        )
        return len(ids)

    async def count_by_document_id(self, document_id: UUID) -> int:
        return len(self._documents_for(document_id))

    async def nearest(
        self,
        document_id: UUID,
        embedding: list[float],
        limit: int,
    ) -> list[ScoredChunk]:
        self._check_dimension(embedding)
        key = str(document_id)
        results = self._vectors.similarity_search_with_score_by_vector(
            embedding,
            k=limit,
            filter=lambda doc: doc.metadata["document_id"] == key,
        )
        return [
            ScoredChunk(
                chunk_id=doc.id,
                content=doc.page_content,
                chunk_index=doc.metadata["chunk_index"],
                score=float(similarity),
            )
            for doc, similarity in results
        ]

    async def first_chunks(self, document_id: UUID, limit: int) -> list[StoredChunk]:
        return [_to_stored(doc) for doc in self._documents_for(document_id)[:limit]]

    async def search_substring(
        self,
        document_id: UUID,
        tokens: list[str],
        limit: int,
    ) -> list[StoredChunk]:
        if not tokens:
            return []
        needles = [token.lower() for token in tokens]
        matches = [
            doc
            for doc in self._documents_for(document_id)
            if any(needle in doc.page_content.lower() for needle in needles)
        ]
        return [_to_stored(doc) for doc in matches[:limit]]
