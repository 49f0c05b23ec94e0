"""
Chunk store interface.

Both ingestion (writes) and hybrid retrieval (reads) depend on this
abstraction rather than on a concrete database.

Dependencies: documind.boundary.vdb.chunk_schemas
System role: Persistence contract for document chunks and their vectors
"""

from abc import ABC, abstractmethod
from uuid import UUID

from documind.boundary.vdb.chunk_schemas import ScoredChunk, StoredChunk


class ChunkStore(ABC):
    """
    Persists chunks with their embeddings and answers dense and
    substring queries scoped to one document.
    """

    def __init__(self, dimension: int) -> None:
        self.dimension = dimension

    def _check_dimension(self, embedding: list[float]) -> None:
        if len(embedding) != self.dimension:
            raise ValueError(
                f"Embedding dimension {len(embedding)} does not match store dimension {self.dimension}"
            )

    @abstractmethod
    async def add_chunk(
        self,
        document_id: UUID,
        content: str,
        embedding: list[float],
        chunk_index: int,
    ) -> str:
        """
        Persist one chunk. Committed before returning.

        Returns:
            str: Identifier of the stored chunk

        Raises:
            ValueError: If the embedding dimension does not match the store
        """

    @abstractmethod
    async def delete_by_document_id(self, document_id: UUID) -> int:
        """Delete every chunk of a document. Returns the number removed."""

    @abstractmethod
    async def count_by_document_id(self, document_id: UUID) -> int:
        """Number of chunks stored for a document."""

    @abstractmethod
    async def nearest(
        self,
        document_id: UUID,
        embedding: list[float],
        limit: int,
    ) -> list[ScoredChunk]:
        """Chunks ordered by ascending cosine distance, scored 1 - distance."""

    @abstractmethod
    async def first_chunks(self, document_id: UUID, limit: int) -> list[StoredChunk]:
        """First chunks of a document by chunk index."""

    @abstractmethod
    async def search_substring(
        self,
        document_id: UUID,
        tokens: list[str],
        limit: int,
    ) -> list[StoredChunk]:
        """Chunks whose content contains any token, case-insensitively."""
