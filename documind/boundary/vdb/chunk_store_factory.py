"""
Chunk store factory for selecting between the in-memory (dev) and pgvector
(prod) stores.

Depends on CHUNK_STORE_STORE_TYPE. The choice is resolved once, when the
application or worker wires its components.

Dependencies: documind.boundary.vdb, documind.configs
System role: Chunk store instantiation and selection
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from documind.boundary.vdb.chunk_store import ChunkStore
from documind.boundary.vdb.memory_store import InMemoryChunkStore
from documind.boundary.vdb.pgvector_store import PgVectorChunkStore
from documind.configs import Settings
from documind.configs.vector_store import ChunkStoreType

logger = logging.getLogger(__name__)


def get_chunk_store(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> ChunkStore:
    """
    Build the configured chunk store.

    Args:
        settings: Application settings
        session_factory: Required for the pgvector store

    Returns:
        ChunkStore: Configured chunk store instance

    Raises:
        ValueError: If the pgvector store is selected without a session factory
    """
    store_type = settings.chunk_store.store_type
    dimension = settings.embedding.dimension

    if store_type == ChunkStoreType.MEMORY:
        logger.info(f"{__name__}:get_chunk_store - Creating in-memory chunk store (local dev mode)")
        return InMemoryChunkStore(dimension=dimension)

    if session_factory is None:
        raise ValueError("pgvector chunk store requires a database session factory")
    logger.info(f"{__name__}:get_chunk_store - Creating pgvector chunk store (dimension={dimension})")
    return PgVectorChunkStore(session_factory=session_factory, dimension=dimension)
