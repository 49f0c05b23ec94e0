"""
Chunk store adapters.

Exports:
  - ChunkStore: Abstract interface used by ingestion and retrieval
  - PgVectorChunkStore: PostgreSQL + pgvector implementation
  - InMemoryChunkStore: Process-local implementation for development and tests
  - get_chunk_store(): Factory selecting one from configuration
"""

from documind.boundary.vdb.chunk_schemas import ScoredChunk, StoredChunk
from documind.boundary.vdb.chunk_store import ChunkStore
from documind.boundary.vdb.chunk_store_factory import get_chunk_store
from documind.boundary.vdb.memory_store import InMemoryChunkStore
from documind.boundary.vdb.pgvector_store import PgVectorChunkStore

__all__ = [
    "ChunkStore",
    "InMemoryChunkStore",
    "PgVectorChunkStore",
    "ScoredChunk",
    "StoredChunk",
    "get_chunk_store",
]
