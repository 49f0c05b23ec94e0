"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - DocumentModel, ChunkModel: Core domain entities
  - DocumentStatus: Ingestion state enum
  - document_crud: CRUD operation singleton

Dependencies: sqlalchemy, pgvector, documind.configs
System role: Database adapter for documents and their chunks
"""

from documind.boundary.db.base import Base, TimestampMixin, UUIDMixin
from documind.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    get_shared_session_factory,
)
from documind.boundary.db.models import ChunkModel, DocumentModel, DocumentStatus
from documind.boundary.db.CRUD import BaseCRUD, DocumentCRUD, document_crud

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "get_shared_session_factory",
    "ChunkModel",
    "DocumentModel",
    "DocumentStatus",
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
]
