"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory SQLite database, session factory, settings objects,
stub embedder and chunk stores, document factory
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from documind.boundary.db import Base, DocumentModel, DocumentStatus, document_crud
from documind.boundary.storage import LocalFileStorage
from documind.boundary.vdb import InMemoryChunkStore
from documind.configs.ingestion import IngestionSettings
from documind.configs.retrieval import PromptSettings, RetrievalSettings
from documind.core.document_processing import StubEmbedder

TEST_DIMENSION = 16


@pytest.fixture
async def async_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine shared by every session of one test
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_async_db(session_factory):
    """
    Create a session on the in-memory database.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def owner_id() -> str:
    return "owner-1"


@pytest.fixture
def stub_embedder() -> StubEmbedder:
    return StubEmbedder(TEST_DIMENSION)


@pytest.fixture
def memory_chunk_store() -> InMemoryChunkStore:
    return InMemoryChunkStore(TEST_DIMENSION)


@pytest.fixture
def storage(tmp_path: Path) -> LocalFileStorage:
    """File storage rooted in a per-test temporary directory."""
    return LocalFileStorage(root=tmp_path, uploads_dir="uploads")


@pytest.fixture
def ingestion_settings() -> IngestionSettings:
    return IngestionSettings(chunk_size=5, chunk_overlap=1, rollback_wait_seconds=0)


@pytest.fixture
def retrieval_settings() -> RetrievalSettings:
    return RetrievalSettings()


@pytest.fixture
def prompt_settings() -> PromptSettings:
    return PromptSettings()


@pytest.fixture
def make_document(session_factory, owner_id):
    """
    Factory inserting a committed document row.

    Returns:
        Callable: async (**fields) -> DocumentModel
    """

    async def _make(**fields) -> DocumentModel:
        values = {
            "owner_id": owner_id,
            "name": "report.pdf",
            "status": DocumentStatus.PENDING,
            "progress": 0,
            "file_path": f"uploads/{uuid.uuid4()}.pdf",
            "size_bytes": 1024,
        }
        values.update(fields)
        async with session_factory() as session:
            document = await document_crud.create(session, **values)
            await session.commit()
            return document

    return _make


@pytest.fixture
def load_document(session_factory):
    """Factory reading the current row of a document (None if deleted)."""

    async def _load(document_id: uuid.UUID) -> DocumentModel | None:
        async with session_factory() as session:
            return await document_crud.get_by_id(session, document_id)

    return _load
