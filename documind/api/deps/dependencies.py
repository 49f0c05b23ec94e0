"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived components
(embedder, chunk store, LLM backend, retriever, orchestrator) are built
once per process in ServiceCache; per-request services get a fresh
database session.

Dependencies: fastapi, documind.configs, documind.application, documind.boundary, documind.core
System role: DI container for service injection
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from documind.application.services import DocumentService, IngestionQueue
from documind.boundary.db import get_async_db, get_shared_session_factory
from documind.boundary.storage import LocalFileStorage
from documind.boundary.vdb import ChunkStore, get_chunk_store
from documind.configs import Settings, get_settings
from documind.core.document_processing import Embedder, build_embedder
from documind.core.rag import AnswerOrchestrator, LLMGateway, PromptBuilder, build_llm_gateway
from documind.core.retrieval import HybridRetriever


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._chunk_store: ChunkStore | None = None
        self._embedder: Embedder | None = None
        self._llm: LLMGateway | None = None
        self._storage: LocalFileStorage | None = None
        self._queue: IngestionQueue | None = None
        self._retriever: HybridRetriever | None = None
        self._orchestrator: AnswerOrchestrator | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def chunk_store(self) -> ChunkStore:
        """Get cached chunk store."""
        if self._chunk_store is None:
            self._chunk_store = get_chunk_store(self.settings, get_shared_session_factory())
        return self._chunk_store

    @property
    def embedder(self) -> Embedder:
        """Get cached embedder."""
        if self._embedder is None:
            self._embedder = build_embedder(self.settings.embedding)
        return self._embedder

    @property
    def llm(self) -> LLMGateway:
        """Get cached LLM backend."""
        if self._llm is None:
            self._llm = build_llm_gateway(self.settings.llm)
        return self._llm

    @property
    def storage(self) -> LocalFileStorage:
        if self._storage is None:
            self._storage = LocalFileStorage(uploads_dir=self.settings.ingestion.uploads_dir)
        return self._storage

    @property
    def queue(self) -> IngestionQueue:
        """Get cached ingestion queue."""
        if self._queue is None:
            from documind.workers.queue import CeleryIngestionQueue

            self._queue = CeleryIngestionQueue()
        return self._queue

    @property
    def retriever(self) -> HybridRetriever:
        """Get cached hybrid retriever."""
        if self._retriever is None:
            self._retriever = HybridRetriever(
                session_factory=get_shared_session_factory(),
                embedder=self.embedder,
                chunk_store=self.chunk_store,
                settings=self.settings.retrieval,
            )
        return self._retriever

    @property
    def orchestrator(self) -> AnswerOrchestrator:
        """Get cached answer orchestrator."""
        if self._orchestrator is None:
            self._orchestrator = AnswerOrchestrator(
                retriever=self.retriever,
                prompt_builder=PromptBuilder(self.settings.prompt),
                llm=self.llm,
                max_top_k=self.settings.retrieval.max_top_k,
                log_latency=not self.settings.is_production,
            )
        return self._orchestrator

    async def aclose(self) -> None:
        """Release cached resources and clear all instances."""
        if self._llm is not None:
            await self._llm.aclose()
        self._chunk_store = None
        self._embedder = None
        self._llm = None
        self._storage = None
        self._queue = None
        self._retriever = None
        self._orchestrator = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_current_owner_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    """
    Caller identity from the X-User-Id header set by the auth layer.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_document_service(db: AsyncSession = Depends(get_async_db)) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        DocumentService: Document service bound to the request session
    """
    cache = get_service_cache()
    return DocumentService(
        db=db,
        chunk_store=cache.chunk_store,
        storage=cache.storage,
        queue=cache.queue,
        settings=cache.settings.ingestion,
    )


def get_retriever() -> HybridRetriever:
    return get_service_cache().retriever


def get_orchestrator() -> AnswerOrchestrator:
    return get_service_cache().orchestrator
