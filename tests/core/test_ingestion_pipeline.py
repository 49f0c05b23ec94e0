"""
Tests for the document ingestion pipeline.

Runs the pipeline against the in-memory SQLite database with the SQL chunk
store, a fake text extractor and a recording notifier.

System role: Verification of ingestion state transitions and rollback
"""

import uuid

import pytest
from sqlalchemy import delete

from documind.boundary.db import DocumentModel, DocumentStatus
from documind.boundary.vdb import PgVectorChunkStore
from documind.core.cancellation import CancellationToken
from documind.core.document_processing import (
    IngestionJob,
    IngestionOutcome,
    IngestionPipeline,
    StubEmbedder,
)
from documind.core.exceptions import ParsingError

TEST_DIMENSION = 16


class FakeExtractor:
    def __init__(self, text: str) -> None:
        self.text = text
        self.paths: list[str] = []

    def extract(self, file_path: str) -> str:
        self.paths.append(file_path)
        return self.text


class RecordingNotifier:
    """Collects every published update; optional hook runs after each one."""

    def __init__(self, hook=None) -> None:
        self.updates = []
        self._hook = hook

    async def document_updated(self, owner_id, update) -> None:
        self.updates.append(update)
        if self._hook is not None:
            await self._hook(update)


class FlakyEmbedder(StubEmbedder):
    """Fails on the n-th call."""

    def __init__(self, dimension: int, fail_on_call: int) -> None:
        super().__init__(dimension)
        self.calls = 0
        self._fail_on_call = fail_on_call

    async def embed(self, text: str) -> list[float]:
        self.calls += 1
        if self.calls == self._fail_on_call:
            raise RuntimeError("embedding backend down")
        return self.embed_sync(text)


class UnreliableChunkStore(PgVectorChunkStore):
    """Fails on the n-th add; afterwards the next `delete_failures` deletes fail too."""

    def __init__(self, session_factory, dimension: int, fail_on_add: int, delete_failures: int) -> None:
        super().__init__(session_factory, dimension)
        self.adds = 0
        self.delete_attempts = 0
        self._fail_on_add = fail_on_add
        self._delete_failures = delete_failures
        self._broken = False

    async def add_chunk(self, document_id, content, embedding, chunk_index) -> str:
        self.adds += 1
        if self.adds == self._fail_on_add:
            self._broken = True
            raise RuntimeError("chunk store write failed")
        return await super().add_chunk(document_id, content, embedding, chunk_index)

    async def delete_by_document_id(self, document_id) -> int:
        if self._broken:
            self.delete_attempts += 1
            if self.delete_attempts <= self._delete_failures:
                raise ConnectionError("chunk store unreachable")
        return await super().delete_by_document_id(document_id)


@pytest.fixture
def sql_chunk_store(session_factory) -> PgVectorChunkStore:
    return PgVectorChunkStore(session_factory, TEST_DIMENSION)


@pytest.fixture
def build_pipeline(session_factory, sql_chunk_store, storage, ingestion_settings):
    def _build(text="AAAA BBBB CCC", embedder=None, notifier=None, chunk_store=None) -> IngestionPipeline:
        return IngestionPipeline(
            session_factory=session_factory,
            chunk_store=chunk_store or sql_chunk_store,
            embedder=embedder or StubEmbedder(TEST_DIMENSION),
            extractor=FakeExtractor(text),
            storage=storage,
            settings=ingestion_settings,
            notifier=notifier,
        )

    return _build


class TestIngestionPipeline:
    """Test suite for IngestionPipeline.run."""

    @pytest.mark.asyncio
    async def test_successful_run_reports_progress_and_stores_chunks(
        self, build_pipeline, make_document, load_document, sql_chunk_store, owner_id
    ) -> None:
        # Arrange
        document = await make_document()
        notifier = RecordingNotifier()
        pipeline = build_pipeline(notifier=notifier)

        # Act
        result = await pipeline.run(IngestionJob(document_id=document.id, owner_id=owner_id))

        # Assert
        assert result.outcome == IngestionOutcome.COMPLETED
        assert result.chunk_count == 3
        assert [update.progress for update in notifier.updates] == [0, 30, 50, 70, 90, 100]
        assert notifier.updates[0].status == DocumentStatus.PROCESSING
        assert notifier.updates[-1].status == DocumentStatus.DONE
        assert all(update.status == DocumentStatus.PROCESSING for update in notifier.updates[:-1])

        stored = await load_document(document.id)
        assert stored.status == DocumentStatus.DONE
        assert stored.progress == 100
        assert await sql_chunk_store.count_by_document_id(document.id) == 3

        chunks = await sql_chunk_store.first_chunks(document.id, 10)
        assert [chunk.content for chunk in chunks] == ["AAAA ", " BBBB", "B CCC"]

    @pytest.mark.asyncio
    async def test_progress_never_decreases(self, build_pipeline, make_document, owner_id) -> None:
        document = await make_document()
        notifier = RecordingNotifier()
        pipeline = build_pipeline(text="x" * 60, notifier=notifier)

        await pipeline.run(IngestionJob(document_id=document.id, owner_id=owner_id))

        progress = [update.progress for update in notifier.updates]
        assert progress == sorted(progress)
        assert progress[-1] == 100

    @pytest.mark.asyncio
    async def test_empty_text_stores_single_empty_chunk(
        self, build_pipeline, make_document, load_document, sql_chunk_store, owner_id
    ) -> None:
        document = await make_document()

        result = await build_pipeline(text="").run(
            IngestionJob(document_id=document.id, owner_id=owner_id)
        )

        assert result.outcome == IngestionOutcome.COMPLETED
        assert result.chunk_count == 1
        chunks = await sql_chunk_store.first_chunks(document.id, 10)
        assert [chunk.content for chunk in chunks] == [""]
        assert (await load_document(document.id)).status == DocumentStatus.DONE

    @pytest.mark.asyncio
    async def test_embedding_failure_rolls_back_chunks(
        self, build_pipeline, make_document, load_document, sql_chunk_store, owner_id
    ) -> None:
        # Arrange
        document = await make_document()
        embedder = FlakyEmbedder(TEST_DIMENSION, fail_on_call=3)
        pipeline = build_pipeline(embedder=embedder)

        # Act
        with pytest.raises(RuntimeError, match="embedding backend down"):
            await pipeline.run(IngestionJob(document_id=document.id, owner_id=owner_id))

        # Assert
        stored = await load_document(document.id)
        assert stored.status == DocumentStatus.FAILED
        assert stored.progress == 100
        assert "embedding backend down" in stored.error_message
        assert await sql_chunk_store.count_by_document_id(document.id) == 0

    @pytest.mark.asyncio
    async def test_rollback_retries_transient_delete_failure(
        self, build_pipeline, make_document, load_document, session_factory, owner_id
    ) -> None:
        # Arrange
        document = await make_document()
        store = UnreliableChunkStore(session_factory, TEST_DIMENSION, fail_on_add=3, delete_failures=1)
        pipeline = build_pipeline(chunk_store=store)

        # Act
        with pytest.raises(RuntimeError, match="chunk store write failed"):
            await pipeline.run(IngestionJob(document_id=document.id, owner_id=owner_id))

        # Assert
        assert store.delete_attempts == 2
        stored = await load_document(document.id)
        assert stored.status == DocumentStatus.FAILED
        assert await store.count_by_document_id(document.id) == 0

    @pytest.mark.asyncio
    async def test_failed_rollback_leaves_document_processing(
        self, build_pipeline, make_document, load_document, session_factory, ingestion_settings, owner_id
    ) -> None:
        # Arrange
        document = await make_document()
        store = UnreliableChunkStore(session_factory, TEST_DIMENSION, fail_on_add=3, delete_failures=100)
        pipeline = build_pipeline(chunk_store=store)

        # Act
        with pytest.raises(ConnectionError, match="chunk store unreachable"):
            await pipeline.run(IngestionJob(document_id=document.id, owner_id=owner_id))

        # Assert
        assert store.delete_attempts == ingestion_settings.rollback_attempts
        stored = await load_document(document.id)
        assert stored.status == DocumentStatus.PROCESSING
        assert stored.error_message is None
        assert await store.count_by_document_id(document.id) == 2

    @pytest.mark.asyncio
    async def test_missing_file_path_fails_document(
        self, build_pipeline, make_document, load_document, owner_id
    ) -> None:
        document = await make_document(file_path=None)

        with pytest.raises(ParsingError):
            await build_pipeline().run(IngestionJob(document_id=document.id, owner_id=owner_id))

        stored = await load_document(document.id)
        assert stored.status == DocumentStatus.FAILED
        assert stored.error_message

    @pytest.mark.asyncio
    async def test_foreign_owner_is_skipped(
        self, build_pipeline, make_document, load_document
    ) -> None:
        document = await make_document()
        notifier = RecordingNotifier()

        result = await build_pipeline(notifier=notifier).run(
            IngestionJob(document_id=document.id, owner_id="someone-else")
        )

        assert result.outcome == IngestionOutcome.SKIPPED
        assert notifier.updates == []
        assert (await load_document(document.id)).status == DocumentStatus.PENDING

    @pytest.mark.asyncio
    async def test_missing_document_is_skipped(self, build_pipeline, owner_id) -> None:
        result = await build_pipeline().run(IngestionJob(document_id=uuid.uuid4(), owner_id=owner_id))

        assert result.outcome == IngestionOutcome.SKIPPED

    @pytest.mark.asyncio
    async def test_document_deleted_mid_run_ends_silently(
        self, build_pipeline, make_document, session_factory, sql_chunk_store, owner_id
    ) -> None:
        # Arrange
        document = await make_document()

        async def delete_after_chunking(update) -> None:
            if update.progress == 30:
                async with session_factory() as session:
                    await session.execute(delete(DocumentModel).where(DocumentModel.id == document.id))
                    await session.commit()

        pipeline = build_pipeline(notifier=RecordingNotifier(hook=delete_after_chunking))

        # Act
        result = await pipeline.run(IngestionJob(document_id=document.id, owner_id=owner_id))

        # Assert
        assert result.outcome == IngestionOutcome.DELETED
        assert await sql_chunk_store.count_by_document_id(document.id) == 0

    @pytest.mark.asyncio
    async def test_cancellation_aborts_and_marks_failed(
        self, build_pipeline, make_document, load_document, sql_chunk_store, owner_id
    ) -> None:
        # Arrange
        document = await make_document()
        token = CancellationToken()

        async def cancel_after_first_chunk(update) -> None:
            if update.progress == 50:
                token.cancel()

        pipeline = build_pipeline(notifier=RecordingNotifier(hook=cancel_after_first_chunk))

        # Act
        result = await pipeline.run(
            IngestionJob(document_id=document.id, owner_id=owner_id),
            cancellation=token,
        )

        # Assert
        assert result.outcome == IngestionOutcome.ABORTED
        stored = await load_document(document.id)
        assert stored.status == DocumentStatus.FAILED
        assert stored.error_message == "Ingestion aborted"
        assert await sql_chunk_store.count_by_document_id(document.id) == 0

    @pytest.mark.asyncio
    async def test_rerun_replaces_stale_chunks(
        self, build_pipeline, make_document, sql_chunk_store, owner_id
    ) -> None:
        document = await make_document()
        await sql_chunk_store.add_chunk(document.id, "stale", [0.0] * TEST_DIMENSION, 0)

        await build_pipeline().run(IngestionJob(document_id=document.id, owner_id=owner_id))

        chunks = await sql_chunk_store.first_chunks(document.id, 10)
        assert "stale" not in [chunk.content for chunk in chunks]
        assert len(chunks) == 3

    @pytest.mark.asyncio
    async def test_notifier_failure_does_not_stop_ingestion(
        self, build_pipeline, make_document, load_document, owner_id
    ) -> None:
        document = await make_document()

        async def explode(update) -> None:
            raise ConnectionError("client gone")

        result = await build_pipeline(notifier=RecordingNotifier(hook=explode)).run(
            IngestionJob(document_id=document.id, owner_id=owner_id)
        )

        assert result.outcome == IngestionOutcome.COMPLETED
        assert (await load_document(document.id)).status == DocumentStatus.DONE

    def test_embedding_progress_bounds(self, build_pipeline) -> None:
        pipeline = build_pipeline()

        assert pipeline.embedding_progress(0, 4) == 30
        assert pipeline.embedding_progress(4, 4) == 90
        assert pipeline.embedding_progress(1, 3) == 50
