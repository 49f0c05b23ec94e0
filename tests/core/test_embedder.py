"""
Tests for embedders.

System role: Verification of deterministic stub vectors and provider adaptation
"""

import math
from unittest.mock import MagicMock

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from documind.configs.vector_store import EmbeddingProvider, EmbeddingSettings
from documind.core.document_processing import LangChainEmbedder, StubEmbedder, build_embedder
from documind.core.exceptions import UpstreamUnavailableError


class TestStubEmbedder:
    """Test suite for StubEmbedder."""

    @pytest.mark.asyncio
    async def test_same_text_same_vector(self) -> None:
        embedder = StubEmbedder(32)

        first = await embedder.embed("termination clause")
        second = await embedder.embed("termination clause")

        assert first == second

    @pytest.mark.asyncio
    async def test_different_text_different_vector(self) -> None:
        embedder = StubEmbedder(32)

        assert await embedder.embed("alpha") != await embedder.embed("beta")

    @pytest.mark.asyncio
    async def test_vector_is_unit_length_with_configured_dimension(self) -> None:
        embedder = StubEmbedder(1536)

        vector = await embedder.embed("some text")

        assert len(vector) == 1536
        assert math.isclose(math.sqrt(sum(v * v for v in vector)), 1.0, rel_tol=1e-9)

    def test_empty_text_is_embeddable(self) -> None:
        vector = StubEmbedder(8).embed_sync("")

        assert len(vector) == 8

    def test_dimension_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            StubEmbedder(0)


class TestLangChainEmbedder:
    """Test suite for LangChainEmbedder."""

    @pytest.mark.asyncio
    async def test_returns_provider_vector(self) -> None:
        embedder = LangChainEmbedder(DeterministicFakeEmbedding(size=8), dimension=8, name="fake")

        vector = await embedder.embed("hello")

        assert len(vector) == 8
        assert all(isinstance(v, float) for v in vector)

    @pytest.mark.asyncio
    async def test_wrong_dimension_raises_upstream_error(self) -> None:
        embedder = LangChainEmbedder(DeterministicFakeEmbedding(size=4), dimension=8, name="fake")

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await embedder.embed("hello")

        assert exc_info.value.details["provider"] == "fake"

    @pytest.mark.asyncio
    async def test_provider_failure_raises_upstream_error(self) -> None:
        # Arrange
        embeddings = MagicMock()
        embeddings.embed_query.side_effect = RuntimeError("quota exceeded")
        embedder = LangChainEmbedder(embeddings, dimension=8, name="gemini", max_attempts=1)

        # Act / Assert
        with pytest.raises(UpstreamUnavailableError, match="quota exceeded"):
            await embedder.embed("hello")
        assert embeddings.embed_query.call_count == 1

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self) -> None:
        embeddings = MagicMock()
        embeddings.embed_query.side_effect = [RuntimeError("throttled"), [0.5] * 8]
        embedder = LangChainEmbedder(
            embeddings, dimension=8, max_attempts=2, wait_initial=0, wait_max=0
        )

        vector = await embedder.embed("hello")

        assert vector == [0.5] * 8
        assert embeddings.embed_query.call_count == 2


class TestBuildEmbedder:
    def test_stub_provider(self) -> None:
        embedder = build_embedder(EmbeddingSettings(provider=EmbeddingProvider.STUB, dimension=64))

        assert isinstance(embedder, StubEmbedder)
        assert embedder.dimension == 64
