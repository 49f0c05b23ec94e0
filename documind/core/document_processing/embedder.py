"""
Text embedders.

StubEmbedder produces deterministic pseudo-random unit vectors for local
development and tests. LangChainEmbedder adapts any LangChain Embeddings
model (Google Gemini, Amazon Bedrock) and enforces the configured
dimension. build_embedder() picks one from configuration.

Dependencies: langchain_core, langchain_google_genai, langchain_aws, tenacity
System role: Embedding stage of ingestion and query embedding for retrieval
"""

import hashlib
import logging
import math
import random
from abc import ABC, abstractmethod

from fastapi.concurrency import run_in_threadpool
from langchain_core.embeddings import Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential_jitter

from documind.configs.vector_store import EmbeddingProvider, EmbeddingSettings
from documind.core.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class Embedder(ABC):
    """Maps text to a fixed-length vector."""

    name: str = "embedder"

    def __init__(self, dimension: int) -> None:
        if dimension < 1:
            raise ValueError("dimension must be at least 1")
        self.dimension = dimension

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """
        Embed one text.

        Raises:
            UpstreamUnavailableError: If the provider fails or returns a
                vector of the wrong dimension
        """


class StubEmbedder(Embedder):
    """Deterministic embedder: SHA-256 of the text seeds a Gaussian PRNG."""

    name = "stub"

    async def embed(self, text: str) -> list[float]:
        return self.embed_sync(text)

    def embed_sync(self, text: str) -> list[float]:
        seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")
        rng = random.Random(seed)
        values = [rng.gauss(0.0, 1.0) for _ in range(self.dimension)]
        norm = math.sqrt(sum(v * v for v in values)) or 1.0
        return [v / norm for v in values]


class FixedDimensionGoogleEmbeddings(GoogleGenerativeAIEmbeddings):
    """Gemini embeddings that always request the configured output dimensionality."""

    _output_dimensionality: int = 1536

    def __init__(self, model: str, output_dimensionality: int, **kwargs) -> None:
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality

    def embed_query(self, text: str, **kwargs) -> list[float]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return super().embed_query(text, **kwargs)


class LangChainEmbedder(Embedder):
    """
    Adapter over a LangChain Embeddings model.

    Provider calls are retried with exponential jitter; the last failure
    is surfaced as UpstreamUnavailableError.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int,
        name: str = "langchain",
        max_attempts: int = 3,
        wait_initial: float = 0.5,
        wait_max: float = 8.0,
    ) -> None:
        super().__init__(dimension)
        self._embeddings = embeddings
        self.name = name
        self._max_attempts = max_attempts
        self._wait_initial = wait_initial
        self._wait_max = wait_max

    async def embed(self, text: str) -> list[float]:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_attempts),
                wait=wait_exponential_jitter(initial=self._wait_initial, max=self._wait_max),
                reraise=True,
            ):
                with attempt:
                    vector = await run_in_threadpool(self._embeddings.embed_query, text)
        except Exception as e:
            logger.error(
                f"{__name__}:embed - Embedding provider failed: {e}",
                extra={"provider": self.name},
            )
            raise UpstreamUnavailableError(
                f"Embedding provider '{self.name}' failed: {e}", provider=self.name
            ) from e

        if len(vector) != self.dimension:
            raise UpstreamUnavailableError(
                f"Embedding provider '{self.name}' returned dimension {len(vector)}, "
                f"expected {self.dimension}",
                provider=self.name,
            )
        return [float(v) for v in vector]


def build_embedder(settings: EmbeddingSettings) -> Embedder:
    """
    Build the configured embedder.

    Args:
        settings: Embedding settings

    Returns:
        Embedder: Stub, Gemini or Bedrock embedder
    """
    provider = settings.provider
    logger.info(
        f"{__name__}:build_embedder - Creating {provider.value} embedder "
        f"(dimension={settings.dimension})"
    )

    if provider == EmbeddingProvider.STUB:
        return StubEmbedder(settings.dimension)

    if provider == EmbeddingProvider.GEMINI:
        embeddings = FixedDimensionGoogleEmbeddings(
            model=settings.gemini_model,
            output_dimensionality=settings.dimension,
        )
    else:
        from langchain_aws import BedrockEmbeddings

        embeddings = BedrockEmbeddings(
            model_id=settings.bedrock_model_id,
            region_name=settings.aws_region,
            model_kwargs={"dimensions": settings.dimension},
        )

    return LangChainEmbedder(
        embeddings,
        dimension=settings.dimension,
        name=provider.value,
        max_attempts=settings.max_attempts,
    )
