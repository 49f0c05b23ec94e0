"""
Chunk store and embedding configuration settings.

Selects where chunk vectors live (pgvector in PostgreSQL, or an in-process
store for local development) and which embedding provider produces them.

Dependencies: pydantic, pydantic_settings
System role: Vector storage configuration for ingestion and retrieval
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from documind.configs.base import BaseSettings


class ChunkStoreType(str, Enum):
    """Available chunk store backends."""

    PGVECTOR = "pgvector"
    MEMORY = "memory"


class EmbeddingProvider(str, Enum):
    """Available embedding providers."""

    STUB = "stub"
    GEMINI = "gemini"
    BEDROCK = "bedrock"


class ChunkStoreSettings(BaseSettings):
    """Chunk store configuration (in-memory for dev, pgvector for prod)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHUNK_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: ChunkStoreType = Field(
        default=ChunkStoreType.PGVECTOR,
        description="Chunk store type: 'memory' for local dev, 'pgvector' for production",
    )


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: EmbeddingProvider = Field(
        default=EmbeddingProvider.STUB,
        description="Embedding provider: 'stub' (deterministic), 'gemini' or 'bedrock'",
    )
    dimension: int = Field(
        default=1536,
        ge=1,
        description="Embedding vector dimension shared by every stored chunk",
    )
    gemini_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    bedrock_model_id: str = Field(
        default="amazon.titan-embed-text-v2:0",
        description="Amazon Bedrock embedding model ID",
    )
    aws_region: str = Field(default="us-east-1", description="AWS region for Bedrock")
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Provider call attempts before giving up",
    )
