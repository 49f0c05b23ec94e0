"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI and the workers.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from documind.configs.base import BaseSettings
from documind.configs.celery_config import CelerySettings
from documind.configs.database import DatabaseSettings
from documind.configs.ingestion import IngestionSettings
from documind.configs.llm import LLMSettings
from documind.configs.retrieval import PromptSettings, RetrievalSettings
from documind.configs.vector_store import ChunkStoreSettings, EmbeddingSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    celery: CelerySettings = CelerySettings()
    chunk_store: ChunkStoreSettings = ChunkStoreSettings()
    embedding: EmbeddingSettings = EmbeddingSettings()
    llm: LLMSettings = LLMSettings()
    ingestion: IngestionSettings = IngestionSettings()
    retrieval: RetrievalSettings = RetrievalSettings()
    prompt: PromptSettings = PromptSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from documind.configs import get_settings
        settings = get_settings()
    """
    return Settings()
