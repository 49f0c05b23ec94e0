"""
Ingestion pipeline configuration settings.

Chunking window, upload limits and the progress checkpoints reported while
a document is being indexed.

Dependencies: pydantic, pydantic_settings
System role: Document ingestion configuration
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from documind.configs.base import BaseSettings


class IngestionSettings(BaseSettings):
    """Document upload and ingestion configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(default=900, ge=1, description="Sliding window size in characters")
    chunk_overlap: int = Field(default=100, ge=0, description="Overlap between windows in characters")

    uploads_dir: str = Field(default="uploads", description="Directory holding uploaded files")
    max_file_size_bytes: int = Field(
        default=50 * 1024 * 1024,
        description="Maximum accepted upload size",
    )
    allowed_content_types: list[str] = Field(
        default=["application/pdf"],
        description="Accepted upload MIME types",
    )

    progress_after_chunking: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Progress reported once text is chunked",
    )
    progress_embedding_end: int = Field(
        default=90,
        ge=0,
        le=100,
        description="Progress reported once every chunk is embedded",
    )

    rollback_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts at deleting a failed document's chunks before giving up",
    )
    rollback_wait_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Pause between chunk rollback attempts",
    )

    @model_validator(mode="after")
    def _check_window(self) -> "IngestionSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        if self.progress_after_chunking > self.progress_embedding_end:
            raise ValueError("progress_after_chunking must not exceed progress_embedding_end")
        return self
