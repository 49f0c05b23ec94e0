"""
Retrieval and prompt configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Hybrid retrieval scoring and context budget configuration
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from documind.configs.base import BaseSettings


class RetrievalSettings(BaseSettings):
    """Hybrid retrieval configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    default_top_k: int = Field(default=4, ge=1, description="Results returned when top_k is omitted")
    max_top_k: int = Field(default=20, ge=1, description="Upper bound for top_k")
    score_drop_threshold: float = Field(
        default=0.15,
        ge=0.0,
        description="Largest allowed score drop between consecutive results",
    )

    lexical_base_score: float = Field(default=0.35, description="Score of lexical-only matches")
    hybrid_boost: float = Field(default=0.2, description="Bonus for chunks found by both channels")
    lexical_max_chunks: int = Field(default=20, ge=1, description="Lexical channel row cap")
    min_token_length: int = Field(default=3, ge=1, description="Shortest query token kept")

    dense_fallback_score: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Neutral score assigned when the dense channel returns nothing",
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> "RetrievalSettings":
        if self.default_top_k > self.max_top_k:
            raise ValueError("default_top_k must not exceed max_top_k")
        return self


class PromptSettings(BaseSettings):
    """Context budget configuration for prompt assembly."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROMPT_",
        case_sensitive=False,
        extra="ignore",
    )

    max_chunk_chars: int = Field(default=2000, ge=1, description="Per-chunk character cap")
    max_context_chars: int = Field(default=8000, ge=1, description="Total context character cap")
    similar_score_range: float = Field(
        default=0.1,
        ge=0.0,
        description="Score spread below which retrieved chunks count as near-duplicates",
    )
    similar_score_context_ratio: float = Field(
        default=0.6,
        gt=0.0,
        le=1.0,
        description="Fraction of the context cap used for near-duplicate results",
    )
