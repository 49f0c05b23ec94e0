"""
LLM gateway configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Language model backend selection for answer generation
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from documind.configs.base import BaseSettings


class LLMProvider(str, Enum):
    """Available language model backends."""

    STUB = "stub"
    OLLAMA = "ollama"
    GEMINI = "gemini"
    BEDROCK = "bedrock"


class LLMSettings(BaseSettings):
    """Language model backend configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: LLMProvider = Field(
        default=LLMProvider.STUB,
        description="LLM backend: 'stub', 'ollama', 'gemini' or 'bedrock'",
    )
    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="Sampling temperature")
    request_timeout: float = Field(default=120.0, description="Upstream request timeout in seconds")

    ollama_base_url: str = Field(default="http://localhost:11434", description="Ollama server URL")
    ollama_model: str = Field(default="llama3.2", description="Ollama model name")

    gemini_model: str = Field(default="gemini-2.5-flash", description="Google Gemini chat model")

    bedrock_model_id: str = Field(
        default="anthropic.claude-3-haiku-20240307-v1:0",
        description="Amazon Bedrock chat model ID",
    )
    aws_region: str = Field(default="us-east-1", description="AWS region for Bedrock")
