"""Prompt assembly, LLM backends and answer orchestration."""

from documind.core.rag.llm_gateway import (
    ChatModelLLMGateway,
    LLMGateway,
    OllamaLLMGateway,
    StubLLMGateway,
    build_llm_gateway,
)
from documind.core.rag.orchestrator import (
    NO_CHUNKS_ANSWER,
    NO_EXTRACTABLE_TEXT_ANSWER,
    NO_INFO_ANSWER,
    AnswerOrchestrator,
)
from documind.core.rag.prompt_builder import BuiltPrompt, PromptBuilder

__all__ = [
    "NO_CHUNKS_ANSWER",
    "NO_EXTRACTABLE_TEXT_ANSWER",
    "NO_INFO_ANSWER",
    "AnswerOrchestrator",
    "BuiltPrompt",
    "ChatModelLLMGateway",
    "LLMGateway",
    "OllamaLLMGateway",
    "PromptBuilder",
    "StubLLMGateway",
    "build_llm_gateway",
]
