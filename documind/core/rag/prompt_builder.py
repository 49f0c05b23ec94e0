"""
Grounded-answer prompt assembly.

Packs retrieved chunks into a bounded context block and wraps it in the
answer prompt. When retrieval scores are tightly clustered the chunks are
likely near-duplicates, so the context budget shrinks to save tokens.

Dependencies: langchain_core.prompts
System role: Prompt construction for the answer orchestrator
"""

import math
from typing import Sequence

from langchain_core.prompts import PromptTemplate
from pydantic import BaseModel

from documind.configs.retrieval import PromptSettings
from documind.core.retrieval.models import RetrievalResult

CONTEXT_SEPARATOR = "\n\n"
TRUNCATION_MARK = "…"

ANSWER_TEMPLATE = """You are an assistant that answers questions about a single document.

## Instructions
1. Answer ONLY from the context below. Do not use outside knowledge.
2. If the context does not contain the answer, say explicitly that the document does not provide enough information.
3. Be concise and accurate.

## Context
{context}

## Question
{question}

## Answer
"""

ANSWER_PROMPT = PromptTemplate.from_template(ANSWER_TEMPLATE)


class BuiltPrompt(BaseModel):
    """
    Assembled prompt.

    Attributes:
        prompt: Full text sent to the model
        included_chunk_indices: Chunk indices that made it into the context, in order
        context_chars: Length of the context block
    """

    prompt: str
    included_chunk_indices: list[int]
    context_chars: int


class PromptBuilder:
    """Build a context-bounded answer prompt from retrieved chunks."""

    def __init__(self, settings: PromptSettings) -> None:
        self._settings = settings

    def context_budget(self, chunks: Sequence[RetrievalResult]) -> int:
        """Character budget for the context block given the retrieved scores."""
        cap = self._settings.max_context_chars
        scores = [chunk.score for chunk in chunks]
        if len(scores) >= 2 and max(scores) - min(scores) < self._settings.similar_score_range:
            return math.floor(cap * self._settings.similar_score_context_ratio)
        return cap

    def format_chunk(self, chunk: RetrievalResult) -> str:
        text = chunk.content.strip()
        limit = self._settings.max_chunk_chars
        if len(text) > limit:
            text = text[:limit] + TRUNCATION_MARK
        return f"[Chunk {chunk.chunk_index}]\n{text}"

    def build(self, chunks: Sequence[RetrievalResult], question: str) -> BuiltPrompt:
        """
        Assemble the prompt.

        Chunks are added in the given order until the next block would push
        the context past the budget; assembly stops there.

        Args:
            chunks: Retrieved chunks, best first
            question: User question

        Returns:
            BuiltPrompt: Prompt text and the chunk indices it contains
        """
        budget = self.context_budget(chunks)
        blocks: list[str] = []
        included: list[int] = []
        total = 0

        for chunk in chunks:
            block = self.format_chunk(chunk)
            added = len(block) + (len(CONTEXT_SEPARATOR) if blocks else 0)
            if total + added > budget:
                break
            blocks.append(block)
            included.append(chunk.chunk_index)
            total += added

        context = CONTEXT_SEPARATOR.join(blocks)
        prompt = ANSWER_PROMPT.format(context=context, question=question.strip())
        return BuiltPrompt(prompt=prompt, included_chunk_indices=included, context_chars=len(context))
