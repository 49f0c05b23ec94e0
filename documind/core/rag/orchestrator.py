"""
Answer orchestrator.

Turns a question about one document into an answer grounded in that
document: retrieve → short-circuit on empty input or empty content →
build prompt → call the LLM → cite the chunks the prompt contained.
Streaming always terminates with exactly one `done` event; LLM failures
and cancellation are folded into the stream instead of raised.

Dependencies: documind.core.retrieval, documind.core.rag, documind.models
System role: Question answering entry point for the API
"""

import contextlib
import logging
import time
from typing import AsyncIterator, Sequence
from uuid import UUID

from pydantic import BaseModel, Field

from documind.core.cancellation import CancellationToken
from documind.core.exceptions import DocuMindException, ValidationError
from documind.core.rag.llm_gateway import LLMGateway
from documind.core.rag.prompt_builder import PromptBuilder
from documind.core.retrieval import HybridRetriever, RetrievalResult
from documind.models.chat import ChatAnswer
from documind.models.streaming import ChatSource, StreamEvent
from documind.observability.latency import RagLatency, log_rag_latency

logger = logging.getLogger(__name__)

NO_INFO_ANSWER = "I don't have enough information to answer that."
NO_CHUNKS_ANSWER = (
    "I couldn't find any content for this document yet. "
    "It may still be processing, or it may not contain any text."
)
NO_EXTRACTABLE_TEXT_ANSWER = (
    "This document doesn't contain any extractable text. It may be a scanned "
    "or image-only PDF, so I can't answer questions about its content."
)
STREAM_FAILURE_MESSAGE = "The answer could not be completed. Please try again."


class AnswerPlan(BaseModel):
    """Either a fixed answer or a prompt with the sources it cites."""

    fixed_answer: str | None = None
    prompt: str | None = None
    sources: list[ChatSource] = Field(default_factory=list)


def elapsed_ms(since: float) -> float:
    return (time.perf_counter() - since) * 1000


class AnswerOrchestrator:
    """Coordinate retrieval, prompt assembly and generation for one question."""

    def __init__(
        self,
        retriever: HybridRetriever,
        prompt_builder: PromptBuilder,
        llm: LLMGateway,
        max_top_k: int = 20,
        log_latency: bool = True,
    ) -> None:
        self._retriever = retriever
        self._prompt_builder = prompt_builder
        self._llm = llm
        self._max_top_k = max_top_k
        self._log_latency = log_latency

    def _validate(self, question: str, top_k: int | None) -> None:
        if not isinstance(question, str):
            raise ValidationError("question must be a string", field="question")
        if top_k is not None and not 1 <= top_k <= self._max_top_k:
            raise ValidationError(f"top_k must be between 1 and {self._max_top_k}", field="top_k")

    @staticmethod
    def cite(chunks: Sequence[RetrievalResult], included: Sequence[int]) -> list[ChatSource]:
        """Sources for the chunk indices that made it into the prompt, in prompt order."""
        scores = {chunk.chunk_index: chunk.score for chunk in chunks}
        return [ChatSource(chunk_index=index, score=scores[index]) for index in included]

    async def plan(
        self,
        owner_id: str,
        document_id: UUID,
        question: str,
        top_k: int | None,
        latency: RagLatency,
    ) -> AnswerPlan:
        """
        Decide how to answer: a fixed reply or a grounded prompt.

        Raises:
            DocumentNotReadyError: If the document is still being processed
        """
        question = question.strip()
        if not question:
            return AnswerPlan(fixed_answer=NO_INFO_ANSWER)

        started = time.perf_counter()
        chunks = await self._retriever.retrieve(owner_id, document_id, question, top_k)
        latency.retrieval_ms = elapsed_ms(started)

        if not chunks:
            return AnswerPlan(fixed_answer=NO_CHUNKS_ANSWER)
        if all(not chunk.content.strip() for chunk in chunks):
            return AnswerPlan(fixed_answer=NO_EXTRACTABLE_TEXT_ANSWER)

        started = time.perf_counter()
        built = self._prompt_builder.build(chunks, question)
        latency.prompt_build_ms = elapsed_ms(started)

        return AnswerPlan(
            prompt=built.prompt,
            sources=self.cite(chunks, built.included_chunk_indices),
        )

    async def answer(
        self,
        owner_id: str,
        document_id: UUID,
        question: str,
        top_k: int | None = None,
    ) -> ChatAnswer:
        """
        Produce a complete answer.

        Args:
            owner_id: Caller identity
            document_id: Document the question is about
            question: Natural-language question
            top_k: Chunks to retrieve (1..max_top_k)

        Returns:
            ChatAnswer: Answer text and cited sources

        Raises:
            ValidationError: On malformed input
            DocumentNotReadyError: If the document is not DONE
            UpstreamUnavailableError: If the LLM or embedder fails
        """
        self._validate(question, top_k)
        started = time.perf_counter()
        latency = RagLatency(document_id=str(document_id), streamed=False)

        plan = await self.plan(owner_id, document_id, question, top_k, latency)
        if plan.fixed_answer is not None:
            return ChatAnswer(answer=plan.fixed_answer, sources=[])

        text = await self._llm.complete(plan.prompt)
        latency.total_ms = elapsed_ms(started)
        if self._log_latency:
            log_rag_latency(latency)
        return ChatAnswer(answer=text.strip() or NO_INFO_ANSWER, sources=plan.sources)

    async def stream_answer(
        self,
        owner_id: str,
        document_id: UUID,
        question: str,
        top_k: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Stream an answer as delta events followed by one done event.

        Args:
            owner_id: Caller identity
            document_id: Document the question is about
            question: Natural-language question
            top_k: Chunks to retrieve (1..max_top_k)
            cancellation: Fired by the consumer to stop generation early

        Yields:
            StreamEvent: delta*, optional error, then done

        Raises:
            ValidationError: On malformed input, before any event
            DocumentNotReadyError: If the document is not DONE, before any event
        """
        self._validate(question, top_k)
        started = time.perf_counter()
        latency = RagLatency(document_id=str(document_id), streamed=True)

        plan = await self.plan(owner_id, document_id, question, top_k, latency)
        if plan.fixed_answer is not None:
            yield StreamEvent.delta(plan.fixed_answer)
            yield StreamEvent.done([])
            return

        if cancellation is not None and cancellation.is_cancelled:
            yield StreamEvent.done(plan.sources)
            return

        llm_started = time.perf_counter()
        fragments = 0
        try:
            async with contextlib.aclosing(self._llm.stream(plan.prompt, cancellation)) as stream:
                async for fragment in stream:
                    if fragments == 0:
                        latency.llm_first_token_ms = elapsed_ms(llm_started)
                        latency.time_to_first_token_ms = elapsed_ms(started)
                    fragments += 1
                    yield StreamEvent.delta(fragment)
        except Exception as e:
            logger.error(
                f"{__name__}:stream_answer - LLM stream failed after {fragments} fragments: "
                f"{type(e).__name__}: {e}",
                extra={"document_id": str(document_id)},
            )
            message = e.message if isinstance(e, DocuMindException) else STREAM_FAILURE_MESSAGE
            yield StreamEvent.error(message)

        if cancellation is not None and cancellation.is_cancelled:
            logger.info(
                f"{__name__}:stream_answer - Stream cancelled after {fragments} fragments",
                extra={"document_id": str(document_id)},
            )

        latency.total_ms = elapsed_ms(started)
        if self._log_latency:
            log_rag_latency(latency)
        yield StreamEvent.done(plan.sources)
