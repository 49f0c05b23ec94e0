"""
RAG latency reporting.

Collects per-request timings of the answer path (retrieval, prompt
assembly, first streamed token) and logs them in one line.

Dependencies: logging (stdlib), pydantic
System role: Lightweight latency observability for the answer path
"""

import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class RagLatency(BaseModel):
    """
    Timings of one answer request, in milliseconds.

    Attributes:
        document_id: Document the question was asked about
        streamed: Whether the answer was streamed
        retrieval_ms: Time spent in hybrid retrieval
        prompt_build_ms: Time spent assembling the prompt
        llm_first_token_ms: LLM call start to first fragment (streaming only)
        time_to_first_token_ms: Request start to first fragment (streaming only)
        total_ms: Request start to final event
    """

    document_id: str
    streamed: bool
    retrieval_ms: float | None = None
    prompt_build_ms: float | None = None
    llm_first_token_ms: float | None = None
    time_to_first_token_ms: float | None = None
    total_ms: float | None = None


def log_rag_latency(latency: RagLatency) -> None:
    """Log RAG timings as a single INFO line with structured extras."""
    fields = latency.model_dump(exclude_none=True)
    summary = " ".join(
        f"{key}={value:.1f}" for key, value in fields.items() if isinstance(value, float)
    )
    logger.info(
        f"{__name__}:log_rag_latency - document={latency.document_id} "
        f"streamed={latency.streamed} {summary}",
        extra=fields,
    )
