"""
Chat endpoints.

Complete answers over JSON and streamed answers over Server-Sent Events.
A client disconnect fires the cancellation token so generation stops.

Dependencies: fastapi, documind.core.rag
System role: Question answering API
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from documind.api.deps.dependencies import get_current_owner_id, get_orchestrator
from documind.api.error_handling import handle_document_errors
from documind.core.cancellation import CancellationToken
from documind.core.rag import AnswerOrchestrator
from documind.models.chat import ChatAnswer, ChatRequest

router = APIRouter(prefix="/documents/{document_id}/chat", tags=["chat"])


@router.post("", response_model=ChatAnswer)
@handle_document_errors
async def chat(
    document_id: UUID,
    request: ChatRequest,
    owner_id: str = Depends(get_current_owner_id),
    orchestrator: AnswerOrchestrator = Depends(get_orchestrator),
) -> ChatAnswer:
    """Answer a question about one document."""
    return await orchestrator.answer(owner_id, document_id, request.question, request.top_k)


@router.post("/stream")
@handle_document_errors
async def chat_stream(
    document_id: UUID,
    request: ChatRequest,
    owner_id: str = Depends(get_current_owner_id),
    orchestrator: AnswerOrchestrator = Depends(get_orchestrator),
) -> StreamingResponse:
    """
    Stream an answer as Server-Sent Events: delta*, optional error, done.

    The first event is produced before the response starts so that
    not-ready and validation errors still map to HTTP status codes.
    """
    cancellation = CancellationToken()
    events = orchestrator.stream_answer(
        owner_id,
        document_id,
        request.question,
        request.top_k,
        cancellation=cancellation,
    )
    first_event = await anext(events, None)

    async def event_source():
        try:
            if first_event is not None:
                yield first_event.to_sse()
            async for event in events:
                yield event.to_sse()
        finally:
            # Runs on completion and when the server drops a disconnected client.
            cancellation.cancel()
            await events.aclose()

    return StreamingResponse(
        event_source(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
