"""
Tests for chat endpoints.

A real orchestrator runs on a mocked retriever and the stub LLM.

System role: Verification of answer responses and the SSE stream
"""

import json
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from documind.api.deps.dependencies import get_orchestrator
from documind.api.main import create_app
from documind.configs.retrieval import PromptSettings
from documind.core.exceptions import DocumentNotReadyError
from documind.core.rag import AnswerOrchestrator, PromptBuilder, StubLLMGateway
from documind.core.retrieval import RetrievalResult

HEADERS = {"X-User-Id": "owner-1"}


def parse_sse(body: str) -> list[tuple[str, dict]]:
    events = []
    for frame in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in frame.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


@pytest.fixture
def retriever() -> MagicMock:
    retriever = MagicMock()
    retriever.retrieve = AsyncMock(
        return_value=[
            RetrievalResult(chunk_id="chunk-a", content="Rent is due on the first.", chunk_index=4, score=1.0)
        ]
    )
    return retriever


@pytest.fixture
def app(retriever: MagicMock) -> FastAPI:
    app = create_app()
    orchestrator = AnswerOrchestrator(
        retriever=retriever,
        prompt_builder=PromptBuilder(PromptSettings()),
        llm=StubLLMGateway("Rent is due on the first of the month."),
        log_latency=False,
    )
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestChat:
    def test_answer_with_sources(self, client: TestClient) -> None:
        response = client.post(
            f"/api/v1/documents/{uuid.uuid4()}/chat",
            headers=HEADERS,
            json={"question": "When is rent due?"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["answer"] == "Rent is due on the first of the month."
        assert body["sources"] == [{"chunk_index": 4, "score": 1.0}]

    def test_not_ready_is_409(self, client: TestClient, retriever: MagicMock) -> None:
        retriever.retrieve.side_effect = DocumentNotReadyError("x", "pending")

        response = client.post(
            f"/api/v1/documents/{uuid.uuid4()}/chat",
            headers=HEADERS,
            json={"question": "When is rent due?"},
        )

        assert response.status_code == 409

    def test_empty_question_is_422(self, client: TestClient) -> None:
        response = client.post(
            f"/api/v1/documents/{uuid.uuid4()}/chat",
            headers=HEADERS,
            json={"question": ""},
        )

        assert response.status_code == 422

    def test_missing_identity_is_401(self, client: TestClient) -> None:
        response = client.post(f"/api/v1/documents/{uuid.uuid4()}/chat", json={"question": "q?"})

        assert response.status_code == 401


class TestChatStream:
    def test_stream_ends_with_single_done(self, client: TestClient) -> None:
        # Act
        response = client.post(
            f"/api/v1/documents/{uuid.uuid4()}/chat/stream",
            headers=HEADERS,
            json={"question": "When is rent due?"},
        )

        # Assert
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = parse_sse(response.text)
        names = [name for name, _ in events]
        assert names[-1] == "done"
        assert names.count("done") == 1
        assert set(names[:-1]) == {"delta"}
        assert "".join(data["text"] for _, data in events[:-1]) == "Rent is due on the first of the month."
        assert events[-1][1] == {"sources": [{"chunk_index": 4, "score": 1.0}]}

    def test_stream_not_ready_is_409_before_streaming(self, client: TestClient, retriever: MagicMock) -> None:
        retriever.retrieve.side_effect = DocumentNotReadyError("x", "processing")

        response = client.post(
            f"/api/v1/documents/{uuid.uuid4()}/chat/stream",
            headers=HEADERS,
            json={"question": "When is rent due?"},
        )

        assert response.status_code == 409

    def test_stream_fixed_answer_when_no_chunks(self, client: TestClient, retriever: MagicMock) -> None:
        retriever.retrieve.return_value = []

        response = client.post(
            f"/api/v1/documents/{uuid.uuid4()}/chat/stream",
            headers=HEADERS,
            json={"question": "anything?"},
        )

        events = parse_sse(response.text)
        assert [name for name, _ in events] == ["delta", "done"]
        assert events[1][1] == {"sources": []}
