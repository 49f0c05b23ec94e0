"""
LLM gateway.

One interface over several language model backends: a deterministic stub,
a local Ollama server (httpx, NDJSON streaming) and LangChain chat models
(Google Gemini, Amazon Bedrock). Streaming honours a CancellationToken:
once it fires, emission stops promptly even while the backend is waiting
on I/O, the upstream is closed, and no error is raised.

Dependencies: httpx, langchain_core, langchain_google_genai, langchain_aws
System role: Answer generation backend for the orchestrator
"""

import asyncio
import contextlib
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator

import httpx
from langchain_core.language_models.chat_models import BaseChatModel

from documind.configs.llm import LLMProvider, LLMSettings
from documind.core.cancellation import CancellationToken
from documind.core.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)

STUB_ANSWER = (
    "This is a placeholder answer from the stub model. "
    "Configure an LLM provider to receive answers generated from your document."
)


async def iterate_until_cancelled(
    source: AsyncIterator[str],
    cancellation: CancellationToken | None,
) -> AsyncIterator[str]:
    """
    Relay items from `source` until it is exhausted or the token fires.

    Each pending read is raced against the token, so a fired token
    interrupts a backend that is blocked waiting for its next fragment.
    The source is always closed on exit.
    """
    iterator = source.__aiter__()
    try:
        while cancellation is None or not cancellation.is_cancelled:
            if cancellation is None:
                try:
                    item = await iterator.__anext__()
                except StopAsyncIteration:
                    break
                yield item
                continue

            next_item = asyncio.ensure_future(iterator.__anext__())
            fired = asyncio.ensure_future(cancellation.wait())
            done, _ = await asyncio.wait({next_item, fired}, return_when=asyncio.FIRST_COMPLETED)

            if next_item not in done:
                next_item.cancel()
                with contextlib.suppress(asyncio.CancelledError, StopAsyncIteration):
                    await next_item
                break

            fired.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await fired
            try:
                item = next_item.result()
            except StopAsyncIteration:
                break
            yield item
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


def message_text(content: Any) -> str:
    """Flatten chat model content (plain string or Bedrock-style block list) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else str(item))
            for item in content
        )
    return str(content or "")


class LLMGateway(ABC):
    """Completion and streaming over one language model backend."""

    name: str = "llm"

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """
        Generate a full answer.

        Raises:
            UpstreamUnavailableError: If the backend fails
        """

    @abstractmethod
    def _stream(self, prompt: str) -> AsyncIterator[str]:
        """Raw fragment generator of the backend."""

    async def stream(
        self,
        prompt: str,
        cancellation: CancellationToken | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream answer fragments.

        Args:
            prompt: Full prompt text
            cancellation: Optional token; once fired no further fragments are
                emitted and the upstream request is closed

        Yields:
            str: Non-empty text fragments in order

        Raises:
            UpstreamUnavailableError: If the backend fails before cancellation
        """
        async with contextlib.aclosing(iterate_until_cancelled(self._stream(prompt), cancellation)) as fragments:
            async for fragment in fragments:
                if fragment:
                    yield fragment

    async def aclose(self) -> None:
        """Release backend resources."""


class StubLLMGateway(LLMGateway):
    """Deterministic backend for development and tests."""

    name = "stub"

    def __init__(self, answer: str = STUB_ANSWER) -> None:
        self._answer = answer

    async def complete(self, prompt: str) -> str:
        return self._answer

    async def _stream(self, prompt: str) -> AsyncIterator[str]:
        words = self._answer.split(" ")
        for position, word in enumerate(words):
            await asyncio.sleep(0)
            yield word if position == len(words) - 1 else f"{word} "


class OllamaLLMGateway(LLMGateway):
    """Local Ollama server via its /api/generate endpoint."""

    name = "ollama"

    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.0,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    def _payload(self, prompt: str, stream: bool) -> dict[str, Any]:
        return {
            "model": self._model,
            "prompt": prompt,
            "stream": stream,
            "options": {"temperature": self._temperature},
        }

    async def complete(self, prompt: str) -> str:
        try:
            response = await self._client.post("/api/generate", json=self._payload(prompt, stream=False))
            response.raise_for_status()
            return str(response.json().get("response", ""))
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"{__name__}:complete - Ollama request failed: {e}")
            raise UpstreamUnavailableError(f"Ollama request failed: {e}", provider=self.name) from e

    async def _stream(self, prompt: str) -> AsyncIterator[str]:
        try:
            async with self._client.stream(
                "POST", "/api/generate", json=self._payload(prompt, stream=True)
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    data = json.loads(line)
                    if data.get("error"):
                        raise UpstreamUnavailableError(
                            f"Ollama stream error: {data['error']}", provider=self.name
                        )
                    fragment = data.get("response")
                    if fragment:
                        yield fragment
                    if data.get("done"):
                        break
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"{__name__}:_stream - Ollama stream failed: {e}")
            raise UpstreamUnavailableError(f"Ollama stream failed: {e}", provider=self.name) from e

    async def aclose(self) -> None:
        await self._client.aclose()


class ChatModelLLMGateway(LLMGateway):
    """LangChain chat model backend (Gemini, Bedrock)."""

    def __init__(self, model: BaseChatModel, name: str = "chat-model") -> None:
        self._model = model
        self.name = name

    async def complete(self, prompt: str) -> str:
        try:
            message = await self._model.ainvoke(prompt)
        except Exception as e:
            logger.error(f"{__name__}:complete - {self.name} call failed: {type(e).__name__}: {e}")
            raise UpstreamUnavailableError(f"{self.name} call failed: {e}", provider=self.name) from e
        return message_text(message.content)

    async def _stream(self, prompt: str) -> AsyncIterator[str]:
        try:
            async for chunk in self._model.astream(prompt):
                text = message_text(chunk.content)
                if text:
                    yield text
        except Exception as e:
            logger.error(f"{__name__}:_stream - {self.name} stream failed: {type(e).__name__}: {e}")
            raise UpstreamUnavailableError(f"{self.name} stream failed: {e}", provider=self.name) from e


def build_llm_gateway(settings: LLMSettings) -> LLMGateway:
    """
    Build the configured LLM backend.

    Args:
        settings: LLM settings

    Returns:
        LLMGateway: Backend instance
    """
    provider = settings.provider
    logger.info(f"{__name__}:build_llm_gateway - Creating {provider.value} LLM gateway")

    if provider == LLMProvider.STUB:
        return StubLLMGateway()

    if provider == LLMProvider.OLLAMA:
        return OllamaLLMGateway(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            temperature=settings.temperature,
            timeout=settings.request_timeout,
        )

    if provider == LLMProvider.GEMINI:
        from langchain_google_genai import ChatGoogleGenerativeAI

        model = ChatGoogleGenerativeAI(
            model=settings.gemini_model,
            temperature=settings.temperature,
        )
    else:
        from langchain_aws import ChatBedrockConverse

        model = ChatBedrockConverse(
            model=settings.bedrock_model_id,
            region_name=settings.aws_region,
            temperature=settings.temperature,
        )
    return ChatModelLLMGateway(model, name=provider.value)
