"""
Cooperative cancellation token.

A consumer (HTTP disconnect, job abort) fires the token; producers check it
between steps or await it to stop while blocked on I/O.

Dependencies: asyncio (stdlib)
System role: Cancellation signal shared across streaming and ingestion
"""

import asyncio


class CancellationToken:
    """One-shot cancellation signal backed by an asyncio.Event."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        """Fire the token. Idempotent."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until the token is fired."""
        await self._event.wait()
