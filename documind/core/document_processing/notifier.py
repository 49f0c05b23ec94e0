"""
Document update notification.

The pipeline publishes a DocumentUpdate after every persisted status or
progress change. Delivery to connected clients belongs to an external
connection registry keyed by owner; this module only adapts to it.

Dependencies: documind.core.document_processing.models
System role: Outbound notification boundary of the ingestion pipeline
"""

import logging
from typing import Any, Protocol

from documind.core.document_processing.models import DocumentUpdate

logger = logging.getLogger(__name__)

DOCUMENT_UPDATED_EVENT = "document.updated"


class ConnectionRegistry(Protocol):
    """Fan-out registry of live client connections, keyed by owner id."""

    async def send_to_owner(self, owner_id: str, event: str, payload: dict[str, Any]) -> None: ...


class DocumentUpdateNotifier(Protocol):
    """Receives every persisted document update."""

    async def document_updated(self, owner_id: str, update: DocumentUpdate) -> None: ...


class RegistryDocumentNotifier:
    """Forwards document updates to a connection registry."""

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    async def document_updated(self, owner_id: str, update: DocumentUpdate) -> None:
        await self._registry.send_to_owner(
            owner_id,
            DOCUMENT_UPDATED_EVENT,
            update.model_dump(mode="json"),
        )


class LoggingDocumentNotifier:
    """Logs document updates; used where no registry is wired (workers, CLI)."""

    async def document_updated(self, owner_id: str, update: DocumentUpdate) -> None:
        logger.debug(
            f"{__name__}:document_updated - {update.status.value} {update.progress}%",
            extra={"owner_id": owner_id, "document_id": str(update.document_id)},
        )
