"""
Exception hierarchy for DocuMind.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocuMindException(Exception):
    """Base exception for all DocuMind application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DocuMindException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DocumentNotFoundError(DocuMindException):
    """Raised when a document cannot be found."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found: {document_id}", details)


class DocumentAccessDeniedError(DocuMindException):
    """Raised when a caller acts on a document owned by someone else."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Access to document denied: {document_id}", details)


class DocumentNotReadyError(DocuMindException):
    """Raised when a document is queried before ingestion finished."""

    def __init__(self, document_id: str, status: str) -> None:
        """
        Initialize not-ready error.

        Args:
            document_id: Document that was queried
            status: Current processing status of the document
        """
        self.status = status
        super().__init__(
            f"Document is not ready for retrieval. Current status: {status}. "
            "Wait for processing to finish and try again.",
            {"document_id": document_id, "status": status},
        )


class RetryNotAllowedError(DocuMindException):
    """Raised when a retry is requested for a document that cannot be retried."""

    def __init__(self, document_id: str, reason: str) -> None:
        super().__init__(
            f"Document cannot be retried: {reason}",
            {"document_id": document_id},
        )


class DocumentProcessingError(DocuMindException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ParsingError(DocumentProcessingError):
    """Raised when text extraction from an uploaded file fails."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        file_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, document_id, details)


class IngestionAbortedError(DocumentProcessingError):
    """Raised when an ingestion run is explicitly cancelled."""

    pass


class UpstreamUnavailableError(DocuMindException):
    """Raised when an embedding or LLM provider fails or misbehaves."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            message: Error message
            provider: Name of the provider that failed
            details: Additional context
        """
        details = details or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, details)
