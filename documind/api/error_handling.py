"""
API error handling.

Decorator mapping domain exceptions raised by services and the core to
HTTP errors, with consistent logging.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from documind.core.exceptions import (
    DocumentAccessDeniedError,
    DocumentNotFoundError,
    DocumentNotReadyError,
    DocuMindException,
    RetryNotAllowedError,
    UpstreamUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

STATUS_BY_ERROR: list[tuple[type[DocuMindException], int]] = [
    (DocumentNotFoundError, status.HTTP_404_NOT_FOUND),
    (DocumentAccessDeniedError, status.HTTP_403_FORBIDDEN),
    (DocumentNotReadyError, status.HTTP_409_CONFLICT),
    (RetryNotAllowedError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UpstreamUnavailableError, status.HTTP_502_BAD_GATEWAY),
]


def status_for(error: DocuMindException) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_document_errors(func: F) -> F:
    """
    Decorator transforming domain errors into HTTPExceptions.

    Client errors are logged as warnings, upstream and unexpected failures
    as errors.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except DocuMindException as e:
            code = status_for(e)
            log = logger.warning if code < 500 else logger.error
            log(f"{__name__}:{func.__name__} - {e.message}", extra={"error_details": e.details})
            raise HTTPException(status_code=code, detail=e.message)

    return wrapper  # type: ignore
