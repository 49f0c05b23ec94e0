"""
Document endpoints.

Upload, list, inspect, delete and retry documents, and run hybrid
retrieval against one of them.

Dependencies: fastapi, documind.application, documind.core
System role: Document management API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status

from documind.api.deps.dependencies import (
    get_current_owner_id,
    get_document_service,
    get_retriever,
)
from documind.api.error_handling import handle_document_errors
from documind.application.services import DocumentService
from documind.core.retrieval import HybridRetriever
from documind.models.document import (
    DocumentListResponse,
    DocumentResponse,
    RetrievalRequest,
    RetrievalResponse,
    RetrievedChunk,
)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
@handle_document_errors
async def upload_document(
    file: UploadFile = File(...),
    owner_id: str = Depends(get_current_owner_id),
    service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Upload a PDF and queue it for ingestion."""
    data = await file.read()
    document = await service.upload_document(
        owner_id=owner_id,
        filename=file.filename or "",
        content_type=file.content_type,
        data=data,
    )
    return DocumentResponse.model_validate(document)


@router.get("", response_model=DocumentListResponse)
@handle_document_errors
async def list_documents(
    owner_id: str = Depends(get_current_owner_id),
    service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    documents = await service.list_documents(owner_id)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(document) for document in documents],
        total=len(documents),
    )


@router.get("/{document_id}", response_model=DocumentResponse)
@handle_document_errors
async def get_document(
    document_id: UUID,
    owner_id: str = Depends(get_current_owner_id),
    service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    document = await service.get_document(document_id, owner_id)
    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_document_errors
async def delete_document(
    document_id: UUID,
    owner_id: str = Depends(get_current_owner_id),
    service: DocumentService = Depends(get_document_service),
) -> None:
    await service.delete_document(document_id, owner_id)


@router.post("/{document_id}/retry", response_model=DocumentResponse)
@handle_document_errors
async def retry_document(
    document_id: UUID,
    owner_id: str = Depends(get_current_owner_id),
    service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Reset a FAILED document to PENDING and queue it again."""
    document = await service.retry_document(document_id, owner_id)
    return DocumentResponse.model_validate(document)


@router.post("/{document_id}/retrieve", response_model=RetrievalResponse)
@handle_document_errors
async def retrieve(
    document_id: UUID,
    request: RetrievalRequest,
    owner_id: str = Depends(get_current_owner_id),
    retriever: HybridRetriever = Depends(get_retriever),
) -> RetrievalResponse:
    """Hybrid retrieval; unknown or foreign documents yield no results."""
    results = await retriever.retrieve(owner_id, document_id, request.query, request.top_k)
    return RetrievalResponse(
        results=[RetrievedChunk.model_validate(result, from_attributes=True) for result in results]
    )
