"""Generated document API routes."""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from docstudio.api.deps import get_document_service
from docstudio.api.format import export_response
from docstudio.api.schemas import DocumentCreate, DocumentListResponse
from docstudio.interfaces.document_store import (
    DocumentStatus,
    DocumentUpdate,
    GeneratedDocument,
    filter_documents,
)
from docstudio.services.documents import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=GeneratedDocument, status_code=status.HTTP_201_CREATED)
async def create_document(
    request: DocumentCreate,
    service: DocumentService = Depends(get_document_service),
) -> GeneratedDocument:
    """Generate a document from a template and save it."""
    return await service.generate(
        request.template_id,
        request.values,
        name=request.name,
        status=request.status,
    )


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    template_id: str | None = Query(default=None),
    status: DocumentStatus | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=500),
    q: str | None = Query(default=None, description="Search document and template names"),
    service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List saved documents, newest first."""
    if q:
        documents = filter_documents(
            await service.store.search(q), template_id=template_id, status=status, limit=limit
        )
    else:
        documents = await service.store.list(template_id=template_id, status=status, limit=limit)
    return DocumentListResponse(documents=documents, total=len(documents))


@router.get("/{document_id}", response_model=GeneratedDocument)
async def get_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> GeneratedDocument:
    return await service.store.get(document_id)


@router.patch("/{document_id}", response_model=GeneratedDocument)
async def update_document(
    document_id: str,
    changes: DocumentUpdate,
    service: DocumentService = Depends(get_document_service),
) -> GeneratedDocument:
    """Update name, status, content or variables.

    New variables without new content re-render the document body.
    """
    return await service.update(document_id, changes)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> Response:
    await service.store.delete(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{document_id}/export")
async def export_document(
    document_id: str,
    format: str = Query(default="pdf", description="pdf, docx, html or markdown"),
    service: DocumentService = Depends(get_document_service),
) -> Response:
    """Download a saved document in the requested format."""
    result = await service.export(document_id, format)
    logger.info(f"Exported document {document_id} as {format} via {result.source}")
    return export_response(result)
