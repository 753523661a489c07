"""Document format conversion API route."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from docstudio.api.deps import get_exporter
from docstudio.api.schemas import FormatRequest
from docstudio.core.exceptions import UnsupportedFormatError
from docstudio.services.export import DocumentExporter, ExportResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["format"])

CONVERTIBLE_FORMATS = ("pdf", "docx", "html")


def export_response(result: ExportResult) -> Response:
    """Wrap an export in a download response."""
    headers = {"X-Format-Source": result.source}
    if result.format != "html":
        headers["Content-Disposition"] = f'attachment; filename="{result.filename}"'
    return Response(content=result.data, media_type=result.content_type, headers=headers)


@router.post(
    "/format",
    responses={200: {"content": {"application/pdf": {}, "text/html": {}}}},
)
async def format_document(
    request: FormatRequest,
    exporter: DocumentExporter = Depends(get_exporter),
) -> Response:
    """Convert markdown to PDF, DOCX or HTML.

    Uses the remote format service when configured and falls back to
    local generation otherwise. ``X-Format-Source`` reports which one
    produced the file.
    """
    if request.format not in CONVERTIBLE_FORMATS:
        raise UnsupportedFormatError(request.format)

    options = request.options.to_options() if request.options else None
    result = await exporter.export(request.content, request.format, options)
    logger.info(f"Formatted {request.format} via {result.source} ({len(result.data)} bytes)")
    return export_response(result)
