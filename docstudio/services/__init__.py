"""Application services composed from strategies."""

from docstudio.services.documents import DocumentService
from docstudio.services.export import DocumentExporter, ExportResult

__all__ = [
    "DocumentService",
    "DocumentExporter",
    "ExportResult",
]
