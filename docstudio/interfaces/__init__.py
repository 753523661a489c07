"""Abstract base classes for the document studio's strategies."""

from docstudio.interfaces.document_store import (
    BaseDocumentStore,
    DocumentUpdate,
    GeneratedDocument,
)
from docstudio.interfaces.encoder import BaseDocumentEncoder
from docstudio.interfaces.field_extractor import BaseFieldExtractor, TemplateContext
from docstudio.interfaces.format_service import (
    BaseFormatService,
    FormatOptions,
    FormatResult,
    Margins,
)
from docstudio.interfaces.template import BaseTemplateRenderer

__all__ = [
    "BaseDocumentStore",
    "DocumentUpdate",
    "GeneratedDocument",
    "BaseDocumentEncoder",
    "BaseFieldExtractor",
    "TemplateContext",
    "BaseFormatService",
    "FormatOptions",
    "FormatResult",
    "Margins",
    "BaseTemplateRenderer",
]
