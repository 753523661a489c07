"""FastAPI dependencies for dependency injection.

Components come from the ComponentFactory stored on the application
state, so tests can build an app around their own settings.
"""

import logging

from fastapi import Depends, Request

from docstudio.core.factory import ComponentFactory
from docstudio.interfaces.document_store import BaseDocumentStore
from docstudio.interfaces.field_extractor import BaseFieldExtractor
from docstudio.services.documents import DocumentService
from docstudio.services.export import DocumentExporter

logger = logging.getLogger(__name__)


def get_component_factory(request: Request) -> ComponentFactory:
    """The factory created for this application."""
    return request.app.state.factory


def get_document_store(
    factory: ComponentFactory = Depends(get_component_factory),
) -> BaseDocumentStore:
    return factory.get_document_store()


def get_document_service(
    factory: ComponentFactory = Depends(get_component_factory),
) -> DocumentService:
    return factory.get_document_service()


def get_exporter(
    factory: ComponentFactory = Depends(get_component_factory),
) -> DocumentExporter:
    return factory.get_exporter()


def get_field_extractor(
    factory: ComponentFactory = Depends(get_component_factory),
) -> BaseFieldExtractor:
    return factory.get_field_extractor()
