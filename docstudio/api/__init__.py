"""FastAPI routers and dependencies."""

from docstudio.api.documents import router as documents_router
from docstudio.api.format import router as format_router
from docstudio.api.templates import router as templates_router

__all__ = [
    "documents_router",
    "format_router",
    "templates_router",
]
