"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from docstudio.engine.models import Template, TemplateCategory, Values
from docstudio.interfaces.document_store import DocumentStatus, GeneratedDocument
from docstudio.interfaces.format_service import FormatOptions, Margins


# =============================================================================
# Template Schemas
# =============================================================================


class TemplateSummary(BaseModel):
    """Template listing entry without sections or body."""

    id: str
    name: str
    description: str
    category: TemplateCategory
    version: str
    tags: list[str]
    variable_count: int = Field(description="Number of variables across all sections")

    @classmethod
    def from_template(cls, template: Template) -> "TemplateSummary":
        return cls(
            id=template.id,
            name=template.name,
            description=template.description,
            category=template.category,
            version=template.version,
            tags=list(template.tags),
            variable_count=len(template.variables),
        )


class TemplateListResponse(BaseModel):
    """Response for listing templates."""

    templates: list[TemplateSummary]
    total: int


class CategoryResponse(BaseModel):
    """A template category with its template count."""

    id: str
    name: str
    count: int


class ValuesRequest(BaseModel):
    """Variable values submitted for a template."""

    values: Values = Field(default_factory=dict)


class RenderResponse(BaseModel):
    """Processed template text."""

    content: str


class ParseRequest(BaseModel):
    """Free-text description to extract variable values from."""

    text: str = Field(min_length=1, description="Natural-language description of the document")


# =============================================================================
# Format Schemas
# =============================================================================


# Five inches
MAX_MARGIN_POINTS = 360


class MarginsSchema(BaseModel):
    """Page margins in points."""

    model_config = {"allow_inf_nan": False}

    top: float = Field(default=72, ge=0, le=MAX_MARGIN_POINTS)
    bottom: float = Field(default=72, ge=0, le=MAX_MARGIN_POINTS)
    left: float = Field(default=72, ge=0, le=MAX_MARGIN_POINTS)
    right: float = Field(default=72, ge=0, le=MAX_MARGIN_POINTS)


class FormatOptionsSchema(BaseModel):
    """Rendering options for a conversion."""

    title: str | None = None
    author: str | None = None
    page_size: Literal["letter", "a4"] = Field(default="letter", alias="pageSize")
    margins: MarginsSchema = Field(default_factory=MarginsSchema)

    model_config = {"populate_by_name": True}

    def to_options(self) -> FormatOptions:
        return FormatOptions(
            title=self.title,
            author=self.author,
            page_size=self.page_size,
            margins=Margins(**self.margins.model_dump()),
        )


class FormatRequest(BaseModel):
    """Request to convert markdown content."""

    content: str = Field(default="", description="Processed markdown text")
    format: str = Field(description="Target format: pdf, docx or html")
    options: FormatOptionsSchema | None = None


# =============================================================================
# Document Schemas
# =============================================================================


class DocumentCreate(BaseModel):
    """Request to generate and save a document from a template."""

    template_id: str
    values: Values = Field(default_factory=dict)
    name: str | None = Field(default=None, max_length=255)
    status: DocumentStatus = "final"


class DocumentListResponse(BaseModel):
    """Response for listing documents."""

    documents: list[GeneratedDocument]
    total: int


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")
