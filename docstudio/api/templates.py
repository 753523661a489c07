"""Template catalog API routes.

Browsing templates, validating and rendering values, and extracting
values from a plain-English description.
"""

import logging

from fastapi import APIRouter, Depends, Query

from docstudio.api.deps import get_document_service, get_field_extractor
from docstudio.api.schemas import (
    CategoryResponse,
    ParseRequest,
    RenderResponse,
    TemplateListResponse,
    TemplateSummary,
    ValuesRequest,
)
from docstudio.engine.catalog import (
    TEMPLATES,
    get_categories,
    get_template_by_id,
    get_templates_by_category,
    search_templates,
)
from docstudio.engine.models import ParsedInput, Template, TemplateCategory, ValidationResult
from docstudio.interfaces.field_extractor import BaseFieldExtractor, TemplateContext
from docstudio.services.documents import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    category: TemplateCategory | None = Query(default=None),
    q: str | None = Query(default=None, description="Search name, description and tags"),
) -> TemplateListResponse:
    """List templates, optionally by category or search query."""
    templates = list(TEMPLATES)
    if category:
        templates = get_templates_by_category(category)
    if q:
        matches = {t.id for t in search_templates(q)}
        templates = [t for t in templates if t.id in matches]

    return TemplateListResponse(
        templates=[TemplateSummary.from_template(t) for t in templates],
        total=len(templates),
    )


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    """Categories that have templates."""
    return [CategoryResponse(**c) for c in get_categories()]


@router.get("/{template_id}", response_model=Template)
async def get_template(template_id: str) -> Template:
    """Full template definition, including sections and body."""
    return get_template_by_id(template_id)


@router.post("/{template_id}/validate", response_model=ValidationResult)
async def validate_values(
    template_id: str,
    request: ValuesRequest,
    service: DocumentService = Depends(get_document_service),
) -> ValidationResult:
    """Validate values against the template's visible variables."""
    template = get_template_by_id(template_id)
    return service.validate(template, request.values)


@router.post("/{template_id}/render", response_model=RenderResponse)
async def render_template(
    template_id: str,
    request: ValuesRequest,
    service: DocumentService = Depends(get_document_service),
) -> RenderResponse:
    """Process the template body without saving a document."""
    template = get_template_by_id(template_id)
    return RenderResponse(content=service.render(template, request.values))


@router.post("/{template_id}/parse", response_model=ParsedInput)
async def parse_description(
    template_id: str,
    request: ParseRequest,
    extractor: BaseFieldExtractor = Depends(get_field_extractor),
) -> ParsedInput:
    """Fill template variables from a natural-language description."""
    template = get_template_by_id(template_id)
    logger.info(f"Parsing description for {template_id} ({len(request.text)} chars)")
    return await extractor.extract(
        request.text,
        template.variables,
        TemplateContext(name=template.name, category=template.category),
    )
