"""Document generation and persistence."""

import logging
from datetime import date

from docstudio.core.exceptions import InvalidValuesError
from docstudio.engine.catalog import get_template_by_id
from docstudio.engine.models import Template, ValidationResult, Values
from docstudio.engine.validation import default_values, validate_variables, visible_variables
from docstudio.interfaces.document_store import (
    BaseDocumentStore,
    DocumentStatus,
    DocumentUpdate,
    GeneratedDocument,
)
from docstudio.interfaces.format_service import FormatOptions
from docstudio.interfaces.template import BaseTemplateRenderer
from docstudio.services.export import DocumentExporter, ExportResult

logger = logging.getLogger(__name__)


class DocumentService:
    """Renders templates into documents and keeps them in a store.

    Example:
        ```python
        service = DocumentService(store, renderer, exporter)
        document = await service.generate("nda-mutual", values)
        pdf = await service.export(document.id, "pdf")
        ```
    """

    def __init__(
        self,
        store: BaseDocumentStore,
        renderer: BaseTemplateRenderer,
        exporter: DocumentExporter | None = None,
    ) -> None:
        self._store = store
        self._renderer = renderer
        self._exporter = exporter or DocumentExporter()

    @property
    def store(self) -> BaseDocumentStore:
        return self._store

    def validate(self, template: Template, values: Values) -> ValidationResult:
        """Validate values, with defaults merged, against the variables visible for them."""
        merged = default_values(template, values)
        return validate_variables(visible_variables(template, merged), merged)

    def render(self, template: Template, values: Values) -> str:
        """Process the template body with defaults merged under the values."""
        return self._renderer.render(template.content, default_values(template, values))

    async def generate(
        self,
        template_id: str,
        values: Values,
        name: str | None = None,
        status: DocumentStatus = "final",
    ) -> GeneratedDocument:
        """Validate, render and save a new document.

        Raises:
            TemplateNotFoundError: If the template does not exist.
            InvalidValuesError: If the values fail validation.
        """
        template = get_template_by_id(template_id)
        merged = default_values(template, values)

        result = self.validate(template, merged)
        if not result.is_valid:
            logger.info(f"Rejected values for {template_id}: {sorted(result.errors)}")
            raise InvalidValuesError(result.errors)

        document = GeneratedDocument(
            template_id=template.id,
            template_name=template.name,
            name=name or f"{template.name} - {date.today().isoformat()}",
            content=self._renderer.render(template.content, merged),
            variables=merged,
            status=status,
        )
        saved = await self._store.save(document)
        logger.info(f"Generated document {saved.id} from {template_id}")
        return saved

    async def update(self, document_id: str, changes: DocumentUpdate) -> GeneratedDocument:
        """Apply changes; new variables without new content re-render the body.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            InvalidValuesError: If re-rendering values fail validation.
        """
        if changes.variables is not None and changes.content is None:
            current = await self._store.get(document_id)
            template = get_template_by_id(current.template_id)
            merged = default_values(template, changes.variables)
            result = self.validate(template, merged)
            if not result.is_valid:
                logger.info(f"Rejected update values for {document_id}: {sorted(result.errors)}")
                raise InvalidValuesError(result.errors)
            changes = changes.model_copy(
                update={
                    "variables": merged,
                    "content": self._renderer.render(template.content, merged),
                }
            )
        return await self._store.update(document_id, changes)

    async def export(self, document_id: str, fmt: str) -> ExportResult:
        """Export a stored document."""
        document = await self._store.get(document_id)
        return await self._exporter.export(
            document.content,
            fmt,
            FormatOptions(title=document.name),
            filename_stem=document.name,
        )
