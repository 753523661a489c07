"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different strategy implementations at runtime based on
configuration or environment variables.
"""

import logging

from docstudio.core.config import Settings, get_settings
from docstudio.engine.renderer import TemplateRenderer
from docstudio.interfaces.document_store import BaseDocumentStore
from docstudio.interfaces.field_extractor import BaseFieldExtractor
from docstudio.interfaces.format_service import BaseFormatService
from docstudio.interfaces.template import BaseTemplateRenderer
from docstudio.services.documents import DocumentService
from docstudio.services.export import DocumentExporter
from docstudio.strategies.extractors import LLMFieldExtractor
from docstudio.strategies.formatters import CaseFormatService, LocalFormatService
from docstudio.strategies.stores import LocalStore, VaultClient, VaultStore

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Each component kind is created once and cached until ``clear_cache``.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        renderer = factory.get_renderer()
        store = factory.get_document_store()
        exporter = factory.get_exporter()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._renderer_cache: BaseTemplateRenderer | None = None
        self._format_service_cache: BaseFormatService | None = None
        self._local_formatter_cache: LocalFormatService | None = None
        self._document_store_cache: BaseDocumentStore | None = None
        self._field_extractor_cache: BaseFieldExtractor | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_renderer(self) -> BaseTemplateRenderer:
        """Get the template renderer."""
        if self._renderer_cache is None:
            logger.info(f"Instantiating template renderer (max_depth={self._settings.max_template_depth})")
            self._renderer_cache = TemplateRenderer(max_depth=self._settings.max_template_depth)
        return self._renderer_cache

    def get_format_service(self) -> BaseFormatService:
        """Get the remote format service.

        The service is returned even without an API key; it then reports
        ``is_configured = False`` and the exporter skips it.
        """
        if self._format_service_cache is None:
            logger.info(f"Instantiating format service (remote_enabled={self._settings.remote_enabled})")
            self._format_service_cache = CaseFormatService(
                api_key=self._settings.case_api_key,
                base_url=self._settings.case_api_base_url,
                timeout=self._settings.request_timeout_seconds,
            )
        return self._format_service_cache

    def get_local_formatter(self) -> LocalFormatService:
        """Get the offline formatter."""
        if self._local_formatter_cache is None:
            self._local_formatter_cache = LocalFormatService()
        return self._local_formatter_cache

    def get_exporter(self) -> DocumentExporter:
        """Get an exporter wired to the cached formatters."""
        return DocumentExporter(remote=self.get_format_service(), local=self.get_local_formatter())

    def get_document_store(self, backend: str | None = None) -> BaseDocumentStore:
        """Get a document store based on the specified backend.

        Args:
            backend: ``local`` or ``vault``. If None, uses settings.

        Returns:
            A BaseDocumentStore implementation instance.

        Raises:
            ValueError: If the backend is unknown or lacks configuration.
        """
        if self._document_store_cache is None or backend is not None:
            backend = backend or self._settings.storage_backend

            logger.info(f"Instantiating document store: {backend}")

            match backend:
                case "local":
                    self._document_store_cache = LocalStore(self._settings.local_store_dir)
                case "vault":
                    if not self._settings.remote_enabled:
                        raise ValueError("CASE_API_KEY is required for vault storage")
                    client = VaultClient(
                        api_key=self._settings.case_api_key,
                        base_url=self._settings.case_api_base_url,
                        timeout=self._settings.request_timeout_seconds,
                    )
                    self._document_store_cache = VaultStore(client, vault_id=self._settings.vault_id)
                case _:
                    raise ValueError(
                        f"Unknown storage backend: {backend}. "
                        f"Valid options: 'local', 'vault'"
                    )

        return self._document_store_cache

    def get_field_extractor(self) -> BaseFieldExtractor:
        """Get the natural-language field extractor."""
        if self._field_extractor_cache is None:
            logger.info(f"Instantiating field extractor: {self._settings.llm_model}")
            self._field_extractor_cache = LLMFieldExtractor(
                api_key=self._settings.case_api_key,
                base_url=f"{self._settings.case_api_base_url}/llm/v1",
                model=self._settings.llm_model,
                temperature=self._settings.llm_temperature,
                max_tokens=self._settings.llm_max_tokens,
            )
        return self._field_extractor_cache

    def get_document_service(self) -> DocumentService:
        """Get a document service over the cached store and renderer."""
        return DocumentService(
            store=self.get_document_store(),
            renderer=self.get_renderer(),
            exporter=self.get_exporter(),
        )

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._renderer_cache = None
        self._format_service_cache = None
        self._local_formatter_cache = None
        self._document_store_cache = None
        self._field_extractor_cache = None
        logger.debug("Component factory cache cleared")

