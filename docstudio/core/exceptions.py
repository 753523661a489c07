"""Exception hierarchy for the document studio."""


class DocStudioError(Exception):
    """Base class for all application errors."""


# =============================================================================
# Templates
# =============================================================================


class TemplateError(DocStudioError):
    """Raised when a template body cannot be processed."""


class TemplateDepthError(TemplateError):
    """Raised when conditional blocks are nested deeper than allowed."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"Conditional nesting exceeds maximum depth of {max_depth}")
        self.max_depth = max_depth


class TemplateNotFoundError(DocStudioError):
    """Raised when a template id is not in the catalog."""

    def __init__(self, template_id: str) -> None:
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class InvalidValuesError(DocStudioError):
    """Raised when values fail validation against a template."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__(f"{len(errors)} variable(s) failed validation")
        self.errors = errors


# =============================================================================
# Formatting
# =============================================================================


class FormatError(DocStudioError):
    """Raised when a document cannot be converted."""


class UnsupportedFormatError(FormatError):
    """Raised for an output format no formatter handles."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported format: {fmt}")
        self.format = fmt


class FormatServiceError(FormatError):
    """Raised when the remote format service fails or is unreachable."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


# =============================================================================
# Storage
# =============================================================================


class StorageError(DocStudioError):
    """Raised when a document store operation fails."""


class DocumentNotFoundError(StorageError):
    """Raised when a document id is not present in the store."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id


class VaultApiError(StorageError):
    """Raised for a non-success response from the vault API."""

    def __init__(self, message: str, status: int, response: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.response = response


class InvalidApiKeyError(VaultApiError):
    """Raised when the vault API rejects the key."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired API key", 401)


class RateLimitError(VaultApiError):
    """Raised when the vault API throttles the caller."""

    def __init__(self) -> None:
        super().__init__("Rate limit exceeded. Please try again later.", 429)
