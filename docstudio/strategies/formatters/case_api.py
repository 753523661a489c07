"""Remote document formatter backed by the Case.dev Format API."""

import logging

import httpx

from docstudio.core.exceptions import FormatServiceError, UnsupportedFormatError
from docstudio.interfaces.format_service import (
    CONTENT_TYPES,
    BaseFormatService,
    FormatOptions,
    FormatResult,
    OutputFormat,
)

logger = logging.getLogger(__name__)

# Remote name for each output format
_OUTPUT_FORMATS: dict[str, str] = {
    "pdf": "pdf",
    "docx": "docx",
    "html": "html_preview",
}


class CaseFormatService(BaseFormatService):
    """Converts markdown through ``POST /format/v1/document``.

    Every failure, including a missing key, surfaces as
    ``FormatServiceError`` so callers can fall back to local encoding.

    Attributes:
        base_url: API base URL without trailing slash.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.case.dev",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            api_key: Bearer key for the API. Empty leaves the service unconfigured.
            base_url: API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        self._api_key = api_key.strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/format/v1/document"

    def build_payload(
        self, content: str, target_format: OutputFormat, options: FormatOptions | None = None
    ) -> dict:
        """Request body for a conversion."""
        return {
            "content": content,
            "input_format": "md",
            "output_format": _OUTPUT_FORMATS[target_format],
            "options": {
                "template": "standard",
                **(options or FormatOptions()).to_payload(),
            },
        }

    async def convert(
        self,
        content: str,
        target_format: OutputFormat,
        options: FormatOptions | None = None,
    ) -> FormatResult:
        if target_format not in _OUTPUT_FORMATS:
            raise UnsupportedFormatError(target_format)
        if not self.is_configured:
            raise FormatServiceError("Format service is not configured")

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(content, target_format, options)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"Format API request failed: {e}")
            raise FormatServiceError(f"Format API request failed: {e}") from e

        if not response.is_success:
            logger.warning(f"Format API returned {response.status_code} for {target_format}")
            raise FormatServiceError(
                f"Format API returned {response.status_code}",
                status=response.status_code,
            )

        logger.info(f"Format API converted document to {target_format} ({len(response.content)} bytes)")
        return FormatResult(
            data=response.content,
            content_type=CONTENT_TYPES[target_format],
            format=target_format,
            source="remote",
        )
