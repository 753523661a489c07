"""Abstract base class for document format conversion.

The Strategy Pattern lets the export pipeline try a remote conversion
service first and fall back to local encoders.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["pdf", "docx", "html"]

CONTENT_TYPES: dict[str, str] = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "html": "text/html",
    "markdown": "text/markdown",
}


@dataclass(frozen=True)
class Margins:
    """Page margins in points."""

    top: float = 72
    bottom: float = 72
    left: float = 72
    right: float = 72


@dataclass(frozen=True)
class FormatOptions:
    """Rendering options forwarded to the format service.

    Attributes:
        title: Optional document title.
        author: Optional document author.
        page_size: Paper size, ``letter`` or ``a4``.
        margins: Page margins in points.
    """

    title: str | None = None
    author: str | None = None
    page_size: Literal["letter", "a4"] = "letter"
    margins: Margins = field(default_factory=Margins)

    def to_payload(self) -> dict:
        """Serialize to the JSON shape the remote API expects."""
        payload: dict = {
            "pageSize": self.page_size,
            "margins": {
                "top": self.margins.top,
                "bottom": self.margins.bottom,
                "left": self.margins.left,
                "right": self.margins.right,
            },
        }
        if self.title:
            payload["title"] = self.title
        if self.author:
            payload["author"] = self.author
        return payload


@dataclass(frozen=True)
class FormatResult:
    """A converted document.

    Attributes:
        data: The file bytes (HTML is UTF-8 encoded).
        content_type: MIME type of ``data``.
        format: The output format produced.
        source: ``remote`` or ``fallback``.
    """

    data: bytes
    content_type: str
    format: str
    source: str

    @property
    def filename(self) -> str:
        """Download filename for the result."""
        return f"document.{self.format}"


class BaseFormatService(ABC):
    """Abstract base class for format conversion strategies.

    All concrete formatters must implement ``convert``.
    """

    @abstractmethod
    async def convert(
        self,
        content: str,
        target_format: OutputFormat,
        options: FormatOptions | None = None,
    ) -> FormatResult:
        """Convert markdown content to the target format.

        Args:
            content: Processed markdown text.
            target_format: ``pdf``, ``docx`` or ``html``.
            options: Optional rendering options.

        Returns:
            A FormatResult with the converted bytes.

        Raises:
            UnsupportedFormatError: If the format is not handled.
            FormatServiceError: If a remote conversion fails.
        """
        ...

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the service can be used at all."""
        ...
