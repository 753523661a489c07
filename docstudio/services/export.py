"""Export pipeline: remote conversion first, local encoders as fallback."""

import logging
import re
from dataclasses import dataclass

from docstudio.core.exceptions import FormatError, FormatServiceError, UnsupportedFormatError
from docstudio.interfaces.format_service import (
    CONTENT_TYPES,
    BaseFormatService,
    FormatOptions,
    FormatResult,
)
from docstudio.strategies.formatters.local import LocalFormatService

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("pdf", "docx", "html", "markdown")

_EXTENSIONS = {"pdf": "pdf", "docx": "docx", "html": "html", "markdown": "md"}
_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename_stem(name: str, default: str = "document") -> str:
    """Reduce a display name to a filesystem- and header-safe stem."""
    stem = _UNSAFE_FILENAME_RE.sub("_", name).strip("._")
    return stem or default


@dataclass(frozen=True)
class ExportResult:
    """A finished export.

    Attributes:
        data: File bytes.
        content_type: MIME type of ``data``.
        filename: Suggested download filename.
        format: Export format.
        source: ``remote``, ``fallback`` or ``local``.
    """

    data: bytes
    content_type: str
    filename: str
    format: str
    source: str


class DocumentExporter:
    """Converts processed markdown into downloadable files.

    The remote formatter is tried when configured; any failure there is
    logged and the local encoders are used instead.
    """

    def __init__(
        self,
        remote: BaseFormatService | None = None,
        local: LocalFormatService | None = None,
    ) -> None:
        self._remote = remote
        self._local = local or LocalFormatService()

    async def export(
        self,
        content: str,
        fmt: str,
        options: FormatOptions | None = None,
        filename_stem: str = "document",
    ) -> ExportResult:
        """Export content to a format.

        Args:
            content: Processed markdown text.
            fmt: ``pdf``, ``docx``, ``html`` or ``markdown``.
            options: Rendering options for the converters.
            filename_stem: Base name of the suggested filename.

        Returns:
            ExportResult with the file bytes and where they came from.

        Raises:
            FormatError: If the content is empty.
            UnsupportedFormatError: If the format is unknown.
        """
        if not content:
            raise FormatError("Content is required")
        if fmt not in EXPORT_FORMATS:
            raise UnsupportedFormatError(fmt)

        filename = f"{safe_filename_stem(filename_stem)}.{_EXTENSIONS[fmt]}"

        if fmt == "markdown":
            return ExportResult(
                data=content.encode("utf-8"),
                content_type=CONTENT_TYPES["markdown"],
                filename=filename,
                format=fmt,
                source="local",
            )

        result = await self._convert(content, fmt, options)
        return ExportResult(
            data=result.data,
            content_type=result.content_type,
            filename=filename,
            format=fmt,
            source=result.source,
        )

    async def _convert(self, content: str, fmt: str, options: FormatOptions | None) -> FormatResult:
        if self._remote is not None and self._remote.is_configured:
            try:
                return await self._remote.convert(content, fmt, options)
            except FormatServiceError as e:
                logger.warning(f"Remote {fmt} conversion failed, using fallback generation: {e}")
        else:
            logger.info(f"No remote formatter configured, generating {fmt} locally")

        return await self._local.convert(content, fmt, options)
