"""Offline formatter built on the local encoders."""

import logging

from docstudio.core.exceptions import UnsupportedFormatError
from docstudio.interfaces.encoder import BaseDocumentEncoder
from docstudio.interfaces.format_service import (
    BaseFormatService,
    FormatOptions,
    FormatResult,
    OutputFormat,
)
from docstudio.strategies.encoders import DocxEncoder, HtmlEncoder, PageGeometry, PdfEncoder

logger = logging.getLogger(__name__)


class LocalFormatService(BaseFormatService):
    """Produces PDF, DOCX and HTML without any network access."""

    @property
    def is_configured(self) -> bool:
        return True

    def get_encoder(
        self, target_format: OutputFormat, options: FormatOptions | None = None
    ) -> BaseDocumentEncoder:
        """Encoder for a format, configured from the options.

        Raises:
            UnsupportedFormatError: If the format has no local encoder.
        """
        options = options or FormatOptions()

        match target_format:
            case "pdf":
                geometry = PageGeometry.for_page_size(
                    options.page_size,
                    top=options.margins.top,
                    bottom=options.margins.bottom,
                    left=options.margins.left,
                )
                return PdfEncoder(geometry, title=options.title, author=options.author)
            case "docx":
                return DocxEncoder()
            case "html":
                return HtmlEncoder(title=options.title)
            case _:
                raise UnsupportedFormatError(target_format)

    async def convert(
        self,
        content: str,
        target_format: OutputFormat,
        options: FormatOptions | None = None,
    ) -> FormatResult:
        encoder = self.get_encoder(target_format, options)
        data = encoder.encode(content)
        logger.info(f"Generated {target_format} locally ({len(data)} bytes)")
        return FormatResult(
            data=data,
            content_type=encoder.content_type,
            format=encoder.extension,
            source="fallback",
        )
