"""Plain-text PDF encoder.

Writes a PDF 1.4 file with one Times-Roman text line per wrapped line of
the document. Objects are built as records, then serialized in one pass
that records each object's byte offset for the cross-reference table.
"""

import logging
import math
from dataclasses import dataclass

from docstudio.interfaces.encoder import BaseDocumentEncoder
from docstudio.interfaces.format_service import CONTENT_TYPES
from docstudio.strategies.encoders.markdown import to_plain_text, wrap_text

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT_LINE = "[Document content]"

PAGE_SIZES: dict[str, tuple[float, float]] = {
    "letter": (612, 792),
    "a4": (595, 842),
}


@dataclass(frozen=True)
class PageGeometry:
    """Page layout in PDF points.

    Attributes:
        width: Page width.
        height: Page height.
        margin_top: Distance from the top edge to the first baseline.
        margin_bottom: Space kept free at the bottom of the page.
        margin_left: X position of every line.
        font_size: Font size of the body text.
        line_height: Vertical distance between baselines.
        max_line_length: Characters per line before wrapping.
    """

    width: float = 612
    height: float = 792
    margin_top: float = 72
    margin_bottom: float = 72
    margin_left: float = 72
    font_size: float = 11
    line_height: float = 14
    max_line_length: int = 80

    @classmethod
    def for_page_size(
        cls,
        page_size: str = "letter",
        top: float = 72,
        bottom: float = 72,
        left: float = 72,
    ) -> "PageGeometry":
        """Geometry for a named paper size and margins."""
        width, height = PAGE_SIZES.get(page_size, PAGE_SIZES["letter"])
        return cls(width=width, height=height, margin_top=top, margin_bottom=bottom, margin_left=left)

    @property
    def lines_per_page(self) -> int:
        usable = self.height - self.margin_top - self.margin_bottom
        if not math.isfinite(usable):
            return 1
        return max(1, math.floor(usable / self.line_height))


def _num(value: float) -> str:
    """Format a number the way PDF operands are usually written."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def escape_pdf_string(text: str) -> str:
    """Escape backslashes and parentheses for a PDF literal string."""
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def encode_pdf_text(text: str) -> bytes:
    """Encode text as WinAnsi, replacing characters it cannot represent."""
    return text.encode("cp1252", errors="replace")


def paginate(lines: list[str], lines_per_page: int) -> list[list[str]]:
    """Split lines into pages; an empty document gets one placeholder page."""
    pages = [lines[i:i + lines_per_page] for i in range(0, len(lines), lines_per_page)]
    return pages or [[EMPTY_DOCUMENT_LINE]]


class PdfEncoder(BaseDocumentEncoder):
    """Encodes markdown-flavoured text as a simple paginated PDF.

    Object layout: 1 catalog, 2 page tree, 3 font, then one page object
    per page, then one content stream per page. A document information
    dictionary follows when a title or author is set.
    """

    def __init__(
        self,
        geometry: PageGeometry | None = None,
        title: str | None = None,
        author: str | None = None,
    ) -> None:
        self._geometry = geometry or PageGeometry()
        self._title = title
        self._author = author

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES["pdf"]

    @property
    def extension(self) -> str:
        return "pdf"

    def layout(self, content: str) -> list[list[str]]:
        """Wrapped, paginated lines for the content."""
        plain = to_plain_text(content.replace("\r\n", "\n"))
        lines = wrap_text(plain, self._geometry.max_line_length) if plain else []
        return paginate(lines, self._geometry.lines_per_page)

    def encode(self, content: str) -> bytes:
        pages = self.layout(content)
        objects = self._build_objects(pages)

        info_number = None
        info = self._info_dictionary()
        if info is not None:
            objects.append(info)
            info_number = len(objects)

        logger.debug(f"Encoding PDF with {len(pages)} page(s) and {len(objects)} objects")
        return self._serialize(objects, info_number)

    def _build_objects(self, pages: list[list[str]]) -> list[bytes]:
        g = self._geometry
        page_count = len(pages)
        first_page = 4
        first_content = first_page + page_count

        kids = " ".join(f"{first_page + i} 0 R" for i in range(page_count))
        objects: list[bytes] = [
            b"<< /Type /Catalog /Pages 2 0 R >>",
            f"<< /Type /Pages /Kids [{kids}] /Count {page_count} >>".encode("ascii"),
            b"<< /Type /Font /Subtype /Type1 /BaseFont /Times-Roman /Encoding /WinAnsiEncoding >>",
        ]

        for i in range(page_count):
            objects.append(
                (
                    f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {_num(g.width)} {_num(g.height)}] "
                    f"/Contents {first_content + i} 0 R /Resources << /Font << /F1 3 0 R >> >> >>"
                ).encode("ascii")
            )

        for page_lines in pages:
            stream = self._content_stream(page_lines)
            objects.append(
                f"<< /Length {len(stream)} >>\nstream\n".encode("ascii") + stream + b"\nendstream"
            )

        return objects

    def _content_stream(self, lines: list[str]) -> bytes:
        g = self._geometry
        y = g.height - g.margin_top
        parts = [f"BT\n/F1 {_num(g.font_size)} Tf\n".encode("ascii")]
        for line in lines:
            parts.append(f"1 0 0 1 {_num(g.margin_left)} {_num(y)} Tm\n(".encode("ascii"))
            parts.append(encode_pdf_text(escape_pdf_string(line)))
            parts.append(b") Tj\n")
            y -= g.line_height
        parts.append(b"ET")
        return b"".join(parts)

    def _info_dictionary(self) -> bytes | None:
        entries = []
        if self._title:
            entries.append(b"/Title (" + encode_pdf_text(escape_pdf_string(self._title)) + b")")
        if self._author:
            entries.append(b"/Author (" + encode_pdf_text(escape_pdf_string(self._author)) + b")")
        if not entries:
            return None
        return b"<< " + b" ".join(entries) + b" /Producer (docstudio) >>"

    def _serialize(self, objects: list[bytes], info_number: int | None = None) -> bytes:
        buffer = bytearray(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
        offsets: list[int] = []

        for number, body in enumerate(objects, start=1):
            offsets.append(len(buffer))
            buffer += f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n"

        size = len(objects) + 1
        xref_offset = len(buffer)
        buffer += f"xref\n0 {size}\n".encode("ascii")
        buffer += b"0000000000 65535 f \n"
        for offset in offsets:
            buffer += f"{offset:010d} 00000 n \n".encode("ascii")

        trailer = f"<< /Size {size} /Root 1 0 R"
        if info_number is not None:
            trailer += f" /Info {info_number} 0 R"
        trailer += " >>"
        buffer += f"trailer\n{trailer}\nstartxref\n{xref_offset}\n%%EOF".encode("ascii")
        return bytes(buffer)
