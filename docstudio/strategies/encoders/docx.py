"""Minimal WordprocessingML (DOCX) encoder.

Produces a four-part package with one paragraph per source line, packed
in a stored ZIP archive.
"""

import logging
import re

from docstudio.interfaces.encoder import BaseDocumentEncoder
from docstudio.interfaces.format_service import CONTENT_TYPES
from docstudio.strategies.encoders.markdown import BULLET
from docstudio.strategies.encoders.zip import ZipEntry, build_zip

logger = logging.getLogger(__name__)

_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

CONTENT_TYPES_XML = f"""{_XML_DECLARATION}
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

PACKAGE_RELS_XML = f"""{_XML_DECLARATION}
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

DOCUMENT_RELS_XML = f"""{_XML_DECLARATION}
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
</Relationships>"""

# Letter, 1 inch margins, in twentieths of a point
_SECTION_PROPERTIES = (
    "<w:sectPr>\n"
    '<w:pgSz w:w="12240" w:h="15840"/>\n'
    '<w:pgMar w:top="1440" w:right="1440" w:bottom="1440" w:left="1440"/>\n'
    "</w:sectPr>"
)

_HEADING_RES = [
    (re.compile(r"^# (.+)$"), "Heading1"),
    (re.compile(r"^## (.+)$"), "Heading2"),
    (re.compile(r"^### (.+)$"), "Heading3"),
]

# Characters XML 1.0 does not allow anywhere in a document
_INVALID_XML_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

_EMPTY_PARAGRAPH = "<w:p><w:r><w:t></w:t></w:r></w:p>"


def escape_xml(text: str) -> str:
    """Escape the five XML special characters and drop illegal ones."""
    text = _INVALID_XML_CHARS_RE.sub("", text)
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _run(text: str) -> str:
    return f'<w:r><w:t xml:space="preserve">{escape_xml(text)}</w:t></w:r>'


def paragraph_xml(line: str) -> str:
    """Convert one source line to a ``<w:p>`` element."""
    if not line.strip():
        return _EMPTY_PARAGRAPH

    for pattern, style in _HEADING_RES:
        match = pattern.match(line)
        if match:
            return f'<w:p><w:pPr><w:pStyle w:val="{style}"/></w:pPr>{_run(match.group(1))}</w:p>'

    if line.startswith("- "):
        line = f"{BULLET} {line[2:]}"
    return f"<w:p>{_run(line)}</w:p>"


def document_xml(content: str) -> str:
    """Build ``word/document.xml`` for the content."""
    body = "".join(paragraph_xml(line) for line in content.split("\n"))
    return (
        f"{_XML_DECLARATION}\n"
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">\n'
        "<w:body>\n"
        f"{body}\n"
        f"{_SECTION_PROPERTIES}\n"
        "</w:body>\n"
        "</w:document>"
    )


class DocxEncoder(BaseDocumentEncoder):
    """Encodes markdown-flavoured text as a Word document.

    Every line, blank ones included, becomes its own paragraph. ``#``,
    ``##`` and ``###`` lines get the matching heading style.
    """

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES["docx"]

    @property
    def extension(self) -> str:
        return "docx"

    def parts(self, content: str) -> list[ZipEntry]:
        """The package parts, in archive order."""
        return [
            ZipEntry("[Content_Types].xml", CONTENT_TYPES_XML.encode("utf-8")),
            ZipEntry("_rels/.rels", PACKAGE_RELS_XML.encode("utf-8")),
            ZipEntry("word/_rels/document.xml.rels", DOCUMENT_RELS_XML.encode("utf-8")),
            ZipEntry("word/document.xml", document_xml(content).encode("utf-8")),
        ]

    def encode(self, content: str) -> bytes:
        content = content.replace("\r\n", "\n")
        logger.debug(f"Encoding DOCX from {len(content)} characters")
        return build_zip(self.parts(content))
