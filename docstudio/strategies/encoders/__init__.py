"""Local document encoders used when no remote formatter is available."""

from docstudio.strategies.encoders.crc32 import crc32
from docstudio.strategies.encoders.docx import DocxEncoder
from docstudio.strategies.encoders.html import HtmlEncoder, render_html
from docstudio.strategies.encoders.pdf import PageGeometry, PdfEncoder
from docstudio.strategies.encoders.zip import ZipEntry, build_zip

__all__ = [
    "crc32",
    "DocxEncoder",
    "HtmlEncoder",
    "render_html",
    "PageGeometry",
    "PdfEncoder",
    "ZipEntry",
    "build_zip",
]
