"""Concrete strategy implementations."""

from docstudio.strategies.encoders import DocxEncoder, HtmlEncoder, PdfEncoder
from docstudio.strategies.extractors import LLMFieldExtractor
from docstudio.strategies.formatters import CaseFormatService, LocalFormatService
from docstudio.strategies.stores import LocalStore, VaultClient, VaultStore

__all__ = [
    "DocxEncoder",
    "HtmlEncoder",
    "PdfEncoder",
    "LLMFieldExtractor",
    "CaseFormatService",
    "LocalFormatService",
    "LocalStore",
    "VaultClient",
    "VaultStore",
]
