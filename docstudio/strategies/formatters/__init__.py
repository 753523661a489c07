"""Concrete format service implementations."""

from docstudio.strategies.formatters.case_api import CaseFormatService
from docstudio.strategies.formatters.local import LocalFormatService

__all__ = [
    "CaseFormatService",
    "LocalFormatService",
]
