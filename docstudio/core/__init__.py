"""Core configuration, logging and error types."""

from docstudio.core.config import Settings, get_settings
from docstudio.core.exceptions import DocStudioError

__all__ = [
    "Settings",
    "get_settings",
    "DocStudioError",
]
