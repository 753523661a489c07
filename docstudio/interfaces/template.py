"""Template rendering interface.

Defines the abstract base class for turning a template body and a set of
values into final document text.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class BaseTemplateRenderer(ABC):
    """Abstract base class for template rendering strategies.

    Example:
        ```python
        renderer = TemplateRenderer()
        text = renderer.render("Hello {{name}}!", {"name": "Ann"})
        ```
    """

    @abstractmethod
    def render(self, template: str, values: Mapping[str, Any]) -> str:
        """Render a template body.

        Args:
            template: The template text containing substitution markup.
            values: Variable values keyed by variable name.

        Returns:
            The processed document text.

        Raises:
            TemplateError: If the template cannot be processed.
        """

    @abstractmethod
    def references(self, template: str) -> set[str]:
        """Return the variable names a template body refers to."""
