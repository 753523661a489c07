"""Natural-language field extraction interface.

Defines the abstract base class for strategies that fill template
variables from a free-text description.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from docstudio.engine.models import ParsedInput, Variable


@dataclass(frozen=True)
class TemplateContext:
    """Hints about the template being filled.

    Attributes:
        name: Display name of the template.
        category: Template category.
    """

    name: str
    category: str


class BaseFieldExtractor(ABC):
    """Abstract base class for natural-language extraction strategies."""

    @abstractmethod
    async def extract(
        self,
        text: str,
        variables: list[Variable],
        template_context: TemplateContext | None = None,
    ) -> ParsedInput:
        """Extract variable values from a description.

        Implementations degrade to an empty result instead of raising.

        Args:
            text: The user's description.
            variables: Variables the values should be matched to.
            template_context: Optional template name and category.

        Returns:
            ParsedInput with extracted values, confidence and suggestions.
        """
