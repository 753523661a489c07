"""Template engine: models, catalog, rendering and validation."""

from docstudio.engine.catalog import (
    TEMPLATES,
    get_categories,
    get_template_by_id,
    get_templates_by_category,
    search_templates,
)
from docstudio.engine.models import (
    ParsedInput,
    Section,
    ShowIf,
    Template,
    ValidationResult,
    Value,
    Values,
    Variable,
    VariableValidation,
)
from docstudio.engine.renderer import PLACEHOLDER, TemplateRenderer, process_template
from docstudio.engine.validation import (
    default_values,
    validate_variables,
    visible_sections,
    visible_variables,
)

__all__ = [
    "TEMPLATES",
    "get_categories",
    "get_template_by_id",
    "get_templates_by_category",
    "search_templates",
    "ParsedInput",
    "Section",
    "ShowIf",
    "Template",
    "ValidationResult",
    "Value",
    "Values",
    "Variable",
    "VariableValidation",
    "PLACEHOLDER",
    "TemplateRenderer",
    "process_template",
    "default_values",
    "validate_variables",
    "visible_sections",
    "visible_variables",
]
