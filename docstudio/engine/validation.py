"""Variable validation and section visibility.

Checks values against template variable definitions and works out which
sections of a template apply to the current values.
"""

import logging
import re
from collections.abc import Mapping

from docstudio.engine.models import Section, Template, ValidationResult, Value, Values, Variable

logger = logging.getLogger(__name__)


def _is_empty(value: Value | None) -> bool:
    return value is None or value == ""


def _is_number(value: Value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _check_variable(variable: Variable, value: Value | None) -> str | None:
    """Return the first error for a single value, or None.

    Checks run in a fixed order: required, pattern, min/max, length.
    """
    if _is_empty(value):
        if variable.required:
            return f"{variable.label} is required"
        return None

    rules = variable.validation
    if rules is None:
        return None

    if rules.pattern and isinstance(value, str):
        try:
            if not re.search(rules.pattern, value):
                return f"{variable.label} format is invalid"
        except re.error as e:
            logger.warning(f"Invalid validation pattern for {variable.name}: {e}")

    if _is_number(value):
        if rules.min is not None and value < rules.min:
            return f"{variable.label} must be at least {_format_bound(rules.min)}"
        if rules.max is not None and value > rules.max:
            return f"{variable.label} must be at most {_format_bound(rules.max)}"

    if isinstance(value, str):
        if rules.min_length is not None and len(value) < rules.min_length:
            return f"{variable.label} must be at least {rules.min_length} characters"
        if rules.max_length is not None and len(value) > rules.max_length:
            return f"{variable.label} must be at most {rules.max_length} characters"

    return None


def validate_variables(
    variables: list[Variable], values: Mapping[str, Value]
) -> ValidationResult:
    """Validate values against their variable definitions.

    Every variable is checked independently and all errors are collected.
    Optional variables without a value are skipped entirely.

    Args:
        variables: The variables to check.
        values: Current values keyed by variable name.

    Returns:
        ValidationResult mapping failing variable names to messages.
    """
    errors: dict[str, str] = {}
    for variable in variables:
        error = _check_variable(variable, values.get(variable.name))
        if error:
            errors[variable.name] = error

    return ValidationResult(is_valid=not errors, errors=errors)


def visible_sections(template: Template, values: Mapping[str, Value]) -> list[Section]:
    """Sections whose ``show_if`` predicate holds for the values."""
    visible = []
    for section in template.sections:
        if section.show_if is None:
            visible.append(section)
            continue
        current = values.get(section.show_if.variable_id)
        expected = section.show_if.value
        # bool and int compare equal in Python; keep them apart
        if isinstance(current, bool) != isinstance(expected, bool):
            continue
        if current == expected:
            visible.append(section)
    return visible


def visible_variables(template: Template, values: Mapping[str, Value]) -> list[Variable]:
    """Variables of all visible sections, in order."""
    return [v for section in visible_sections(template, values) for v in section.variables]


def default_values(template: Template, initial: Mapping[str, Value] | None = None) -> Values:
    """Starting values for a template.

    Booleans default to False, declared defaults override that, and
    ``initial`` overrides both.
    """
    defaults: Values = {}
    for variable in template.variables:
        if variable.type == "boolean":
            defaults[variable.name] = False
        if variable.default_value is not None:
            defaults[variable.name] = variable.default_value

    defaults.update(initial or {})
    return defaults
