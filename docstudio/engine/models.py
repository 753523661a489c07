"""Template engine domain models.

Pydantic models describing document templates, their sections and
variables, and the results produced by validation and extraction.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# bool first so pydantic's smart union never turns True into 1
Value = Union[bool, int, float, str]
Values = dict[str, Value]

VariableType = Literal["text", "textarea", "number", "date", "boolean", "select"]
TemplateCategory = Literal["employment", "nda", "services", "lease", "corporate", "litigation"]


class VariableValidation(BaseModel):
    """Optional constraints applied to a variable's value."""

    model_config = ConfigDict(frozen=True)

    pattern: str | None = Field(default=None, description="Regex a string value must match")
    min: float | None = Field(default=None, description="Lower bound for numeric values")
    max: float | None = Field(default=None, description="Upper bound for numeric values")
    min_length: int | None = Field(default=None, ge=0, description="Minimum string length")
    max_length: int | None = Field(default=None, ge=0, description="Maximum string length")


class Variable(BaseModel):
    """A fillable field in a template, keyed by its name."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Substitution key, unique within a template")
    label: str = Field(description="Human-readable field label")
    type: VariableType = Field(default="text")
    required: bool = Field(default=False)
    options: list[str] | None = Field(default=None, description="Choices for select fields")
    validation: VariableValidation | None = None
    placeholder: str | None = None
    help_text: str | None = None
    default_value: Value | None = None


class ShowIf(BaseModel):
    """Visibility predicate: the section shows when the variable equals value."""

    model_config = ConfigDict(frozen=True)

    variable_id: str
    value: Value


class Section(BaseModel):
    """An ordered group of variables presented together."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str | None = None
    variables: list[Variable] = Field(default_factory=list)
    show_if: ShowIf | None = None


class Template(BaseModel):
    """Immutable template definition plus its raw markdown body."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: TemplateCategory
    version: str = "1.0.0"
    tags: list[str] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    content: str = Field(description="Template body with {{var}} and {{#if}} markup")

    @property
    def variables(self) -> list[Variable]:
        """All variables across every section, in order."""
        return [variable for section in self.sections for variable in section.variables]


class ValidationResult(BaseModel):
    """Outcome of validating a set of values."""

    is_valid: bool
    errors: dict[str, str] = Field(default_factory=dict)


class ParsedInput(BaseModel):
    """Variables extracted from a natural-language description."""

    variables: Values = Field(default_factory=dict)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    suggestions: list[str] = Field(default_factory=list)
    unmatched_text: str | None = None
