"""LLM-backed natural-language field extractor.

Sends the user's description together with the template's variable list
to an OpenAI-compatible chat endpoint and maps the JSON reply back onto
typed variable values.
"""

import json
import logging
import math
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from docstudio.engine.models import ParsedInput, Value, Values, Variable
from docstudio.interfaces.field_extractor import BaseFieldExtractor, TemplateContext

logger = logging.getLogger(__name__)


# =============================================================================
# Extraction Prompt
# =============================================================================

EXTRACTION_RULES = """Return a JSON object with:
1. "variables": An object mapping variable names to their extracted values
2. "confidence": A number from 0 to 1 indicating how confident you are in the extraction
3. "suggestions": An array of strings suggesting what additional information might be needed

Rules:
- Extract ALL variables that can be reasonably inferred from the input
- Be flexible in matching - for example:
  - "Acme Corp" could be employer_name, client_name, party_a_name, etc. depending on context
  - "$150,000" or "150k" should be extracted as 150000 for salary/currency fields
  - "California" or "CA" should be extracted for state fields
  - "full-time" or "full time" should match employment_type
  - "remote" or "work from home" should match work_location
- For dates, use ISO format (YYYY-MM-DD)
- For currency/numbers, extract just the numeric value (no $ or commas)
- For boolean fields, infer true/false from context (e.g., "with health insurance" = health_insurance: true)
- For select fields, match to the closest valid option value
- If a value is ambiguous, don't include it and add a suggestion instead

Return ONLY valid JSON, no other text."""

_TRUE_WORDS = {"true", "yes", "y", "1", "on"}
_FALSE_WORDS = {"false", "no", "n", "0", "off"}


def describe_variable(variable: Variable) -> str:
    """One prompt line: ``- name (type): label - help``."""
    description = variable.help_text or ""
    if variable.type == "select" and variable.options:
        valid = f"Valid values: {', '.join(variable.options)}"
        description = f"{description}. {valid}" if description else valid
    suffix = f" - {description}" if description else ""
    return f"- {variable.name} ({variable.type}): {variable.label}{suffix}"


def build_system_prompt(
    variables: list[Variable], template_context: TemplateContext | None = None
) -> str:
    """System prompt listing the variables to extract."""
    hint = ""
    if template_context:
        hint = f'\nThis is for a "{template_context.name}" document (category: {template_context.category}).'
    descriptions = "\n".join(describe_variable(v) for v in variables)
    return (
        "You are a legal document assistant that extracts structured data "
        f"from natural language input.{hint}\n\n"
        "Given a user's description, extract values for the following template variables:\n"
        f"{descriptions}\n\n"
        f"{EXTRACTION_RULES}"
    )


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json / ``` fence from a model reply."""
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def _to_number(raw: Any) -> int | float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return raw if math.isfinite(raw) else None
    if isinstance(raw, str):
        cleaned = raw.strip().replace("$", "").replace(",", "").replace(" ", "")
        multiplier = 1
        if cleaned.lower().endswith("k"):
            cleaned, multiplier = cleaned[:-1], 1000
        try:
            number = float(cleaned) * multiplier
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None


def _to_bool(raw: Any) -> bool | None:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw != 0
    if isinstance(raw, str):
        word = raw.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


def coerce_value(variable: Variable, raw: Any) -> Value | None:
    """Convert a model-supplied value to the variable's type.

    Returns None when the value cannot be used.
    """
    if raw is None or isinstance(raw, (dict, list)):
        return None

    match variable.type:
        case "number":
            return _to_number(raw)
        case "boolean":
            return _to_bool(raw)
        case "select":
            text = str(raw).strip()
            for option in variable.options or []:
                if option.lower() == text.lower():
                    return option
            return None
        case _:
            if isinstance(raw, bool):
                return "true" if raw else "false"
            text = str(raw).strip()
            return text or None


def coerce_values(variables: list[Variable], raw_values: dict[str, Any]) -> tuple[Values, list[str]]:
    """Coerce extracted values, dropping unknown names.

    Returns:
        The usable values and suggestions for values that were rejected.
    """
    by_name = {v.name: v for v in variables}
    values: Values = {}
    rejected: list[str] = []
    for name, raw in raw_values.items():
        variable = by_name.get(name)
        if variable is None:
            logger.debug(f"Ignoring extracted value for unknown variable {name}")
            continue
        value = coerce_value(variable, raw)
        if value is None:
            rejected.append(f"Please confirm {variable.label}")
            continue
        values[name] = value
    return values, rejected


class LLMFieldExtractor(BaseFieldExtractor):
    """Extracts template variables with a chat-completion model.

    Attributes:
        model: Chat model name.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str = "openai/gpt-4o",
        temperature: float = 0.0,
        max_tokens: int = 4096,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            api_key: Bearer key for the LLM endpoint.
            base_url: OpenAI-compatible API base URL.
            model: Chat model name.
            temperature: Sampling temperature.
            max_tokens: Completion token budget.
            client: Optional preconfigured client.
        """
        self._api_key = api_key.strip()
        self._client = client
        if self._client is None and self._api_key:
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=base_url)
        self.model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def extract(
        self,
        text: str,
        variables: list[Variable],
        template_context: TemplateContext | None = None,
    ) -> ParsedInput:
        empty = ParsedInput(variables={}, confidence=0.0, unmatched_text=text)

        if not text.strip() or not variables:
            return empty
        if self._client is None:
            logger.warning("LLM extraction requested without an API key")
            return empty

        messages = [
            {"role": "system", "content": build_system_prompt(variables, template_context)},
            {"role": "user", "content": text},
        ]

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except OpenAIError as e:
            logger.warning(f"LLM extraction failed: {e}")
            return empty

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.warning("LLM extraction returned an empty reply")
            return empty

        try:
            parsed = json.loads(strip_code_fences(content))
        except json.JSONDecodeError as e:
            logger.warning(f"LLM extraction reply is not valid JSON: {e}")
            return empty
        if not isinstance(parsed, dict):
            logger.warning("LLM extraction reply is not a JSON object")
            return empty

        raw_values = parsed.get("variables") or {}
        values, rejected = coerce_values(variables, raw_values if isinstance(raw_values, dict) else {})

        confidence = _to_number(parsed.get("confidence")) or 0
        raw_suggestions = parsed.get("suggestions")
        suggestions = [str(s) for s in raw_suggestions if s] if isinstance(raw_suggestions, list) else []

        logger.info(f"Extracted {len(values)} of {len(variables)} variables (confidence={confidence})")
        return ParsedInput(
            variables=values,
            confidence=min(max(float(confidence), 0.0), 1.0),
            suggestions=suggestions + rejected,
        )
