"""Unit tests for the LLM field extractor."""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from docstudio.engine.models import Variable
from docstudio.interfaces.field_extractor import TemplateContext
from docstudio.strategies.extractors import LLMFieldExtractor
from docstudio.strategies.extractors.llm import (
    build_system_prompt,
    coerce_value,
    coerce_values,
    strip_code_fences,
)

VARIABLES = [
    Variable(name="employer_name", label="Employer Name", required=True),
    Variable(name="salary_amount", label="Annual Salary", type="number"),
    Variable(name="health_insurance", label="Health Insurance", type="boolean"),
    Variable(
        name="employment_type",
        label="Employment Type",
        type="select",
        options=["full-time", "part-time"],
    ),
]


def _reply(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _extractor(create: AsyncMock) -> LLMFieldExtractor:
    client = MagicMock()
    client.chat.completions.create = create
    return LLMFieldExtractor(api_key="", base_url="https://llm.example.test/v1", client=client)


# =============================================================================
# Prompt and Coercion Tests
# =============================================================================


class TestPromptAndCoercion:
    """Test suite for prompt building and value coercion."""

    def test_system_prompt_lists_variables(self):
        """Test that every variable and select options appear in the prompt."""
        prompt = build_system_prompt(VARIABLES, TemplateContext(name="Employment Agreement", category="employment"))
        assert "- employer_name (text): Employer Name" in prompt
        assert "Valid values: full-time, part-time" in prompt
        assert '"Employment Agreement" document (category: employment)' in prompt
        assert "Return ONLY valid JSON" in prompt

    def test_strip_code_fences(self):
        """Test fenced and bare replies."""
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences(' {"a": 1} ') == '{"a": 1}'

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (150000, 150000),
            ("$150,000", 150000),
            ("150k", 150000),
            ("2.5", 2.5),
            ("lots", None),
            (True, None),
            ("inf", None),
            (float("nan"), None),
        ],
    )
    def test_coerce_number(self, raw, expected):
        """Test numeric coercion of model output."""
        assert coerce_value(VARIABLES[1], raw) == expected

    @pytest.mark.parametrize("raw,expected", [(True, True), ("yes", True), ("false", False), ("maybe", None)])
    def test_coerce_boolean(self, raw, expected):
        """Test boolean coercion of model output."""
        assert coerce_value(VARIABLES[2], raw) == expected

    def test_coerce_select(self):
        """Test that select values must match an option."""
        assert coerce_value(VARIABLES[3], "Full-Time") == "full-time"
        assert coerce_value(VARIABLES[3], "contract") is None

    def test_coerce_values(self):
        """Test unknown names are dropped and bad values suggested."""
        values, rejected = coerce_values(
            VARIABLES,
            {"employer_name": " Acme Corp ", "salary_amount": "n/a", "unknown": "x"},
        )
        assert values == {"employer_name": "Acme Corp"}
        assert rejected == ["Please confirm Annual Salary"]


# =============================================================================
# Extractor Tests
# =============================================================================


class TestLLMFieldExtractor:
    """Test suite for LLMFieldExtractor."""

    def test_unconfigured_returns_empty(self):
        """Test that no key means an empty result, not an error."""
        extractor = LLMFieldExtractor(api_key="", base_url="https://llm.example.test/v1")
        assert extractor.is_configured is False

        async def run_test():
            result = await extractor.extract("Acme hires Jane", VARIABLES)
            assert result.variables == {}
            assert result.confidence == 0.0
            assert result.unmatched_text == "Acme hires Jane"

        asyncio.run(run_test())

    def test_extracts_values(self):
        """Test a well-formed fenced reply is parsed and coerced."""
        reply = {
            "variables": {
                "employer_name": "Acme Corp",
                "salary_amount": "$120,000",
                "health_insurance": True,
                "employment_type": "Full-time",
            },
            "confidence": 0.85,
            "suggestions": ["What is the start date?"],
        }
        create = AsyncMock(return_value=_reply(f"```json\n{json.dumps(reply)}\n```"))

        async def run_test():
            result = await _extractor(create).extract(
                "Acme Corp hiring a full-time engineer at $120k with health insurance", VARIABLES
            )
            assert result.variables == {
                "employer_name": "Acme Corp",
                "salary_amount": 120000,
                "health_insurance": True,
                "employment_type": "full-time",
            }
            assert result.confidence == 0.85
            assert result.suggestions == ["What is the start date?"]

        asyncio.run(run_test())
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-4o"
        assert kwargs["messages"][0]["role"] == "system"
        assert kwargs["messages"][1] == {
            "role": "user",
            "content": "Acme Corp hiring a full-time engineer at $120k with health insurance",
        }

    def test_confidence_clamped(self):
        """Test that out-of-range confidence is clamped."""
        create = AsyncMock(return_value=_reply(json.dumps({"variables": {}, "confidence": 7})))

        async def run_test():
            result = await _extractor(create).extract("text", VARIABLES)
            assert result.confidence == 1.0

        asyncio.run(run_test())

    @pytest.mark.parametrize("confidence", [float("nan"), float("inf"), "NaN"])
    def test_non_finite_confidence(self, confidence):
        """Test that a non-finite confidence is reported as zero."""
        reply = json.dumps({"variables": {"employer_name": "Acme"}, "confidence": confidence})
        create = AsyncMock(return_value=_reply(reply))

        async def run_test():
            result = await _extractor(create).extract("Acme hires", VARIABLES)
            assert result.variables == {"employer_name": "Acme"}
            assert result.confidence == 0.0

        asyncio.run(run_test())

    @pytest.mark.parametrize("suggestions", [5, "ask for a date", {"a": 1}, None])
    def test_malformed_suggestions_ignored(self, suggestions):
        """Test that suggestions other than a list are dropped."""
        reply = json.dumps({"variables": {"employer_name": "Acme"}, "confidence": 0.5, "suggestions": suggestions})
        create = AsyncMock(return_value=_reply(reply))

        async def run_test():
            result = await _extractor(create).extract("Acme hires", VARIABLES)
            assert result.variables == {"employer_name": "Acme"}
            assert result.confidence == 0.5
            assert result.suggestions == []

        asyncio.run(run_test())

    @pytest.mark.parametrize("content", [None, "", "not json", "[1, 2]"])
    def test_bad_replies_return_empty(self, content):
        """Test that unusable replies degrade to an empty result."""
        create = AsyncMock(return_value=_reply(content))

        async def run_test():
            result = await _extractor(create).extract("text", VARIABLES)
            assert result.variables == {}
            assert result.confidence == 0.0
            assert result.unmatched_text == "text"

        asyncio.run(run_test())

    def test_api_error_returns_empty(self):
        """Test that client errors are not raised to the caller."""
        create = AsyncMock(side_effect=OpenAIError("upstream down"))

        async def run_test():
            result = await _extractor(create).extract("text", VARIABLES)
            assert result.variables == {}

        asyncio.run(run_test())

    def test_blank_text_skips_request(self):
        """Test that blank input never calls the model."""
        create = AsyncMock()

        async def run_test():
            await _extractor(create).extract("   ", VARIABLES)

        asyncio.run(run_test())
        create.assert_not_called()
