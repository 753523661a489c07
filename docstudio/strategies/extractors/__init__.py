"""Concrete natural-language extraction implementations."""

from docstudio.strategies.extractors.llm import LLMFieldExtractor

__all__ = [
    "LLMFieldExtractor",
]
