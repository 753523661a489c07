"""Template substitution engine.

Resolves ``{{name}}`` references and ``{{#if name}}...{{else}}...{{/if}}``
blocks in a template body. The body is tokenized once and parsed into a
tree, so nested blocks resolve in a single pass and values inserted into
the output are never re-scanned for markup.
"""

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Union

from docstudio.core.exceptions import TemplateDepthError
from docstudio.engine.models import Value
from docstudio.interfaces.template import BaseTemplateRenderer

logger = logging.getLogger(__name__)

PLACEHOLDER = "[___]"
DEFAULT_MAX_DEPTH = 64

_TAG_RE = re.compile(
    r"\{\{\s*(?:"
    r"#if\s+(?P<if_name>\w+)"
    r"|(?P<else>else)"
    r"|(?P<end_if>/if)"
    r"|(?P<name>\w+)"
    r"|(?P<stray>[#/][^{}]*|else\s[^{}]*)"
    r")\s*\}\}"
)

_TEXT = "text"
_VAR = "var"
_IF = "if"
_ELSE = "else"
_END_IF = "end_if"
_STRAY = "stray"


@dataclass(frozen=True)
class _Text:
    text: str


@dataclass(frozen=True)
class _Var:
    name: str


@dataclass
class _Block:
    name: str
    then_nodes: list["_Node"] = field(default_factory=list)
    else_nodes: list["_Node"] = field(default_factory=list)
    closed: bool = False


_Node = Union[_Text, _Var, _Block]


def _tokenize(template: str) -> Iterator[tuple[str, str]]:
    pos = 0
    for match in _TAG_RE.finditer(template):
        if match.start() > pos:
            yield _TEXT, template[pos:match.start()]
        pos = match.end()

        if match.group("if_name"):
            yield _IF, match.group("if_name")
        elif match.group("else"):
            yield _ELSE, ""
        elif match.group("end_if"):
            yield _END_IF, ""
        elif match.group("stray") is not None:
            yield _STRAY, match.group(0)
        else:
            yield _VAR, match.group("name")

    if pos < len(template):
        yield _TEXT, template[pos:]


class _Parser:
    """Recursive-descent parser over the tag token stream."""

    def __init__(self, tokens: list[tuple[str, str]], max_depth: int) -> None:
        self._tokens = tokens
        self._max_depth = max_depth
        self._pos = 0

    def parse(self) -> list[_Node]:
        return self._parse_nodes(depth=0, in_block=False)

    def _peek(self) -> str | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos][0]
        return None

    def _parse_nodes(self, depth: int, in_block: bool) -> list[_Node]:
        nodes: list[_Node] = []
        while self._pos < len(self._tokens):
            kind, value = self._tokens[self._pos]
            if in_block and kind in (_ELSE, _END_IF):
                return nodes
            self._pos += 1

            if kind == _TEXT:
                nodes.append(_Text(value))
            elif kind == _VAR:
                nodes.append(_Var(value))
            elif kind == _IF:
                nodes.append(self._parse_block(value, depth + 1))
            else:
                # Stray else, unmatched /if, or unparseable block tags: dropped
                logger.debug(f"Dropping stray template markup at token {self._pos - 1}")
        return nodes

    def _parse_block(self, name: str, depth: int) -> _Block:
        if depth > self._max_depth:
            raise TemplateDepthError(self._max_depth)

        block = _Block(name=name)
        block.then_nodes = self._parse_nodes(depth, in_block=True)

        if self._peek() == _ELSE:
            self._pos += 1
            block.else_nodes = self._parse_nodes(depth, in_block=True)
            # A repeated else inside the same block is dead markup
            while self._peek() == _ELSE:
                self._pos += 1
                block.else_nodes.extend(self._parse_nodes(depth, in_block=True))

        if self._peek() == _END_IF:
            self._pos += 1
            block.closed = True

        return block


def is_truthy(value: Value | None) -> bool:
    """Whether a value selects the ``{{#if}}`` branch.

    Missing values, ``False``, the empty string and numeric zero are falsy.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def stringify(value: Value) -> str:
    """Convert a value to the text inserted into the document."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class TemplateRenderer(BaseTemplateRenderer):
    """Renders template bodies against a mapping of values.

    Unknown references become ``[___]``; malformed conditional markup is
    stripped. The only failure is nesting beyond ``max_depth``.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, placeholder: str = PLACEHOLDER) -> None:
        self._max_depth = max_depth
        self._placeholder = placeholder

    def parse(self, template: str) -> list[_Node]:
        """Parse a template body into its node tree.

        Raises:
            TemplateDepthError: If conditionals nest deeper than max_depth.
        """
        return _Parser(list(_tokenize(template)), self._max_depth).parse()

    def render(self, template: str, values: Mapping[str, Value]) -> str:
        nodes = self.parse(template)
        out: list[str] = []
        self._render_nodes(nodes, values, out)
        return "".join(out)

    def references(self, template: str) -> set[str]:
        """Names referenced by substitutions or conditions in the template."""
        names: set[str] = set()
        for kind, value in _tokenize(template):
            if kind in (_VAR, _IF):
                names.add(value)
        return names

    def _render_nodes(
        self, nodes: list[_Node], values: Mapping[str, Value], out: list[str]
    ) -> None:
        for node in nodes:
            if isinstance(node, _Text):
                out.append(node.text)
            elif isinstance(node, _Var):
                value = values.get(node.name)
                out.append(self._placeholder if value is None else stringify(value))
            elif not node.closed:
                # Unterminated block: keep both branches, drop the tags
                self._render_nodes(node.then_nodes, values, out)
                self._render_nodes(node.else_nodes, values, out)
            elif is_truthy(values.get(node.name)):
                self._render_nodes(node.then_nodes, values, out)
            else:
                self._render_nodes(node.else_nodes, values, out)


def process_template(
    template: str,
    values: Mapping[str, Value],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    """Render a template body with the given values.

    Args:
        template: Template text with ``{{name}}`` and ``{{#if}}`` markup.
        values: Variable values keyed by name.
        max_depth: Maximum conditional nesting accepted.

    Returns:
        The processed document text.

    Raises:
        TemplateDepthError: If conditionals nest deeper than max_depth.
    """
    return TemplateRenderer(max_depth=max_depth).render(template, values)
