"""Markdown helpers shared by the local encoders."""

import re

BULLET = "•"
DIVIDER = "_" * 40

_HEADING_RE = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_LIST_ITEM_RE = re.compile(r"^- ", re.MULTILINE)
_RULE_RE = re.compile(r"^---$", re.MULTILINE)


def to_plain_text(markdown: str) -> str:
    """Strip heading, emphasis and list markup.

    Heading markers and emphasis asterisks are removed, ``- `` list markers
    become bullets and ``---`` rules become a divider line. The result is
    trimmed.
    """
    text = _HEADING_RE.sub("", markdown)
    text = _BOLD_RE.sub(r"\1", text)
    text = _ITALIC_RE.sub(r"\1", text)
    text = _LIST_ITEM_RE.sub(f"{BULLET} ", text)
    text = _RULE_RE.sub(DIVIDER, text)
    return text.strip()


def wrap_line(line: str, width: int) -> list[str]:
    """Greedy word wrap on spaces.

    Lines within ``width`` are returned untouched. A single word longer
    than ``width`` is kept whole on its own line.
    """
    if len(line) <= width:
        return [line]

    wrapped: list[str] = []
    current = ""
    for word in line.split(" "):
        candidate = f"{current} {word}".strip()
        if len(candidate) <= width:
            current = candidate
        else:
            if current:
                wrapped.append(current)
            current = word
    if current:
        wrapped.append(current)
    return wrapped


def wrap_text(text: str, width: int) -> list[str]:
    """Split text into lines and wrap each one."""
    lines: list[str] = []
    for line in text.split("\n"):
        lines.extend(wrap_line(line, width))
    return lines
