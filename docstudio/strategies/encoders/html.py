"""Markdown to HTML preview renderer."""

import html
import re

from docstudio.interfaces.encoder import BaseDocumentEncoder
from docstudio.interfaces.format_service import CONTENT_TYPES

_H3_RE = re.compile(r"^### (.*)$", re.MULTILINE)
_H2_RE = re.compile(r"^## (.*)$", re.MULTILINE)
_H1_RE = re.compile(r"^# (.*)$", re.MULTILINE)
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_LIST_ITEM_RE = re.compile(r"^- (.*)$", re.MULTILINE)
_LIST_RUN_RE = re.compile(r"(?:^<li>.*</li>(?:\n|$))+", re.MULTILINE)
_RULE_RE = re.compile(r"^---$", re.MULTILINE)

PREVIEW_STYLESHEET = """
    body {
      font-family: 'Times New Roman', Times, serif;
      font-size: 12pt;
      line-height: 1.6;
      max-width: 8.5in;
      margin: 0 auto;
      padding: 1in;
      background: white;
      color: black;
    }
    h1 { font-size: 18pt; font-weight: bold; text-align: center; margin-bottom: 24pt; }
    h2 { font-size: 14pt; font-weight: bold; margin-top: 18pt; margin-bottom: 12pt; }
    h3 { font-size: 12pt; font-weight: bold; margin-top: 12pt; margin-bottom: 6pt; }
    p { margin-bottom: 12pt; text-align: justify; }
    ul { margin-left: 24pt; margin-bottom: 12pt; }
    li { margin-bottom: 6pt; }
    hr { border: none; border-top: 1px solid #ccc; margin: 24pt 0; }
"""


def _wrap_list(match: re.Match) -> str:
    run = match.group(0)
    trailing = "\n" if run.endswith("\n") else ""
    items = run.replace("\n", "")
    return f"<ul>{items}</ul>{trailing}"


def markdown_to_html_body(markdown: str) -> str:
    """Convert the supported markdown subset to an HTML fragment.

    Text is escaped first, so markup in values cannot inject HTML.
    """
    body = html.escape(markdown.replace("\r\n", "\n"), quote=False)

    body = _H3_RE.sub(r"<h3>\1</h3>", body)
    body = _H2_RE.sub(r"<h2>\1</h2>", body)
    body = _H1_RE.sub(r"<h1>\1</h1>", body)
    body = _BOLD_RE.sub(r"<strong>\1</strong>", body)
    body = _ITALIC_RE.sub(r"<em>\1</em>", body)
    body = _LIST_ITEM_RE.sub(r"<li>\1</li>", body)
    body = _LIST_RUN_RE.sub(_wrap_list, body)
    body = _RULE_RE.sub("<hr>", body)

    body = body.replace("\n\n", "</p><p>")
    body = body.replace("\n", "<br>")
    return f"<p>{body}</p>"


def render_html(markdown: str, title: str | None = None) -> str:
    """Render a complete, styled HTML preview document."""
    head_title = f"\n  <title>{html.escape(title)}</title>" if title else ""
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '  <meta charset="utf-8">'
        f"{head_title}\n"
        f"  <style>{PREVIEW_STYLESHEET}  </style>\n"
        "</head>\n"
        "<body>\n"
        f"  {markdown_to_html_body(markdown)}\n"
        "</body>\n"
        "</html>\n"
    )


class HtmlEncoder(BaseDocumentEncoder):
    """UTF-8 encoded HTML preview."""

    def __init__(self, title: str | None = None) -> None:
        self._title = title

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES["html"]

    @property
    def extension(self) -> str:
        return "html"

    def encode(self, content: str) -> bytes:
        return render_html(content, title=self._title).encode("utf-8")
