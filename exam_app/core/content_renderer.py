"""Markdown rendering of exam papers for the take-exam screen.

Architecture note:
    Teachers paste exam content as plain text, Markdown or raw HTML. Rendering
    through MarkdownIt with HTML passthrough and hard line breaks covers all
    three: plain text keeps its line structure, Markdown gets formatted and
    HTML fragments are emitted unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt

from exam_app.constants.ui_constants import CONTENT_MISSING_MESSAGE, INSTRUCTIONS_TEXT
from exam_app.core.models import ExamDefinition


@dataclass(slots=True)
class ExamContentRenderer:
    """Converts exam definitions into HTML suitable for a Qt rich-text view."""

    enable_html: bool = True
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html, "breaks": True})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_exam(self, definition: ExamDefinition) -> str:
        """Render instructions, the download link and the inline paper."""
        parts = ["<h3>Instructions:</h3>"]
        if definition.description:
            parts.append(f"<p>{escape(definition.description)}</p>")
        parts.append(f"<p>{escape(INSTRUCTIONS_TEXT)}</p>")

        if definition.file_url:
            label = escape(definition.file_name or "exam paper")
            parts.append(
                f'<p><a href="{escape(definition.file_url, quote=True)}">Download Exam Paper ({label})</a></p>'
            )
        if definition.content:
            parts.append("<h4>Exam Questions:</h4>")
            parts.append(self.render_fragment(definition.content))
        if not definition.has_content:
            parts.append(f'<p style="color: #dc2626;">{escape(CONTENT_MISSING_MESSAGE)}</p>')
        return "\n".join(parts)


renderer = ExamContentRenderer()
