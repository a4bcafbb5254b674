"""Markdown rendering of question text for the player window.

Question text in the bank may carry light markdown (emphasis, code, lists).
Qt labels accept a subset of HTML, so the text is rendered once per question
and shown as rich text. Raw HTML in the bank is escaped, not passed through.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class QuestionRenderer:
    """Converts markdown question text into an HTML fragment."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = MarkdownIt("commonmark", {"html": self.enable_html}).enable("strikethrough")

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return "<p><em>No question text.</em></p>"
        return self._markdown.render(sanitized)


renderer = QuestionRenderer()
# Shared instance; MarkdownIt is safe to reuse for read-only renders.
