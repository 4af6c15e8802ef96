"""Markdown to HTML conversion."""

from typing import cast

from markdown_it import MarkdownIt


class MarkdownConverter:
    """CommonMark converter with tables and strikethrough enabled.

    Raw HTML in content files is passed through; content is trusted.
    """

    def __init__(self) -> None:
        md = MarkdownIt("commonmark", {"html": True, "typographer": True})
        md.enable("table").enable("strikethrough")
        self._md = md

    def to_html(self, text: str) -> str:
        """Render block-level markdown."""
        if not text.strip():
            return ""
        return cast(str, self._md.render(text))

    def to_inline_html(self, text: str) -> str:
        """Render a single line of markdown without a wrapping paragraph."""
        if not text.strip():
            return ""
        return cast(str, self._md.renderInline(text))
