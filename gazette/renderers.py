"""Markdown rendering for Gazette.

Posts and pages are written in Markdown and converted to HTML with mistune.
Fenced code blocks that name a language are highlighted with Pygments; raw
HTML (including the ``<!-- more -->`` marker) passes through untouched.

Key classes:
- HighlightRenderer: mistune HTML renderer with Pygments code highlighting.
- MarkdownRenderer: Callable converting a Markdown string to HTML.
"""

from __future__ import annotations

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

PLUGINS = ["strikethrough", "footnotes", "table", "task_lists", "url"]


class HighlightRenderer(mistune.HTMLRenderer):
    """Markdown renderer with syntax highlighting for fenced code."""

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

        Returns:
            HTML string with highlighted code.
        """
        lang = info.split()[0] if info else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownRenderer:
    """Converts Markdown to HTML.

    Instances are callables matching the MarkdownConverter protocol, so the
    site can be given any other ``(str) -> str`` function instead.
    """

    def __init__(self, plugins: list[str] | None = None):
        self.plugins = list(PLUGINS if plugins is None else plugins)

    def __call__(self, text: str) -> str:
        # footnote state lives on the parser, so build one per document
        markdown = mistune.create_markdown(
            renderer=HighlightRenderer(), plugins=self.plugins
        )
        return markdown(text)


markdown_to_html = MarkdownRenderer()
