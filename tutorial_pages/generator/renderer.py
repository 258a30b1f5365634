"""Markdown formatting and syntax highlighting for tutorial blocks."""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

# Fences nested in list items ("   ```rust") and rustdoc labels ("```rust,no_run").
NESTED_FENCE_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
PROSE_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists")


class HtmlContentRenderer:
    """Format markdown prose and highlight code listings.

    The composer delegates to this class and hands it whatever Markdown
    extensions a block needs. It knows nothing about steps or permalinks.
    Language metadata lives on the block wrappers, so the highlighted markup
    is returned as Pygments produced it.
    """

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(
        self, text: str, *, extensions: cabc.Sequence[Extension] = ()
    ) -> str:
        """Render markdown into HTML.

        Parameters
        ----------
        text : str
            Markdown source, passed through without interpretation.
        extensions : Sequence[Extension], optional
            Extra Python-Markdown extensions (e.g. step link rewriting)
            applied on top of the prose set.

        Returns
        -------
        str
            Rendered HTML, or ``""`` for blank input.
        """
        if not text.strip():
            return ""
        md = Markdown(
            extensions=[*PROSE_EXTENSIONS, *extensions],
            extension_configs={
                "codehilite": {
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return md.convert(_tidy_fences(text))

    def code_block(self, code: str, language: str | None = None) -> str:
        """Highlight ``code``; unknown lexers fall back to plain text."""
        try:
            lexer = get_lexer_by_name(language or "text")
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        return highlight(code, lexer, self._formatter)


def _tidy_fences(text: str) -> str:
    """Left-align list-nested fences and drop ``,no_run`` style fence labels."""
    text = NESTED_FENCE_PATTERN.sub(r"\1", text)
    return FENCE_LABEL_PATTERN.sub(
        lambda match: f"{match.group(1)}{match.group(2) or ''}", text
    )


__all__ = ["HtmlContentRenderer"]
