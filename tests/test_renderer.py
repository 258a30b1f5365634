"""Unit tests for the markdown formatter and highlighter used by the composer."""

from __future__ import annotations

from textwrap import dedent

from bs4 import BeautifulSoup

from tutorial_pages.generator import HtmlContentRenderer


def test_rustdoc_fence_labels_are_highlighted() -> None:
    html = HtmlContentRenderer().markdown(
        dedent(
            """
            1. Add the system:

               ```rust,no_run
               fn main() {}
               ```
            """
        )
    )
    block = BeautifulSoup(html, "html.parser").select_one(".codehilite")
    assert block is not None, "nested, labelled fences should still highlight"
    assert "fn main() {}" in block.get_text()
    assert "no_run" not in html


def test_unknown_language_falls_back_to_plain_text() -> None:
    html = HtmlContentRenderer().code_block("<not & code>", "no-such-lexer")
    block = BeautifulSoup(html, "html.parser").select_one(".codehilite")
    assert block is not None
    assert block.get_text() == "<not & code>\n", "listing text must be preserved"


def test_blank_markdown_renders_nothing() -> None:
    assert HtmlContentRenderer().markdown("  \n") == ""
