"""Unit tests for loading authored tutorial documents from YAML."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from tutorial_pages.document import (
    BrowserPanelBlock,
    CalloutBlock,
    CodeListingBlock,
    DocumentError,
    ProseBlock,
    load_document,
    parse_document,
)
from tutorial_pages.references import FileReference

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, text: str, name: str = "tutorial.yaml") -> Path:
    path = tmp_path / name
    path.write_text(dedent(text).strip() + "\n", encoding="utf-8")
    return path


def test_load_document_parses_every_block_kind(tmp_path: Path) -> None:
    (tmp_path / "snippets").mkdir()
    (tmp_path / "snippets" / "main.rs").write_text("fn main() {}\n", encoding="utf-8")
    path = _write(
        tmp_path,
        """
        release: v0.10.0
        title: Getting started
        slug: getting-started
        blocks:
          - type: prose
            step: 1
            markdown: |
              Create the project.
          - type: code
            language: toml
            ref: "1:Cargo.toml"
            code: |
              [package]
              name = "demo"
          - type: callout
            header: Compatibility
            body: Works with 0.10 only.
            variant: warning
          - type: browser
            step: 2
            panels:
              - label: main.rs
                language: rust
                ref: {step: 2, path: src/main.rs}
                code_file: snippets/main.rs
              - label: README
                code: hello
        """,
    )
    document = load_document(path)

    assert document.release == "v0.10.0"
    assert document.title == "Getting started"
    assert document.slug == "getting-started"
    kinds = [type(block) for block in document.blocks]
    assert kinds == [ProseBlock, CodeListingBlock, CalloutBlock, BrowserPanelBlock]

    prose, code, callout, browser = document.blocks
    assert prose.introduces_step == 1
    assert prose.markdown == "Create the project.\n"
    assert code.reference == FileReference(1, "Cargo.toml")
    assert code.code == '[package]\nname = "demo"\n', "code must be kept verbatim"
    assert callout.variant == "warning"
    assert browser.introduces_step == 2
    assert [panel.label for panel in browser.panels] == ["main.rs", "README"]
    assert browser.panels[0].code == "fn main() {}\n"
    assert browser.panels[0].reference == FileReference(2, "src/main.rs")


def test_release_falls_back_to_configured_value() -> None:
    document = parse_document(
        {"blocks": [{"type": "prose", "markdown": "x"}]}, release="v1.0.0"
    )
    assert document.release == "v1.0.0"


def test_conflicting_release_is_rejected() -> None:
    with pytest.raises(DocumentError, match="targets release"):
        parse_document(
            {"release": "v0.9.0", "blocks": [{"type": "prose", "markdown": "x"}]},
            release="v0.10.0",
        )


def test_missing_release_is_rejected() -> None:
    with pytest.raises(DocumentError, match="release"):
        parse_document({"blocks": [{"type": "prose", "markdown": "x"}]})


def test_unquoted_numeric_release_is_rejected(tmp_path: Path) -> None:
    """``release: 0.10`` loads as 0.1 and must not silently become '0.1' tags."""
    path = _write(
        tmp_path,
        """
        release: 0.10
        blocks:
          - type: prose
            markdown: x
        """,
    )
    with pytest.raises(DocumentError, match="quote it"):
        load_document(path, release="0.10")


def test_quoted_numeric_release_matches_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        release: "0.10"
        blocks:
          - type: prose
            markdown: x
        """,
    )
    assert load_document(path, release="0.10").release == "0.10"


@pytest.mark.parametrize(
    ("block", "message"),
    [
        ({"type": "diagram"}, "unknown type"),
        ({"type": "prose"}, "missing 'markdown'"),
        ({"type": "code"}, "missing 'code'"),
        ({"type": "code", "code": "x", "code_file": "a.rs"}, "both"),
        ({"type": "callout", "header": "h"}, "missing 'body'"),
        ({"type": "browser", "panels": []}, "non-empty 'panels'"),
        ({"type": "prose", "markdown": "x", "step": 0}, "invalid step"),
        ({"type": "prose", "markdown": "x", "step": "two"}, "invalid step"),
    ],
)
def test_malformed_blocks_are_rejected(block: dict[str, object], message: str) -> None:
    with pytest.raises(DocumentError, match=message):
        parse_document({"release": "v1", "blocks": [block]})


def test_empty_block_list_is_rejected() -> None:
    with pytest.raises(DocumentError, match="non-empty 'blocks'"):
        parse_document({"release": "v1", "blocks": []})


def test_missing_code_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(DocumentError, match="could not read"):
        parse_document(
            {"release": "v1", "blocks": [{"type": "code", "code_file": "nope.rs"}]},
            base_dir=tmp_path,
        )


def test_missing_document_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_document(tmp_path / "absent.yaml")
