"""End-to-end tests for tutorial fragment generation.

These tests drive :class:`~tutorial_pages.generator.TutorialPageGenerator`
from a YAML site config and an authored document on disk, then inspect the
written fragment with BeautifulSoup. They cover permalink placement, block
ordering, the metadata JSON, and the guarantee that a failing render writes
nothing.
"""

from __future__ import annotations

import json
import typing as typ
from textwrap import dedent

import pytest
from bs4 import BeautifulSoup

from tutorial_pages._constants import TUTORIAL_META_TEMPLATE
from tutorial_pages.config import TutorialConfig, load_site_config
from tutorial_pages.generator import CompositionError, TutorialPageGenerator

if typ.TYPE_CHECKING:
    from pathlib import Path

DOCUMENT = """
release: v0.10.0
title: Your first game
slug: first-game
blocks:
  - type: prose
    step: 1
    markdown: |
      Start with a fresh project. The full tree lives in [this commit](step:1).
  - type: code
    language: toml
    ref: "1:Cargo.toml"
    code: |
      [dependencies]
      bevy = "0.10"
  - type: callout
    header: Version compatibility
    body: This guide targets **v0.10.0**.
  - type: prose
    step: 3
    markdown: Add movement.
  - type: browser
    panels:
      - label: src/main.rs
        language: rust
        ref: "3:src/main.rs"
        code: |
          fn main() {}
      - label: src/player.rs
        language: rust
        ref: "3:src/player.rs"
        code: |
          pub struct Player;
"""


@pytest.fixture
def tutorial(tmp_path: Path) -> TutorialConfig:
    """Write a config plus document and return the loaded tutorial entry."""
    (tmp_path / "content").mkdir()
    (tmp_path / "content" / "first-game.yaml").write_text(
        dedent(DOCUMENT).strip() + "\n", encoding="utf-8"
    )
    config_path = tmp_path / "tutorials.yaml"
    config_path.write_text(
        dedent(
            """
            defaults:
              output_dir: public
            tutorials:
              first-game:
                release: v0.10.0
                document: content/first-game.yaml
                repo: org/demo
                step_refs:
                  1: "1111111"
                  3: "3333333"
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )
    return load_site_config(config_path).get_tutorial("first-game")


@pytest.fixture
def fragment(tutorial: TutorialConfig) -> BeautifulSoup:
    path = TutorialPageGenerator(tutorial).run()
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def test_fragment_written_with_slug_filename(tutorial: TutorialConfig) -> None:
    path = TutorialPageGenerator(tutorial).run()
    assert path == tutorial.output_dir / "tutorial-first-game.html"
    assert path.read_text(encoding="utf-8").endswith("\n")


def test_fragment_blocks_follow_document_order(fragment: BeautifulSoup) -> None:
    article = fragment.select_one("article.tutorial")
    assert article is not None
    assert article["data-release"] == "v0.10.0"
    kinds = [
        node["data-block-kind"]
        for node in article.find_all(attrs={"data-block-kind": True}, recursive=False)
    ]
    assert kinds == ["prose", "code", "callout", "prose", "browser"]
    assert fragment.select_one(".tutorial__title").get_text(strip=True) == (
        "Your first game"
    )


def test_permalinks_use_pinned_commits(fragment: BeautifulSoup) -> None:
    hrefs = [a["href"] for a in fragment.select("a")]
    assert hrefs == [
        "https://github.com/org/demo/blob/1111111",
        "https://github.com/org/demo/blob/1111111/Cargo.toml",
        "https://github.com/org/demo/blob/3333333/src/main.rs",
        "https://github.com/org/demo/blob/3333333/src/player.rs",
    ]


def test_metadata_records_release_and_highest_step(tutorial: TutorialConfig) -> None:
    TutorialPageGenerator(tutorial).run()
    meta_path = tutorial.output_dir / TUTORIAL_META_TEMPLATE.format(key=tutorial.key)
    metadata = json.loads(meta_path.read_text(encoding="utf-8"))
    assert metadata == {
        "file": "tutorial-first-game.html",
        "release": "v0.10.0",
        "highest_step": 3,
    }


def test_output_dir_override(tutorial: TutorialConfig, tmp_path: Path) -> None:
    target = tmp_path / "override"
    path = TutorialPageGenerator(tutorial, output_dir=target).run()
    assert path.parent == target


def test_stylesheet_is_optional(tutorial: TutorialConfig) -> None:
    html = TutorialPageGenerator(tutorial).run().read_text(encoding="utf-8")
    assert "<style>" not in html
    tutorial.include_stylesheet = True
    html = TutorialPageGenerator(tutorial).run().read_text(encoding="utf-8")
    assert ".codehilite" in html and "<style>" in html


def test_failed_render_writes_nothing(tutorial: TutorialConfig) -> None:
    tutorial.document_path.write_text(
        dedent(
            """
            release: v0.10.0
            blocks:
              - type: prose
                step: 1
                markdown: Start.
              - type: code
                ref: "3:src/main.rs"
                code: fn main() {}
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )
    with pytest.raises(CompositionError):
        TutorialPageGenerator(tutorial).run()
    assert not tutorial.output_dir.exists() or not any(tutorial.output_dir.iterdir())
