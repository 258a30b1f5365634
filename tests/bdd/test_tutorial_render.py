"""Behaviour tests for rendering tutorial pages with step permalinks.

These pytest-bdd scenarios drive ``TutorialPageGenerator`` from a YAML site
config and an authored document written to a temporary directory. The
feature file ``tutorial_render.feature`` covers the happy path (every listing
links to its step tag, blocks keep their order) and the fail-fast path (a
reference to a step that has not been introduced aborts the build).

Usage
-----
Run ``pytest tests/bdd/test_tutorial_render.py -v``. No network access is
required; the resolver only builds strings.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, scenarios, then, when

from tutorial_pages.config import load_site_config
from tutorial_pages.generator import CompositionError, TutorialPageGenerator

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "tutorial_render.feature"
)
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _write_document(scenario_state: ScenarioState, text: str) -> None:
    path = typ.cast("Path", scenario_state["document_path"])
    path.write_text(dedent(text).strip() + "\n", encoding="utf-8")


@given("a tutorial config for release v0.10.0 of org/demo")
def given_config(tmp_path: Path, scenario_state: ScenarioState) -> None:
    """Write a tutorials.yaml pointing at a document in the temp directory."""
    output_dir = tmp_path / "public"
    config_path = tmp_path / "tutorials.yaml"
    config_path.write_text(
        dedent(
            f"""
            defaults:
              output_dir: {output_dir}
            tutorials:
              breakout:
                release: v0.10.0
                document: breakout.yaml
                repo: org/demo
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )
    scenario_state["config_path"] = config_path
    scenario_state["document_path"] = tmp_path / "breakout.yaml"
    scenario_state["output_dir"] = output_dir


@given("a tutorial document that introduces steps 1 and 2")
def given_valid_document(scenario_state: ScenarioState) -> None:
    _write_document(
        scenario_state,
        """
        blocks:
          - type: prose
            step: 1
            markdown: Create the project.
          - type: code
            language: toml
            ref: "1:Cargo.toml"
            code: |
              [package]
              name = "breakout"
          - type: callout
            header: Heads up
            body: Bevy changes quickly between releases.
          - type: browser
            step: 2
            panels:
              - label: src/main.rs
                language: rust
                ref: "2:src/main.rs"
                code: |
                  fn main() {}
        """,
    )


@given("a tutorial document that references step 5 after introducing 3 steps")
def given_invalid_document(scenario_state: ScenarioState) -> None:
    _write_document(
        scenario_state,
        """
        blocks:
          - type: prose
            step: 1
            markdown: One.
          - type: prose
            step: 2
            markdown: Two.
          - type: prose
            step: 3
            markdown: Three.
          - type: code
            ref: "5:src/main.rs"
            code: fn main() {}
        """,
    )


def _generator(scenario_state: ScenarioState) -> TutorialPageGenerator:
    config = load_site_config(typ.cast("Path", scenario_state["config_path"]))
    return TutorialPageGenerator(config.get_tutorial("breakout"))


@when("I render the tutorial")
def when_render(scenario_state: ScenarioState) -> None:
    scenario_state["written"] = _generator(scenario_state).run()


@when("I try to render the tutorial")
def when_try_render(scenario_state: ScenarioState) -> None:
    try:
        _generator(scenario_state).run()
    except CompositionError as exc:
        scenario_state["error"] = exc


@then("the fragment contains 4 blocks in authored order")
def then_blocks_in_order(scenario_state: ScenarioState) -> None:
    written = typ.cast("Path", scenario_state["written"])
    soup = BeautifulSoup(written.read_text(encoding="utf-8"), "html.parser")
    kinds = [node["data-block-kind"] for node in soup.select("[data-block-kind]")]
    assert kinds == ["prose", "code", "callout", "browser"], (
        f"expected blocks in authored order, got {kinds!r}"
    )


@then("the Cargo.toml listing links to the v0.10.0-step-1 tag")
def then_listing_linked(scenario_state: ScenarioState) -> None:
    written = typ.cast("Path", scenario_state["written"])
    soup = BeautifulSoup(written.read_text(encoding="utf-8"), "html.parser")
    link = soup.select_one("figure.tutorial-listing a.tutorial-permalink")
    assert link is not None, "expected a permalink on the Cargo.toml listing"
    assert link["href"] == (
        "https://github.com/org/demo/blob/v0.10.0-step-1/Cargo.toml"
    )


@then("the render fails with a composition error")
def then_render_fails(scenario_state: ScenarioState) -> None:
    error = scenario_state.get("error")
    assert isinstance(error, CompositionError), "expected a CompositionError"
    assert "step 5" in str(error)


@then("no fragment is written")
def then_nothing_written(scenario_state: ScenarioState) -> None:
    output_dir = typ.cast("Path", scenario_state["output_dir"])
    assert not output_dir.exists(), "a failed render must not write any output"
