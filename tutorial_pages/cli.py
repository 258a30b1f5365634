"""Cyclopts CLI entrypoint for building tutorial pages.

The ``tutorials`` console script defined here renders authored tutorial
documents into HTML fragments, resolves individual step permalinks for
authors, and pins step tags to commit SHAs by talking to the GitHub API.
Typical usage involves running ``tutorials generate`` locally or in CI, and
``tutorials pin`` whenever the companion repository gains new step tags.

Examples
--------
Generate every configured tutorial:

>>> from tutorial_pages.cli import main
>>> main()  # doctest: +SKIP

Print the permalink for a file at step 3:

>>> from tutorial_pages.cli import app
>>> app(["resolve", "3", "src/main.rs", "--tutorial", "getting-started"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .generator import TutorialPageGenerator
from .pin import pin_step_refs
from .tags import GitHubTagClient

DEFAULT_CONFIG = Path("config/tutorials.yaml")

app = App(name="tutorials", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:  # noqa: FBT001
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command(help="Render tutorial documents into HTML fragments.")
def generate(
    *,
    tutorial: typ.Annotated[
        str | None, Parameter(help="Tutorial identifier", env_var="INPUT_TUTORIAL")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Generate fragments for one tutorial or every configured tutorial.

    Parameters
    ----------
    tutorial : str or None, optional
        Tutorial key to render; when ``None`` (default) all tutorials are
        rendered.
    config : Path, optional
        Path to the ``tutorials.yaml`` configuration file.
    output_dir : Path or None, optional
        Override output directory for every rendered tutorial.
    verbose : bool, optional
        Emit debug logging from the composer and generator.

    Raises
    ------
    CompositionError, InvalidReferenceError, DocumentError
        Propagated unchanged so the build fails on authoring defects.
    """
    _configure_logging(verbose)
    site_config = load_site_config(config)

    if tutorial:
        targets = [site_config.get_tutorial(tutorial)]
    else:
        targets = list(site_config.tutorials.values())

    for tutorial_config in targets:
        generator = TutorialPageGenerator(tutorial_config, output_dir=output_dir)
        path = generator.run()
        print(f"wrote {_format_path(path)}")


@app.command(help="Print the permalink for a file at a tutorial step.")
def resolve(
    step: int,
    path: str = "",
    *,
    tutorial: typ.Annotated[
        str | None, Parameter(help="Tutorial identifier", env_var="INPUT_TUTORIAL")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Resolve ``path`` at ``step`` for the selected tutorial and print it."""
    site_config = load_site_config(config)
    resolver = site_config.get_tutorial(tutorial).build_resolver()
    print(resolver.resolve(step, path))


@app.command(help="Pin tutorial step tags to commit SHAs from GitHub.")
def pin(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    github_token: typ.Annotated[
        str | None,
        Parameter(
            help="Optional GitHub token (falls back to GITHUB_TOKEN)",
            env_var="INPUT_GITHUB_TOKEN",
        ),
    ] = None,
    github_api_url: typ.Annotated[
        str,
        Parameter(
            help="Override the GitHub API base URL", env_var="INPUT_GITHUB_API_URL"
        ),
    ] = GitHubTagClient.default_api_base,
) -> None:
    """Update tutorial configs with ``step_refs`` pinned to commit SHAs.

    Parameters
    ----------
    config : Path, optional
        Path to the site configuration file.
    github_token : str or None, optional
        GitHub token for authenticated lookups. Falls back to ``GITHUB_TOKEN``
        or ``GH_TOKEN`` before making unauthenticated requests.
    github_api_url : str, optional
        Base URL for the GitHub API.
    """
    token = github_token or os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
    client = GitHubTagClient(token=token, api_base=github_api_url)
    results = pin_step_refs(config_path=config, client=client)
    for key, refs in sorted(results.items()):
        if refs:
            print(f"{key}: {len(refs)} steps pinned")
        else:
            print(f"{key}: no step tags found")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``tutorials`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
