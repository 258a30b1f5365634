"""High-level orchestration for tutorial page generation.

This module loads an authored tutorial document, composes it against the
tutorial's release with :class:`~tutorial_pages.generator.composer.ContentComposer`,
and writes the resulting HTML fragment plus a small metadata JSON file. The
fragment carries no page chrome; the surrounding site layout embeds it.

Example
-------
>>> from pathlib import Path
>>> from tutorial_pages.config import load_site_config
>>> from tutorial_pages.generator import TutorialPageGenerator
>>> config = load_site_config(Path("config/tutorials.yaml"))  # doctest: +SKIP
>>> tutorial = config.get_tutorial("getting-started")  # doctest: +SKIP
>>> TutorialPageGenerator(tutorial).run()  # doctest: +SKIP
PosixPath('public/tutorial-getting-started.html')
"""

from __future__ import annotations

import json
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from tutorial_pages._constants import TUTORIAL_META_TEMPLATE
from tutorial_pages.document import load_document
from tutorial_pages.generator.composer import ContentComposer
from tutorial_pages.generator.renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from tutorial_pages.config import TutorialConfig
    from tutorial_pages.document import TutorialDocument
    from tutorial_pages.generator.models import RenderedPage

logger = logging.getLogger(__name__)


class TutorialPageGenerator:
    """Compose one tutorial and write its HTML fragment."""

    def __init__(
        self,
        tutorial: TutorialConfig,
        *,
        templates_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """Initialize the generator with configuration and template context.

        Parameters
        ----------
        tutorial : TutorialConfig
            Tutorial configuration describing the release, document, and
            companion repository.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        output_dir : Path, optional
            Override for the output directory; defaults to the tutorial config.
        """
        self.tutorial = tutorial
        self.output_dir_override = output_dir
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.renderer = HtmlContentRenderer(tutorial.pygments_style)
        self.composer = ContentComposer(
            tutorial.build_resolver(),
            self.renderer,
            templates_dir=self.templates_dir,
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("tutorial_fragment.jinja")

    @property
    def output_dir(self) -> Path:
        """Return the directory the fragment is written to."""
        return self.output_dir_override or self.tutorial.output_dir

    def load(self) -> TutorialDocument:
        """Load the authored document pinned to the configured release."""
        return load_document(
            self.tutorial.document_path, release=self.tutorial.release
        )

    def compose(self, document: TutorialDocument | None = None) -> RenderedPage:
        """Compose ``document`` (or the configured one) without writing files."""
        return self.composer.render(document or self.load())

    def run(self) -> Path:
        """Render the tutorial fragment to disk.

        Returns
        -------
        Path
            Path to the written HTML fragment.

        Raises
        ------
        DocumentError
            If the authored document is malformed.
        CompositionError
            If a block references a step that was not yet introduced.
        InvalidReferenceError
            If a file reference cannot be turned into a permalink.

        Notes
        -----
        Composition finishes before anything is written, so a failing render
        leaves no fragment or metadata behind.
        """
        document = self.load()
        page = self.compose(document)
        html = self.template.render(
            page=page,
            tutorial=self.tutorial,
            pygments_css=self.renderer.stylesheet
            if self.tutorial.include_stylesheet
            else None,
        )
        if not html.endswith("\n"):
            html += "\n"

        out_dir = self.output_dir
        out_dir.mkdir(parents=True, exist_ok=True)
        slug = document.slug or self.tutorial.key
        output_path = out_dir / f"{self.tutorial.filename_prefix}{slug}.html"
        output_path.write_text(html, encoding="utf-8")
        self._write_metadata(output_path.name, page)
        logger.info(
            "Rendered tutorial %s (%d blocks) to %s",
            self.tutorial.key,
            len(page.blocks),
            output_path,
        )
        return output_path

    def _metadata_path(self) -> Path:
        """Return the path to the metadata JSON file for this tutorial."""
        filename = TUTORIAL_META_TEMPLATE.format(key=self.tutorial.key)
        return self.output_dir / filename

    def _write_metadata(self, filename: str, page: RenderedPage) -> None:
        """Persist the fragment filename, release, and highest step."""
        metadata = {
            "file": filename,
            "release": page.release,
            "highest_step": page.highest_step,
        }
        self._metadata_path().write_text(json.dumps(metadata), encoding="utf-8")


__all__ = ["TutorialPageGenerator"]
