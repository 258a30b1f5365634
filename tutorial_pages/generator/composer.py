"""Compose authored tutorial blocks into rendered markup.

:class:`ContentComposer` walks a :class:`~tutorial_pages.document.TutorialDocument`
once, in authored order, producing exactly one
:class:`~tutorial_pages.generator.models.RenderedBlock` per input block. Prose
goes to the markdown formatter untouched, code goes to the highlighter
untouched, and every file reference is resolved into a permalink through the
:class:`~tutorial_pages.references.StepReferenceResolver`.

Any authoring defect (a reference to a step that has not been introduced yet,
or a malformed reference) aborts the whole render; no partial page is
returned.

Example
-------
>>> from tutorial_pages.document import parse_document
>>> from tutorial_pages.generator.composer import ContentComposer
>>> from tutorial_pages.references import StepReferenceResolver
>>> resolver = StepReferenceResolver(
...     "v0.10.0", "https://github.com/org/demo/blob/{commit}/{path}"
... )
>>> doc = parse_document(
...     {"release": "v0.10.0", "blocks": [{"type": "prose", "markdown": "Hi"}]}
... )
>>> page = ContentComposer(resolver).render(doc)  # doctest: +SKIP
>>> [block.kind for block in page.blocks]  # doctest: +SKIP
['prose']
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from tutorial_pages.document import (
    BrowserPanelBlock,
    CalloutBlock,
    CodeListingBlock,
    ProseBlock,
)
from tutorial_pages.generator.models import RenderedBlock, RenderedPage
from tutorial_pages.generator.renderer import HtmlContentRenderer
from tutorial_pages.generator.step_links import StepLinkExtension

if typ.TYPE_CHECKING:
    from tutorial_pages.document import ContentBlock, TutorialDocument
    from tutorial_pages.references import (
        FileReference,
        ResolvedLink,
        StepReferenceResolver,
    )

logger = logging.getLogger(__name__)


class CompositionError(ValueError):
    """Raised when a document's blocks violate step ordering rules."""


class _StepTracker:
    """Track the highest checkpoint introduced so far during one render."""

    def __init__(self) -> None:
        self.highest = 0

    def introduce(self, index: int, step: int | None) -> None:
        if step is None:
            return
        if step <= self.highest:
            msg = (
                f"Block {index} introduces step {step} after step "
                f"{self.highest}; steps must increase in document order."
            )
            raise CompositionError(msg)
        self.highest = step

    def require(self, index: int, reference: FileReference) -> None:
        if reference.step > self.highest:
            msg = (
                f"Block {index} references step {reference.step} but only "
                f"step {self.highest} has been introduced."
            )
            raise CompositionError(msg)


class ContentComposer:
    """Render tutorial documents block by block."""

    def __init__(
        self,
        resolver: StepReferenceResolver,
        renderer: HtmlContentRenderer | None = None,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the composer.

        Parameters
        ----------
        resolver : StepReferenceResolver
            Permalink resolver bound to the release being rendered.
        renderer : HtmlContentRenderer, optional
            Markdown formatter and highlighter; a monokai renderer is created
            when omitted.
        templates_dir : Path, optional
            Directory containing ``blocks/<kind>.jinja`` wrappers; defaults to
            the package templates.
        """
        self.resolver = resolver
        self.renderer = renderer or HtmlContentRenderer()
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, document: TutorialDocument) -> RenderedPage:
        """Render every block of ``document`` in authored order.

        Returns
        -------
        RenderedPage
            One rendered block per authored block, order and kind preserved.

        Raises
        ------
        CompositionError
            If the document's release differs from the resolver's, a step is
            introduced out of order, or a block references a step that has
            not been introduced yet.
        InvalidReferenceError
            If a file reference cannot be resolved.
        """
        if document.release != self.resolver.release:
            msg = (
                f"Document release '{document.release}' does not match resolver "
                f"release '{self.resolver.release}'."
            )
            raise CompositionError(msg)

        tracker = _StepTracker()
        rendered: list[RenderedBlock] = []
        for index, block in enumerate(document.blocks):
            tracker.introduce(index, block.introduces_step)
            rendered.append(self._render_block(index, block, tracker))

        logger.debug(
            "Composed %d blocks for release %s (highest step %d)",
            len(rendered),
            document.release,
            tracker.highest,
        )
        return RenderedPage(
            release=document.release,
            blocks=rendered,
            title=document.title,
            highest_step=tracker.highest,
        )

    def _render_block(
        self, index: int, block: ContentBlock, tracker: _StepTracker
    ) -> RenderedBlock:
        links: list[ResolvedLink] = []

        def link_for(reference: FileReference) -> ResolvedLink:
            tracker.require(index, reference)
            link = self.resolver.link(reference)
            links.append(link)
            return link

        match block:
            case ProseBlock():
                context = {
                    "body_html": self.renderer.markdown(
                        block.markdown, extensions=[StepLinkExtension(link_for)]
                    ),
                }
            case CodeListingBlock():
                context = {
                    "link": link_for(block.reference) if block.reference else None,
                    "caption": block.caption or _reference_caption(block.reference),
                    "language": block.language or "text",
                    "code_html": self.renderer.code_block(block.code, block.language),
                }
            case CalloutBlock():
                context = {
                    "header": block.header,
                    "variant": block.variant,
                    "body_html": self.renderer.markdown(
                        block.body,
                        extensions=[StepLinkExtension(_callout_link(index))],
                    ),
                }
            case BrowserPanelBlock():
                context = {
                    "panels": [
                        {
                            "label": panel.label,
                            "link": link_for(panel.reference)
                            if panel.reference
                            else None,
                            "language": panel.language or "text",
                            "code_html": self.renderer.code_block(
                                panel.code, panel.language
                            ),
                        }
                        for panel in block.panels
                    ],
                }
            case _:  # pragma: no cover - exhaustive over ContentBlock
                msg = f"Block {index} has unsupported type {type(block).__name__}."
                raise CompositionError(msg)

        template = self.env.get_template(f"blocks/{block.kind}.jinja")
        html = template.render(index=index, step=block.introduces_step, **context)
        return RenderedBlock(kind=block.kind, html=html.strip(), links=links)


def _reference_caption(reference: FileReference | None) -> str | None:
    if reference is None or not reference.path:
        return None
    return reference.path


def _callout_link(index: int) -> cabc.Callable[[FileReference], ResolvedLink]:
    """Return a link callback refusing ``step:`` hrefs, which only prose resolves."""

    def reject(reference: FileReference) -> ResolvedLink:
        msg = (
            f"Block {index} is a callout linking to step {reference.step}; "
            "step links are only resolved in prose blocks."
        )
        raise CompositionError(msg)

    return reject


__all__ = ["CompositionError", "ContentComposer"]
