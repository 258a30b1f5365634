"""Python-Markdown extension resolving ``step:`` links in tutorial prose.

Authors link to a checkpoint of the companion project with hrefs such as
``step:3/src/main.rs`` (a file), ``step:3`` (the whole commit), or
``step:3/src/main.rs#L10`` (a line anchor). The treeprocessor hands each
reference to a callback supplied by the composer, so prose links obey the
same validation as code listings.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from tutorial_pages._constants import STEP_LINK_SCHEME
from tutorial_pages.references import (
    FileReference,
    InvalidReferenceError,
    ResolvedLink,
)

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

LinkCallback = cabc.Callable[[FileReference], ResolvedLink]


def parse_step_href(href: str) -> tuple[FileReference, str] | None:
    """Split a ``step:`` href into a reference and an optional fragment.

    Returns ``None`` for hrefs using any other scheme.
    """
    if not href.lower().startswith(STEP_LINK_SCHEME):
        return None
    target = href[len(STEP_LINK_SCHEME) :]
    target, _, fragment = target.partition("#")
    step_text, _, path = target.partition("/")
    try:
        step = int(step_text)
    except ValueError as exc:
        msg = f"Invalid step link '{href}'; expected 'step:<n>/<path>'."
        raise InvalidReferenceError(msg) from exc
    return FileReference(step=step, path=path.rstrip("/")), fragment


class StepLinkExtension(Extension):
    """Register :class:`StepLinkTreeprocessor` on a Markdown instance."""

    def __init__(self, link_for: LinkCallback) -> None:
        self.link_for = link_for
        super().__init__()

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the step-link treeprocessor on the Markdown instance."""
        processor = StepLinkTreeprocessor(md, self.link_for)
        md.treeprocessors.register(processor, "tutorial_step_links", 15)


class StepLinkTreeprocessor(Treeprocessor):
    """Rewrite ``step:`` anchors into permalinks."""

    def __init__(self, md: Markdown, link_for: LinkCallback) -> None:
        super().__init__(md)
        self.link_for = link_for

    def run(self, root: Element) -> Element:
        """Rewrite step anchors in the parsed tree; errors propagate."""
        for element in root.iter("a"):
            parsed = parse_step_href(element.get("href") or "")
            if parsed is None:
                continue
            reference, fragment = parsed
            link = self.link_for(reference)
            url = f"{link.url}#{fragment}" if fragment else link.url
            element.set("href", url)
        return root


__all__ = [
    "StepLinkExtension",
    "StepLinkTreeprocessor",
    "parse_step_href",
]
