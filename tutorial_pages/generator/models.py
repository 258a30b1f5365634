"""Shared dataclasses produced by the tutorial composition pipeline."""

from __future__ import annotations

import dataclasses as dc

from tutorial_pages.references import ResolvedLink


@dc.dataclass(slots=True)
class RenderedBlock:
    """Structural markup for one authored content block.

    Attributes
    ----------
    kind : str
        Block kind copied from the source block (``"prose"``, ``"code"``,
        ``"callout"``, or ``"browser"``).
    html : str
        Rendered markup for the block, including its wrapper.
    links : list[ResolvedLink]
        Permalinks resolved while rendering the block, in document order.
    """

    kind: str
    html: str
    links: list[ResolvedLink] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class RenderedPage:
    """Ordered rendered blocks ready to embed into a page layout.

    Attributes
    ----------
    release : str
        Release identifier the page was rendered against.
    blocks : list[RenderedBlock]
        One entry per authored block, in authored order.
    title : str | None
        Document title, when the author provided one.
    highest_step : int
        Last checkpoint introduced by the document (0 when none).
    """

    release: str
    blocks: list[RenderedBlock]
    title: str | None = None
    highest_step: int = 0

    @property
    def html(self) -> str:
        """Return the concatenated block markup."""
        return "\n".join(block.html for block in self.blocks)


__all__ = ["RenderedBlock", "RenderedPage"]
