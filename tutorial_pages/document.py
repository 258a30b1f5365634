r"""Load authored tutorial documents into ordered content blocks.

A tutorial document is a YAML file listing the page's content in reading
order. Each entry is one block (prose, code listing, callout, or browser
panel) and may open a new checkpoint with ``step``. Blocks that reference
files carry a ``ref`` that the composer later resolves into a permalink.

Example
-------
>>> from tutorial_pages.document import parse_document
>>> doc = parse_document(
...     {
...         "release": "v0.10.0",
...         "blocks": [
...             {"type": "prose", "step": 1, "markdown": "Create the project."},
...             {"type": "code", "code": "[package]", "ref": "1:Cargo.toml"},
...         ],
...     }
... )
>>> [block.kind for block in doc.blocks]
['prose', 'code']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .references import FileReference, parse_reference


class DocumentError(ValueError):
    """Raised when an authored document is malformed."""


@dc.dataclass(slots=True)
class ProseBlock:
    """Markdown narrative handed verbatim to the markdown formatter."""

    markdown: str
    introduces_step: int | None = None
    kind: typ.ClassVar[str] = "prose"


@dc.dataclass(slots=True)
class CodeListingBlock:
    """Literal code, optionally preceded by a permalink to its source file.

    Attributes
    ----------
    code : str
        Listing text, embedded without modification.
    language : str | None
        Lexer name for the highlighter; ``None`` renders plain text.
    reference : FileReference | None
        File the listing was taken from, if any.
    caption : str | None
        Short label shown above the listing (usually the file path).
    introduces_step : int | None
        Checkpoint opened by this block.
    """

    code: str
    language: str | None = None
    reference: FileReference | None = None
    caption: str | None = None
    introduces_step: int | None = None
    kind: typ.ClassVar[str] = "code"


@dc.dataclass(slots=True)
class CalloutBlock:
    """Header/body aside such as a version-compatibility note."""

    header: str
    body: str
    variant: str = "note"
    introduces_step: int | None = None
    kind: typ.ClassVar[str] = "callout"


@dc.dataclass(slots=True)
class BrowserPanel:
    """One labelled file view inside a :class:`BrowserPanelBlock`."""

    label: str
    code: str
    language: str | None = None
    reference: FileReference | None = None


@dc.dataclass(slots=True)
class BrowserPanelBlock:
    """Side-by-side "files as of this step" panels sharing one container."""

    panels: list[BrowserPanel]
    introduces_step: int | None = None
    kind: typ.ClassVar[str] = "browser"


ContentBlock = ProseBlock | CodeListingBlock | CalloutBlock | BrowserPanelBlock


@dc.dataclass(slots=True)
class TutorialDocument:
    """Authored tutorial: a release identifier plus blocks in reading order."""

    release: str
    blocks: list[ContentBlock]
    title: str | None = None
    slug: str | None = None


def load_document(path: Path, *, release: str | None = None) -> TutorialDocument:
    """Load a tutorial document from a YAML file.

    Parameters
    ----------
    path : Path
        Filesystem path to the document YAML.
    release : str, optional
        Release identifier supplied by site configuration. Used when the
        document omits ``release``; must match it otherwise.

    Returns
    -------
    TutorialDocument
        Parsed document with blocks in authored order.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    DocumentError
        If the YAML structure or any block is malformed.
    """
    if not path.exists():
        msg = f"Tutorial document '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    return parse_document(loaded, base_dir=path.parent, release=release)


def parse_document(
    payload: object,
    *,
    base_dir: Path | None = None,
    release: str | None = None,
) -> TutorialDocument:
    """Build a :class:`TutorialDocument` from an already-parsed mapping."""
    if not isinstance(payload, cabc.Mapping):
        msg = "Top-level document structure must be a mapping."
        raise DocumentError(msg)

    declared = _release_text(payload.get("release"))
    if declared and release and declared != release:
        msg = f"Document targets release '{declared}' but the site configures '{release}'."
        raise DocumentError(msg)
    effective_release = declared or release
    if not effective_release:
        msg = "Document does not declare a release."
        raise DocumentError(msg)

    raw_blocks = payload.get("blocks")
    if not isinstance(raw_blocks, list) or not raw_blocks:
        msg = "Document must define a non-empty 'blocks' list."
        raise DocumentError(msg)

    root = base_dir or Path.cwd()
    blocks = [
        _parse_block(index, entry, root) for index, entry in enumerate(raw_blocks)
    ]
    return TutorialDocument(
        release=effective_release,
        blocks=blocks,
        title=_optional_text(payload.get("title")),
        slug=_optional_text(payload.get("slug")),
    )


def _parse_block(index: int, entry: object, base_dir: Path) -> ContentBlock:
    """Return the content block described by ``entry``."""
    if not isinstance(entry, cabc.Mapping):
        msg = f"Block {index} must be a mapping."
        raise DocumentError(msg)

    step = _parse_step(index, entry.get("step"))
    match entry.get("type"):
        case "prose":
            return ProseBlock(
                markdown=_required_text(index, entry, "markdown"),
                introduces_step=step,
            )
        case "code":
            return CodeListingBlock(
                code=_code_text(index, entry, base_dir),
                language=_optional_text(entry.get("language")),
                reference=_optional_reference(entry.get("ref")),
                caption=_optional_text(entry.get("caption")),
                introduces_step=step,
            )
        case "callout":
            return CalloutBlock(
                header=_required_text(index, entry, "header"),
                body=_required_text(index, entry, "body"),
                variant=_optional_text(entry.get("variant")) or "note",
                introduces_step=step,
            )
        case "browser":
            return BrowserPanelBlock(
                panels=_parse_panels(index, entry.get("panels"), base_dir),
                introduces_step=step,
            )
        case other:
            msg = f"Block {index} has unknown type {other!r}."
            raise DocumentError(msg)


def _parse_panels(index: int, value: object, base_dir: Path) -> list[BrowserPanel]:
    if not isinstance(value, list) or not value:
        msg = f"Browser block {index} must define a non-empty 'panels' list."
        raise DocumentError(msg)
    panels: list[BrowserPanel] = []
    for panel in value:
        if not isinstance(panel, cabc.Mapping):
            msg = f"Browser block {index} contains a panel that is not a mapping."
            raise DocumentError(msg)
        panels.append(
            BrowserPanel(
                label=_required_text(index, panel, "label"),
                code=_code_text(index, panel, base_dir),
                language=_optional_text(panel.get("language")),
                reference=_optional_reference(panel.get("ref")),
            )
        )
    return panels


def _parse_step(index: int, value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"Block {index} introduces an invalid step {value!r}."
        raise DocumentError(msg)
    return value


def _code_text(index: int, entry: cabc.Mapping[str, typ.Any], base_dir: Path) -> str:
    """Return inline ``code`` or the contents of ``code_file``."""
    code = entry.get("code")
    code_file = entry.get("code_file")
    if code is not None and code_file is not None:
        msg = f"Block {index} sets both 'code' and 'code_file'."
        raise DocumentError(msg)
    if code_file is not None:
        source = base_dir / str(code_file)
        try:
            return source.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Block {index} could not read code file '{source}': {exc}"
            raise DocumentError(msg) from exc
    if not isinstance(code, str):
        msg = f"Block {index} is missing 'code'."
        raise DocumentError(msg)
    return code


def _required_text(index: int, entry: cabc.Mapping[str, typ.Any], key: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        msg = f"Block {index} is missing '{key}'."
        raise DocumentError(msg)
    return value


def _optional_text(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _release_text(value: object | None) -> str | None:
    """Return the declared release, refusing scalars YAML has retyped.

    An unquoted ``0.10`` loads as the float ``0.1``; stringifying it would
    silently target the wrong tags.
    """
    if value is None or isinstance(value, str):
        return _optional_text(value)
    msg = f"Document release {value!r} must be a string; quote it in the YAML."
    raise DocumentError(msg)


def _optional_reference(value: object | None) -> FileReference | None:
    if value is None:
        return None
    return parse_reference(value)


__all__ = [
    "BrowserPanel",
    "BrowserPanelBlock",
    "CalloutBlock",
    "CodeListingBlock",
    "ContentBlock",
    "DocumentError",
    "ProseBlock",
    "TutorialDocument",
    "load_document",
    "parse_document",
]
