r"""Resolve tutorial checkpoints into permalinks on the companion repository.

Every tutorial is written against one release of the subject library and
walks through numbered checkpoints ("steps") of a companion demo project.
Each step corresponds to an immutable tag or commit in that project, so a
``(step, path)`` pair can be turned into a stable URL that shows the file as
it existed at that point in the narrative.

The mapping from step to commit-ish is supplied by site configuration: either
an explicit ``step_refs`` table (usually pinned commit SHAs) or a tag template
such as ``"{release}-step-{step}"``.

Example
-------
>>> from tutorial_pages.references import resolve
>>> resolve(
...     "v0.10.0",
...     1,
...     "Cargo.toml",
...     url_template="https://github.com/org/demo/blob/{commit}/{path}",
... )
'https://github.com/org/demo/blob/v0.10.0-step-1/Cargo.toml'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
from urllib.parse import quote

from ._constants import DEFAULT_LINK_LABEL, DEFAULT_TAG_TEMPLATE


class InvalidReferenceError(ValueError):
    """Raised when a release, step, or path cannot form a valid permalink."""


@dc.dataclass(frozen=True, slots=True)
class FileReference:
    """A file (or the whole project) as it existed at a tutorial step.

    Attributes
    ----------
    step : int
        Checkpoint number, starting at 1.
    path : str
        Slash-separated path relative to the project root. The empty string
        refers to the project root at ``step``.
    """

    step: int
    path: str = ""


@dc.dataclass(frozen=True, slots=True)
class ResolvedLink:
    """Absolute URL and display label computed from a file reference."""

    url: str
    label: str = DEFAULT_LINK_LABEL


def _validate_release(release: str) -> str:
    if not isinstance(release, str) or not release.strip():
        msg = "Release identifier cannot be empty."
        raise InvalidReferenceError(msg)
    return release.strip()


def _validate_step(step: int) -> int:
    # bool is an int subclass; True would otherwise pass as step 1.
    if isinstance(step, bool) or not isinstance(step, int):
        msg = f"Step must be an integer, got {step!r}."
        raise InvalidReferenceError(msg)
    if step < 1:
        msg = f"Step must be at least 1, got {step}."
        raise InvalidReferenceError(msg)
    return step


def _validate_path(path: str) -> str:
    if not isinstance(path, str):
        msg = f"Path must be a string, got {path!r}."
        raise InvalidReferenceError(msg)
    if path.startswith("/"):
        msg = f"Path '{path}' must be relative to the project root."
        raise InvalidReferenceError(msg)
    if ".." in path.split("/"):
        msg = f"Path '{path}' must not contain parent-directory segments."
        raise InvalidReferenceError(msg)
    return path


class StepReferenceResolver:
    """Turn ``(step, path)`` pairs into permalinks for one release.

    The resolver is a pure string builder: it never touches the network and
    never checks that the target exists. Two calls with the same inputs
    always return the same URL.
    """

    def __init__(
        self,
        release: str,
        url_template: str,
        *,
        step_refs: cabc.Mapping[int, str] | None = None,
        tag_template: str = DEFAULT_TAG_TEMPLATE,
        link_label: str = DEFAULT_LINK_LABEL,
        repo: str | None = None,
    ) -> None:
        """Initialize the resolver.

        Parameters
        ----------
        release : str
            Version tag the tutorial targets, e.g. ``"v0.10.0"``.
        url_template : str
            Format string with ``{commit}`` and ``{path}`` placeholders (and
            optionally ``{repo}``).
        step_refs : Mapping[int, str], optional
            Explicit step to commit-ish mapping. When given, it is the only
            source of commit-ish values and ``tag_template`` is ignored.
        tag_template : str, optional
            Format string with ``{release}`` and ``{step}`` placeholders used
            when no explicit mapping is configured.
        link_label : str, optional
            Display label attached to :class:`ResolvedLink` values.
        repo : str, optional
            ``owner/name`` slug substituted into ``{repo}``.

        Raises
        ------
        InvalidReferenceError
            If ``release`` is empty or a template lacks its step placeholder.
        """
        if "{commit}" not in url_template:
            msg = f"URL template '{url_template}' must contain '{{commit}}'."
            raise InvalidReferenceError(msg)
        if not step_refs and "{step}" not in tag_template:
            msg = f"Tag template '{tag_template}' must contain '{{step}}'."
            raise InvalidReferenceError(msg)
        refs = {_validate_step(step): str(ref) for step, ref in (step_refs or {}).items()}
        if len(set(refs.values())) != len(refs):
            msg = "Each step must map to a distinct commit-ish."
            raise InvalidReferenceError(msg)
        self.release = _validate_release(release)
        self.url_template = url_template
        self.step_refs: dict[int, str] = refs
        self.tag_template = tag_template
        self.link_label = link_label
        self.repo = repo or ""

    def commit_for(self, step: int) -> str:
        """Return the commit-ish identifying ``step`` in the companion repo."""
        step = _validate_step(step)
        if self.step_refs:
            try:
                return self.step_refs[step]
            except KeyError as exc:
                known = ", ".join(str(key) for key in sorted(self.step_refs))
                msg = f"No commit configured for step {step}. Known steps: {known}"
                raise InvalidReferenceError(msg) from exc
        return self.tag_template.format(release=self.release, step=step)

    def resolve(self, step: int, path: str = "") -> str:
        """Return the permalink for ``path`` as of ``step``.

        An empty ``path`` yields the commit root with no trailing slash.
        """
        path = _validate_path(path)
        commit = self.commit_for(step)
        template = self.url_template
        if not path:
            # Drop the separator too, wherever {path} sits in the template.
            template = template.replace("/{path}", "{path}")
        url = template.format(
            commit=quote(commit, safe="/"),
            path=quote(path, safe="/"),
            repo=self.repo,
        )
        return url.rstrip("/")

    def link(self, reference: FileReference) -> ResolvedLink:
        """Return a :class:`ResolvedLink` for ``reference``."""
        return ResolvedLink(
            url=self.resolve(reference.step, reference.path), label=self.link_label
        )


def resolve(
    release: str,
    step: int,
    path: str = "",
    *,
    url_template: str,
    step_refs: cabc.Mapping[int, str] | None = None,
    tag_template: str = DEFAULT_TAG_TEMPLATE,
) -> str:
    """Return the permalink for ``path`` at ``step`` of ``release``.

    Parameters
    ----------
    release : str
        Non-empty version tag.
    step : int
        Positive checkpoint number.
    path : str, optional
        Relative project path; empty for the commit root.
    url_template : str
        Format string containing ``{commit}`` and ``{path}``.
    step_refs : Mapping[int, str], optional
        Explicit step to commit-ish mapping.
    tag_template : str, optional
        Fallback template used when ``step_refs`` is not provided.

    Returns
    -------
    str
        Absolute URL; no network access is performed.

    Raises
    ------
    InvalidReferenceError
        If ``release`` is empty, ``step`` is below 1, or ``path`` is absolute
        or contains ``..`` segments.
    """
    resolver = StepReferenceResolver(
        release, url_template, step_refs=step_refs, tag_template=tag_template
    )
    return resolver.resolve(step, path)


def parse_reference(value: object) -> FileReference:
    """Parse ``"2:src/main.rs"``, ``2``, or ``{"step": 2, "path": ...}``."""
    match value:
        case FileReference():
            return value
        case bool():
            msg = f"Invalid file reference {value!r}."
            raise InvalidReferenceError(msg)
        case int():
            return FileReference(step=value)
        case str() as text:
            step_text, _, path = text.partition(":")
            try:
                step = int(step_text.strip())
            except ValueError as exc:
                msg = f"Invalid file reference '{text}'; expected '<step>:<path>'."
                raise InvalidReferenceError(msg) from exc
            return FileReference(step=step, path=path.strip())
        case cabc.Mapping():
            step = value.get("step")
            if isinstance(step, bool) or not isinstance(step, int):
                msg = f"File reference is missing an integer 'step': {value!r}."
                raise InvalidReferenceError(msg)
            return FileReference(step=step, path=str(value.get("path") or ""))
        case _:
            msg = f"Invalid file reference {value!r}."
            raise InvalidReferenceError(msg)


__all__ = [
    "FileReference",
    "InvalidReferenceError",
    "ResolvedLink",
    "StepReferenceResolver",
    "parse_reference",
    "resolve",
]
