"""Pin tutorial steps to commit SHAs in the site configuration file.

For every tutorial whose companion repository lives on GitHub, this module
lists the repository's tags, keeps the ones matching the tutorial's
``tag_template`` for its release, and records ``step_refs`` (step number to
commit SHA) back into the YAML. The primary entry point is
:func:`pin_step_refs`.

Example
-------
.. code-block:: python

    from pathlib import Path
    from tutorial_pages.pin import pin_step_refs
    from tutorial_pages.tags import GitHubTagClient

    results = pin_step_refs(
        config_path=Path("config/tutorials.yaml"), client=GitHubTagClient()
    )
    for key, refs in results.items():
        print(f"{key}: {len(refs)} steps pinned")
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from ._constants import DEFAULT_TAG_TEMPLATE

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .tags import GitHubTagClient, TagInfo

logger = logging.getLogger(__name__)


class TutorialsConfigError(ValueError):
    """Raised when the tutorials configuration cannot be updated."""


def pin_step_refs(
    *, config_path: Path, client: GitHubTagClient
) -> dict[str, dict[int, str]]:
    """Record step to commit SHA mappings for each tutorial repository.

    Returns a mapping of tutorial keys to the pinned steps. Tutorials without
    a ``repo`` are skipped; tutorials whose repository has no matching tags
    keep their existing ``step_refs`` and map to an empty dict.
    """
    yaml = _build_roundtrip_yaml()
    with config_path.open("r", encoding="utf-8") as handle:
        document = yaml.load(handle) or CommentedMap()
    if not isinstance(document, CommentedMap):
        msg = "Top-level configuration must be a mapping"
        raise TutorialsConfigError(msg)

    defaults = document.get("defaults")
    if not isinstance(defaults, cabc.Mapping):
        defaults = {}

    tutorials = document.get("tutorials")
    if not isinstance(tutorials, CommentedMap) or not tutorials:
        msg = "No tutorials defined in configuration"
        raise TutorialsConfigError(msg)

    results: dict[str, dict[int, str]] = {}
    for key, payload in tutorials.items():
        if not isinstance(payload, CommentedMap):
            continue
        repo = payload.get("repo") or defaults.get("repo")
        release = payload.get("release")
        if not repo or not release:
            continue
        if not isinstance(release, str):
            msg = f"Tutorial '{key}' release {release!r} must be a quoted string"
            raise TutorialsConfigError(msg)
        template = str(
            payload.get("tag_template")
            or defaults.get("tag_template")
            or DEFAULT_TAG_TEMPLATE
        )
        refs = match_step_tags(client.list_tags(str(repo)), str(release), template)
        _ensure_distinct(str(key), refs)
        if refs:
            _upsert_step_refs(payload, refs)
        logger.info("Pinned %d steps for tutorial %s", len(refs), key)
        results[str(key)] = refs

    with config_path.open("w", encoding="utf-8") as handle:
        yaml.dump(document, handle)

    return results


def match_step_tags(
    tags: cabc.Iterable[TagInfo], release: str, tag_template: str
) -> dict[int, str]:
    """Return ``{step: sha}`` for tags produced by ``tag_template``.

    >>> from tutorial_pages.tags import TagInfo
    >>> match_step_tags(
    ...     [TagInfo("v1-step-2", "b"), TagInfo("v1-step-1", "a"), TagInfo("v2", "c")],
    ...     "v1",
    ...     "{release}-step-{step}",
    ... )
    {1: 'a', 2: 'b'}
    """
    pattern = _tag_pattern(release, tag_template)
    refs: dict[int, str] = {}
    for tag in tags:
        match = pattern.fullmatch(tag.name)
        if match is None:
            continue
        step = int(match.group(1))
        if step >= 1:
            refs[step] = tag.sha
    return dict(sorted(refs.items()))


def _tag_pattern(release: str, tag_template: str) -> re.Pattern[str]:
    rendered = tag_template.replace("{release}", release)
    parts = rendered.split("{step}", 1)
    if len(parts) != 2:  # noqa: PLR2004
        msg = f"Tag template '{tag_template}' must contain '{{step}}'"
        raise TutorialsConfigError(msg)
    prefix, suffix = parts
    return re.compile(f"{re.escape(prefix)}(\\d+){re.escape(suffix)}")


def _ensure_distinct(key: str, refs: dict[int, str]) -> None:
    """Reject step tags sharing a commit; the loader would refuse the result."""
    seen: dict[str, int] = {}
    for step, sha in refs.items():
        if sha in seen:
            msg = (
                f"Tutorial '{key}' tags for steps {seen[sha]} and {step} point at "
                f"the same commit {sha}; retag one of them before pinning"
            )
            raise TutorialsConfigError(msg)
        seen[sha] = step


def _build_roundtrip_yaml() -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def _upsert_step_refs(payload: CommentedMap, refs: dict[int, str]) -> None:
    value = CommentedMap(refs.items())
    if "step_refs" in payload:
        payload["step_refs"] = value
        return

    existing_keys = list(payload.keys())
    for anchor in ("tag_template", "repo", "release"):
        if anchor in payload:
            payload.insert(existing_keys.index(anchor) + 1, "step_refs", value)
            return
    payload["step_refs"] = value


__all__ = ["TutorialsConfigError", "match_step_tags", "pin_step_refs"]
