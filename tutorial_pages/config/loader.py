"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from tutorial_pages._constants import DEFAULT_LINK_LABEL, DEFAULT_TAG_TEMPLATE

from .helpers import (
    _coerce_bool,
    _optional_str,
    _parse_step_refs,
    _scalar_text,
    _resolve_url_template,
    _validate_tag_template,
)
from .models import SiteConfig, SiteConfigError, TutorialConfig


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing tutorials and their repos.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/tutorials.yaml``). Relative ``document`` and ``output_dir``
        entries resolve against this file's directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with one :class:`TutorialConfig` per entry.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required sections or fields are missing or invalid.

    Examples
    --------
    >>> from pathlib import Path
    >>> from tutorial_pages.config import load_site_config
    >>> config = load_site_config(Path("config/tutorials.yaml"))  # doctest: +SKIP
    >>> sorted(config.tutorials)[:1]  # doctest: +SKIP
    ['getting-started']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    defaults = raw.get("defaults", {}) or {}
    base_dir = path.parent

    tutorial_defaults = _TutorialDefaults(
        base_dir=base_dir,
        output_dir=_resolve_path(base_dir, defaults.get("output_dir", "public")),
        filename_prefix=defaults.get("filename_prefix", "tutorial-"),
        pygments_style=defaults.get("pygments_style", "monokai"),
        link_label=defaults.get("link_label", DEFAULT_LINK_LABEL),
        tag_template=defaults.get("tag_template", DEFAULT_TAG_TEMPLATE),
        include_stylesheet=_coerce_bool(defaults.get("include_stylesheet"), False),
        repo=_optional_str(defaults.get("repo")),
        url_template=_optional_str(defaults.get("url_template")),
    )

    tutorials_raw = raw.get("tutorials") or {}
    if not tutorials_raw:
        msg = "No tutorials defined in configuration."
        raise SiteConfigError(msg)

    tutorials: dict[str, TutorialConfig] = {}
    for key, payload in tutorials_raw.items():
        match payload:
            case dict():
                tutorials[str(key)] = _build_tutorial_config(
                    key=str(key), payload=payload, defaults=tutorial_defaults
                )
            case _:
                continue

    return SiteConfig(
        tutorials=tutorials,
        default_tutorial=_optional_str(defaults.get("default_tutorial")),
    )


@dc.dataclass(slots=True)
class _TutorialDefaults:
    """Internal container for tutorial default configuration values."""

    base_dir: Path
    output_dir: Path
    filename_prefix: str
    pygments_style: str
    link_label: str
    tag_template: str
    include_stylesheet: bool
    repo: str | None
    url_template: str | None


def _resolve_path(base_dir: Path, value: object) -> Path:
    candidate = Path(str(value))
    if candidate.is_absolute():
        return candidate
    return base_dir / candidate


def _build_tutorial_config(
    *,
    key: str,
    payload: typ.Mapping[str, typ.Any],
    defaults: _TutorialDefaults,
) -> TutorialConfig:
    """Build a TutorialConfig for a single entry using defaults and overrides."""
    release = _scalar_text(key, "release", payload.get("release"))
    if not release:
        msg = f"Tutorial '{key}' is missing 'release'."
        raise SiteConfigError(msg)

    document = _optional_str(payload.get("document"))
    if not document:
        msg = f"Tutorial '{key}' is missing 'document'."
        raise SiteConfigError(msg)

    repo = _optional_str(payload.get("repo")) or defaults.repo
    url_template = _resolve_url_template(
        key, repo, _optional_str(payload.get("url_template")) or defaults.url_template
    )
    step_refs = _parse_step_refs(key, payload.get("step_refs"))
    tag_template = _validate_tag_template(
        key, str(payload.get("tag_template", defaults.tag_template)), step_refs
    )
    output_dir = (
        _resolve_path(defaults.base_dir, payload["output_dir"])
        if payload.get("output_dir")
        else defaults.output_dir
    )

    return TutorialConfig(
        key=key,
        label=payload.get("label") or key.replace("-", " ").title(),
        release=release,
        document_path=_resolve_path(defaults.base_dir, document),
        url_template=url_template,
        repo=repo,
        tag_template=tag_template,
        step_refs=step_refs,
        link_label=payload.get("link_label", defaults.link_label),
        output_dir=output_dir,
        filename_prefix=payload.get("filename_prefix", defaults.filename_prefix),
        pygments_style=payload.get("pygments_style", defaults.pygments_style),
        include_stylesheet=_coerce_bool(
            payload.get("include_stylesheet"), defaults.include_stylesheet
        ),
    )


__all__ = ["load_site_config"]
