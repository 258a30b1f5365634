"""Typed dataclasses describing tutorial site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from tutorial_pages._constants import DEFAULT_LINK_LABEL, DEFAULT_TAG_TEMPLATE
from tutorial_pages.references import StepReferenceResolver


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class TutorialConfig:
    """A fully resolved tutorial definition sourced from YAML config.

    Attributes
    ----------
    key : str
        Identifier used on the command line and in output filenames.
    label : str
        Human-readable name.
    release : str
        Release of the subject library the tutorial targets.
    document_path : Path
        Authored document YAML, resolved relative to the config file.
    url_template : str
        Permalink template with ``{commit}`` and ``{path}`` placeholders.
    repo : str | None
        Companion repository slug (``owner/name``), when hosted on GitHub.
    tag_template : str
        Step tag naming scheme used when ``step_refs`` is empty.
    step_refs : dict[int, str]
        Explicit step to commit-ish mapping (e.g. pinned SHAs).
    """

    key: str
    label: str
    release: str
    document_path: Path
    url_template: str
    repo: str | None = None
    tag_template: str = DEFAULT_TAG_TEMPLATE
    step_refs: dict[int, str] = dc.field(default_factory=dict)
    link_label: str = DEFAULT_LINK_LABEL
    output_dir: Path = Path("public")
    filename_prefix: str = "tutorial-"
    pygments_style: str = "monokai"
    include_stylesheet: bool = False

    def build_resolver(self) -> StepReferenceResolver:
        """Return a resolver bound to this tutorial's release and repository."""
        return StepReferenceResolver(
            self.release,
            self.url_template,
            step_refs=self.step_refs,
            tag_template=self.tag_template,
            link_label=self.link_label,
            repo=self.repo,
        )


@dc.dataclass(slots=True)
class SiteConfig:
    """Collection of tutorial configs alongside shared defaults."""

    tutorials: dict[str, TutorialConfig]
    default_tutorial: str | None = None

    def get_tutorial(self, key: str | None) -> TutorialConfig:
        """Return the requested tutorial or fall back to the configured default."""
        if key is None:
            return self._get_default_tutorial()
        try:
            return self.tutorials[key]
        except KeyError as exc:
            available = ", ".join(sorted(self.tutorials))
            msg = f"Unknown tutorial '{key}'. Known tutorials: {available}"
            raise KeyError(msg) from exc

    def _get_default_tutorial(self) -> TutorialConfig:
        if self.default_tutorial and self.default_tutorial in self.tutorials:
            return self.tutorials[self.default_tutorial]
        if not self.tutorials:  # pragma: no cover - loader rejects this
            msg = "No tutorials configured."
            raise SiteConfigError(msg)
        return next(iter(self.tutorials.values()))


__all__ = ["SiteConfig", "SiteConfigError", "TutorialConfig"]
