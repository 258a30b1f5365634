"""Load and validate site configuration YAML for tutorial builds.

This subpackage parses the project's ``tutorials.yaml`` file, merges global
defaults with per-tutorial overrides, validates the step to commit-ish
mapping, and produces typed dataclasses (:class:`SiteConfig`,
:class:`TutorialConfig`) that the page generator consumes. The primary entry
point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from tutorial_pages.config import load_site_config
>>> site = load_site_config(Path("config/tutorials.yaml"))  # doctest: +SKIP
>>> tutorial = site.get_tutorial("getting-started")  # doctest: +SKIP
>>> tutorial.build_resolver().resolve(1, "Cargo.toml")  # doctest: +SKIP
'https://github.com/org/demo/blob/v0.10.0-step-1/Cargo.toml'
"""

from .loader import load_site_config
from .models import SiteConfig, SiteConfigError, TutorialConfig

__all__ = [
    "SiteConfig",
    "SiteConfigError",
    "TutorialConfig",
    "load_site_config",
]
