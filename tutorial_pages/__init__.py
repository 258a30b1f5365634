"""Build-time generator for step-by-step tutorial pages.

Tutorial pages interleave prose, code listings, callouts, and "files as of
this step" panels. Each listing can carry a permalink into the matching step
snapshot of a companion demo repository; this package resolves those
permalinks and composes the blocks into an HTML fragment.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``resolve``: Pure ``(release, step, path) -> URL`` permalink builder.

Examples
--------
>>> from tutorial_pages import resolve
>>> resolve(
...     "v0.10.0", 1, "", url_template="https://github.com/org/demo/blob/{commit}/{path}"
... )
'https://github.com/org/demo/blob/v0.10.0-step-1'
"""

from __future__ import annotations

from .cli import app, main
from .references import resolve

__all__ = ["app", "main", "resolve"]
