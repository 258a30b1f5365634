"""Common literal values used across tutorial_pages.

These constants keep filenames, labels, and templates centralized so the
config loader, generators, and tests can import the same values without
drifting. Intended for internal use within the tutorial_pages package.

Examples
--------
>>> from tutorial_pages import _constants
>>> _constants.TUTORIAL_META_TEMPLATE.format(key="getting-started")
'.tutorial-pages-getting-started-meta.json'
>>> _constants.DEFAULT_TAG_TEMPLATE.format(release="v0.10.0", step=1)
'v0.10.0-step-1'
"""

TUTORIAL_META_TEMPLATE = ".tutorial-pages-{key}-meta.json"
DEFAULT_TAG_TEMPLATE = "{release}-step-{step}"
DEFAULT_LINK_LABEL = "View on GitHub"
GITHUB_BLOB_TEMPLATE = "https://github.com/{repo}/blob/{commit}/{path}"
STEP_LINK_SCHEME = "step:"
