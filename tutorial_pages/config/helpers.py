"""Utility helpers shared by the tutorial configuration loader."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from tutorial_pages._constants import GITHUB_BLOB_TEMPLATE

from .models import SiteConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _scalar_text(key: str, field: str, value: object | None) -> str | None:
    """Return ``value`` stripped, rejecting scalars YAML loaded as non-strings.

    Unquoted ``0.10`` or ``0123456`` arrive as numbers whose text differs
    from what the author wrote, so they cannot name a tag or commit.
    """
    if value is None or isinstance(value, str):
        return _optional_str(value)
    msg = (
        f"Tutorial '{key}' {field} must be a string, got {value!r}; "
        "quote it in the YAML."
    )
    raise SiteConfigError(msg)


def _resolve_url_template(
    key: str, repo: str | None, url_template: str | None
) -> str:
    """Return the explicit template or the GitHub blob template for ``repo``."""
    if url_template:
        template = url_template
    elif repo:
        template = GITHUB_BLOB_TEMPLATE
    else:
        msg = f"Tutorial '{key}' is missing 'repo' or 'url_template'."
        raise SiteConfigError(msg)
    if "{commit}" not in template:
        msg = f"Tutorial '{key}' url_template must contain '{{commit}}'."
        raise SiteConfigError(msg)
    if "{repo}" in template and not repo:
        msg = f"Tutorial '{key}' url_template uses '{{repo}}' but no repo is set."
        raise SiteConfigError(msg)
    return template


def _parse_step_refs(key: str, value: object | None) -> dict[int, str]:
    """Validate a step to commit-ish mapping.

    Keys must be positive integers (YAML may deliver them as strings) and
    values must be distinct non-empty strings so that no two steps share a
    permalink.
    """
    if value is None:
        return {}
    if not isinstance(value, cabc.Mapping):
        msg = f"Tutorial '{key}' step_refs must be a mapping."
        raise SiteConfigError(msg)

    refs: dict[int, str] = {}
    for raw_step, raw_ref in value.items():
        try:
            step = int(raw_step)
        except (TypeError, ValueError) as exc:
            msg = f"Tutorial '{key}' has a non-numeric step_refs key {raw_step!r}."
            raise SiteConfigError(msg) from exc
        if step < 1:
            msg = f"Tutorial '{key}' step_refs keys must be >= 1, got {step}."
            raise SiteConfigError(msg)
        ref = _scalar_text(key, f"step {step}", raw_ref)
        if not ref:
            msg = f"Tutorial '{key}' step {step} maps to an empty commit-ish."
            raise SiteConfigError(msg)
        refs[step] = ref

    seen: dict[str, int] = {}
    for step, ref in sorted(refs.items()):
        if ref in seen:
            msg = (
                f"Tutorial '{key}' maps steps {seen[ref]} and {step} to the same "
                f"commit-ish '{ref}'."
            )
            raise SiteConfigError(msg)
        seen[ref] = step
    return refs


def _validate_tag_template(key: str, template: str, step_refs: dict[int, str]) -> str:
    if not step_refs and "{step}" not in template:
        msg = f"Tutorial '{key}' tag_template must contain '{{step}}'."
        raise SiteConfigError(msg)
    return template


def _coerce_bool(value: typ.Any, default: bool) -> bool:  # noqa: FBT001
    if value is None:
        return default
    return bool(value)


__all__ = [
    "_coerce_bool",
    "_optional_str",
    "_parse_step_refs",
    "_resolve_url_template",
    "_scalar_text",
    "_validate_tag_template",
]
