r"""Utilities for listing tags on a tutorial's companion repository.

Step tags (``v0.10.0-step-1``, ``v0.10.0-step-2``, ...) are mutable in
principle; pinning each step to the commit SHA the tag points at makes the
generated permalinks immutable. This module wraps the GitHub REST endpoint
needed for that lookup and normalises its payload into dataclasses.

Example
-------
>>> from tutorial_pages.tags import GitHubTagClient
>>> client = GitHubTagClient(token="ghp_example", timeout=5)  # doctest: +SKIP
>>> tags = client.list_tags("org/demo")  # doctest: +SKIP
>>> tags[0].name  # doctest: +SKIP
'v0.10.0-step-1'
"""

from __future__ import annotations

import dataclasses as dc
import json
from http import HTTPStatus

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_API_BASE = "https://api.github.com"
_ACCEPT_HEADER = "application/vnd.github+json"
_PAGE_SIZE = 100


class GitHubTagError(RuntimeError):
    """Raised when the GitHub API returns an unexpected error response."""


@dc.dataclass(slots=True)
class TagInfo:
    """A git tag and the commit it points at."""

    name: str
    sha: str


def _build_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class GitHubTagClient:
    """Thin wrapper around the GitHub ``/repos/:owner/:repo/tags`` endpoint."""

    default_api_base = DEFAULT_API_BASE

    def __init__(
        self,
        *,
        token: str | None = None,
        api_base: str = DEFAULT_API_BASE,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialise the client with optional authentication and transport.

        Parameters
        ----------
        token : str | None, optional
            Personal access token; raises rate limits and grants private repo
            access when provided.
        api_base : str, optional
            Base URL for the GitHub API; override for GitHub Enterprise.
        session : requests.Session, optional
            Preconfigured session. Defaults to a session that retries
            transient 5xx responses.
        timeout : float, optional
            Per-request timeout in seconds.
        """
        self._api_base = api_base.rstrip("/") or DEFAULT_API_BASE
        self._session = session or _build_session()
        self.timeout = timeout
        self._headers = {
            "Accept": _ACCEPT_HEADER,
            "User-Agent": "tutorial-pages/0.1",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def list_tags(self, repo: str) -> list[TagInfo]:
        """Return every tag of ``owner/repo``, following pagination.

        Returns an empty list when the repository does not exist (HTTP 404).
        """
        normalized = repo.strip()
        if not normalized:
            msg = "Repository name cannot be empty"
            raise ValueError(msg)

        tags: list[TagInfo] = []
        page = 1
        while True:
            payload = self._get_page(normalized, page)
            if payload is None:
                return []
            for entry in payload:
                tag = _parse_tag(entry)
                if tag is not None:
                    tags.append(tag)
            if len(payload) < _PAGE_SIZE:
                return tags
            page += 1

    def _get_page(self, repo: str, page: int) -> list[dict[str, object]] | None:
        url = f"{self._api_base}/repos/{repo}/tags"
        try:
            response = self._session.get(
                url,
                headers=self._headers,
                params={"per_page": _PAGE_SIZE, "page": page},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach GitHub tags for '{repo}': {exc}"
            raise GitHubTagError(msg) from exc

        if response.status_code == HTTPStatus.NOT_FOUND:
            return None
        if response.status_code >= HTTPStatus.BAD_REQUEST:
            snippet = response.text[:200]
            msg = (
                f"GitHub tag lookup for '{repo}' failed with "
                f"status {response.status_code}: {snippet}"
            )
            raise GitHubTagError(msg)

        try:
            payload = response.json()
        except json.JSONDecodeError as exc:
            msg = f"GitHub response for '{repo}' was not valid JSON"
            raise GitHubTagError(msg) from exc
        if not isinstance(payload, list):
            msg = f"GitHub tag listing for '{repo}' was not a list"
            raise GitHubTagError(msg)
        return payload


def _parse_tag(entry: object) -> TagInfo | None:
    """Return a TagInfo for a GitHub tag payload, or None if incomplete."""
    if not isinstance(entry, dict):
        return None
    name = entry.get("name")
    commit = entry.get("commit")
    sha = commit.get("sha") if isinstance(commit, dict) else None
    if not isinstance(name, str) or not isinstance(sha, str):
        return None
    return TagInfo(name=name, sha=sha)


__all__ = ["DEFAULT_API_BASE", "GitHubTagClient", "GitHubTagError", "TagInfo"]
