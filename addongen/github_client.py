"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Sends HTTP requests to api.github.com
- Interprets GitHub API responses / error payloads

It covers the release bookkeeping of an add-on: looking up the releases of a
repository, creating a release, and notifying the marketplace repository of
released add-ons through a repository dispatch event.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import urlparse

import requests

from addongen.errors import GitHubError
from addongen.log import get_logger
from addongen.repo import GitHubRepo

logger = get_logger(__name__)

ADD_ON_RELEASE_EVENT = "add-on-release"


@dataclass(frozen=True)
class ReleaseInfo:
    tag: str
    name: str
    html_url: str
    prerelease: bool
    draft: bool


def _release_info(data: dict[str, Any]) -> ReleaseInfo:
    return ReleaseInfo(
        tag=data["tag_name"],
        name=data.get("name") or "",
        html_url=data.get("html_url") or "",
        prerelease=bool(data.get("prerelease")),
        draft=bool(data.get("draft")),
    )


def _sha256(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def addon_release_payload(releases: Iterable[tuple[str | Path, str]]) -> dict[str, list[dict[str, str]]]:
    """
    Build the `add-on-release` client payload from (archive path, download URL) pairs.

    Download URLs must use HTTPS.
    """
    addons = []
    for archive, url in releases:
        scheme = urlparse(url).scheme
        if scheme.lower() != "https":
            raise GitHubError(f"The provided URL does not use HTTPS scheme: {scheme or url}")
        path = Path(archive)
        if not path.is_file():
            raise GitHubError(f"Add-on file does not exist: {path}")
        addons.append({"url": url, "checksum": _sha256(path)})
    return {"addons": addons}


class GitHubClient:
    def __init__(self, token: str, api_base: str = "https://api.github.com") -> None:
        if not token.strip():
            raise GitHubError("GitHub token is required.")
        self._token = token
        self._api_base = api_base.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "addongen",
        }

    def _request(self, method: str, path: str, *, json_body: dict[str, Any] | None = None) -> Any:
        url = f"{self._api_base}{path}"
        logger.debug("%s %s", method, url)
        try:
            r = requests.request(method, url, headers=self._headers(), json=json_body, timeout=30)
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed {method} {path}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            message = payload.get("message", payload) if isinstance(payload, dict) else payload
            raise GitHubError(f"GitHub API error {r.status_code} {method} {path}: {message}")
        if r.status_code == 204:
            return None
        return r.json()

    def _get_or_none(self, path: str) -> Any:
        try:
            return self._request("GET", path)
        except GitHubError as e:
            if "error 404" in str(e).lower():
                return None
            raise

    @staticmethod
    def _repo_path(repo: GitHubRepo) -> str:
        if not repo.configured:
            raise GitHubError(f"GitHub repository is not configured (got {str(repo)!r}).")
        return f"/repos/{repo.owner}/{repo.name}"

    def get_release(self, repo: GitHubRepo, tag: str) -> ReleaseInfo | None:
        data = self._get_or_none(f"{self._repo_path(repo)}/releases/tags/{tag}")
        return _release_info(data) if data is not None else None

    def create_release(
        self,
        repo: GitHubRepo,
        tag: str,
        *,
        title: str,
        body: str = "",
        prerelease: bool = False,
    ) -> ReleaseInfo:
        body_json = {
            "tag_name": tag,
            "name": title,
            "body": body,
            "prerelease": prerelease,
            "draft": False,
        }
        data = self._request("POST", f"{self._repo_path(repo)}/releases", json_body=body_json)
        logger.info("Created release %s in %s", tag, repo)
        return _release_info(data)

    def send_repository_dispatch(
        self,
        repo: GitHubRepo,
        event_type: str,
        client_payload: dict[str, Any] | None = None,
    ) -> None:
        body = {"event_type": event_type, "client_payload": client_payload or {}}
        self._request("POST", f"{self._repo_path(repo)}/dispatches", json_body=body)
        logger.info("Sent %s event to %s", event_type, repo)
