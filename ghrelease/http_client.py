"""Thin GitHub REST client for the branch and release calls the workflow needs."""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from .config import API_BASE_URL, REQUEST_TIMEOUT, USER_AGENT
from .errors import GitHubAPIError, MalformedResponseError, TransportError
from .models import ReferenceInfo, ReleaseRequest


def status_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


def error_message(resp: requests.Response) -> str:
    """Pull GitHub's `message` field out of an error response, else a text snippet."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        body = {"text": str(body)[:300]}
    return str(body.get("message") or body.get("error") or body.get("text") or "")


def log_http_error(resp: requests.Response, url: str) -> None:
    """Print a short, human-readable message when GitHub returns an error."""
    print(f"[error] HTTP {resp.status_code} for {url}\n  -> {error_message(resp)}")


class GitHubClient:
    """Authenticated session scoped to one owner; every call honours the run timeout.

    No retries: a failed transport raises TransportError. Lookups treat any
    non-2xx answer as "not found"; writes raise GitHubAPIError on a bad status.
    """

    def __init__(
        self,
        token: str,
        owner: str,
        timeout: int = REQUEST_TIMEOUT,
        base_url: str = API_BASE_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.owner = owner
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": USER_AGENT,
                "Authorization": f"token {token}",
            }
        )

    def close(self) -> None:
        self.session.close()

    def repo_url(self, project: str, path: str = "") -> str:
        path = path if not path or path.startswith("/") else f"/{path}"
        return f"{self.base_url}/repos/{self.owner}/{project}{path}"

    def request(self, method: str, url: str, payload: Optional[Dict[str, Any]] = None) -> requests.Response:
        print(f"[http] {method} {url}")
        try:
            resp = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        print(f"[http] {method} {url} -> {resp.status_code}")
        return resp

    @staticmethod
    def decode(resp: requests.Response, url: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"Could not decode JSON body from {url}: {exc}") from exc

    def _exists(self, url: str) -> bool:
        resp = self.request("GET", url)
        if status_success(resp.status_code):
            return True
        if resp.status_code != 404:
            log_http_error(resp, url)
        return False

    def branch_exists(self, project: str, branch: str) -> bool:
        """True on 2xx; any other status is logged and counts as missing."""
        return self._exists(self.repo_url(project, f"branches/{quote(branch, safe='/')}"))

    def release_exists(self, project: str, tag: str) -> bool:
        """True when a release is filed under `tag`; this is how a source is recognised as a tag."""
        return self._exists(self.repo_url(project, f"releases/tags/{quote(tag, safe='/')}"))

    def get_tag_ref(self, project: str, tag: str) -> ReferenceInfo:
        url = self.repo_url(project, f"git/refs/tags/{quote(tag, safe='/')}")
        resp = self.request("GET", url)
        if not status_success(resp.status_code):
            log_http_error(resp, url)
            raise GitHubAPIError(resp.status_code, url, error_message(resp))
        return ReferenceInfo.from_response(self.decode(resp, url))

    def create_branch(self, project: str, branch: str, sha: str) -> ReferenceInfo:
        """Create refs/heads/<branch> at `sha`; only 201 Created counts as success."""
        url = self.repo_url(project, "git/refs")
        payload = {"ref": f"refs/heads/{branch}", "sha": sha}
        print(f"[branch] creating {payload['ref']} at {sha} in {self.owner}/{project}")
        resp = self.request("POST", url, payload)
        if resp.status_code != 201:
            log_http_error(resp, url)
            raise GitHubAPIError(resp.status_code, url, error_message(resp))
        return ReferenceInfo.from_response(self.decode(resp, url))

    def create_release(self, project: str, release: ReleaseRequest) -> Dict[str, Any]:
        url = self.repo_url(project, "releases")
        resp = self.request("POST", url, release.to_payload())
        if not status_success(resp.status_code):
            log_http_error(resp, url)
            raise GitHubAPIError(resp.status_code, url, error_message(resp))
        try:
            body = resp.json()
        except ValueError:
            print(f"[warn] release created but {url} returned a body that is not JSON")
            return {}
        return body if isinstance(body, dict) else {}


__all__ = [
    "status_success",
    "error_message",
    "log_http_error",
    "GitHubClient",
]
