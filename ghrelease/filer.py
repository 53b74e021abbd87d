"""Build and submit the release for a resolved branch."""

from __future__ import annotations

import json
from typing import Any, Dict

from .config import COMPARE_URL, RunConfig
from .http_client import GitHubClient
from .models import ReleaseRequest


def compare_body(owner: str, project: str, base: str, tag: str) -> str:
    """Changelog link comparing `base` against the new tag."""
    return COMPARE_URL.format(owner=owner, project=project, base=base, tag=tag)


def build_release_request(settings: RunConfig, project: str, target_branch: str) -> ReleaseRequest:
    base = settings.previous_tag or target_branch
    return ReleaseRequest(
        tag_name=settings.tag,
        target_commitish=target_branch,
        name=settings.release_name,
        body=compare_body(settings.owner, project, base, settings.tag),
        prerelease=settings.pre_release,
    )


def file_release(client: GitHubClient, settings: RunConfig, project: str, target_branch: str) -> Dict[str, Any]:
    """Create the release on GitHub and return the API's response body."""
    release = build_release_request(settings, project, target_branch)
    print(json.dumps(release.to_payload(), indent=4))
    created = client.create_release(project, release)
    print(f"  [release] created {release.tag_name} on {target_branch} -> {created.get('html_url', 'ok')}")
    return created


__all__ = ["compare_body", "build_release_request", "file_release"]
