"""Pick the branch a project's release is filed against, creating a support branch if needed."""

from __future__ import annotations

from .config import DEFAULT_BRANCH, RunConfig
from .errors import ConfigurationError
from .http_client import GitHubClient


def branch_name_from_ref(ref: str) -> str:
    """Strip the `refs/<kind>/` prefix: refs/heads/support/v1.x -> support/v1.x."""
    parts = ref.split("/", 2)
    if len(parts) == 3:
        return parts[2]
    return ref


def create_support_branch(client: GitHubClient, settings: RunConfig, project: str) -> str:
    """Branch `support_branch_name` off the commit `settings.source` (a tag) points at."""
    if not settings.support_branch_name:
        raise ConfigurationError(
            f"{settings.source} is a tag; --support-branch-name is required to branch from it"
        )
    print(f"  [branch] {settings.source} is a tag, creating support branch {settings.support_branch_name}")
    tag_ref = client.get_tag_ref(project, settings.source)
    print(f"  [branch] tag {tag_ref.ref} points at {tag_ref.sha}")
    created = client.create_branch(project, settings.support_branch_name, tag_ref.sha)
    return branch_name_from_ref(created.ref)


def resolve_target_branch(client: GitHubClient, settings: RunConfig, project: str) -> str:
    """Return the branch to release from.

    Order: the source as a branch, then the source as a tag (branching
    `support_branch_name` off it), then the fallback branch, then "master".
    """
    if client.branch_exists(project, settings.source):
        print(f"  [branch] {settings.source} exists, selecting it")
        return settings.source

    print(f"  [branch] checking whether source {settings.source} is a tag")
    if client.release_exists(project, settings.source):
        return create_support_branch(client, settings, project)

    print(f"  [branch] {settings.source} is neither a branch nor a tag, trying fallback {settings.fallback_branch}")
    if settings.fallback_branch and client.branch_exists(project, settings.fallback_branch):
        print(f"  [branch] {settings.fallback_branch} exists, selecting it")
        return settings.fallback_branch

    print(f"  [warn] neither source nor fallback branch is usable, using {DEFAULT_BRANCH}")
    return DEFAULT_BRANCH


__all__ = ["branch_name_from_ref", "create_support_branch", "resolve_target_branch"]
