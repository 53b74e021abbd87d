"""Entry points for filing a release across a batch of repositories."""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .config import (
    USAGE_EXIT_CODE,
    RunConfig,
    build_arg_parser,
    format_errors,
    load_token,
    resolve_settings,
    validate_args,
)
from .errors import ConfigurationError, ReleaseToolError
from .filer import file_release
from .http_client import GitHubClient
from .names import fetch_random_name, resolve_release_name
from .resolver import resolve_target_branch


@dataclass
class BatchResult:
    """Outcome of one run, in project order."""

    released: Dict[str, str] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.skipped


def process_project(client: GitHubClient, settings: RunConfig, project: str) -> Dict[str, Any]:
    """Resolve the target branch for `project` and file the release on it."""
    target_branch = resolve_target_branch(client, settings, project)
    print(f"  selected branch {target_branch} to create tag {settings.tag}")
    created = file_release(client, settings, project, target_branch)
    return {"project": project, "branch": target_branch, "release": created}


def run(client: GitHubClient, settings: RunConfig) -> BatchResult:
    """Process every project in order.

    Configuration errors abort the batch and carry the partial result on
    `exc.result`. Other failures are recorded and the next project is
    attempted, unless `settings.fail_fast` is set.
    """
    result = BatchResult()
    projects = list(settings.projects)
    for index, project in enumerate(projects, start=1):
        print(
            f"\n{index:2d} : starting release '{settings.release_name}' for {settings.owner}/{project} "
            f"with tag {settings.tag} on {settings.source} "
            f"(fallback {settings.fallback_branch or '-'}, support branch {settings.support_branch_name or '-'})"
        )
        try:
            outcome = process_project(client, settings, project)
        except ConfigurationError as exc:
            result.failed[project] = str(exc)
            result.skipped.extend(projects[index:])
            exc.result = result
            raise
        except ReleaseToolError as exc:
            print(f"[error] {project}: {exc}")
            result.failed[project] = str(exc)
            if settings.fail_fast:
                result.skipped.extend(projects[index:])
                break
            continue
        result.released[project] = outcome["branch"]
    return result


def print_summary(result: BatchResult) -> None:
    print(f"\nReleased {len(result.released)} project(s), {len(result.failed)} failed.")
    for project, branch in result.released.items():
        print(f"  [ok] {project} on {branch}")
    for project, reason in result.failed.items():
        print(f"  [failed] {project}: {reason}")
    for project in result.skipped:
        print(f"  [skipped] {project}")


def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> None:
    """CLI entry point; exits 3 on bad usage, 1 on fatal or per-project errors."""
    try:
        token = load_token(environ)
    except ConfigurationError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        sys.exit(1)

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    errors = validate_args(args)
    if errors:
        print(format_errors(errors), file=sys.stderr)
        parser.print_help(sys.stderr)
        sys.exit(USAGE_EXIT_CODE)

    settings = resolve_settings(args)
    release_name = resolve_release_name(
        settings.release_name,
        settings.tag,
        fetcher=lambda: fetch_random_name(timeout=settings.timeout),
    )
    settings = dataclasses.replace(settings, release_name=release_name)

    client = GitHubClient(token, settings.owner, timeout=settings.timeout)
    try:
        result = run(client, settings)
    except ConfigurationError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        partial = getattr(exc, "result", None)
        if partial is not None:
            print_summary(partial)
        sys.exit(1)
    finally:
        client.close()

    print_summary(result)
    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
