"""Configuration constants, CLI parsing, and run settings for the release workflow."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from . import __version__
from .errors import ConfigurationError

ENVIRONMENT_TOKEN_KEY = "OAUTH_TOKEN"
API_BASE_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
RELEASE_NAMES_URL = os.getenv(
    "RELEASE_NAMES_URL", "https://frightanic.com/goodies_content/docker-names.php"
)
COMPARE_URL = "https://github.com/{owner}/{project}/compare/{base}...{tag}"
USER_AGENT = f"ghrelease/{__version__}"
REQUEST_TIMEOUT = int(os.getenv("RELEASE_REQUEST_TIMEOUT", "5"))
DEFAULT_BRANCH = "master"
USAGE_EXIT_CODE = 3

DEFAULT_OWNER = "idnowgmbh"
DEFAULT_SOURCE = "master"
DEFAULT_FALLBACK_BRANCH = "master"

EXAMPLES = f"""\
examples:
  %(prog)s --owner comdotlinux --source master --tag v0.0.2 --previous-tag v0.0.1 java-design-patterns TasteOfJavaEE7
  %(prog)s --owner comdotlinux --source support/v0.0.x --tag v0.0.3 --fallback-branch master --previous-tag v0.0.1 --release-name Duke --no-pre-release java-design-patterns TasteOfJavaEE7
  %(prog)s --owner comdotlinux --source v0.0.1 --tag v0.0.2-RC.1 --support-branch-name support/v0.0.x --previous-tag v0.0.1 java-design-patterns TasteOfJavaEE7

When --source is a TAG, --support-branch-name is mandatory.
An environment variable named {ENVIRONMENT_TOKEN_KEY} is mandatory for all actions!
See https://docs.github.com/en/rest/authentication to get one.
"""


@dataclass(frozen=True)
class RunConfig:
    """Validated, immutable settings for one batch run."""

    owner: str
    source: str
    fallback_branch: str
    support_branch_name: str
    tag: str
    previous_tag: str
    release_name: str
    pre_release: bool
    timeout: int
    projects: Tuple[str, ...]
    fail_fast: bool = False


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the release entry point."""

    parser = argparse.ArgumentParser(
        prog="ghrelease",
        description=(
            "An opinionated client of the GitHub API that creates release tags "
            "(and support branches when needed) for multiple projects."
        ),
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--owner", "--user", dest="owner", default=DEFAULT_OWNER,
                        help="The user / owner of the repositories")
    parser.add_argument("--source", default=DEFAULT_SOURCE,
                        help="The source branch/tag to create the new tag from")
    parser.add_argument("--fallback-branch", default=DEFAULT_FALLBACK_BRANCH,
                        help="Branch to create the tag on if the source does not exist in the repository")
    parser.add_argument("--timeout", type=int, default=REQUEST_TIMEOUT,
                        help="Timeout in seconds for GitHub API calls")
    parser.add_argument("--support-branch-name", default="",
                        help="Name of the support branch to create if the source is a tag")
    parser.add_argument("--tag", default="", help="The tag to create")
    parser.add_argument("--release-name", default="", help="The name of the release")
    parser.add_argument("--previous-tag", default="",
                        help="The previous tag to compare against in the release body")
    parser.add_argument("--pre-release", action=argparse.BooleanOptionalAction, default=True,
                        help="Mark the release as a pre-release")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Stop the whole batch on the first failing project")
    parser.add_argument("projects", nargs="*", help="Repositories to release")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def validate_args(args: argparse.Namespace) -> List[str]:
    """Collect every problem with the parsed arguments; empty means valid."""
    errors: List[str] = []
    if not args.owner:
        errors.append("User / Organization parameter is mandatory")
    if not args.source:
        errors.append("source parameter is mandatory and must either be a branch OR an existing TAG on Github")
    if not args.tag:
        errors.append("tag parameter is mandatory, otherwise what are we releasing?")
    projects = [project.strip() for project in (args.projects or [])]
    if not projects:
        errors.append("At least provide one project, otherwise where do we create the tag?")
    elif not all(projects):
        errors.append("project names must not be blank")
    if args.timeout is not None and args.timeout <= 0:
        errors.append("timeout must be a positive number of seconds")
    return errors


def format_errors(errors: List[str]) -> str:
    lines = [""]
    lines.extend(f"{index:2d} : {error}" for index, error in enumerate(errors, start=1))
    lines.append("")
    return "\n".join(lines)


def resolve_settings(args: argparse.Namespace) -> RunConfig:
    """Return immutable settings; callers must run validate_args first."""

    return RunConfig(
        owner=args.owner,
        source=args.source,
        fallback_branch=args.fallback_branch or "",
        support_branch_name=args.support_branch_name or "",
        tag=args.tag,
        previous_tag=args.previous_tag or "",
        release_name=args.release_name or "",
        pre_release=bool(args.pre_release),
        timeout=int(args.timeout),
        projects=tuple(project.strip() for project in args.projects),
        fail_fast=bool(args.fail_fast),
    )


def load_token(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the GitHub token from the environment or raise ConfigurationError."""
    environ = os.environ if environ is None else environ
    token = environ.get(ENVIRONMENT_TOKEN_KEY, "")
    if not token:
        raise ConfigurationError(
            f"Please set an environment variable named {ENVIRONMENT_TOKEN_KEY} created on GitHub."
        )
    return token


__all__ = [
    "ENVIRONMENT_TOKEN_KEY",
    "API_BASE_URL",
    "RELEASE_NAMES_URL",
    "COMPARE_URL",
    "USER_AGENT",
    "REQUEST_TIMEOUT",
    "DEFAULT_BRANCH",
    "USAGE_EXIT_CODE",
    "RunConfig",
    "build_arg_parser",
    "parse_args",
    "validate_args",
    "format_errors",
    "resolve_settings",
    "load_token",
]
