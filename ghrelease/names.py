"""Release name selection, with a random label from an external generator."""

from __future__ import annotations

from typing import Callable

import requests

from .config import RELEASE_NAMES_URL, REQUEST_TIMEOUT


def fetch_random_name(url: str = RELEASE_NAMES_URL, timeout: int = REQUEST_TIMEOUT) -> str:
    """Return a random name from the generator, or "" when it cannot be reached."""
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        print(f"[warn] unable to get a random release name from {url}: {exc}")
        return ""
    if not 200 <= resp.status_code <= 299:
        print(f"[warn] random release name service answered HTTP {resp.status_code}")
        return ""
    return (resp.text or "").rstrip("\n")


def resolve_release_name(
    release_name: str,
    tag: str,
    fetcher: Callable[[], str] = fetch_random_name,
) -> str:
    """Explicit name, else a random one, else "Release of <tag>". Never raises."""
    if release_name:
        return release_name
    print(f"[release] no release name given, fetching a random one from {RELEASE_NAMES_URL}")
    name = fetcher()
    if name:
        return name
    name = f"Release of {tag}"
    print(f"[release] falling back to release name '{name}'")
    return name


__all__ = ["fetch_random_name", "resolve_release_name"]
