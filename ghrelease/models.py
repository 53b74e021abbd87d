"""Payload and response records exchanged with the GitHub API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import MalformedResponseError


@dataclass(frozen=True)
class ReleaseRequest:
    """Body of a create-release call."""

    tag_name: str
    target_commitish: str
    name: str
    body: str
    prerelease: bool

    def to_payload(self) -> Dict[str, Any]:
        return {
            "tag_name": self.tag_name,
            "target_commitish": self.target_commitish,
            "name": self.name,
            "body": self.body,
            "prerelease": self.prerelease,
        }


@dataclass(frozen=True)
class ReferenceInfo:
    """A git ref and the object it points to, e.g. refs/tags/v1.0 -> commit sha."""

    ref: str
    sha: str
    object_type: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def from_response(cls, data: Any) -> "ReferenceInfo":
        """Parse a git/refs response; raise MalformedResponseError when incomplete."""
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Expected a JSON object for a git ref, got {type(data).__name__}")
        obj = data.get("object") or {}
        ref = data.get("ref")
        sha = obj.get("sha") if isinstance(obj, dict) else None
        if not ref or not sha:
            raise MalformedResponseError(f"Git ref response is missing 'ref' or 'object.sha': {data}")
        return cls(ref=ref, sha=sha, object_type=obj.get("type"), url=data.get("url"))


__all__ = ["ReleaseRequest", "ReferenceInfo"]
