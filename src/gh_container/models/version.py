"""Model for package versions as reported by the registry."""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Self

from safir.datetime import isodatetime, parse_isodatetime

type JSONVersion = dict[str, Any]


class FilterMode(Enum):
    """Which versions a query selects, by whether they carry tags."""

    ALL = "all"
    UNTAGGED = "untagged"
    TAGGED = "tagged"


@dataclass(frozen=True)
class FilterSpec:
    """How a version listing should be filtered and laid out."""

    mode: FilterMode = FilterMode.ALL
    show_package_name: bool = False


@dataclass(frozen=True)
class PackageVersion:
    """One version of a package.

    GitHub calls the digest the version "name"; the integer ``id`` is
    what the delete endpoint wants.
    """

    id: int
    digest: str
    updated_at: datetime.datetime
    tags: list[str] = field(default_factory=list)

    @property
    def untagged(self) -> bool:
        return len(self.tags) == 0

    @property
    def digest_hex(self) -> str:
        """Digest without its algorithm prefix."""
        colon_pos = self.digest.find(":")
        if colon_pos > -1:
            return self.digest[1 + colon_pos :]
        return self.digest

    @property
    def last_update(self) -> str:
        return isodatetime(self.updated_at)

    @classmethod
    def from_api(cls, inp: JSONVersion) -> Self:
        """Build from one element of the versions endpoint response."""
        if not isinstance(inp.get("id"), int):
            raise TypeError(f"'id' field of {inp} must be an integer")
        if not isinstance(inp.get("name"), str):
            raise TypeError(f"'name' field of {inp} must be a string")
        metadata = inp.get("metadata") or {}
        container = metadata.get("container") or {}
        tags = list(container.get("tags") or [])
        return cls(
            id=inp["id"],
            digest=inp["name"],
            updated_at=parse_isodatetime(inp["updated_at"]),
            tags=tags,
        )
