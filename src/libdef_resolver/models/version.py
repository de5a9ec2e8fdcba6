"""Version descriptors parsed from directory names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

import semantic_version


class Wildcard(Enum):
    """The ``x`` placeholder allowed in minor and patch positions."""

    X = "x"

    def __str__(self) -> str:
        return self.value


WILDCARD = Wildcard.X

VersionComponent = Union[int, Wildcard]


def _concrete(component: VersionComponent) -> int:
    return 0 if component is WILDCARD else int(component)


@dataclass(frozen=True)
class VersionDescriptor:
    """``major.minor.patch[-prerelease]`` where minor and patch may be wildcards."""

    major: int
    minor: VersionComponent
    patch: VersionComponent
    prerelease: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.major, Wildcard) or self.major < 0:
            raise ValueError("major must be a non-negative number")

    def to_token(self) -> str:
        """Render as the on-disk token, e.g. ``v1.x.x`` or ``v1.2.3-beta``."""
        token = f"v{self.major}.{self.minor}.{self.patch}"
        if self.prerelease is not None:
            token += f"-{self.prerelease}"
        return token

    def lower_bound(self) -> semantic_version.Version:
        """Smallest concrete version this descriptor admits (wildcards become 0)."""
        text = f"{self.major}.{_concrete(self.minor)}.{_concrete(self.patch)}"
        if self.prerelease is not None:
            text += f"-{self.prerelease}"
        return semantic_version.Version(text)

    def matches(self, version: semantic_version.Version) -> bool:
        """True when every concrete component equals the one in ``version``."""
        if version.major != self.major:
            return False
        if self.minor is not WILDCARD and version.minor != self.minor:
            return False
        if self.patch is not WILDCARD and version.patch != self.patch:
            return False
        if self.prerelease is not None:
            return ".".join(version.prerelease) == self.prerelease
        return True

    def __str__(self) -> str:
        return self.to_token()


@dataclass(frozen=True)
class PackageVersion(VersionDescriptor):
    """Version of the npm package a libdef describes."""


@dataclass(frozen=True)
class ToolVersionBound(VersionDescriptor):
    """One edge of a tool (Flow) compatibility range."""

    def to_dict(self) -> dict[str, object]:
        return {
            "major": self.major,
            "minor": str(self.minor) if self.minor is WILDCARD else self.minor,
            "patch": str(self.patch) if self.patch is WILDCARD else self.patch,
            "prerelease": self.prerelease,
        }
