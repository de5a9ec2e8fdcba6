"""Tool version ranges attached to libdefs."""

from __future__ import annotations

from dataclasses import dataclass

from .version import WILDCARD, ToolVersionBound

_VALID_KINDS = {"specific", "ranged", "all"}


def compare_bounds(a: ToolVersionBound, b: ToolVersionBound) -> int:
    """Compare two bounds component-wise for interval checks.

    A wildcard compares equal to any value in the same position, so ``v0.37.x``
    is neither before nor after ``v0.37.5``. Prerelease labels are ignored.
    """
    for left, right in ((a.major, b.major), (a.minor, b.minor), (a.patch, b.patch)):
        if left is WILDCARD or right is WILDCARD:
            continue
        if left < right:
            return -1
        if left > right:
            return 1
    return 0


def _at_or_before(lower: ToolVersionBound, upper: ToolVersionBound | None) -> bool:
    if upper is None:
        return True
    return compare_bounds(lower, upper) <= 0


@dataclass(frozen=True)
class ToolVersionRange:
    """Inclusive range of tool versions a libdef supports.

    ``specific`` pins one concrete version (lower == upper), ``ranged`` has a
    lower bound and an optional upper bound (None means unbounded) and ``all``
    is the implicit range of a libdef that is not split by tool version.
    """

    kind: str
    lower: ToolVersionBound | None = None
    upper: ToolVersionBound | None = None

    def __post_init__(self) -> None:
        if self.kind not in _VALID_KINDS:
            raise ValueError(f"Invalid tool version range kind: {self.kind}")
        if self.kind == "all":
            if self.lower is not None or self.upper is not None:
                raise ValueError("An 'all' range has no bounds")
            return
        if self.lower is None:
            raise ValueError(f"A '{self.kind}' range requires a lower bound")
        if self.kind == "specific" and self.upper != self.lower:
            raise ValueError("A 'specific' range must have equal bounds")
        if not _at_or_before(self.lower, self.upper):
            raise ValueError("Lower bound must not exceed the upper bound")

    @classmethod
    def specific(cls, version: ToolVersionBound) -> ToolVersionRange:
        return cls(kind="specific", lower=version, upper=version)

    @classmethod
    def ranged(
        cls, lower: ToolVersionBound, upper: ToolVersionBound | None = None
    ) -> ToolVersionRange:
        return cls(kind="ranged", lower=lower, upper=upper)

    @classmethod
    def all(cls) -> ToolVersionRange:
        return cls(kind="all")

    def overlaps(self, other: ToolVersionRange) -> bool:
        """True when the two ranges share at least one version."""
        if self.kind == "all" or other.kind == "all":
            return True
        assert self.lower is not None and other.lower is not None
        return _at_or_before(self.lower, other.upper) and _at_or_before(other.lower, self.upper)

    def contains(self, version: ToolVersionBound) -> bool:
        return self.overlaps(ToolVersionRange.specific(version))

    def to_semver_string(self) -> str:
        if self.kind == "all":
            return "*"
        assert self.lower is not None
        if self.kind == "specific":
            return self.lower.to_token()
        if self.upper is None:
            return f">={self.lower.to_token()}"
        return f">={self.lower.to_token()} <={self.upper.to_token()}"

    def to_dir_suffix(self) -> str:
        """Render the part of a range directory name after ``<tool>_``."""
        if self.kind == "all":
            return "all"
        assert self.lower is not None
        if self.kind == "specific":
            return self.lower.to_token()
        upper = self.upper.to_token() if self.upper is not None else ""
        return f"{self.lower.to_token()}-{upper}"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "lower": self.lower.to_dict() if self.lower is not None else None,
            "upper": self.upper.to_dict() if self.upper is not None else None,
        }
