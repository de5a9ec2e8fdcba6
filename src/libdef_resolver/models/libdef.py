"""LibDef record model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .tool_range import ToolVersionRange


@dataclass(frozen=True)
class LibDef:
    """A libdef file found in the definitions tree.

    ``version`` is the verbatim package version token (``v1.x.x``) and
    ``test_file_paths`` lists package-level tests before range-level ones.
    """

    scope: str | None
    name: str
    version: str
    tool_version: ToolVersionRange
    path: Path
    test_file_paths: tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("LibDef name must be non-empty")
        if not self.version:
            raise ValueError("LibDef version must be non-empty")
        if self.scope is not None and (not self.scope or self.scope.startswith("@")):
            raise ValueError("LibDef scope must be given without the leading '@'")

    @property
    def full_name(self) -> str:
        if self.scope is None:
            return self.name
        return f"@{self.scope}/{self.name}"

    @property
    def file_name(self) -> str:
        return self.path.name

    def to_dict(self) -> dict[str, object]:
        return {
            "scope": self.scope,
            "name": self.name,
            "version": self.version,
            "toolVersion": self.tool_version.to_dict(),
            "path": str(self.path),
            "testFilePaths": [str(p) for p in self.test_file_paths],
        }
