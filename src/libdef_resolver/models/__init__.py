"""Data models for libdef discovery and resolution."""

from __future__ import annotations

from .libdef import LibDef
from .tool_range import ToolVersionRange, compare_bounds
from .version import (
    WILDCARD,
    PackageVersion,
    ToolVersionBound,
    VersionComponent,
    VersionDescriptor,
    Wildcard,
)

__all__ = [
    "LibDef",
    "PackageVersion",
    "ToolVersionBound",
    "ToolVersionRange",
    "VersionComponent",
    "VersionDescriptor",
    "WILDCARD",
    "Wildcard",
    "compare_bounds",
]
