"""Parse tool version range directory names and requested tool versions.

Range directories look like ``flow_v0.13.x-v0.37.x`` or ``flow_v0.38.x-``
(no upper bound). Requested versions are concrete, e.g. ``0.38.1``.
"""

from __future__ import annotations

import re

from ..errors import (
    ErrorAccumulator,
    InvalidRangeDirectoryNameError,
    InvalidVersionNumberError,
    record_error,
)
from ..models.tool_range import ToolVersionRange, compare_bounds
from ..models.version import ToolVersionBound
from .version_parts import validate_number_part, validate_version_part

DEFAULT_TOOL_NAME = "flow"

_RANGE_RE = re.compile(r"^(?P<lower>v[^-]+)-(?P<upper>v[^-]+)?$")
_BOUND_RE = re.compile(r"^v(?P<major>[^.]+)\.(?P<minor>[^.]+)\.(?P<patch>[^.]+)$")
_REQUESTED_RE = re.compile(
    r"^v(?P<major>[^.]+)\.(?P<minor>[^.]+)\.(?P<patch>[^.-]+)(?:-(?P<prerelease>.+))?$"
)
_MAJOR_MINOR_RE = re.compile(r"^v[0-9]+\.[0-9]+$")


def _range_format(tool_name: str) -> str:
    bound = "v<MAJOR>.<MINOR>.<PATCH>"
    return f"{tool_name}_{bound}-[{bound}]"


def _parse_bound(
    token: str,
    context: str,
    errors: ErrorAccumulator | None,
    tool_name: str,
) -> ToolVersionBound | None:
    match = _BOUND_RE.match(token)
    if match is None:
        record_error(
            InvalidRangeDirectoryNameError(
                context,
                f"Malformed {tool_name} version range! Expected the name to be "
                f"formatted as {_range_format(tool_name)}",
            ),
            errors,
        )
        return None

    errors_before = errors.message_count if errors is not None else 0
    major = validate_number_part(match.group("major"), "major", context, errors)
    minor = validate_version_part(match.group("minor"), "minor", context, errors)
    patch = validate_version_part(match.group("patch"), "patch", context, errors)
    if errors is not None and errors.message_count != errors_before:
        return None
    return ToolVersionBound(major=major, minor=minor, patch=patch)


def parse_tool_range_dir(
    dir_name: str,
    context: str,
    errors: ErrorAccumulator | None = None,
    tool_name: str = DEFAULT_TOOL_NAME,
) -> ToolVersionRange | None:
    """Parse ``<tool>_v<lower>-[v<upper>]`` into a ranged ToolVersionRange."""
    prefix = f"{tool_name}_"
    if not dir_name.startswith(prefix):
        record_error(
            InvalidRangeDirectoryNameError(
                context, f"{tool_name.capitalize()} versions must start with `{prefix}`"
            ),
            errors,
        )
        return None

    match = _RANGE_RE.match(dir_name[len(prefix):])
    if match is None:
        record_error(
            InvalidRangeDirectoryNameError(
                context,
                f"Malformed {tool_name} version range! Expected the name to be "
                f"formatted as {_range_format(tool_name)}",
            ),
            errors,
        )
        return None

    lower = _parse_bound(match.group("lower"), context, errors, tool_name)
    if lower is None:
        return None

    upper = None
    if match.group("upper") is not None:
        upper = _parse_bound(match.group("upper"), context, errors, tool_name)
        if upper is None:
            return None
        if compare_bounds(lower, upper) > 0:
            record_error(
                InvalidRangeDirectoryNameError(
                    context,
                    f"Lower bound of the {tool_name} version range must not "
                    f"exceed its upper bound",
                ),
                errors,
            )
            return None

    return ToolVersionRange.ranged(lower, upper)


def parse_tool_version(
    version_str: str,
    context: str = "tool version",
    errors: ErrorAccumulator | None = None,
) -> ToolVersionRange | None:
    """Parse a concrete requested tool version into a ``specific`` range.

    Be permissive: the leading ``v`` may be left off and ``vX.Y`` means
    ``vX.Y.0``.
    """
    text = version_str.strip()
    if not text.startswith("v"):
        text = f"v{text}"
    if _MAJOR_MINOR_RE.match(text):
        text = f"{text}.0"

    match = _REQUESTED_RE.match(text)
    if match is None:
        record_error(
            InvalidVersionNumberError(
                context,
                f"Invalid version: '{version_str}'. Expected <MAJOR>.<MINOR>.<PATCH>.",
            ),
            errors,
        )
        return None

    errors_before = errors.message_count if errors is not None else 0
    major = validate_number_part(match.group("major"), "major", context, errors)
    minor = validate_number_part(match.group("minor"), "minor", context, errors)
    patch = validate_number_part(match.group("patch"), "patch", context, errors)
    if errors is not None and errors.message_count != errors_before:
        return None

    bound = ToolVersionBound(
        major=major, minor=minor, patch=patch, prerelease=match.group("prerelease")
    )
    return ToolVersionRange.specific(bound)
