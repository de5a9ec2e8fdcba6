"""Check that sibling tool version ranges of one package version are disjoint."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations

from ..errors import ErrorAccumulator, OverlappingRangesError, record_error
from ..models.tool_range import ToolVersionRange


def ranges_overlap(a: ToolVersionRange, b: ToolVersionRange) -> bool:
    return a.overlaps(b)


def find_overlaps(
    ranges: Sequence[ToolVersionRange],
) -> list[tuple[ToolVersionRange, ToolVersionRange]]:
    return [(a, b) for a, b in combinations(ranges, 2) if ranges_overlap(a, b)]


def validate_disjoint(
    ranges: Sequence[ToolVersionRange],
    context: str,
    errors: ErrorAccumulator | None = None,
    tool_name: str = "flow",
) -> bool:
    """Return True when no two ranges intersect.

    Any number of overlapping pairs yields a single error under ``context``.
    """
    if not find_overlaps(ranges):
        return True
    record_error(
        OverlappingRangesError(context, f"{tool_name.capitalize()} versions not disjoint!"),
        errors,
    )
    return False
