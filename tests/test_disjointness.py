"""Tests for sibling tool version range disjointness."""

import pytest

from libdef_resolver.errors import ErrorAccumulator, OverlappingRangesError
from libdef_resolver.models.tool_range import ToolVersionRange
from libdef_resolver.models.version import WILDCARD, ToolVersionBound
from libdef_resolver.validators.tool_ranges import find_overlaps, validate_disjoint


def ranged(lower, upper=None):
    return ToolVersionRange.ranged(
        ToolVersionBound(*lower), ToolVersionBound(*upper) if upper else None
    )


class TestValidateDisjoint:
    """validate_disjoint reports at most one error per package version."""

    def test_adjacent_ranges_are_disjoint(self):
        ranges = [ranged((0, 13, WILDCARD), (0, 37, WILDCARD)), ranged((0, 38, WILDCARD))]
        assert validate_disjoint(ranges, "ctx")

    def test_shared_bound_overlaps(self):
        ranges = [ranged((0, 13, WILDCARD), (0, 38, WILDCARD)), ranged((0, 38, WILDCARD))]
        with pytest.raises(OverlappingRangesError) as excinfo:
            validate_disjoint(ranges, "npm/lib_v1.x.x")
        assert str(excinfo.value) == "npm/lib_v1.x.x: Flow versions not disjoint!"

    def test_wildcard_bound_overlaps_concrete_version(self):
        ranges = [ranged((0, 20, 0), (0, 30, WILDCARD)), ranged((0, 30, 5))]
        assert len(find_overlaps(ranges)) == 1

    def test_two_unbounded_ranges_always_overlap(self):
        ranges = [ranged((0, 10, 0)), ranged((5, 0, 0))]
        errs = ErrorAccumulator()
        assert not validate_disjoint(ranges, "ctx", errs)
        assert errs.items() == [("ctx", ["Flow versions not disjoint!"])]

    def test_many_overlaps_single_error(self):
        ranges = [ranged((0, 10, 0)), ranged((0, 20, 0)), ranged((0, 30, 0))]
        assert len(find_overlaps(ranges)) == 3
        errs = ErrorAccumulator()
        validate_disjoint(ranges, "ctx", errs)
        assert errs.message_count == 1

    def test_all_overlaps_everything(self):
        assert find_overlaps([ToolVersionRange.all(), ranged((0, 1, 0), (0, 2, 0))])

    def test_empty_and_single(self):
        assert validate_disjoint([], "ctx")
        assert validate_disjoint([ranged((0, 1, 0))], "ctx")

    def test_tool_name_in_message(self):
        errs = ErrorAccumulator()
        validate_disjoint([ranged((1, 0, 0)), ranged((2, 0, 0))], "ctx", errs, tool_name="tsc")
        assert errs["ctx"] == ["Tsc versions not disjoint!"]
