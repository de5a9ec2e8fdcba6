"""Tests for tool version range parsing and range semantics."""

import pytest

from libdef_resolver.errors import (
    ErrorAccumulator,
    InvalidRangeDirectoryNameError,
    InvalidVersionNumberError,
)
from libdef_resolver.models.tool_range import ToolVersionRange, compare_bounds
from libdef_resolver.models.version import WILDCARD, ToolVersionBound
from libdef_resolver.parsers.tool_range import parse_tool_range_dir, parse_tool_version


def bound(major, minor, patch):
    return ToolVersionBound(major=major, minor=minor, patch=patch)


class TestParseToolRangeDir:
    """parse_tool_range_dir reads <tool>_v<lower>-[v<upper>] names."""

    def test_bounded_range(self):
        rng = parse_tool_range_dir("flow_v0.13.x-v0.37.x", "ctx")
        assert rng == ToolVersionRange.ranged(bound(0, 13, WILDCARD), bound(0, 37, WILDCARD))
        assert rng.kind == "ranged"

    def test_unbounded_range(self):
        rng = parse_tool_range_dir("flow_v0.38.x-", "ctx")
        assert rng.lower == bound(0, 38, WILDCARD)
        assert rng.upper is None

    def test_concrete_bounds(self):
        rng = parse_tool_range_dir("flow_v0.25.0-v0.30.1", "ctx")
        assert rng.lower == bound(0, 25, 0)
        assert rng.upper == bound(0, 30, 1)

    def test_wrong_prefix(self):
        with pytest.raises(InvalidRangeDirectoryNameError) as excinfo:
            parse_tool_range_dir("asdfdir", "underscore_v1.x.x/asdfdir")
        assert str(excinfo.value) == (
            "underscore_v1.x.x/asdfdir: Flow versions must start with `flow_`"
        )

    def test_wrong_prefix_is_recorded(self):
        errs = ErrorAccumulator()
        assert parse_tool_range_dir("asdfdir", "ctx", errs) is None
        assert errs.items() == [("ctx", ["Flow versions must start with `flow_`"])]

    @pytest.mark.parametrize(
        "dir_name",
        ["flow_v0.38.x", "flow_0.38.x-", "flow_v0.38-", "flow_-v0.38.x", "flow_v0.1.x-v0.2.x-"],
    )
    def test_malformed_ranges(self, dir_name):
        errs = ErrorAccumulator()
        assert parse_tool_range_dir(dir_name, "ctx", errs) is None
        assert list(errs) == ["ctx"]
        assert errs["ctx"][0].startswith("Malformed flow version range!")

    def test_wildcard_major_is_invalid_number(self):
        with pytest.raises(InvalidVersionNumberError):
            parse_tool_range_dir("flow_vx.x.x-", "ctx")

    def test_lower_above_upper(self):
        errs = ErrorAccumulator()
        assert parse_tool_range_dir("flow_v0.40.0-v0.30.0", "ctx", errs) is None
        assert errs["ctx"] == [
            "Lower bound of the flow version range must not exceed its upper bound"
        ]

    def test_custom_tool_name(self):
        rng = parse_tool_range_dir("tsc_v2.0.x-", "ctx", tool_name="tsc")
        assert rng.lower == bound(2, 0, WILDCARD)
        with pytest.raises(InvalidRangeDirectoryNameError, match="Tsc versions must start"):
            parse_tool_range_dir("flow_v2.0.x-", "ctx", tool_name="tsc")


class TestParseToolVersion:
    """parse_tool_version is permissive about the requested version."""

    @pytest.mark.parametrize("text", ["0.38.0", "v0.38.0", "0.38", "v0.38"])
    def test_variants(self, text):
        assert parse_tool_version(text) == ToolVersionRange.specific(bound(0, 38, 0))

    def test_prerelease(self):
        rng = parse_tool_version("0.38.1-rc1")
        assert rng.lower.prerelease == "rc1"
        assert rng.kind == "specific"

    def test_wildcards_are_rejected(self):
        with pytest.raises(InvalidVersionNumberError):
            parse_tool_version("0.38.x")

    def test_garbage_is_recorded(self):
        errs = ErrorAccumulator()
        assert parse_tool_version("latest", errors=errs) is None
        assert "tool version" in errs


class TestToolVersionRange:
    """Range containment, overlap and rendering."""

    def test_compare_bounds_treats_wildcard_as_equal(self):
        assert compare_bounds(bound(0, 37, WILDCARD), bound(0, 37, 5)) == 0
        assert compare_bounds(bound(0, 37, WILDCARD), bound(0, 38, 0)) == -1
        assert compare_bounds(bound(1, WILDCARD, WILDCARD), bound(0, 99, 99)) == 1

    def test_contains(self):
        rng = ToolVersionRange.ranged(bound(0, 13, WILDCARD), bound(0, 37, WILDCARD))
        assert rng.contains(bound(0, 13, 0))
        assert rng.contains(bound(0, 37, 9))
        assert not rng.contains(bound(0, 38, 0))
        assert not rng.contains(bound(0, 12, 9))

    def test_unbounded_contains_later_versions(self):
        rng = ToolVersionRange.ranged(bound(0, 38, WILDCARD))
        assert rng.contains(bound(0, 38, 0))
        assert rng.contains(bound(5, 0, 0))
        assert not rng.contains(bound(0, 37, 99))

    def test_all_contains_everything(self):
        assert ToolVersionRange.all().contains(bound(0, 1, 0))

    def test_invalid_construction(self):
        with pytest.raises(ValueError):
            ToolVersionRange(kind="ranged")
        with pytest.raises(ValueError):
            ToolVersionRange(kind="weird", lower=bound(0, 1, 0))
        with pytest.raises(ValueError):
            ToolVersionRange.ranged(bound(0, 2, 0), bound(0, 1, 0))

    def test_rendering(self):
        rng = ToolVersionRange.ranged(bound(0, 13, WILDCARD), bound(0, 37, WILDCARD))
        assert rng.to_semver_string() == ">=v0.13.x <=v0.37.x"
        assert rng.to_dir_suffix() == "v0.13.x-v0.37.x"
        open_ended = ToolVersionRange.ranged(bound(0, 38, WILDCARD))
        assert open_ended.to_semver_string() == ">=v0.38.x"
        assert open_ended.to_dir_suffix() == "v0.38.x-"
        assert ToolVersionRange.all().to_semver_string() == "*"

    def test_to_dict(self):
        rng = ToolVersionRange.ranged(bound(0, 38, WILDCARD))
        assert rng.to_dict() == {
            "kind": "ranged",
            "lower": {"major": 0, "minor": 38, "patch": "x", "prerelease": None},
            "upper": None,
        }
