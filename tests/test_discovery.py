"""Tests for walking a whole definitions tree."""

import pytest

from libdef_resolver.discovery import EMPTY_SCOPE_MESSAGE, ONLY_DIRECTORIES_MESSAGE, get_libdefs
from libdef_resolver.errors import (
    ErrorAccumulator,
    NoLibDefsFoundError,
    UnexpectedDirectoryError,
    UnexpectedFileError,
)


def _underscore():
    return {"underscore_v1.x.x.js": "", "test_underscore.js": ""}


class TestGetLibDefs:
    """get_libdefs walks npm/ and one level of @scope directories."""

    def test_finds_unscoped_and_scoped_packages(self, make_tree):
        root = make_tree(
            {
                "npm": {
                    "underscore_v1.x.x": _underscore(),
                    "lodash_v4.x.x": {
                        "flow_v0.13.x-v0.37.x": {"lodash_v4.x.x.js": ""},
                        "flow_v0.38.x-": {"lodash_v4.x.x.js": ""},
                    },
                    "@babel": {"core_v7.x.x": {"core_v7.x.x.js": ""}},
                    "@types": {"node_v18.x.x": {"node_v18.x.x.js": ""}},
                }
            }
        )

        defs = get_libdefs(root)

        assert len(defs) == 5
        scoped = [d for d in defs if d.scope is not None]
        assert sorted(d.full_name for d in scoped) == ["@babel/core", "@types/node"]
        assert sorted({d.full_name for d in defs}) == [
            "@babel/core",
            "@types/node",
            "lodash",
            "underscore",
        ]

    def test_order_is_deterministic(self, make_tree):
        root = make_tree(
            {"npm": {"b_v1.x.x": {"b_v1.x.x.js": ""}, "a_v1.x.x": {"a_v1.x.x.js": ""}}}
        )
        assert [d.name for d in get_libdefs(root)] == ["a", "b"]

    def test_file_in_npm_dir_is_an_error(self, make_tree):
        root = make_tree(
            {
                "npm": {
                    "README.md": "",
                    "underscore_v1.x.x": _underscore(),
                    "@babel": {"core_v7.x.x": {"core_v7.x.x.js": ""}},
                }
            }
        )
        expected_context = str((root / "npm" / "README.md").absolute())

        with pytest.raises(UnexpectedFileError) as excinfo:
            get_libdefs(root)
        assert excinfo.value.context == expected_context

        errs = ErrorAccumulator()
        defs = get_libdefs(root, errs)
        assert len(defs) == 2
        assert errs.items() == [(expected_context, [ONLY_DIRECTORIES_MESSAGE])]

    def test_file_in_scope_dir_is_an_error(self, make_tree):
        root = make_tree({"npm": {"@babel": {"stray.js": "", "core_v7.x.x": {"core_v7.x.x.js": ""}}}})
        errs = ErrorAccumulator()
        defs = get_libdefs(root, errs)
        assert [d.full_name for d in defs] == ["@babel/core"]
        assert list(errs) == [str((root / "npm" / "@babel" / "stray.js").absolute())]

    def test_ignored_files_are_skipped(self, make_tree):
        root = make_tree({"npm": {".notes.swp": "", "underscore_v1.x.x": _underscore()}})
        errs = ErrorAccumulator()
        assert len(get_libdefs(root, errs)) == 1
        assert not errs

    def test_package_errors_are_collected_across_packages(self, make_tree):
        root = make_tree(
            {
                "npm": {
                    "broken": {"broken.js": ""},
                    "empty_v1.x.x": {},
                    "underscore_v1.x.x": _underscore(),
                }
            }
        )
        errs = ErrorAccumulator()
        defs = get_libdefs(root, errs)
        assert [d.name for d in defs] == ["underscore"]
        assert list(errs) == ["broken", "npm/empty_v1.x.x"]

    def test_missing_npm_dir(self, tmp_path):
        with pytest.raises(NoLibDefsFoundError, match="No npm definitions directory found!"):
            get_libdefs(tmp_path)

        errs = ErrorAccumulator()
        assert get_libdefs(tmp_path, errs) == []
        assert len(errs) == 1

    def test_bare_scope_dir_is_an_error(self, make_tree):
        root = make_tree(
            {
                "npm": {
                    "@": {"foo_v1.x.x": {"foo_v1.x.x.js": ""}},
                    "underscore_v1.x.x": _underscore(),
                }
            }
        )
        expected_context = str((root / "npm" / "@").absolute())

        with pytest.raises(UnexpectedDirectoryError) as excinfo:
            get_libdefs(root)
        assert excinfo.value.context == expected_context

        errs = ErrorAccumulator()
        defs = get_libdefs(root, errs)
        assert [d.full_name for d in defs] == ["underscore"]
        assert errs.items() == [(expected_context, [EMPTY_SCOPE_MESSAGE])]
