"""Shared fixtures for building definitions trees on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

# A dict value is a directory, a str value is a file with that content.
TreeSpec = dict[str, Any]


def build_tree(root: Path, spec: TreeSpec) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for name, value in spec.items():
        path = root / name
        if isinstance(value, dict):
            build_tree(path, value)
        else:
            path.write_text(value, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[TreeSpec], Path]:
    """Return a builder writing ``spec`` under ``tmp_path/definitions``."""

    def _make(spec: TreeSpec) -> Path:
        return build_tree(tmp_path / "definitions", spec)

    return _make


@pytest.fixture
def well_formed_underscore() -> TreeSpec:
    return {
        "test_underscore-v1.js": "// shared test\n",
        "flow_v0.13.x-v0.37.x": {
            "underscore_v1.x.x.js": "declare module 'underscore' {}\n",
        },
        "flow_v0.38.x-": {
            "underscore_v1.x.x.js": "declare module 'underscore' {}\n",
            "test_underscore.js": "// range test\n",
        },
    }
