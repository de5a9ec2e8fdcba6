"""Parse package.json and extract dependencies across sections."""

from __future__ import annotations

import json
from pathlib import Path

SECTIONS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)


def load(path: Path) -> dict[str, object]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: package.json must contain a JSON object")
    return data


def dependencies(data: dict[str, object]) -> dict[str, str]:
    """Return package -> version_expr from all dependency sections.

    Sections: dependencies, devDependencies, peerDependencies, optionalDependencies.
    The first section that names a package wins.
    """
    deps: dict[str, str] = {}
    for section in SECTIONS:
        entries = data.get(section) or {}
        if not isinstance(entries, dict):
            continue
        for name, version in entries.items():
            deps.setdefault(name, str(version))
    return deps


def parse(path: Path) -> list[tuple[str, str]]:
    """Return list of (package, version_expr) from a package.json file."""
    return list(dependencies(load(path)).items())
