"""Extract LibDef records from one package version directory.

Layout of a package version directory::

    underscore_v1.x.x/
        test_underscore-v1.js          # shared by every libdef below
        flow_v0.13.x-v0.37.x/
            underscore_v1.x.x.js
        flow_v0.38.x-/
            underscore_v1.x.x.js
            test_underscore.js

A directory may instead hold a single flat ``underscore_v1.x.x.js`` that
applies to every tool version.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import Settings
from .errors import (
    AmbiguousLibDefError,
    ErrorAccumulator,
    NoLibDefsFoundError,
    UnexpectedDirectoryError,
    UnexpectedFileError,
    record_error,
)
from .models.libdef import LibDef
from .models.tool_range import ToolVersionRange
from .parsers.package_dir import parse_package_name_version
from .parsers.tool_range import parse_tool_range_dir
from .validators.tool_ranges import validate_disjoint

logger = logging.getLogger(__name__)

SCOPE_ROOT = "npm"


class EntryKind(Enum):
    DEFINITION_FILE = "definition-file"
    TEST_FILE = "test-file"
    TOOL_RANGE_DIR = "tool-range-dir"
    IGNORED = "ignored"
    UNEXPECTED_FILE = "unexpected-file"
    UNEXPECTED_DIRECTORY = "unexpected-directory"


@dataclass(frozen=True)
class DirEntry:
    name: str
    path: Path
    kind: EntryKind


def classify_entry(
    path: Path,
    definition_file_name: str,
    settings: Settings,
    in_range_dir: bool = False,
) -> EntryKind:
    """Classify one directory entry by name and type.

    Directories are tool version range candidates at package level and
    unexpected inside a range directory.
    """
    if path.is_dir():
        return EntryKind.UNEXPECTED_DIRECTORY if in_range_dir else EntryKind.TOOL_RANGE_DIR
    if settings.is_ignored(path.name):
        return EntryKind.IGNORED
    if path.name == definition_file_name:
        return EntryKind.DEFINITION_FILE
    if settings.test_file_regex().match(path.name):
        return EntryKind.TEST_FILE
    return EntryKind.UNEXPECTED_FILE


def _list_entries(
    dir_path: Path,
    definition_file_name: str,
    settings: Settings,
    in_range_dir: bool = False,
) -> list[DirEntry]:
    return [
        DirEntry(
            name=path.name,
            path=path,
            kind=classify_entry(path, definition_file_name, settings, in_range_dir),
        )
        for path in sorted(dir_path.iterdir(), key=lambda p: p.name)
    ]


def qualified_context(scope: str | None, package_dir_name: str) -> str:
    """``npm/<pkgdir>`` or ``npm/@<scope>/<pkgdir>``."""
    if scope is None:
        return f"{SCOPE_ROOT}/{package_dir_name}"
    return f"{SCOPE_ROOT}/@{scope}/{package_dir_name}"


def _only_contains_message(definition_file_name: str) -> str:
    return (
        "This directory can only contain test files or a libdef file named "
        f"`{definition_file_name}`."
    )


def _extract_from_range_dir(
    range_dir: Path,
    tool_version: ToolVersionRange,
    package_dir_name: str,
    definition_file_name: str,
    common_test_files: list[Path],
    errors: ErrorAccumulator | None,
    settings: Settings,
) -> tuple[Path, list[Path]] | None:
    """Return (libdef path, test files) for one range directory."""
    test_files = list(common_test_files)
    libdef_path: Path | None = None

    for entry in _list_entries(range_dir, definition_file_name, settings, in_range_dir=True):
        context = f"{package_dir_name}/{range_dir.name}/{entry.name}"
        if entry.kind is EntryKind.IGNORED:
            continue
        if entry.kind is EntryKind.DEFINITION_FILE:
            libdef_path = entry.path
        elif entry.kind is EntryKind.TEST_FILE:
            test_files.append(entry.path)
        elif entry.kind is EntryKind.UNEXPECTED_DIRECTORY:
            record_error(
                UnexpectedDirectoryError(
                    context,
                    f"Unexpected sub-directory. {_only_contains_message(definition_file_name)}",
                ),
                errors,
            )
        else:
            record_error(
                UnexpectedFileError(
                    context, f"Unexpected file. {_only_contains_message(definition_file_name)}"
                ),
                errors,
            )

    if libdef_path is None:
        record_error(
            NoLibDefsFoundError(f"{package_dir_name}/{range_dir.name}", "No libdef file found!"),
            errors,
        )
        return None

    logger.debug(
        "Found libdef %s for %s %s",
        libdef_path,
        settings.tool_name,
        tool_version.to_semver_string(),
    )
    return libdef_path, test_files


def extract_libdefs_from_package_dir(
    dir_path: Path,
    scope: str | None,
    package_dir_name: str,
    errors: ErrorAccumulator | None = None,
    settings: Settings | None = None,
) -> list[LibDef]:
    """Return the libdefs of one package version directory.

    Without ``errors`` the first problem is raised; with it, problems are
    recorded and every valid libdef is still returned.
    """
    settings = settings or Settings()
    dir_path = Path(dir_path)
    context = qualified_context(scope, package_dir_name)

    parsed = parse_package_name_version(package_dir_name, context, errors)
    if parsed is None:
        return []

    version = package_dir_name[len(parsed.pkg_name) + 1 :]
    definition_file_name = f"{package_dir_name}{settings.definition_extension}"

    flat_libdef: Path | None = None
    common_test_files: list[Path] = []
    range_dirs: list[tuple[Path, ToolVersionRange]] = []

    for entry in _list_entries(dir_path, definition_file_name, settings):
        entry_context = f"{package_dir_name}/{entry.name}"
        if entry.kind is EntryKind.IGNORED:
            continue
        if entry.kind is EntryKind.DEFINITION_FILE:
            flat_libdef = entry.path
        elif entry.kind is EntryKind.TEST_FILE:
            common_test_files.append(entry.path)
        elif entry.kind is EntryKind.TOOL_RANGE_DIR:
            tool_version = parse_tool_range_dir(
                entry.name, entry_context, errors, settings.tool_name
            )
            if tool_version is not None:
                range_dirs.append((entry.path, tool_version))
        else:
            record_error(
                UnexpectedFileError(
                    entry_context,
                    f"Unexpected file name. {_only_contains_message(definition_file_name)}",
                ),
                errors,
            )

    def _libdef(tool_version: ToolVersionRange, path: Path, tests: list[Path]) -> LibDef:
        return LibDef(
            scope=scope,
            name=parsed.pkg_name,
            version=version,
            tool_version=tool_version,
            path=path,
            test_file_paths=tuple(tests),
        )

    if flat_libdef is not None and range_dirs:
        record_error(
            AmbiguousLibDefError(
                context,
                f"Libdef file found next to {settings.tool_name} version directories! "
                f"Move `{definition_file_name}` into a {settings.tool_name} version directory.",
            ),
            errors,
        )
        return []

    if flat_libdef is not None:
        return [_libdef(ToolVersionRange.all(), flat_libdef, common_test_files)]

    if not range_dirs:
        record_error(NoLibDefsFoundError(context, "No libdef files found!"), errors)
        return []

    validate_disjoint([rng for _, rng in range_dirs], context, errors, settings.tool_name)

    libdefs: list[LibDef] = []
    for range_dir, tool_version in range_dirs:
        found = _extract_from_range_dir(
            range_dir,
            tool_version,
            package_dir_name,
            definition_file_name,
            common_test_files,
            errors,
            settings,
        )
        if found is not None:
            libdef_path, test_files = found
            libdefs.append(_libdef(tool_version, libdef_path, test_files))

    if not libdefs:
        record_error(NoLibDefsFoundError(context, "No libdef files found!"), errors)

    logger.debug("Extracted %d libdef(s) from %s", len(libdefs), context)
    return libdefs
