"""Definitions repository discovery utilities."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import Settings
from .errors import (
    ErrorAccumulator,
    NoLibDefsFoundError,
    UnexpectedDirectoryError,
    UnexpectedFileError,
    record_error,
)
from .extractor import SCOPE_ROOT, extract_libdefs_from_package_dir
from .models.libdef import LibDef

logger = logging.getLogger(__name__)

ONLY_DIRECTORIES_MESSAGE = "Expected only directories to be present in this directory."
EMPTY_SCOPE_MESSAGE = "Scope directories must be named @<SCOPE>."


def _package_dirs(
    dir_path: Path,
    errors: ErrorAccumulator | None,
    settings: Settings,
) -> list[Path]:
    """Return sub-directories of ``dir_path``; files are validation errors."""
    found: list[Path] = []
    for path in sorted(dir_path.iterdir(), key=lambda p: p.name):
        if settings.is_ignored(path.name):
            continue
        if not path.is_dir():
            record_error(UnexpectedFileError(str(path.absolute()), ONLY_DIRECTORIES_MESSAGE), errors)
            continue
        found.append(path)
    return found


def get_libdefs(
    root_dir: Path,
    errors: ErrorAccumulator | None = None,
    settings: Settings | None = None,
) -> list[LibDef]:
    """Find every libdef under ``<root_dir>/npm``.

    ``@scope`` directories are descended one level; everything else at the
    top level is a package version directory.
    """
    settings = settings or Settings()
    npm_dir = Path(root_dir) / SCOPE_ROOT
    if not npm_dir.is_dir():
        record_error(
            NoLibDefsFoundError(
                str(npm_dir.absolute()), f"No {SCOPE_ROOT} definitions directory found!"
            ),
            errors,
        )
        return []

    libdefs: list[LibDef] = []
    for item in _package_dirs(npm_dir, errors, settings):
        if item.name == "@":
            record_error(
                UnexpectedDirectoryError(str(item.absolute()), EMPTY_SCOPE_MESSAGE), errors
            )
            continue
        if item.name.startswith("@"):
            scope = item.name[1:]
            for pkg_dir in _package_dirs(item, errors, settings):
                libdefs.extend(
                    extract_libdefs_from_package_dir(pkg_dir, scope, pkg_dir.name, errors, settings)
                )
        else:
            libdefs.extend(
                extract_libdefs_from_package_dir(item, None, item.name, errors, settings)
            )

    logger.debug("Discovered %d libdef(s) under %s", len(libdefs), npm_dir)
    return libdefs
