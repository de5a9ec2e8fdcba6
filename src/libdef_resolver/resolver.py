"""Pick the best libdef for a dependency and a tool version."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from semantic_version import Version

from .models.libdef import LibDef
from .models.tool_range import ToolVersionRange
from .models.version import PackageVersion
from .parsers.package_dir import parse_version_token
from .parsers.semver import range_lower_bound

logger = logging.getLogger(__name__)

BUILTIN_PACKAGES = ("react", "react-dom")


@dataclass(frozen=True)
class OutdatedLibDef:
    """A libdef that matches a dependency but predates its lower bound."""

    libdef: LibDef
    pkg_name: str
    requested_range: str


@dataclass
class ResolutionReport:
    """Outcome of resolving a set of dependencies."""

    to_install: list[LibDef] = field(default_factory=list)
    needs_update: list[OutdatedLibDef] = field(default_factory=list)
    missing: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _package_version(libdef: LibDef) -> PackageVersion | None:
    return parse_version_token(libdef.version, f"{libdef.full_name}_{libdef.version}")


def _specificity(version: PackageVersion) -> tuple[Version, int]:
    concrete = sum(1 for part in (version.minor, version.patch) if isinstance(part, int))
    return version.lower_bound(), concrete


def find_libdef(
    libdefs: Iterable[LibDef],
    pkg_name: str,
    requested_range: str,
    tool_version: ToolVersionRange,
) -> LibDef | None:
    """Return the most specific libdef compatible with the request, or None.

    Candidates share the (case-insensitive) package name, support
    ``tool_version`` and match the lower bound of ``requested_range``. The one
    with the greatest lower bound not above the requested lower bound wins.
    """
    try:
        requested_lower = range_lower_bound(requested_range)
    except ValueError:
        logger.warning("Ignoring unparsable version range %r for %s", requested_range, pkg_name)
        return None

    wanted = pkg_name.lower()
    best: tuple[tuple[Version, int], LibDef] | None = None
    for libdef in libdefs:
        if libdef.full_name.lower() != wanted:
            continue
        if not libdef.tool_version.overlaps(tool_version):
            continue
        version = _package_version(libdef)
        if version is None or not version.matches(requested_lower):
            continue
        if version.lower_bound() > requested_lower:
            continue
        rank = _specificity(version)
        if best is None or rank > best[0]:
            best = (rank, libdef)

    if best is None:
        logger.debug("No libdef found for %s@%s", pkg_name, requested_range)
        return None
    logger.debug("Resolved %s@%s to %s", pkg_name, requested_range, best[1].path)
    return best[1]


def needs_update(libdef: LibDef, requested_range: str) -> bool:
    """True when ``libdef`` is older than the lower bound of the requested range.

    Advisory only: the libdef still applies, it may just lack newer API.
    """
    return range_lower_bound(libdef.version) < range_lower_bound(requested_range)


def resolve_dependencies(
    libdefs: Iterable[LibDef],
    dependencies: Mapping[str, str],
    tool_version: ToolVersionRange,
    builtin_packages: Iterable[str] = BUILTIN_PACKAGES,
) -> ResolutionReport:
    """Resolve every ``name -> range`` dependency against ``libdefs``."""
    known = list(libdefs)
    builtins = set(builtin_packages)
    report = ResolutionReport()

    for pkg_name, requested_range in dependencies.items():
        if pkg_name in builtins:
            report.skipped.append(pkg_name)
            continue

        libdef = find_libdef(known, pkg_name, requested_range, tool_version)
        if libdef is None:
            report.missing.append((pkg_name, requested_range))
            continue

        report.to_install.append(libdef)
        if needs_update(libdef, requested_range):
            report.needs_update.append(OutdatedLibDef(libdef, pkg_name, requested_range))

    return report
