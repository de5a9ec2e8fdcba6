"""Install resolved libdefs into a project's ``flow-typed/npm`` directory."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .git import GitError
from .models.libdef import LibDef
from .models.tool_range import ToolVersionRange
from .parsers import package_json
from .parsers.semver import is_valid_range, range_lower_bound
from .parsers.tool_range import parse_tool_version
from .resolver import BUILTIN_PACKAGES, OutdatedLibDef, resolve_dependencies
from .signing import sign_code

logger = logging.getLogger(__name__)

PROJECT_MARKER = ".flowconfig"
TOOL_PACKAGE = "flow-bin"
INSTALL_DIR = Path("flow-typed") / "npm"

_EXPLICIT_TERM_RE = re.compile(r"^(?P<scope>@[^@/]+/)?(?P<name>[^@]+)@(?P<range>.+)$")


class InstallError(RuntimeError):
    """Raised when a libdef cannot be installed."""


@dataclass
class InstallSummary:
    installed: list[Path] = field(default_factory=list)
    failed: list[tuple[LibDef, str]] = field(default_factory=list)
    needs_update: list[OutdatedLibDef] = field(default_factory=list)
    missing: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.missing


def find_project_root(start: Path, marker: str = PROJECT_MARKER) -> Path | None:
    """Return the closest directory at or above ``start`` holding ``marker``."""
    start = start.resolve()
    for candidate in (start, *start.parents):
        if (candidate / marker).exists():
            return candidate
    return None


def determine_tool_version(
    version_arg: str | None,
    package_data: Mapping[str, object] | None = None,
    tool_package: str = TOOL_PACKAGE,
) -> ToolVersionRange:
    """Use ``version_arg`` or fall back to the lower bound of the tool dependency."""
    if version_arg is not None:
        tool_version = parse_tool_version(version_arg)
    else:
        deps = package_json.dependencies(dict(package_data or {}))
        requested = deps.get(tool_package)
        if requested is None:
            raise InstallError(
                f"Unable to determine the {tool_package} version: pass it explicitly or "
                f"add {tool_package} to package.json"
            )
        try:
            lower = range_lower_bound(requested)
        except ValueError as exc:
            raise InstallError(f"Invalid {tool_package} version range: {requested!r}") from exc
        tool_version = parse_tool_version(str(lower))
    if tool_version is None:
        raise InstallError(f"Unable to determine the {tool_package} version")
    return tool_version


def parse_explicit_libdefs(terms: Iterable[str]) -> dict[str, str]:
    """Turn ``foo@1.2.3`` / ``@scope/foo@^1.0`` terms into a name -> range mapping."""
    requested: dict[str, str] = {}
    for term in terms:
        match = _EXPLICIT_TERM_RE.match(term)
        if match is None or not is_valid_range(match.group("range")):
            raise InstallError(
                f"Please specify npm package names in the format of `foo@1.2.3` (got {term!r})"
            )
        name = f"{match.group('scope') or ''}{match.group('name')}"
        requested[name] = match.group("range")
    return requested


def install_libdef(
    libdef: LibDef,
    npm_dir: Path,
    overwrite: bool,
    repo_version: str,
) -> Path:
    """Copy ``libdef`` into ``npm_dir`` with a signature header; return the target."""
    target_dir = npm_dir if libdef.scope is None else npm_dir / f"@{libdef.scope}"
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / libdef.file_name

    if target.exists() and not overwrite:
        raise InstallError(
            f"{target} already exists! Use --overwrite to overwrite the existing libdef."
        )

    try:
        code = libdef.path.read_text(encoding="utf-8")
        target.write_text(sign_code(code, repo_version), encoding="utf-8")
    except OSError as exc:
        raise InstallError(f"Failed to install {libdef.full_name} at {target}: {exc}") from exc

    logger.info("Installed %s -> %s", libdef.file_name, target)
    return target


def install_libdefs(
    libdefs: Iterable[LibDef],
    dependencies: Mapping[str, str],
    tool_version: ToolVersionRange,
    project_root: Path,
    repo_version: Callable[[LibDef], str],
    overwrite: bool = False,
    builtin_packages: Iterable[str] = BUILTIN_PACKAGES,
) -> InstallSummary:
    """Resolve ``dependencies`` and install every libdef found.

    Missing libdefs and outdated matches are reported, not raised.
    """
    report = resolve_dependencies(libdefs, dependencies, tool_version, builtin_packages)
    summary = InstallSummary(
        needs_update=report.needs_update,
        missing=report.missing,
        skipped=report.skipped,
    )

    npm_dir = project_root / INSTALL_DIR
    for libdef in report.to_install:
        try:
            summary.installed.append(
                install_libdef(libdef, npm_dir, overwrite, repo_version(libdef))
            )
        except (InstallError, GitError) as exc:
            logger.error("%s", exc)
            summary.failed.append((libdef, str(exc)))

    return summary
