"""Parse package version directory names such as ``underscore_v1.x.x``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import ErrorAccumulator, MalformedPackageVersionNameError, record_error
from ..models.version import PackageVersion
from .version_parts import validate_version_part

_VERSION_PATTERN = (
    r"v(?P<major>[^.]+)\.(?P<minor>[^.]+)\.(?P<patch>[^.-]+)(?:-(?P<prerelease>.+))?"
)
_PKG_NAME_VER_RE = re.compile(rf"^(?P<name>.+)_{_VERSION_PATTERN}$")
_VERSION_TOKEN_RE = re.compile(rf"^{_VERSION_PATTERN}$")
_MAJOR_RE = re.compile(r"^[0-9]+$")

MALFORMED_NAME_MESSAGE = (
    "Malformed npm package name! Expected the name to be formatted as "
    "<PKGNAME>_v<MAJOR>.<MINOR>.<PATCH>"
)
MALFORMED_VERSION_MESSAGE = (
    "Malformed libdef version! Expected the version to be formatted as "
    "v<MAJOR>.<MINOR>.<PATCH>"
)


@dataclass(frozen=True)
class PackageNameVersion:
    pkg_name: str
    pkg_version: PackageVersion


def _version_from_match(
    match: re.Match[str],
    context: str,
    errors: ErrorAccumulator | None,
) -> PackageVersion | None:
    errors_before = errors.message_count if errors is not None else 0
    minor = validate_version_part(match.group("minor"), "minor", context, errors)
    patch = validate_version_part(match.group("patch"), "patch", context, errors)
    if errors is not None and errors.message_count != errors_before:
        return None
    return PackageVersion(
        major=int(match.group("major")),
        minor=minor,
        patch=patch,
        prerelease=match.group("prerelease"),
    )


def parse_package_name_version(
    dir_name: str,
    context: str,
    errors: ErrorAccumulator | None = None,
) -> PackageNameVersion | None:
    """Split ``<name>_v<major>.<minor>.<patch>[-<prerelease>]``.

    Malformed names (including a wildcard major) are keyed by ``dir_name``;
    invalid minor/patch components are keyed by ``context``. Returns None when
    an error was recorded.
    """
    match = _PKG_NAME_VER_RE.match(dir_name)
    if match is None or not _MAJOR_RE.match(match.group("major")):
        record_error(MalformedPackageVersionNameError(dir_name, MALFORMED_NAME_MESSAGE), errors)
        return None

    version = _version_from_match(match, context, errors)
    if version is None:
        return None
    return PackageNameVersion(pkg_name=match.group("name"), pkg_version=version)


def parse_version_token(
    token: str,
    context: str,
    errors: ErrorAccumulator | None = None,
) -> PackageVersion | None:
    """Parse a bare libdef version token such as ``v1.x.x``."""
    match = _VERSION_TOKEN_RE.match(token)
    if match is None or not _MAJOR_RE.match(match.group("major")):
        record_error(MalformedPackageVersionNameError(context, MALFORMED_VERSION_MESSAGE), errors)
        return None
    return _version_from_match(match, context, errors)
