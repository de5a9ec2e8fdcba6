"""npm semver range helpers built atop semantic_version.

Supported lower-bound expressions:
- exact and partial versions (e.g., "1.2.3", "1.2", "v1.x.x")
- caret/tilde ranges ^x.y.z and ~x.y.z
- comparator sets split by spaces, e.g., ">=1.0.0 <2.0.0"
- hyphen ranges "1.2.3 - 2.0.0" and alternatives joined by "||"
"""

from __future__ import annotations

import re

import semantic_version
from semantic_version import Version

_ANY_VERSION = {"", "*", "x", "X", "latest"}

_COMPARATOR_RE = re.compile(
    r"^(?P<op>>=|<=|>|<|=|\^|~>?)?\s*v?"
    r"(?P<major>\d+|[xX*])"
    r"(?:\.(?P<minor>\d+|[xX*]))?"
    r"(?:\.(?P<patch>\d+|[xX*]))?"
    r"(?:-(?P<prerelease>[0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)
_HYPHEN_RE = re.compile(r"^(?P<lower>\S+)\s+-\s+\S+$")
_OPERATOR_SPACE_RE = re.compile(r"(>=|<=|>|<|=|\^|~)\s+")
_V_PREFIX_RE = re.compile(r"(^|[\s=<>^~])v(?=\d)")


def _is_wildcard(part: str | None) -> bool:
    return part is None or part in {"x", "X", "*"}


def _parse_version(v: str) -> Version:
    return Version(v)


def _next_major(v: Version) -> Version:
    return Version(f"{v.major + 1}.0.0")


def _next_minor(v: Version) -> Version:
    return Version(f"{v.major}.{v.minor + 1}.0")


def _next_patch(v: Version) -> Version:
    return Version(f"{v.major}.{v.minor}.{v.patch + 1}")


def normalize_range(expr: str) -> str:
    """Drop ``v`` prefixes and spaces after operators (``>= v1.2`` -> ``>=1.2``)."""
    text = _OPERATOR_SPACE_RE.sub(r"\1", expr.strip())
    return _V_PREFIX_RE.sub(r"\1", text)


def is_valid_range(expr: str) -> bool:
    text = normalize_range(expr)
    if text in _ANY_VERSION:
        return True
    try:
        semantic_version.NpmSpec(text)
    except ValueError:
        return False
    return True


def range_lower_bound(expr: str) -> Version:
    """Return the smallest version the first alternative of ``expr`` admits.

    ``v1.x.x`` -> 1.0.0, ``^1.2`` -> 1.2.0, ``>1.2.3`` -> 1.2.4 and an
    expression that starts with an upper bound (``<2``) -> 0.0.0.

    Raises ValueError when the expression cannot be parsed.
    """
    alternative = expr.split("||")[0].strip()
    if alternative in _ANY_VERSION:
        return Version("0.0.0")

    hyphen = _HYPHEN_RE.match(alternative)
    if hyphen:
        alternative = hyphen.group("lower")

    first = _OPERATOR_SPACE_RE.sub(r"\1", alternative).split()[0]
    match = _COMPARATOR_RE.match(first)
    if match is None:
        raise ValueError(f"Invalid version range: {expr!r}")

    op = match.group("op") or ""
    if op in {"<", "<="} or _is_wildcard(match.group("major")):
        return Version("0.0.0")

    major = int(match.group("major"))
    minor_wild = _is_wildcard(match.group("minor"))
    patch_wild = minor_wild or _is_wildcard(match.group("patch"))
    minor = 0 if minor_wild else int(match.group("minor"))
    patch = 0 if patch_wild else int(match.group("patch"))

    text = f"{major}.{minor}.{patch}"
    if match.group("prerelease") and not patch_wild:
        text += f"-{match.group('prerelease')}"
    base = _parse_version(text)

    if op == ">":
        if minor_wild:
            return _next_major(base)
        if patch_wild:
            return _next_minor(base)
        if base.prerelease:
            return _parse_version(f"{text}.0")
        return _next_patch(base)
    return base
