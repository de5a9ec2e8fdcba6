"""Validation of single version components (major, minor, patch)."""

from __future__ import annotations

import re

from ..errors import ErrorAccumulator, InvalidVersionNumberError, record_error
from ..models.version import WILDCARD, VersionComponent

_DIGITS_RE = re.compile(r"^[0-9]+$")


def validate_number_part(
    token: str,
    field_name: str,
    context: str,
    errors: ErrorAccumulator | None = None,
) -> int:
    """Return ``token`` as an int.

    A non-numeric token raises :class:`InvalidVersionNumberError`, or is
    recorded under ``context`` and yields ``-1`` when ``errors`` is given.
    """
    if not _DIGITS_RE.match(token):
        record_error(
            InvalidVersionNumberError(
                context, f"Invalid {field_name} number: '{token}'. Expected a number."
            ),
            errors,
        )
        return -1
    return int(token)


def validate_version_part(
    token: str,
    field_name: str,
    context: str,
    errors: ErrorAccumulator | None = None,
) -> VersionComponent:
    """Like :func:`validate_number_part` but lets the ``x`` wildcard through."""
    if token == WILDCARD.value:
        return WILDCARD
    return validate_number_part(token, field_name, context, errors)
