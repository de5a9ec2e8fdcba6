"""Validation report aggregation and schema-friendly output."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .errors import ErrorAccumulator
from .models.libdef import LibDef


def aggregate(libdefs: Iterable[LibDef], errors: ErrorAccumulator) -> dict[str, Any]:
    """Aggregate extracted libdefs and validation errors into a single report.

    ``errors`` keeps its insertion order so the report lists problems in the
    order the tree was walked.
    """
    libdef_list = list(libdefs)
    packages = {(libdef.full_name, libdef.version) for libdef in libdef_list}
    error_entries = [
        {"context": context, "messages": messages} for context, messages in errors.items()
    ]

    report: dict[str, Any] = {
        "version": "1",
        "hasErrors": bool(errors),
        "errors": error_entries,
        "libdefs": [libdef.to_dict() for libdef in libdef_list],
        "totals": {
            "packageVersions": len(packages),
            "libdefs": len(libdef_list),
            "errors": errors.message_count,
        },
    }

    return report
