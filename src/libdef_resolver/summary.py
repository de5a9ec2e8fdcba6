"""Human-readable Markdown summary of a validation report."""

from __future__ import annotations

from typing import Any


def render_summary(report: dict[str, Any]) -> str:
    """Return a Markdown string with totals and a table of validation errors."""
    totals = report.get("totals", {})
    errors = report.get("errors", [])

    lines = []
    lines.append("# libdef-resolver Summary")
    lines.append("")
    lines.append(
        f"Package versions: {totals.get('packageVersions', 0)} | "
        f"Libdefs: {totals.get('libdefs', 0)} | Errors: {totals.get('errors', 0)}"
    )
    lines.append("")
    lines.append("| Location | Problem |")
    lines.append("| --- | --- |")

    has_rows = False

    for entry in errors:
        context = entry.get("context") or "(unknown location)"
        for message in entry.get("messages") or []:
            text = str(message).replace("|", "\\|")
            lines.append(f"| {context} | {text} |")
            has_rows = True

    if not has_rows:
        lines.append("| (all definitions) | No problems found |")

    return "\n".join(lines) + "\n"
