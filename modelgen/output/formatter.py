"""Output formatting for generation summaries."""

import json
from typing import Literal

from ..writer.summary import Summary


def format_summary(
    summary: Summary,
    format: Literal["text", "json"] = "text",
) -> str:
    """Format a generation summary for output.

    Args:
        summary: The summary to format.
        format: Output format ("text" or "json").

    Returns:
        Formatted string representation.
    """
    if format == "json":
        return _format_json(summary)
    return _format_text(summary)


def _format_text(summary: Summary) -> str:
    """Format summary as human-readable text."""
    lines: list[str] = []
    verb = "WOULD WRITE" if summary.dry_run else "WRITTEN"

    lines.append(f"{verb}:")
    if summary.written:
        for path in summary.written:
            lines.append(f"  ✎ {path}")
    else:
        lines.append("  (none)")

    if summary.orphans:
        lines.append("")
        lines.append("UNRECOVERED REGIONS:")
        for path, keys in summary.orphans.items():
            lines.append(f"  ⚠ {path}: {', '.join(keys)}")

    if summary.missing:
        lines.append("")
        lines.append("NEW REGIONS (placeholder inserted):")
        for path, keys in summary.missing.items():
            lines.append(f"  + {path}: {', '.join(keys)}")

    if summary.failures:
        lines.append("")
        lines.append("SKIPPED:")
        for failure in summary.failures:
            lines.append(f"  ✘ {failure}")

    if summary.stale:
        lines.append("")
        lines.append("STALE (no longer in the model, not deleted):")
        for path in summary.stale:
            lines.append(f"  ℹ {path}")

    lines.append("")
    lines.append(
        f"{summary.files_changed} changed, {summary.files_unchanged} unchanged, "
        f"{summary.orphans_recovered} orphaned region(s), "
        f"{summary.malformed_regions} skipped"
    )
    if summary.dry_run:
        lines.append("Dry run: nothing was written")

    return "\n".join(lines)


def _format_json(summary: Summary) -> str:
    """Format summary as JSON."""
    data = {
        "dry_run": summary.dry_run,
        "files_unchanged": summary.files_unchanged,
        "files_changed": summary.files_changed,
        "orphans_recovered": summary.orphans_recovered,
        "malformed_regions": summary.malformed_regions,
        "written": summary.written,
        "orphans": summary.orphans,
        "missing": summary.missing,
        "stale": summary.stale,
        "failures": [
            {
                "path": failure.path,
                "line": failure.line,
                "key": failure.error.key,
                "message": failure.error.reason,
            }
            for failure in summary.failures
        ],
    }
    return json.dumps(data, indent=2)
