"""
Builds the notification subject and body from an analysis result.
"""

from collections.abc import Sequence

from sysobs.core import AnalysisResult, Report
from sysobs.fixed_point import SCALE, format_float, format_variation
from sysobs.templating import render

DEFAULT_SUBJECT = "[%environment] SysObs | %level"


def build_subject(template: str, environment: str, level: str) -> str:
    """Render the ``%environment`` and ``%level`` tokens of a subject template."""
    return render(template, {"environment": environment, "level": level})


def _render_table(header: Sequence[str], rows: Sequence[Sequence[str]]) -> list[str]:
    """Render rows as left-aligned columns separated by pipes."""
    widths = [
        max(len(row[column]) for row in [header, *rows])
        for column in range(len(header))
    ]
    lines = []
    for row in [header, *rows]:
        cells = [cell.ljust(width) for cell, width in zip(row, widths)]
        lines.append("  " + " | ".join(cells).rstrip())
    return lines


def _row(
    label: str,
    current: int,
    previous: int | None,
    previous_variation: int | None,
    average: int | None,
    average_variation: int | None,
) -> list[str]:
    row = [label, str(current)]
    if previous is not None and previous_variation is not None:
        row.append(f"{previous} ({format_variation(previous_variation)})")
    if average is not None and average_variation is not None:
        row.append(f"{format_float(average)} ({format_variation(average_variation)})")
    return row


def build_body(result: AnalysisResult, disk_usage: int | None, hostname: str) -> str:
    """
    Build the plain text body of a notification.

    History columns (previous file and history average) are only rendered
    when a history was found.

    Args:
        result: Analysis of the current log file
        disk_usage: Used disk space in percent, None if unknown
        hostname: Name of the sending host
    """
    current = result.current
    previous = result.previous
    history = result.history

    lines = [f"Log file analysis results for '{current.log_file}':"]
    header = ["", "Current"]
    if previous is not None:
        lines.append(f"Previous log file: '{previous.log_file}'")
        header.append("Previous")
    if history is not None:
        lines.append(
            f"History: {len(history.files)} file(s) "
            f"from '{history.files[0].name}' to '{history.files[-1].name}'"
        )
        header.append("Average")

    lines.append("")
    lines.append("Number of lines:")
    lines.extend(_render_table(header, [_row(
        "Lines",
        current.line_count,
        previous.line_count if previous else None,
        result.previous_line_variation,
        history.line_count if history else None,
        result.average_line_variation,
    )]))

    lines.append("")
    lines.append("Occurrences per log type:")
    rows = [
        _row(
            label,
            count,
            previous.counts[label] if previous else None,
            result.previous_variations.get(label),
            history.counts[label] if history else None,
            result.average_variations.get(label),
        )
        for label, count in current.counts.items()
    ]
    lines.extend(_render_table(header, rows))

    lines.append("")
    if disk_usage is None:
        lines.append("Disk usage: unknown")
    else:
        lines.append(f"Disk usage: {format_float(SCALE * disk_usage)}%")

    lines.append("")
    lines.append(f"Sent from: {hostname}")
    return "\n".join(lines)


def build_report(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    result: AnalysisResult,
    level: str,
    subject_template: str,
    environment: str,
    disk_usage: int | None,
    hostname: str,
) -> Report:
    """Build the report for an exceeded severity level."""
    return Report(
        subject=build_subject(subject_template, environment, level),
        body=build_body(result, disk_usage, hostname),
        level=level,
        context={
            "environment": environment,
            "log_file": str(result.current.log_file),
            "counts": dict(result.current.counts),
            "disk_usage": disk_usage,
        }
    )
