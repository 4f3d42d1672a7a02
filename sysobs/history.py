"""
Averages of occurrences over the history window.
"""

from collections.abc import Sequence

from sysobs.core import FileAnalysis, HistoryAverage, LogFile, SeverityType
from sysobs.counter import analyze_file
from sysobs.fixed_point import average, format_float
from sysobs.logging_config import get_logger

logger = get_logger(__name__)


def aggregate(
    line_pattern: str,
    files: Sequence[LogFile],
    severities: Sequence[SeverityType],
) -> HistoryAverage:
    """
    Average occurrences and line counts across historical log files.

    Averages are scaled by 100 and truncated, e.g. ERROR counts of
    1, 2 and 3 average to 200 (2.00).

    Args:
        line_pattern: Pattern with a ``%type`` token, see analyze_file
        files: Historical files, must not be empty
        severities: Severity types, most severe first

    Raises:
        ValueError: If no file is given
    """
    if not files:
        raise ValueError("Cannot aggregate an empty history")

    logger.debug("Analyzing log file history of %d file(s)", len(files))
    analyses = [analyze_file(line_pattern, log_file, severities) for log_file in files]
    return average_analyses(analyses, severities)


def average_analyses(
    analyses: Sequence[FileAnalysis],
    severities: Sequence[SeverityType],
) -> HistoryAverage:
    """
    Average already counted historical files.

    Raises:
        ValueError: If no analysis is given
    """
    if not analyses:
        raise ValueError("Cannot aggregate an empty history")

    totals = {severity.label: 0 for severity in severities}
    total_lines = 0
    for analysis in analyses:
        for label, count in analysis.counts.items():
            totals[label] += count
        total_lines += analysis.line_count

    averages = {label: average(total, len(analyses)) for label, total in totals.items()}
    for label, value in averages.items():
        logger.debug("History average for %s: %s", label, format_float(value))

    return HistoryAverage(
        files=[analysis.log_file for analysis in analyses],
        counts=averages,
        line_count=average(total_lines, len(analyses))
    )
