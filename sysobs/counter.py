"""
Occurrence counting within plain or compressed log files.

Files are read as a stream of lines; nothing is loaded into memory as a
whole. Patterns are regular expressions searched anywhere in a line, and
a line matching a pattern counts once (``grep -c`` semantics).
"""

import bz2
import gzip
import lzma
import re
import zlib
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import IO, Any

from sysobs.core import FileAnalysis, LogFile, SeverityType
from sysobs.logging_config import TRACE, get_logger
from sysobs.templating import render

logger = get_logger(__name__)

TYPE_TOKEN = "type"

OPENERS: dict[str, Callable[..., IO[Any]]] = {
    ".gz": gzip.open,
    ".bz2": bz2.open,
    ".xz": lzma.open,
}


class LogReadError(Exception):
    """Raised when a log file exists but its content cannot be read."""


@contextmanager
def open_log(log_file: LogFile) -> Iterator[IO[str]]:
    """
    Open a log file as text, decompressing it based on its suffix.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    opener = OPENERS[log_file.path.suffix] if log_file.compressed else open
    with opener(log_file.path, "rt", encoding="utf-8", errors="ignore") as f:
        yield f


def _scan(log_file: LogFile, patterns: Sequence[re.Pattern[str]]) -> tuple[list[int], int]:
    """Count lines matching each pattern, and all lines, in one pass."""
    counts = [0] * len(patterns)
    lines = 0
    try:
        with open_log(log_file) as f:
            for line in f:
                lines += 1
                for index, pattern in enumerate(patterns):
                    if pattern.search(line):
                        counts[index] += 1
    except FileNotFoundError:
        raise
    except (OSError, EOFError, lzma.LZMAError, zlib.error) as e:
        raise LogReadError(f"Cannot read log file '{log_file}': {e}") from e
    return counts, lines


def count_occurrences(pattern: str, log_file: LogFile) -> int:
    """Count the lines of a file matching a regular expression."""
    logger.log(TRACE, "Counting occurrences of pattern '%s' in '%s'", pattern, log_file)
    counts, _ = _scan(log_file, [re.compile(pattern)])
    return counts[0]


def count_lines(log_file: LogFile) -> int:
    """Count the lines of a file."""
    _, lines = _scan(log_file, [])
    return lines


def severity_patterns(line_pattern: str, severities: Sequence[SeverityType]) -> dict[str, str]:
    """Expand the ``%type`` token of a line pattern for each severity type."""
    return {
        severity.label: render(line_pattern, {TYPE_TOKEN: severity.label})
        for severity in severities
    }


def analyze_file(
    line_pattern: str,
    log_file: LogFile,
    severities: Sequence[SeverityType],
) -> FileAnalysis:
    """
    Count occurrences of every severity type in a log file.

    Args:
        line_pattern: Regular expression where ``%type`` is replaced by each label
        log_file: File to analyze
        severities: Severity types, most severe first

    Returns:
        FileAnalysis with counts ordered like ``severities``
    """
    patterns = severity_patterns(line_pattern, severities)
    logger.log(TRACE, "Analyzing pattern '%s' within log file '%s'", line_pattern, log_file)

    counts, lines = _scan(log_file, [re.compile(p) for p in patterns.values()])
    analysis = FileAnalysis(
        log_file=log_file,
        counts=dict(zip(patterns, counts)),
        line_count=lines
    )
    logger.debug("Analyzed '%s': %s in %d line(s)", log_file, analysis.counts, lines)
    return analysis
