"""
Discovery of the current and historical log files from a rotation pattern.

A rotation pattern is a file name glob where ``%date`` stands for the
formatted log date, e.g. ``app-%date.log`` or ``access.log-%date.gz``.
"""

from datetime import date, timedelta
from fnmatch import fnmatchcase
from pathlib import Path

from sysobs.core import LogFile
from sysobs.logging_config import TRACE, get_logger
from sysobs.templating import render

logger = get_logger(__name__)

DATE_TOKEN = "date"
ANY_DATE = "*"


def log_date(date_format: str, delay_days: int, today: date | None = None) -> str:
    """
    Format the date of the log file to analyze.

    Args:
        date_format: strftime format used in log file names
        delay_days: Offset applied to today, e.g. -1 for yesterday's file
        today: Reference date (defaults to the current date)
    """
    day = (today or date.today()) + timedelta(days=delay_days)
    logger.log(TRACE, "Retrieving date with format '%s' for '%s' day(s)", date_format, delay_days)
    return day.strftime(date_format)


def list_files(
    pattern: str,
    folder: str | Path,
    limit: int | None = None,
    offset: int | None = None,
    exclude: str | Path | None = None,
) -> list[LogFile]:
    """
    List files directly under a folder matching a glob pattern.

    Files are sorted in reverse lexicographic order, which is reverse
    chronological order for date-stamped names. When ``exclude`` is among the
    matches, the window starts right after it: the excluded file and every
    file sorted before it are dropped. Then ``offset`` files are skipped and
    at most ``limit`` files are returned.

    Args:
        pattern: Glob matched against file names (case sensitive)
        folder: Folder to list (not recursive)
        limit: Maximum number of files (unbounded if None)
        offset: Number of files to skip (0 if None)
        exclude: File anchoring the window

    Returns:
        Matching files, empty if none was found
    """
    folder = Path(folder)
    offset = offset or 0
    logger.log(
        TRACE,
        "Retrieving files in '%s' for '%s' (offset=%s, limit=%s)",
        folder, pattern, offset, limit
    )

    if not folder.is_dir():
        logger.debug("Log folder '%s' does not exist", folder)
        return []

    names = sorted(
        (entry.name for entry in folder.iterdir()
         if entry.is_file() and fnmatchcase(entry.name, pattern)),
        reverse=True
    )

    if exclude is not None:
        excluded = Path(exclude)
        # A bare file name is relative to the listed folder
        if not excluded.is_absolute() and excluded.parent == Path("."):
            excluded = folder / excluded
        excluded = excluded.resolve()
        for index, name in enumerate(names):
            if (folder / name).resolve() == excluded:
                logger.log(TRACE, "Ignoring '%s' and newer files for history", name)
                names = names[index + 1:]
                break

    names = names[offset:]
    if limit is not None:
        names = names[:limit]

    if not names:
        logger.debug("No files found in '%s' for '%s'", folder, pattern)
    return [LogFile(folder / name) for name in names]


def locate_current(pattern: str, folder: str | Path, date_value: str) -> LogFile | None:
    """
    Find the log file for a formatted date.

    Returns:
        The most recent matching file, or None if no file matches
    """
    search = render(pattern, {DATE_TOKEN: date_value})
    logger.log(TRACE, "Retrieving log file '%s' in '%s'", search, folder)
    files = list_files(search, folder, limit=1)
    return files[0] if files else None


def locate_history(
    pattern: str,
    folder: str | Path,
    limit: int | None = None,
    offset: int | None = None,
    exclude: str | Path | None = None,
) -> list[LogFile]:
    """Find the historical log files for any date, most recent first."""
    search = render(pattern, {DATE_TOKEN: ANY_DATE})
    logger.log(TRACE, "Retrieving log files history '%s' in '%s'", search, folder)
    return list_files(search, folder, limit=limit, offset=offset, exclude=exclude)
