"""
Core interfaces and data structures for SysObs.

One check pass builds these objects from scratch:
- SeverityType: an ordered log level with its thresholds
- LogFile: a discovered log file
- FileAnalysis / HistoryAverage / AnalysisResult: counted occurrences
- Report: what gets handed to a Notifier
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

COMPRESSED_SUFFIXES = (".gz", ".bz2", ".xz")


@dataclass(frozen=True)
class SeverityType:
    """
    A log level and the thresholds attached to it.

    A negative threshold means "no limit".
    """
    label: str
    max_absolute: int = -1
    max_variation: int = -1  # In percent

    @property
    def has_absolute_limit(self) -> bool:
        return self.max_absolute >= 0

    @property
    def has_variation_limit(self) -> bool:
        return self.max_variation >= 0


@dataclass(frozen=True)
class LogFile:
    """A log file found on disk."""
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def compressed(self) -> bool:
        return self.path.suffix in COMPRESSED_SUFFIXES

    def __str__(self) -> str:
        return str(self.path)


@dataclass
class FileAnalysis:
    """Occurrences per severity type (ordered by severity) and line count of one file."""
    log_file: LogFile
    counts: dict[str, int]
    line_count: int


@dataclass
class HistoryAverage:
    """Averages over the history window, scaled by 100."""
    files: list[LogFile]
    counts: dict[str, int]
    line_count: int


@dataclass
class AnalysisResult:
    """Everything computed for the current log file during a check pass."""
    current: FileAnalysis
    previous: FileAnalysis | None = None
    history: HistoryAverage | None = None
    # Variations are percentages scaled by 100 (5000 is +50.00%)
    previous_variations: dict[str, int] = field(default_factory=dict)
    average_variations: dict[str, int] = field(default_factory=dict)
    previous_line_variation: int | None = None
    average_line_variation: int | None = None


@dataclass
class Report:
    """Notification content for a breached severity level."""
    subject: str
    body: str
    level: str
    context: dict[str, Any] = field(default_factory=dict)


class Notifier(ABC):
    """
    Base class for all notifiers.

    Notifiers deliver a report to an external destination.
    """

    def __init__(self, config: dict[str, Any]):
        """
        Initialize the notifier with configuration.

        Args:
            config: Type-specific configuration dictionary
        """
        self.config = config

    @abstractmethod
    def notify(self, report: Report) -> bool:
        """
        Send a notification.

        Args:
            report: Subject and body to deliver

        Returns:
            True if notification was sent successfully, False otherwise
        """
        raise NotImplementedError
