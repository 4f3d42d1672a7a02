"""
Check pass that wires together file discovery, analysis, evaluation
and notification.
"""

import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from sysobs.config import Settings
from sysobs.core import AnalysisResult, LogFile, Notifier, Report, SeverityType
from sysobs.counter import LogReadError, analyze_file
from sysobs.evaluator import ThresholdEvaluator, should_notify
from sysobs.fixed_point import SCALE, scale, variation, variations
from sysobs.history import average_analyses
from sysobs.locator import locate_current, locate_history, log_date
from sysobs.logging_config import get_logger
from sysobs.platform import disk_usage_percent, get_hostname
from sysobs.report import build_report
from sysobs.templating import render

logger = get_logger(__name__)


class CheckError(Exception):
    """Raised when a check pass cannot complete."""


@dataclass
class CheckOutcome:
    """Result of a completed check pass."""
    result: AnalysisResult
    verdict: SeverityType | None
    report: Report | None = None
    notified: bool = False


class CheckRunner:
    """
    Runs one stateless check pass over the current and historical log files.
    """

    def __init__(self, settings: Settings, notifier: Notifier, today: date | None = None):
        """
        Initialize the runner.

        Args:
            settings: Resolved settings
            notifier: Destination for reports
            today: Reference date for the log file date (defaults to today)
        """
        self.settings = settings
        self.notifier = notifier
        self.today = today
        self.severities = settings.severities
        self.folder = Path(settings.log_folder)
        self.line_pattern = render(
            settings.log_type_pattern, {"environment": settings.environment}
        )

    def current_log_file(self) -> LogFile:
        """
        Resolve the log file to analyze.

        Raises:
            CheckError: If no log file can be found
        """
        settings = self.settings
        if settings.log_file:
            log_file = LogFile(self.folder / settings.log_file)
            if not log_file.path.is_file():
                raise CheckError(f"Log file '{log_file}' not found")
            return log_file

        if not settings.log_file_pattern:
            raise CheckError("Either log_file or log_file_pattern must be defined")

        date_value = log_date(
            settings.log_file_date_format, settings.log_file_date_delay, self.today
        )
        logger.debug("No log file defined, retrieving logs for date '%s'", date_value)
        log_file = locate_current(settings.log_file_pattern, self.folder, date_value)
        if log_file is None:
            raise CheckError(f"No log file found for date '{date_value}'")
        return log_file

    def history_files(self, current: LogFile) -> list[LogFile]:
        """List the history window, most recent first, excluding the current file."""
        settings = self.settings
        if not settings.log_file_pattern:
            return []
        return locate_history(
            settings.log_file_pattern,
            self.folder,
            limit=settings.log_file_history_limit,
            offset=settings.log_file_history_offset,
            exclude=current.path,
        )

    def analyze(self) -> AnalysisResult:
        """
        Analyze the current log file against its history.

        Raises:
            CheckError: If the current log file is missing or unreadable
        """
        log_file = self.current_log_file()
        logger.info("Analyzing log file: %s", log_file)

        try:
            current = analyze_file(self.line_pattern, log_file, self.severities)
            result = AnalysisResult(current=current)

            history = self.history_files(log_file)
            if not history:
                logger.info("No log history found to analyze")
                return result

            logger.debug("Analyzing log file history: %s", [str(f) for f in history])
            analyses = [analyze_file(self.line_pattern, f, self.severities) for f in history]
            previous = analyses[0]
            average = average_analyses(analyses, self.severities)
        except (FileNotFoundError, LogReadError) as e:
            raise CheckError(str(e)) from e
        except re.error as e:
            raise CheckError(f"Invalid log_type_pattern '{self.line_pattern}': {e}") from e

        result.previous = previous
        result.history = average
        result.previous_variations = variations(scale(previous.counts), current.counts)
        result.average_variations = variations(average.counts, current.counts)
        result.previous_line_variation = variation(
            SCALE * previous.line_count, current.line_count
        )
        result.average_line_variation = variation(average.line_count, current.line_count)
        return result

    def run(self) -> CheckOutcome:
        """
        Run one check cycle: analyze → evaluate → notify.

        Returns:
            CheckOutcome describing what was decided

        Raises:
            CheckError: On missing log file or failed notification
        """
        result = self.analyze()
        logger.info(
            "Log file contains %d line(s): %s",
            result.current.line_count, result.current.counts
        )

        evaluator = ThresholdEvaluator(self.severities)
        verdict = evaluator.evaluate(result.current.counts, result.average_variations)
        if verdict is None:
            logger.info("No threshold exceeded")
        else:
            logger.info("Threshold exceeded: %s", verdict.label)

        outcome = CheckOutcome(result=result, verdict=verdict)
        if verdict is None or not should_notify(
            verdict, self.settings.log_notification_level, self.severities
        ):
            logger.info("Notification ignored")
            return outcome

        disk_usage = disk_usage_percent(self.settings.disk_volume)
        logger.debug("Disk usage: %s%%", disk_usage)
        outcome.report = build_report(
            result,
            level=verdict.label,
            subject_template=self.settings.notification_subject,
            environment=self.settings.environment,
            disk_usage=disk_usage,
            hostname=get_hostname(),
        )

        logger.info("Triggering notification")
        if not self.notifier.notify(outcome.report):
            raise CheckError("Notification failed")
        logger.info("Notification sent successfully")
        outcome.notified = True
        return outcome
