"""
Integration tests for a complete check pass.
"""

from collections.abc import Callable, Iterator
from datetime import date
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from sysobs.check import CheckError, CheckRunner
from sysobs.config import Settings
from sysobs.core import Notifier
from sysobs.counter import analyze_file

TODAY = date(2024, 1, 4)


def make_settings(folder: Path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "environment": "test",
        "log_folder": str(folder),
        "log_file_pattern": "app-%date.log",
        "log_type_pattern": r"\[%type\]",
    }
    values.update(overrides)
    return Settings.model_validate(values)


@pytest.fixture
def notifier() -> MagicMock:
    """Notifier that always succeeds."""
    mock = MagicMock(spec=Notifier)
    mock.notify.return_value = True
    return mock


@pytest.fixture(autouse=True)
def system_info() -> Iterator[None]:
    """Stable disk usage and host name."""
    with patch("sysobs.check.disk_usage_percent", return_value=42), \
            patch("sysobs.check.get_hostname", return_value="web-1"):
        yield


class TestCheckRunner:
    """Tests for CheckRunner."""

    def test_absolute_breach_notifies(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that exceeding the max errors sends a notification."""
        write_log("app-2024-01-02.log", ERROR=1, INFO=10)
        write_log("app-2024-01-03.log", ERROR=2, INFO=10)

        outcome = CheckRunner(make_settings(tmp_path), notifier, today=TODAY).run()

        assert outcome.verdict is not None
        assert outcome.verdict.label == "ERROR"
        assert outcome.notified is True
        notifier.notify.assert_called_once()
        report = notifier.notify.call_args[0][0]
        assert report.subject == "[test] SysObs | ERROR"
        assert str(tmp_path / "app-2024-01-03.log") in report.body
        assert "Disk usage: 42.00%" in report.body
        assert "Sent from: web-1" in report.body

    def test_quiet_day(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that a stable log does not notify."""
        write_log("app-2024-01-01.log", WARNING=2, INFO=10)
        write_log("app-2024-01-02.log", WARNING=2, INFO=10)
        write_log("app-2024-01-03.log", WARNING=2, INFO=10)

        outcome = CheckRunner(make_settings(tmp_path), notifier, today=TODAY).run()

        assert outcome.verdict is None
        assert outcome.notified is False
        assert outcome.report is None
        notifier.notify.assert_not_called()
        assert outcome.result.average_variations == {
            "ERROR": 0, "WARNING": 0, "INFO": 0, "DEBUG": 0
        }

    def test_variation_breach(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that an increase compared to the average notifies."""
        write_log("app-2024-01-01.log", WARNING=1)
        write_log("app-2024-01-02.log", WARNING=1)
        write_log("app-2024-01-03.log", WARNING=2)

        outcome = CheckRunner(make_settings(tmp_path), notifier, today=TODAY).run()

        assert outcome.verdict is not None
        assert outcome.verdict.label == "WARNING"
        assert outcome.result.average_variations["WARNING"] == 10000
        assert outcome.result.previous_variations["WARNING"] == 10000
        assert outcome.notified is True

    def test_breach_below_notification_level(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that a breach less severe than the notification level is ignored."""
        write_log("app-2024-01-03.log", INFO=3)
        settings = make_settings(tmp_path, log_thresholds_max="1 5 2 -1")

        outcome = CheckRunner(settings, notifier, today=TODAY).run()

        assert outcome.verdict is not None
        assert outcome.verdict.label == "INFO"
        assert outcome.notified is False
        notifier.notify.assert_not_called()

    def test_history_window(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that the history excludes the current and newer files."""
        for day in range(1, 6):
            write_log(f"app-2024-01-0{day}.log", INFO=day)
        settings = make_settings(tmp_path, log_file_history_limit=2, log_file_history_offset=1)

        result = CheckRunner(settings, notifier, today=TODAY).analyze()

        assert result.current.log_file.name == "app-2024-01-03.log"
        assert result.previous is not None
        assert result.history is not None
        assert [f.name for f in result.history.files] == ["app-2024-01-01.log"]
        assert result.previous.log_file.name == "app-2024-01-01.log"

    def test_history_line_averages(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test line count variations."""
        write_log("app-2024-01-01.log", INFO=1)
        write_log("app-2024-01-02.log", INFO=3)
        write_log("app-2024-01-03.log", INFO=3)

        result = CheckRunner(make_settings(tmp_path), notifier, today=TODAY).analyze()

        assert result.history is not None
        assert result.history.line_count == 200
        assert result.average_line_variation == 5000
        assert result.previous_line_variation == 0

    def test_no_history(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that a missing history skips variations."""
        write_log("app-2024-01-03.log", WARNING=5)

        outcome = CheckRunner(make_settings(tmp_path), notifier, today=TODAY).run()

        assert outcome.result.history is None
        assert outcome.result.previous is None
        assert outcome.result.average_variations == {}
        assert outcome.verdict is None

    def test_environment_in_line_pattern(
        self,
        tmp_path: Path,
        notifier: MagicMock
    ) -> None:
        """Test that the environment token of the line pattern is replaced."""
        (tmp_path / "app-2024-01-03.log").write_text(
            "prod ERROR a\ntest ERROR b\ntest ERROR c\n"
        )
        settings = make_settings(tmp_path, log_type_pattern="^%environment %type")

        result = CheckRunner(settings, notifier, today=TODAY).analyze()

        assert result.current.counts["ERROR"] == 2

    def test_explicit_log_file(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test analyzing a named log file without history pattern."""
        write_log("current.log", ERROR=1)
        settings = make_settings(tmp_path, log_file="current.log", log_file_pattern="")

        outcome = CheckRunner(settings, notifier, today=TODAY).run()

        assert outcome.result.current.log_file.path == tmp_path / "current.log"
        assert outcome.result.history is None
        assert outcome.verdict is None

    def test_missing_explicit_log_file(self, tmp_path: Path, notifier: MagicMock) -> None:
        """Test that a missing named log file is fatal."""
        settings = make_settings(tmp_path, log_file="missing.log")

        with pytest.raises(CheckError, match="not found"):
            CheckRunner(settings, notifier, today=TODAY).run()

    def test_no_log_file_for_date(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that no log file for the date is fatal."""
        write_log("app-2024-01-01.log", ERROR=5)

        with pytest.raises(CheckError, match="No log file found for date '2024-01-03'"):
            CheckRunner(make_settings(tmp_path), notifier, today=TODAY).run()
        notifier.notify.assert_not_called()

    def test_no_pattern_and_no_file(self, tmp_path: Path, notifier: MagicMock) -> None:
        """Test that a log file or pattern is required."""
        settings = make_settings(tmp_path, log_file_pattern="")

        with pytest.raises(CheckError):
            CheckRunner(settings, notifier, today=TODAY).run()

    def test_failed_notification(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that a failed delivery is fatal."""
        write_log("app-2024-01-03.log", ERROR=3)
        notifier.notify.return_value = False

        with pytest.raises(CheckError, match="Notification failed"):
            CheckRunner(make_settings(tmp_path), notifier, today=TODAY).run()

    def test_invalid_line_pattern(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that an invalid regular expression is fatal."""
        write_log("app-2024-01-03.log", ERROR=3)
        settings = make_settings(tmp_path, log_type_pattern="[%type")

        with pytest.raises(CheckError, match="Invalid log_type_pattern"):
            CheckRunner(settings, notifier, today=TODAY).run()

    def test_unreadable_log_file(self, tmp_path: Path, notifier: MagicMock) -> None:
        """Test that a corrupt compressed current log file is fatal."""
        (tmp_path / "app-2024-01-03.log.gz").write_bytes(b"not gzip data")
        settings = make_settings(tmp_path, log_file_pattern="app-%date.log.gz")

        with pytest.raises(CheckError, match="Cannot read log file"):
            CheckRunner(settings, notifier, today=TODAY).run()
        notifier.notify.assert_not_called()

    def test_unreadable_history_file(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that a corrupt file in the history window is fatal."""
        write_log("app-2024-01-03.log", ERROR=3)
        (tmp_path / "app-2024-01-02.log.gz").write_bytes(b"not gzip data")
        settings = make_settings(tmp_path, log_file_pattern="app-%date.log*")

        with pytest.raises(CheckError, match="app-2024-01-02.log.gz"):
            CheckRunner(settings, notifier, today=TODAY).run()
        notifier.notify.assert_not_called()

    def test_each_file_analyzed_once(
        self,
        tmp_path: Path,
        write_log: Callable[..., Path],
        notifier: MagicMock
    ) -> None:
        """Test that the previous file is counted once for previous and average values."""
        write_log("app-2024-01-01.log", ERROR=1)
        write_log("app-2024-01-02.log", ERROR=3)
        write_log("app-2024-01-03.log", ERROR=3)

        with patch("sysobs.check.analyze_file", wraps=analyze_file) as mock_analyze:
            result = CheckRunner(make_settings(tmp_path), notifier, today=TODAY).analyze()

        analyzed = [call.args[1].name for call in mock_analyze.call_args_list]
        assert sorted(analyzed) == [
            "app-2024-01-01.log", "app-2024-01-02.log", "app-2024-01-03.log"
        ]
        assert result.previous is not None
        assert result.previous.counts["ERROR"] == 3
        assert result.history is not None
        assert result.history.counts["ERROR"] == 200
