"""
Pytest configuration and fixtures for SysObs tests.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from sysobs.core import SeverityType


@pytest.fixture
def severities() -> tuple[SeverityType, ...]:
    """Default severity types with their default thresholds."""
    return (
        SeverityType("ERROR", 1, 5),
        SeverityType("WARNING", 5, 10),
        SeverityType("INFO", -1, -1),
        SeverityType("DEBUG", -1, -1),
    )


@pytest.fixture
def write_log(tmp_path: Path) -> Callable[..., Path]:
    """
    Write a log file in the temporary directory.

    Lines are generated from keyword counts, e.g. write_log("a.log", ERROR=2, INFO=3).
    """
    def _write(name: str, **counts: int) -> Path:
        lines = []
        for level, count in counts.items():
            lines.extend(f"2024-01-01 12:00:00 [{level}] message {i}" for i in range(count))
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path
    return _write
