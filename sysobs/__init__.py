"""
SysObs - A single-pass log analysis and alerting tool.

This package inspects a rotating log file, counts occurrences per
severity type, compares them against the history of previous log files
and sends a notification when configured thresholds are exceeded.
"""

__version__ = "0.1.0"
