"""
Console notifier for SysObs.
"""

from sysobs.core import Notifier, Report
from sysobs.logging_config import get_logger
from sysobs.registry import register_notifier

logger = get_logger(__name__)


@register_notifier("console")
class ConsoleNotifier(Notifier):
    """
    Pretends to send notifications by printing them to stdout.

    Used by default and for dry runs.

    Config:
        (none required)
    """

    def notify(self, report: Report) -> bool:
        """Print the report to console."""
        logger.info("Pretending to send notification for level '%s'", report.level)

        print("-" * 60)
        print(report.subject)
        print("---")
        print(report.body)
        print("-" * 60)
        return True


# Export for dynamic importing
__all__ = ["ConsoleNotifier"]
