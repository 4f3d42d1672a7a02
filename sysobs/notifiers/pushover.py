"""
Pushover notifier for SysObs.
"""

from typing import ClassVar

import requests

from sysobs.core import Notifier, Report
from sysobs.logging_config import get_logger
from sysobs.registry import register_notifier

logger = get_logger(__name__)


@register_notifier("pushover")
class PushoverNotifier(Notifier):
    """
    Sends notifications via Pushover API.

    Config:
        user_key: Pushover user key
        api_token: Pushover API token
        priorities: Optional mapping of log type to Pushover priority
        priority: Priority for log types without mapping (default: 0)
    """

    PUSHOVER_API_URL: ClassVar[str] = "https://api.pushover.net/1/messages.json"

    # Pushover truncates longer messages
    MAX_MESSAGE_LENGTH: ClassVar[int] = 1024

    def notify(self, report: Report) -> bool:
        """Send notification via Pushover."""
        priorities = self.config.get("priorities", {})
        priority = priorities.get(report.level, self.config.get("priority", 0))

        payload = {
            "token": self.config["api_token"],
            "user": self.config["user_key"],
            "title": report.subject,
            "message": report.body[:self.MAX_MESSAGE_LENGTH],
            "priority": priority,
        }

        # Priority 2 (emergency) requires retry and expire parameters
        if priority == 2:
            payload["retry"] = 30
            payload["expire"] = 3600

        try:
            response = requests.post(
                self.PUSHOVER_API_URL,
                data=payload,
                timeout=self.config.get("timeout", 10)
            )
            response.raise_for_status()
            logger.info("Pushover notification sent successfully for level '%s'", report.level)
            return True
        except requests.RequestException:
            logger.error(
                "Failed to send Pushover notification for level '%s'",
                report.level,
                exc_info=True
            )
            return False


# Export for dynamic importing
__all__ = ["PushoverNotifier"]
