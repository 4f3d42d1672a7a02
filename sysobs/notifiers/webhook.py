"""
Webhook notifier for SysObs.
"""

from typing import Any

import requests

from sysobs.core import Notifier, Report
from sysobs.logging_config import get_logger
from sysobs.registry import register_notifier

logger = get_logger(__name__)


@register_notifier("webhook")
class WebhookNotifier(Notifier):
    """
    Sends notifications via HTTP webhook.

    Config:
        url: Webhook URL to send the report to
        method: HTTP method, POST or PUT (default: POST)
        headers: Optional HTTP headers
        timeout: Request timeout in seconds (default: 10)
    """

    def __init__(self, config: dict[str, Any]):
        super().__init__(config)
        self.method = config.get("method", "POST").upper()
        if self.method not in ("POST", "PUT"):
            raise ValueError(f"Unsupported HTTP method: {self.method}")

    def notify(self, report: Report) -> bool:
        """Send notification via webhook."""
        url = self.config["url"]
        headers = self.config.get("headers", {})
        timeout = self.config.get("timeout", 10)

        payload = {
            "subject": report.subject,
            "body": report.body,
            "level": report.level,
            "context": report.context,
        }

        try:
            response = requests.request(
                self.method, url, json=payload, headers=headers, timeout=timeout
            )
            response.raise_for_status()
            logger.info("Webhook notification sent successfully to %s", url)
            return True
        except requests.RequestException:
            logger.error("Failed to send webhook notification to %s", url, exc_info=True)
            return False


# Export for dynamic importing
__all__ = ["WebhookNotifier"]
