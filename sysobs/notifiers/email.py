"""
Email notifier for SysObs.
"""

import smtplib
from email.message import EmailMessage
from email.utils import formatdate
from typing import Any, ClassVar
from urllib.parse import urlsplit

from sysobs.core import Notifier, Report
from sysobs.logging_config import get_logger
from sysobs.registry import register_notifier

logger = get_logger(__name__)


@register_notifier("email")
class EmailNotifier(Notifier):
    """
    Sends notifications via SMTP.

    Config:
        endpoint: SMTP server URL, e.g. "smtps://smtp.example.com:465"
        sender: Sender email address
        receiver: Recipient email address (or a list of addresses)
        username: SMTP username (optional)
        password: SMTP password (optional)
        starttls: Upgrade a plain "smtp://" connection with STARTTLS (default: false)
        timeout: Connection timeout in seconds (default: 10)
    """

    DEFAULT_PORTS: ClassVar[dict[str, int]] = {
        "smtp": 25,
        "smtps": 465,
    }

    def __init__(self, config: dict[str, Any]):
        super().__init__(config)
        self.endpoint = urlsplit(config.get("endpoint", ""))
        if self.endpoint.scheme not in self.DEFAULT_PORTS:
            raise ValueError(f"Unsupported SMTP endpoint scheme: {self.endpoint.scheme}")

    def build_message(self, report: Report) -> EmailMessage:
        """Build the email for a report."""
        receivers = self.config["receiver"]
        if isinstance(receivers, str):
            receivers = [receivers]

        msg = EmailMessage()
        msg["Subject"] = report.subject
        msg["From"] = self.config["sender"]
        msg["To"] = ", ".join(receivers)
        msg["Date"] = formatdate(localtime=True)
        msg.set_content(report.body)
        return msg

    def notify(self, report: Report) -> bool:
        """Send notification via email."""
        endpoint = self.endpoint
        host = endpoint.hostname or "localhost"
        port = endpoint.port or self.DEFAULT_PORTS[endpoint.scheme]
        timeout = self.config.get("timeout", 10)
        username = self.config.get("username")
        password = self.config.get("password", "")

        msg = self.build_message(report)
        smtp_class = smtplib.SMTP_SSL if endpoint.scheme == "smtps" else smtplib.SMTP

        try:
            with smtp_class(host, port, timeout=timeout) as smtp:
                if self.config.get("starttls", False):
                    smtp.starttls()
                if username:
                    smtp.login(username, password)
                smtp.send_message(msg)
            logger.info("Email notification sent successfully to %s", msg["To"])
            return True
        except (smtplib.SMTPException, OSError):
            logger.error(
                "Failed to send email notification through %s:%s",
                host,
                port,
                exc_info=True
            )
            return False


# Export for dynamic importing
__all__ = ["EmailNotifier"]
