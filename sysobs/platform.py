"""
System information included in reports.
"""

import shutil
import socket
from pathlib import Path

from sysobs.logging_config import get_logger

logger = get_logger(__name__)


def disk_usage_percent(volume: str | Path) -> int | None:
    """
    Get the used space of the volume holding a path, in percent.

    Mirrors the ``Use%`` column of ``df``: used space relative to the space
    available to unprivileged users, rounded up.

    Args:
        volume: Any path on the volume

    Returns:
        Integer percentage, or None if the volume cannot be inspected
    """
    try:
        usage = shutil.disk_usage(volume)
    except OSError as e:
        logger.warning("Cannot read disk usage of '%s': %s", volume, e)
        return None

    # shutil reports free space available to unprivileged users
    capacity = usage.used + usage.free
    if capacity == 0:
        return 0
    return -(-usage.used * 100 // capacity)


def get_hostname() -> str:
    """Name of the host sending the report."""
    return socket.gethostname()
