"""
Centralized logging configuration for SysObs.

Provides consistent logging setup across all modules, gated by the
numeric verbosity used on the command line and in configuration files.
"""

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# 0=TRACE, 1=DEBUG, 2=INFO, 3=WARNING, 4=ERROR
VERBOSITY_LEVELS: dict[int, int] = {
    0: TRACE,
    1: logging.DEBUG,
    2: logging.INFO,
    3: logging.WARNING,
    4: logging.ERROR,
}

DEFAULT_VERBOSITY = 2


def verbosity_to_level(verbosity: int) -> int:
    """
    Map a verbosity value to a logging level.

    Values outside of the known range are clamped to the nearest bound.
    """
    clamped = min(max(verbosity, 0), max(VERBOSITY_LEVELS))
    return VERBOSITY_LEVELS[clamped]


def setup_logging(verbosity: int = DEFAULT_VERBOSITY) -> None:
    """
    Configure logging for SysObs.

    Args:
        verbosity: Verbosity (0=TRACE, 1=DEBUG, 2=INFO, 3=WARNING, 4=ERROR)
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger("sysobs")
    root_logger.setLevel(verbosity_to_level(verbosity))

    # Remove existing handlers, setup may run twice (defaults, then resolved config)
    root_logger.handlers.clear()

    # Console handler on stderr, stdout is left for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Prevent propagation to root logger
    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    # Strip 'sysobs.' prefix if present for cleaner names
    if name.startswith("sysobs."):
        name = name[7:]

    return logging.getLogger(f"sysobs.{name}")
