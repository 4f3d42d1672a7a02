"""
Threshold evaluation and notification gating.
"""

from collections.abc import Mapping, Sequence

from sysobs.core import SeverityType
from sysobs.fixed_point import SCALE, format_float
from sysobs.logging_config import get_logger

logger = get_logger(__name__)


class ThresholdEvaluator:
    """
    Finds the most severe severity type whose thresholds are exceeded.

    Each severity type carries two thresholds:
        max_absolute: accepted number of occurrences
        max_variation: accepted variation to the history average, in percent

    A negative threshold is disabled and never exceeded.
    """

    def __init__(self, severities: Sequence[SeverityType]):
        """
        Args:
            severities: Severity types, most severe first
        """
        self.severities = tuple(severities)

    def evaluate(
        self,
        counts: Mapping[str, int],
        variations: Mapping[str, int] | None = None
    ) -> SeverityType | None:
        """
        Return the exceeded severity type, or None.

        Severity types are checked most severe first and the first breach
        wins. For a single type, the absolute threshold is checked before the
        variation threshold.

        Args:
            counts: Occurrences per severity label
            variations: Variations per severity label (percent scaled by 100),
                empty or None when there is no history
        """
        for severity in self.severities:
            count = counts[severity.label]
            if severity.has_absolute_limit and count > severity.max_absolute:
                logger.debug(
                    "Threshold (max) for %s reached (%d>%d)",
                    severity.label, count, severity.max_absolute
                )
                return severity

            if variations and severity.has_variation_limit:
                limit = SCALE * severity.max_variation
                value = variations[severity.label]
                if value > limit:
                    logger.debug(
                        "Threshold (var) for %s reached (%s>%s)",
                        severity.label, format_float(value), format_float(limit)
                    )
                    return severity

        return None


def severity_index(label: str | None, severities: Sequence[SeverityType]) -> int:
    """Position of a label in the severity order, past the end when unknown."""
    for index, severity in enumerate(severities):
        if severity.label == label:
            return index
    return len(severities)


def should_notify(
    verdict: SeverityType | None,
    minimum_level: str,
    severities: Sequence[SeverityType],
) -> bool:
    """
    Decide whether a verdict is severe enough to be notified.

    Args:
        verdict: Exceeded severity type, or None
        minimum_level: Least severe label that still triggers a notification
        severities: Severity types, most severe first

    Returns:
        True if the verdict is at least as severe as the minimum level.
        An unknown minimum level never notifies.
    """
    if verdict is None:
        return False

    verdict_index = severity_index(verdict.label, severities)
    minimum_index = severity_index(minimum_level, severities)
    if minimum_index == len(severities):
        logger.warning("Unknown notification level '%s', notifications disabled", minimum_level)
        return False
    return verdict_index <= minimum_index
