"""
Fixed-point arithmetic helpers.

Magnitudes (averages, disk usage) are integers scaled by 100, variation
percentages are integers scaled by 10000 (a percentage with two decimals,
times 100). Divisions truncate toward zero.
"""

import re
from collections.abc import Mapping

SCALE = 100
VARIATION_SCALE = 10000

_FLOAT_PATTERN = re.compile(r"^([+-]?)(\d+)\.(\d{2})%?$")


def _truncating_div(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero (``//`` floors)."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def average(total: int, count: int) -> int:
    """
    Average of ``count`` data points summing to ``total``, scaled by 100.

    Raises:
        ValueError: If count is not positive
    """
    if count < 1:
        raise ValueError(f"Cannot average over {count} data points")
    return _truncating_div(SCALE * total, count)


def variation(baseline: int, current: int) -> int:
    """
    Variation of a raw current value relative to a scaled baseline.

    Args:
        baseline: Reference value, scaled by 100
        current: Current raw value

    Returns:
        Signed percentage scaled by 10000 (``5000`` is ``+50.00%``).
        A zero baseline yields ``+100.00%`` on any increase, ``0`` otherwise.
    """
    diff = SCALE * current - baseline
    if baseline == 0:
        return VARIATION_SCALE if diff > 0 else 0
    return _truncating_div(VARIATION_SCALE * diff, baseline)


def variations(baselines: Mapping[str, int], currents: Mapping[str, int]) -> dict[str, int]:
    """
    Element-wise variation of two severity-keyed vectors.

    Raises:
        ValueError: If both vectors are not keyed by the same severity types
    """
    if list(baselines) != list(currents):
        raise ValueError(
            f"Mismatched vectors: {list(baselines)} vs {list(currents)}"
        )
    return {label: variation(baselines[label], currents[label]) for label in currents}


def scale(values: Mapping[str, int]) -> dict[str, int]:
    """Scale raw counts by 100 so they can be used as a baseline."""
    return {label: SCALE * value for label, value in values.items()}


def format_float(value: int) -> str:
    """
    Format a value scaled by 100 with two decimals.

    >>> format_float(5)
    '0.05'
    >>> format_float(1234)
    '12.34'
    """
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), SCALE)
    return f"{sign}{whole}.{fraction:02d}"


def format_variation(value: int) -> str:
    """Format a variation as a signed percentage, e.g. ``5000`` is ``+50.00%``."""
    sign = "+" if value >= 0 else ""
    return f"{sign}{format_float(value)}%"


def parse_float(text: str) -> int:
    """
    Parse a value rendered by :func:`format_float` (or a variation) back to
    its scaled integer.

    Raises:
        ValueError: If the text is not a two-decimal number
    """
    match = _FLOAT_PATTERN.match(text.strip())
    if not match:
        raise ValueError(f"Not a two-decimal value: {text!r}")
    sign, whole, fraction = match.groups()
    value = int(whole) * SCALE + int(fraction)
    return -value if sign == "-" else value
