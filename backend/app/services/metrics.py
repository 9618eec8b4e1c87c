"""Small numeric helpers shared by the analytics services."""

import math
from collections import Counter
from datetime import datetime
from typing import Iterable, Optional

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with .5 going towards +infinity (dashboard rounding).

    Python's ``round`` uses banker's rounding, which makes 2.5 -> 2; the
    dashboards expect 3.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))


def percent(part: float, whole: float, digits: int = 0) -> float:
    """``part / whole * 100`` rounded; 0 when ``whole`` is 0."""
    if not whole:
        return 0
    result = round_half_up(part / whole * 100, digits)
    return int(result) if digits == 0 else result


def mean(values: Iterable[float]) -> Optional[float]:
    items = list(values)
    if not items:
        return None
    return sum(items) / len(items)


def bounded_mean(values: Iterable[Optional[float]], upper: float) -> float:
    """Average of values in the open interval (0, upper); 0 when none qualify."""
    kept = [v for v in values if v is not None and 0 < v < upper]
    return sum(kept) / len(kept) if kept else 0.0


def top_counts(counter: Counter, limit: Optional[int] = None) -> list[tuple[str, int]]:
    """Most common entries, ties keep first-seen order."""
    return counter.most_common(limit)


def day_name(moment: datetime) -> str:
    # isoweekday: Mon=1 .. Sun=7
    return DAY_NAMES[moment.isoweekday() % 7]


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00"


def truncate_label(label: str, width: int) -> str:
    return label[:width] + ".." if len(label) > width else label
