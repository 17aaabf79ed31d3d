"""
Utility functions for PortfolioLab.
"""

from __future__ import annotations

import math
from datetime import date, datetime

import numpy as np

_ONE_MONTH = np.timedelta64(1, "M")


def month_range(start: np.datetime64 | date, months: int) -> np.ndarray:
    """
    Generate a range of consecutive months starting from a given month.

    **Args:**
        start: First month (anything ``np.datetime64(..., "M")`` accepts)
        months: Number of months to generate

    **Returns:**
        A numpy array of ``datetime64[M]`` values

    **Example:**
        ```python
        from datetime import date
        from portfoliolab.core.utils import month_range

        month_range(date(2026, 11, 1), 3)
        # array(['2026-11', '2026-12', '2027-01'], dtype='datetime64[M]')
        ```
    """
    s = np.datetime64(start, "M")
    return s + np.arange(months).astype("timedelta64[M]")


def months_between(start: np.datetime64, end: np.datetime64) -> int:
    """Number of whole calendar months from ``start`` to ``end`` (may be negative)."""
    return int((np.datetime64(end, "M") - np.datetime64(start, "M")) // _ONE_MONTH)


def month_parts(month: np.datetime64) -> tuple[int, int]:
    """Split a ``datetime64[M]`` into ``(year, month)`` with month in 1-12."""
    offset = int(np.datetime64(month, "M").astype(np.int64))
    return 1970 + offset // 12, offset % 12 + 1


def current_month(today: date | datetime | np.datetime64 | None = None) -> np.datetime64:
    """Truncate ``today`` (default: the local date) to the first day of its month."""
    if today is None:
        today = date.today()
    if isinstance(today, datetime):
        today = today.date()
    return np.datetime64(today, "M")


def is_finite_number(value) -> bool:
    """True for real numbers that are neither NaN nor infinite (bools excluded)."""
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False
