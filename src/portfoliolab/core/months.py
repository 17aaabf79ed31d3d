"""
Month keys and the month grid used as the time axis of every rollup.

A month key is a ``YYYY-MM`` string. The grid is a contiguous, ascending list
of :class:`MonthDescriptor` covering every observed month plus the configured
planning horizon.
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable
from datetime import date, datetime

import numpy as np

from .kinds import K
from .models import MonthDescriptor, PeriodEnd, StageData
from .utils import current_month, month_parts, month_range, months_between

logger = logging.getLogger(__name__)

# Rolling window used when no valid planning horizon is configured
DEFAULT_WINDOW_MONTHS = 12

# Hard cap on grid length (30 years)
MAX_GRID_MONTHS = 360

Today = date | datetime | np.datetime64 | None


def parse_month_key(key: str) -> np.datetime64 | None:
    """
    Parse a ``YYYY-MM`` key into a ``datetime64[M]``.

    Trailing parts are ignored, so ``"2025-01-15"`` parses as January 2025.

    Returns None for anything that does not name a real calendar month
    (wrong shape, non-numeric parts, month outside 1-12).
    """
    if not isinstance(key, str):
        return None
    parts = key.strip().split("-")
    if len(parts) < 2:
        return None
    try:
        year = int(parts[0])
        month = int(parts[1])
    except ValueError:
        return None
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        return None
    return np.datetime64(f"{year:04d}-{month:02d}", "M")


def format_month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_start(key: str) -> date | None:
    """First day of the month named by ``key``, or None if it is unparseable."""
    parsed = parse_month_key(key)
    if parsed is None:
        return None
    return parsed.astype("datetime64[D]").item()


def _period_end_month(period_end: PeriodEnd | dict | None) -> np.datetime64 | None:
    if period_end is None:
        return None
    if isinstance(period_end, dict):
        period_end = PeriodEnd.from_value(period_end)
    year = period_end.year
    # An unset month means January
    month = period_end.month or 1
    if year is None or not 1 <= month <= 12 or not 1 <= year <= 9999:
        return None
    return np.datetime64(f"{year:04d}-{month:02d}", "M")


def _describe(months: np.ndarray) -> list[MonthDescriptor]:
    out = []
    for index, month in enumerate(months):
        year, month_number = month_parts(month)
        out.append(
            MonthDescriptor(
                key=format_month_key(year, month_number),
                label=calendar.month_abbr[month_number],
                year=year,
                index=index,
            )
        )
    return out


def _grid(start: np.datetime64, end: np.datetime64) -> list[MonthDescriptor]:
    span = months_between(start, end) + 1
    if span > MAX_GRID_MONTHS:
        logger.debug(
            "Month grid %s..%s spans %d months; truncating to %d",
            start,
            end,
            span,
            MAX_GRID_MONTHS,
        )
        span = MAX_GRID_MONTHS
    return _describe(month_range(start, span))


def build_months(
    month_key_sets: Iterable[Iterable[str]],
    period_end: PeriodEnd | dict | None = None,
    today: Today = None,
) -> list[MonthDescriptor]:
    """
    Build the month grid for one or more aggregations.

    The grid starts at the earliest observed month (or the current month when
    nothing was observed) and ends at the later of the latest observed month
    and the planning horizon. The horizon is ``period_end`` when it is valid
    and not before the current month, otherwise a rolling 12-month window.

    Args:
        month_key_sets: Observed month keys, one set per aggregation. A single
            set or a flat list of keys is treated as one aggregation.
        period_end: Configured end of the planning horizon
        today: Reference date; defaults to the local date

    Returns:
        Contiguous ascending descriptors, at most ``MAX_GRID_MONTHS`` long
    """
    if isinstance(month_key_sets, str):
        month_key_sets = [[month_key_sets]]
    elif isinstance(month_key_sets, (set, frozenset)):
        month_key_sets = [month_key_sets]
    else:
        # Bare keys mixed in at the top level form one extra set
        items = list(month_key_sets)
        flat = [item for item in items if isinstance(item, str)]
        month_key_sets = [item for item in items if not isinstance(item, str)]
        if flat:
            month_key_sets.append(flat)

    now = current_month(today)
    default_end = now + np.timedelta64(DEFAULT_WINDOW_MONTHS - 1, "M")
    candidate = _period_end_month(period_end)
    baseline_end = candidate if candidate is not None and candidate >= now else default_end

    earliest: np.datetime64 | None = None
    latest: np.datetime64 | None = None
    for keys in month_key_sets:
        for key in keys:
            parsed = parse_month_key(key)
            if parsed is None:
                logger.debug("Ignoring unparseable month key %r", key)
                continue
            if earliest is None or parsed < earliest:
                earliest = parsed
            if latest is None or parsed > latest:
                latest = parsed

    start = earliest if earliest is not None else now
    end = latest if latest is not None and latest > baseline_end else baseline_end
    if start > end:
        start = end
    return _grid(start, end)


def build_stage_months(stage: StageData, today: Today = None) -> list[MonthDescriptor]:
    """
    Month grid for editing a single stage's financial plan.

    Ends at the stage's own planning period (or the rolling 12-month window
    when the period is unset or already past) and starts at the earliest
    planned month if that lies in the past, otherwise at the current month.
    """
    now = current_month(today)
    default_end = now + np.timedelta64(DEFAULT_WINDOW_MONTHS - 1, "M")
    default_year, default_month = month_parts(default_end)
    candidate = _period_end_month(
        PeriodEnd(
            month=stage.period_month or default_month,
            year=stage.period_year or default_year,
        )
    )
    end = candidate if candidate is not None and candidate >= now else default_end

    earliest: np.datetime64 | None = None
    for kind in K.all_kinds():
        for entry in stage.entries(kind):
            for key in entry.distribution:
                parsed = parse_month_key(key)
                if parsed is not None and (earliest is None or parsed < earliest):
                    earliest = parsed

    start = earliest if earliest is not None and earliest < now else now
    return _grid(start, end)
