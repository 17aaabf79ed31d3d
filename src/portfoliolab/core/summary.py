"""
Net impact and summary calculations.

Derives the monthly net-impact series, whole-horizon category totals, ROI,
trailing run rate, and fiscal/calendar year rollups from aggregated kind
totals.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from .errors import ConfigError
from .kinds import K
from .models import KindTotals, MonthDescriptor, RollupTotals, YearSummaries, YearSummaryEntry
from .months import parse_month_key
from .utils import is_finite_number, month_parts

DEFAULT_FISCAL_YEAR_START_MONTH = 4  # April
DEFAULT_RUN_RATE_WINDOW = 12


def net_impact(
    months: Iterable[MonthDescriptor],
    benefit_kinds: Iterable[str],
    cost_kinds: Iterable[str],
    totals: KindTotals,
) -> dict[str, float]:
    """
    Net impact per grid month: benefits minus costs.

    Costs are subtracted as stored; callers keep the sign convention
    consistent with the chart series.
    """
    benefit_kinds = list(benefit_kinds)
    cost_kinds = list(cost_kinds)
    impact: dict[str, float] = {}
    for month in months:
        benefits = math.fsum(totals.get(k, {}).get(month.key, 0.0) for k in benefit_kinds)
        costs = math.fsum(totals.get(k, {}).get(month.key, 0.0) for k in cost_kinds)
        impact[month.key] = benefits - costs
    return impact


def aggregate_totals(
    kind_totals: KindTotals,
    benefit_kinds: Iterable[str],
    cost_kinds: Iterable[str],
) -> RollupTotals:
    """
    Sum each category over all months, zeroing categories outside the view.

    A kind that is not in ``benefit_kinds``/``cost_kinds`` reports 0 even when
    ``kind_totals`` holds data for it, so the one-off toggle can blank a whole
    category without re-aggregating.
    """
    benefit_kinds = set(benefit_kinds)
    cost_kinds = set(cost_kinds)

    def sum_kind(kind: str) -> float:
        return math.fsum(kind_totals.get(kind, {}).values())

    recurring_benefits = (
        sum_kind(K.RECURRING_BENEFIT) if K.RECURRING_BENEFIT in benefit_kinds else 0.0
    )
    oneoff_benefits = (
        sum_kind(K.ONEOFF_BENEFIT) if K.ONEOFF_BENEFIT in benefit_kinds else 0.0
    )
    recurring_costs = sum_kind(K.RECURRING_COST) if K.RECURRING_COST in cost_kinds else 0.0
    oneoff_costs = sum_kind(K.ONEOFF_COST) if K.ONEOFF_COST in cost_kinds else 0.0
    return RollupTotals(
        recurring_benefits=recurring_benefits,
        recurring_costs=recurring_costs,
        oneoff_benefits=oneoff_benefits,
        oneoff_costs=oneoff_costs,
        recurring_impact=recurring_benefits - recurring_costs,
    )


_TOTAL_FIELDS = {
    "recurring_benefits": "recurringBenefits",
    "recurring_costs": "recurringCosts",
    "oneoff_benefits": "oneoffBenefits",
    "oneoff_costs": "oneoffCosts",
}


def _coerce_totals(totals: RollupTotals | Mapping[str, float]) -> RollupTotals:
    if isinstance(totals, RollupTotals):
        return totals
    values = {}
    for name, camel in _TOTAL_FIELDS.items():
        raw = totals.get(name, totals.get(camel, 0.0))
        try:
            values[name] = float(raw)
        except (TypeError, ValueError):
            values[name] = math.nan
    return RollupTotals(
        **values,
        recurring_impact=values["recurring_benefits"] - values["recurring_costs"],
    )


def calculate_roi(totals: RollupTotals | Mapping[str, float]) -> float | None:
    """
    Return on one-off investment.

    ``(all benefits - all costs) / oneoff_costs``. Returns None when there was
    no one-off cost or when any input makes the ratio non-finite; None means
    "ROI undefined" and is distinct from an ROI of 0.

    Example:
        ```python
        calculate_roi(RollupTotals(recurring_benefits=100.0, recurring_impact=100.0))
        # None  (no one-off investment)
        ```
    """
    t = _coerce_totals(totals)
    denominator = t.oneoff_costs
    if not is_finite_number(denominator) or denominator == 0:
        return None
    roi = (
        t.recurring_benefits + t.oneoff_benefits - t.recurring_costs - t.oneoff_costs
    ) / denominator
    return roi if is_finite_number(roi) else None


def roi_delta(actual: float | None, plan: float | None) -> float | None:
    """Actual minus plan ROI, or None when either side is undefined."""
    if not is_finite_number(actual) or not is_finite_number(plan):
        return None
    return actual - plan


def calculate_run_rate(
    month_keys: Sequence[str],
    impact_by_month: Mapping[str, float],
    window_size: int = DEFAULT_RUN_RATE_WINDOW,
) -> float:
    """
    Trailing run rate: the sum of net impact over the last ``window_size`` months.

    ``month_keys`` is the ordered grid; months absent from ``impact_by_month``
    count as zero. An empty grid gives 0.0.
    """
    if window_size < 1:
        raise ConfigError(f"window_size must be >= 1, got {window_size}")
    keys = list(month_keys)
    if not keys:
        return 0.0
    window = keys[-window_size:]
    return math.fsum(impact_by_month.get(key, 0.0) for key in window)


def _validate_fiscal_start(fiscal_start_month: int) -> int:
    if isinstance(fiscal_start_month, bool) or not isinstance(
        fiscal_start_month, (int, np.integer)
    ):
        raise ConfigError(
            f"fiscal_start_month must be an integer, got {fiscal_start_month!r}"
        )
    if not 1 <= fiscal_start_month <= 12:
        raise ConfigError(
            f"fiscal_start_month must be between 1 and 12, got {fiscal_start_month}"
        )
    return int(fiscal_start_month)


def fiscal_year_of(year: int, month: int, fiscal_start_month: int) -> int:
    """
    Fiscal year containing a calendar month, named by the year it ends in.

    With an April start, April 2025 .. March 2026 is FY2026. Months on or after
    the start month always roll into the next fiscal year, so a January start
    labels calendar 2025 as FY2026.
    """
    if month >= fiscal_start_month:
        return year + 1
    return year


def calculate_year_summaries(
    impact_by_month: Mapping[str, float],
    fiscal_start_month: int = DEFAULT_FISCAL_YEAR_START_MONTH,
) -> YearSummaries:
    """
    Roll a monthly series up into fiscal and calendar years.

    Unparseable keys and non-finite values are ignored. Both lists are sorted
    by year; fiscal labels carry an ``FY`` prefix.
    """
    start = _validate_fiscal_start(fiscal_start_month)

    rows = []
    for key, value in impact_by_month.items():
        parsed = parse_month_key(key)
        if parsed is None or not is_finite_number(value):
            continue
        year, month = month_parts(parsed)
        rows.append((year, fiscal_year_of(year, month, start), float(value)))

    if not rows:
        return YearSummaries()

    frame = pd.DataFrame(rows, columns=["year", "fiscal_year", "value"])
    calendar = frame.groupby("year")["value"].sum().sort_index()
    fiscal = frame.groupby("fiscal_year")["value"].sum().sort_index()
    return YearSummaries(
        fiscal=tuple(
            YearSummaryEntry(label=f"FY{year}", value=float(total))
            for year, total in fiscal.items()
        ),
        calendar=tuple(
            YearSummaryEntry(label=str(year), value=float(total))
            for year, total in calendar.items()
        ),
    )
