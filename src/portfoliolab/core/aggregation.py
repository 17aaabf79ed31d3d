"""
Kind totals aggregator.

Sums financial line amounts per kind and per month across a set of
initiatives, honouring the stage filter. Only the initiative's active stage
contributes; the source records are never modified.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping

import pandas as pd

from .errors import ConfigError
from .kinds import K, validate_kinds
from .models import (
    AggregationResult,
    FinancialLineEntry,
    Initiative,
    KindTotals,
    MonthDescriptor,
    RollupTotals,
)

logger = logging.getLogger(__name__)

Selector = Callable[[FinancialLineEntry], Mapping[str, float] | None]


def plan_selector(entry: FinancialLineEntry) -> Mapping[str, float]:
    """Planned distribution of a line."""
    return entry.distribution


def actuals_selector(entry: FinancialLineEntry) -> Mapping[str, float]:
    """Recorded actuals of a line; lines without actuals contribute nothing."""
    return entry.actuals or {}


def _as_amount(raw) -> float | None:
    if isinstance(raw, bool):
        raw = int(raw)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def aggregate_kind_totals(
    initiatives: Iterable[Initiative],
    stage_filter: Iterable[str],
    kinds: Iterable[str],
    selector: Selector = plan_selector,
) -> AggregationResult:
    """
    Sum the requested kinds per month across stage-filtered initiatives.

    Non-finite or non-numeric amounts are skipped and do not mark their month
    as observed. An explicit zero does. Sums use ``math.fsum`` so the result
    does not depend on the order of initiatives or entries.

    Args:
        initiatives: Initiative snapshot to aggregate
        stage_filter: Stage keys to include; empty excludes everything
        kinds: Non-empty list of kinds to include
        selector: Picks the month->amount mapping of a line (plan or actuals)

    Returns:
        AggregationResult with a slot for every kind (unrequested kinds stay empty)

    Raises:
        ConfigError: If ``kinds`` is empty or contains an unknown tag
    """
    requested = validate_kinds(kinds)
    if not requested:
        raise ConfigError("At least one financial kind must be requested")
    stages = frozenset(stage_filter)

    parts: dict[str, dict[str, list[float]]] = {kind: {} for kind in K.all_kinds()}
    month_keys: set[str] = set()
    skipped = 0

    for initiative in initiatives:
        if initiative.active_stage not in stages:
            continue
        stage = initiative.active
        if stage is None:
            continue
        for kind in dict.fromkeys(requested):
            bucket = parts[kind]
            for entry in stage.entries(kind):
                source = selector(entry) or {}
                for month_key, raw in source.items():
                    value = _as_amount(raw)
                    if value is None:
                        skipped += 1
                        continue
                    bucket.setdefault(month_key, []).append(value)
                    month_keys.add(month_key)

    if skipped:
        logger.debug("Skipped %d non-finite amounts during aggregation", skipped)

    totals: KindTotals = {
        kind: {key: math.fsum(values) for key, values in slots.items()}
        for kind, slots in parts.items()
    }
    return AggregationResult(totals=totals, month_keys=frozenset(month_keys))


def totals_frame(totals: KindTotals, months: Iterable[MonthDescriptor]) -> pd.DataFrame:
    """
    Tabulate kind totals over a month grid.

    Rows follow the grid order, columns are the four kinds, and months with no
    data are 0.0. Amounts outside the grid are dropped.
    """
    keys = [month.key for month in months]
    data = {
        kind: [float(totals.get(kind, {}).get(key, 0.0)) for key in keys]
        for kind in K.all_kinds()
    }
    return pd.DataFrame(data, index=pd.Index(keys, name="month"))


def initiative_totals(initiative: Initiative) -> RollupTotals:
    """
    Planned totals of one initiative across all of its stages.

    Used for the per-record totals stored alongside an initiative; unlike the
    dashboard rollups it is not restricted to the active stage.
    """
    sums: dict[str, list[float]] = {kind: [] for kind in K.all_kinds()}
    for stage in initiative.stages.values():
        for kind in K.all_kinds():
            for entry in stage.entries(kind):
                for raw in entry.distribution.values():
                    value = _as_amount(raw)
                    if value is not None:
                        sums[kind].append(value)

    recurring_benefits = math.fsum(sums[K.RECURRING_BENEFIT])
    recurring_costs = math.fsum(sums[K.RECURRING_COST])
    return RollupTotals(
        recurring_benefits=recurring_benefits,
        recurring_costs=recurring_costs,
        oneoff_benefits=math.fsum(sums[K.ONEOFF_BENEFIT]),
        oneoff_costs=math.fsum(sums[K.ONEOFF_COST]),
        recurring_impact=recurring_benefits - recurring_costs,
    )
