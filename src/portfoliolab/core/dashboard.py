"""
Dashboard orchestration for portfolio rollups.

Wires the aggregator, month grid, chart series and summary calculations
together for the two dashboard views:

- **Outlook**: planned distribution of the filtered initiatives
- **Actuals**: plan and recorded actuals side by side on one month grid

Views are pure functions of the initiative snapshot, the settings, the filters
and the reference month, and are cached on exactly those values.
"""

from __future__ import annotations

import functools
import hashlib
import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any

from .aggregation import actuals_selector, aggregate_kind_totals, plan_selector
from .errors import ConfigError
from .kinds import STAGE_KEYS, benefit_kinds, cost_kinds
from .models import (
    AggregationResult,
    Initiative,
    MonthDescriptor,
    MonthStack,
    PeriodEnd,
    RollupTotals,
    YearSummaries,
)
from .months import Today, build_months
from .stacks import KIND_COLORS, actual_palette, build_stacks
from .summary import (
    DEFAULT_FISCAL_YEAR_START_MONTH,
    DEFAULT_RUN_RATE_WINDOW,
    aggregate_totals,
    calculate_roi,
    calculate_run_rate,
    calculate_year_summaries,
    net_impact,
    roi_delta,
)
from .utils import current_month

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortfolioSettings:
    """Portfolio-level settings shared by every view."""

    fiscal_start_month: int = DEFAULT_FISCAL_YEAR_START_MONTH
    period_end: PeriodEnd | None = None
    run_rate_window: int = DEFAULT_RUN_RATE_WINDOW

    def __post_init__(self):
        if not 1 <= self.fiscal_start_month <= 12:
            raise ConfigError(
                f"fiscal_start_month must be between 1 and 12, got {self.fiscal_start_month}"
            )
        if self.run_rate_window < 1:
            raise ConfigError(
                f"run_rate_window must be >= 1, got {self.run_rate_window}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PortfolioSettings:
        """Read the ``settings`` section of a portfolio document."""
        data = data or {}
        period_end = data.get("periodEnd", data.get("period_end"))
        return cls(
            fiscal_start_month=int(
                data.get(
                    "fiscalStartMonth",
                    data.get("fiscal_start_month", DEFAULT_FISCAL_YEAR_START_MONTH),
                )
            ),
            period_end=PeriodEnd.from_value(period_end),
            run_rate_window=int(
                data.get(
                    "runRateWindow",
                    data.get("run_rate_window", DEFAULT_RUN_RATE_WINDOW),
                )
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "fiscal_start_month": self.fiscal_start_month,
            "period_end": (
                None
                if self.period_end is None
                else {"month": self.period_end.month, "year": self.period_end.year}
            ),
            "run_rate_window": self.run_rate_window,
        }


@dataclass(frozen=True)
class DashboardFilters:
    """
    UI-controlled filters for one view.

    Attributes:
        stages: Stage keys to include (empty excludes everything)
        include_oneoff: Whether one-off benefits/costs are part of the view
        workstream_id: Restrict to one workstream; None means all
    """

    stages: frozenset[str] = field(default_factory=lambda: frozenset(STAGE_KEYS))
    include_oneoff: bool = True
    workstream_id: str | None = None

    def __post_init__(self):
        # Accept any iterable of stage keys but keep the instance hashable
        object.__setattr__(self, "stages", frozenset(self.stages))

    @property
    def benefit_kinds(self) -> list[str]:
        return benefit_kinds(self.include_oneoff)

    @property
    def cost_kinds(self) -> list[str]:
        return cost_kinds(self.include_oneoff)

    @property
    def kinds(self) -> list[str]:
        return self.benefit_kinds + self.cost_kinds


@dataclass(frozen=True)
class OutlookView:
    """Planned rollup of the filtered initiatives."""

    filters: DashboardFilters
    months: tuple[MonthDescriptor, ...]
    plan: AggregationResult
    stacks: tuple[MonthStack, ...]
    impact: Mapping[str, float]
    run_rate: float
    summaries: YearSummaries
    totals: RollupTotals
    roi: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "months": [m.to_dict() for m in self.months],
            "stacks": [s.to_dict() for s in self.stacks],
            "impact": dict(self.impact),
            "run_rate": self.run_rate,
            "summaries": self.summaries.to_dict(),
            "totals": self.totals.to_dict(),
            "roi": self.roi,
        }


@dataclass(frozen=True)
class ActualsView:
    """Plan versus recorded actuals on a shared month grid."""

    filters: DashboardFilters
    months: tuple[MonthDescriptor, ...]
    plan: AggregationResult
    actual: AggregationResult
    plan_stacks: tuple[MonthStack, ...]
    actual_stacks: tuple[MonthStack, ...]
    plan_impact: Mapping[str, float]
    actual_impact: Mapping[str, float]
    plan_run_rate: float
    actual_run_rate: float
    plan_summaries: YearSummaries
    actual_summaries: YearSummaries
    plan_totals: RollupTotals
    actual_totals: RollupTotals
    plan_roi: float | None
    actual_roi: float | None
    roi_delta: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "months": [m.to_dict() for m in self.months],
            "plan": {
                "stacks": [s.to_dict() for s in self.plan_stacks],
                "impact": dict(self.plan_impact),
                "run_rate": self.plan_run_rate,
                "summaries": self.plan_summaries.to_dict(),
                "totals": self.plan_totals.to_dict(),
                "roi": self.plan_roi,
            },
            "actual": {
                "stacks": [s.to_dict() for s in self.actual_stacks],
                "impact": dict(self.actual_impact),
                "run_rate": self.actual_run_rate,
                "summaries": self.actual_summaries.to_dict(),
                "totals": self.actual_totals.to_dict(),
                "roi": self.actual_roi,
            },
            "roi_delta": self.roi_delta,
        }


def snapshot_fingerprint(initiatives: Iterable[Initiative]) -> str:
    """Stable sha256 over the canonical JSON form of an initiative snapshot."""
    payload = json.dumps(
        [initiative.to_dict() for initiative in initiatives],
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _frozen_series(series: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(series))


def _frozen_result(result: AggregationResult) -> AggregationResult:
    # Views are cached and shared between callers
    totals = {kind: _frozen_series(slots) for kind, slots in result.totals.items()}
    return AggregationResult(
        totals=MappingProxyType(totals), month_keys=result.month_keys
    )


class PortfolioDashboard:
    """
    Computes dashboard views over an immutable initiative snapshot.

    Example:
        ```python
        from portfoliolab import DashboardFilters, PortfolioDashboard, load_portfolio

        portfolio = load_portfolio("portfolio.json")
        dashboard = PortfolioDashboard(portfolio.initiatives, portfolio.settings)
        view = dashboard.outlook(DashboardFilters(stages={"l2", "l3"}))
        print(view.totals.recurring_impact, view.roi)
        ```
    """

    def __init__(
        self,
        initiatives: Iterable[Initiative],
        settings: PortfolioSettings | None = None,
        cache_size: int = 32,
    ):
        self._initiatives: tuple[Initiative, ...] = tuple(initiatives)
        self.settings = settings or PortfolioSettings()
        self.fingerprint = snapshot_fingerprint(self._initiatives)
        self._cache_size = cache_size
        self._outlook_cached = functools.lru_cache(maxsize=cache_size)(
            self._compute_outlook
        )
        self._actuals_cached = functools.lru_cache(maxsize=cache_size)(
            self._compute_actuals
        )

    @property
    def initiatives(self) -> tuple[Initiative, ...]:
        return self._initiatives

    def with_initiatives(self, initiatives: Iterable[Initiative]) -> PortfolioDashboard:
        """Dashboard for a new snapshot; reuses ``self`` (and its cache) if unchanged."""
        initiatives = tuple(initiatives)
        if snapshot_fingerprint(initiatives) == self.fingerprint:
            return self
        return PortfolioDashboard(initiatives, self.settings, self._cache_size)

    def scoped(self, workstream_id: str | None) -> list[Initiative]:
        if workstream_id is None:
            return list(self._initiatives)
        return [i for i in self._initiatives if i.workstream_id == workstream_id]

    def outlook(
        self, filters: DashboardFilters | None = None, today: Today = None
    ) -> OutlookView:
        filters = filters or DashboardFilters()
        return self._outlook_cached(filters, str(current_month(today)))

    def actuals(
        self, filters: DashboardFilters | None = None, today: Today = None
    ) -> ActualsView:
        filters = filters or DashboardFilters()
        return self._actuals_cached(filters, str(current_month(today)))

    def cache_info(self) -> dict[str, Any]:
        return {
            "outlook": self._outlook_cached.cache_info()._asdict(),
            "actuals": self._actuals_cached.cache_info()._asdict(),
        }

    def _compute_outlook(self, filters: DashboardFilters, month: str) -> OutlookView:
        logger.debug("Computing outlook view (%s) for %s", filters, month)
        today = date.fromisoformat(f"{month}-01")
        initiatives = self.scoped(filters.workstream_id)
        plan = aggregate_kind_totals(
            initiatives, filters.stages, filters.kinds, plan_selector
        )
        months = build_months([plan.month_keys], self.settings.period_end, today)
        impact = net_impact(months, filters.benefit_kinds, filters.cost_kinds, plan.totals)
        totals = aggregate_totals(plan.totals, filters.benefit_kinds, filters.cost_kinds)
        return OutlookView(
            filters=filters,
            months=tuple(months),
            plan=_frozen_result(plan),
            stacks=tuple(
                build_stacks(
                    months, filters.benefit_kinds, filters.cost_kinds, plan.totals, KIND_COLORS
                )
            ),
            impact=_frozen_series(impact),
            run_rate=calculate_run_rate(
                [m.key for m in months], impact, self.settings.run_rate_window
            ),
            summaries=calculate_year_summaries(impact, self.settings.fiscal_start_month),
            totals=totals,
            roi=calculate_roi(totals),
        )

    def _compute_actuals(self, filters: DashboardFilters, month: str) -> ActualsView:
        logger.debug("Computing actuals view (%s) for %s", filters, month)
        today = date.fromisoformat(f"{month}-01")
        initiatives = self.scoped(filters.workstream_id)
        benefit, cost = filters.benefit_kinds, filters.cost_kinds
        plan = aggregate_kind_totals(initiatives, filters.stages, filters.kinds, plan_selector)
        actual = aggregate_kind_totals(
            initiatives, filters.stages, filters.kinds, actuals_selector
        )
        months = build_months(
            [plan.month_keys, actual.month_keys], self.settings.period_end, today
        )
        keys = [m.key for m in months]
        window = self.settings.run_rate_window
        fiscal_start = self.settings.fiscal_start_month

        plan_impact = net_impact(months, benefit, cost, plan.totals)
        actual_impact = net_impact(months, benefit, cost, actual.totals)
        plan_totals = aggregate_totals(plan.totals, benefit, cost)
        actual_totals = aggregate_totals(actual.totals, benefit, cost)
        plan_roi = calculate_roi(plan_totals)
        actual_roi = calculate_roi(actual_totals)
        return ActualsView(
            filters=filters,
            months=tuple(months),
            plan=_frozen_result(plan),
            actual=_frozen_result(actual),
            plan_stacks=tuple(build_stacks(months, benefit, cost, plan.totals, KIND_COLORS)),
            actual_stacks=tuple(
                build_stacks(months, benefit, cost, actual.totals, actual_palette())
            ),
            plan_impact=_frozen_series(plan_impact),
            actual_impact=_frozen_series(actual_impact),
            plan_run_rate=calculate_run_rate(keys, plan_impact, window),
            actual_run_rate=calculate_run_rate(keys, actual_impact, window),
            plan_summaries=calculate_year_summaries(plan_impact, fiscal_start),
            actual_summaries=calculate_year_summaries(actual_impact, fiscal_start),
            plan_totals=plan_totals,
            actual_totals=actual_totals,
            plan_roi=plan_roi,
            actual_roi=actual_roi,
            roi_delta=roi_delta(actual_roi, plan_roi),
        )
