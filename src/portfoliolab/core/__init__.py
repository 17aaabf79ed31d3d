"""
Core module for PortfolioLab.

This module contains the financial rollup engine: kind taxonomy, value
objects, month grid, aggregation, chart series, summaries and the dashboard
orchestrator.
"""

from .aggregation import (
    actuals_selector,
    aggregate_kind_totals,
    initiative_totals,
    plan_selector,
    totals_frame,
)
from .dashboard import (
    ActualsView,
    DashboardFilters,
    OutlookView,
    PortfolioDashboard,
    PortfolioSettings,
    snapshot_fingerprint,
)
from .errors import ConfigError, PortfolioLoadError
from .kinds import KIND_LABELS, STAGE_KEYS, STAGE_LABELS, K, benefit_kinds, cost_kinds
from .loader import Portfolio, load_portfolio
from .models import (
    AggregationResult,
    ChartSegment,
    FinancialLineEntry,
    Initiative,
    MonthDescriptor,
    MonthStack,
    PeriodEnd,
    RollupTotals,
    StageData,
    YearSummaries,
    YearSummaryEntry,
)
from .months import (
    build_months,
    build_stage_months,
    format_month_key,
    month_start,
    parse_month_key,
)
from .stacks import KIND_COLORS, actual_palette, build_stacks, shade_color
from .summary import (
    aggregate_totals,
    calculate_roi,
    calculate_run_rate,
    calculate_year_summaries,
    net_impact,
    roi_delta,
)
from .utils import month_range

__all__ = [
    # Errors
    "ConfigError",
    "PortfolioLoadError",
    # Kinds
    "K",
    "KIND_LABELS",
    "STAGE_KEYS",
    "STAGE_LABELS",
    "benefit_kinds",
    "cost_kinds",
    # Models
    "AggregationResult",
    "ChartSegment",
    "FinancialLineEntry",
    "Initiative",
    "MonthDescriptor",
    "MonthStack",
    "PeriodEnd",
    "RollupTotals",
    "StageData",
    "YearSummaries",
    "YearSummaryEntry",
    # Months
    "build_months",
    "build_stage_months",
    "format_month_key",
    "month_start",
    "parse_month_key",
    "month_range",
    # Aggregation
    "aggregate_kind_totals",
    "plan_selector",
    "actuals_selector",
    "totals_frame",
    "initiative_totals",
    # Chart series
    "KIND_COLORS",
    "build_stacks",
    "shade_color",
    "actual_palette",
    # Summaries
    "net_impact",
    "aggregate_totals",
    "calculate_roi",
    "calculate_run_rate",
    "calculate_year_summaries",
    "roi_delta",
    # Dashboard
    "ActualsView",
    "DashboardFilters",
    "OutlookView",
    "PortfolioDashboard",
    "PortfolioSettings",
    "snapshot_fingerprint",
    # Loader
    "Portfolio",
    "load_portfolio",
]
