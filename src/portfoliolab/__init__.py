"""
PortfolioLab - Financial Rollups for Transformation Portfolios

PortfolioLab turns per-initiative monthly financial lines (benefits and costs,
recurring and one-off, planned and actual) into time-bucketed aggregates:
stacked chart series, net-impact series, fiscal/calendar year summaries, run
rate and ROI, consistently across stage, workstream and one-off filters.

Key Features:
- **Pure Rollups**: Every calculation is a side-effect-free function of its inputs
- **Month Grid**: Contiguous month axis inferred from data and the planning horizon
- **Signed Chart Series**: Benefits above, costs below the axis, whatever their stored sign
- **Graceful Degradation**: Bad amounts and month keys are skipped, undefined ROI is None
- **Cached Views**: Dashboard views are memoised on value-equal inputs

Architecture Overview:
- **K / kinds**: The four financial kinds and the stage-gate keys
- **aggregate_kind_totals**: Kind totals aggregator (plan or actuals)
- **build_months**: Month grid builder
- **build_stacks**: Chart series builder
- **net_impact / aggregate_totals / calculate_roi / ...**: Summary calculator
- **PortfolioDashboard**: Outlook and actuals views over an initiative snapshot

Quick Start:
    ```python
    from portfoliolab import DashboardFilters, PortfolioDashboard, load_portfolio

    portfolio = load_portfolio("portfolio.yaml")
    dashboard = PortfolioDashboard(portfolio.initiatives, portfolio.settings)

    outlook = dashboard.outlook(DashboardFilters(include_oneoff=False))
    print(outlook.totals.recurring_impact, outlook.run_rate)
    for entry in outlook.summaries.fiscal:
        print(entry.label, entry.value)
    ```
"""

# Version information
__version__ = "0.1.0"
__author__ = "PortfolioLab Team"
__description__ = "Financial rollup and time-series aggregation for transformation portfolios"

from .core import (
    ActualsView,
    AggregationResult,
    ChartSegment,
    ConfigError,
    DashboardFilters,
    FinancialLineEntry,
    Initiative,
    K,
    MonthDescriptor,
    MonthStack,
    OutlookView,
    PeriodEnd,
    Portfolio,
    PortfolioDashboard,
    PortfolioLoadError,
    PortfolioSettings,
    RollupTotals,
    StageData,
    YearSummaries,
    YearSummaryEntry,
    aggregate_kind_totals,
    aggregate_totals,
    build_months,
    build_stacks,
    calculate_roi,
    calculate_run_rate,
    calculate_year_summaries,
    load_portfolio,
    net_impact,
)

__all__ = [
    "__version__",
    "ActualsView",
    "AggregationResult",
    "ChartSegment",
    "ConfigError",
    "DashboardFilters",
    "FinancialLineEntry",
    "Initiative",
    "K",
    "MonthDescriptor",
    "MonthStack",
    "OutlookView",
    "PeriodEnd",
    "Portfolio",
    "PortfolioDashboard",
    "PortfolioLoadError",
    "PortfolioSettings",
    "RollupTotals",
    "StageData",
    "YearSummaries",
    "YearSummaryEntry",
    "aggregate_kind_totals",
    "aggregate_totals",
    "build_months",
    "build_stacks",
    "calculate_roi",
    "calculate_run_rate",
    "calculate_year_summaries",
    "load_portfolio",
    "net_impact",
]
