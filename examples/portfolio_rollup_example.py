"""
Walk through the outlook and actuals views for the sample portfolio.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from portfoliolab import DashboardFilters, PortfolioDashboard, load_portfolio
from portfoliolab.core.aggregation import totals_frame


def pretty(data: dict) -> str:
    """Return JSON formatted output."""
    return json.dumps(data, indent=2, sort_keys=True)


def main() -> None:
    portfolio = load_portfolio(Path(__file__).with_name("portfolio.yaml"))
    dashboard = PortfolioDashboard(portfolio.initiatives, portfolio.settings)
    today = date(2025, 3, 15)

    outlook = dashboard.outlook(today=today)
    print("Outlook totals:")
    print(pretty(outlook.totals.to_dict()))
    print(f"Run rate: {outlook.run_rate:,.0f}  ROI: {outlook.roi}")
    print(totals_frame(outlook.plan.totals, outlook.months).head(6))

    recurring_only = dashboard.outlook(
        DashboardFilters(stages={"l3"}, include_oneoff=False), today=today
    )
    print("\nL3, recurring only:")
    for entry in recurring_only.summaries.fiscal:
        print(f"  {entry.label}: {entry.value:,.0f}")

    actuals = dashboard.actuals(DashboardFilters(workstream_id="operations"), today=today)
    print("\nOperations plan vs actuals:")
    print(f"  plan ROI:   {actuals.plan_roi}")
    print(f"  actual ROI: {actuals.actual_roi}")
    print(f"  delta:      {actuals.roi_delta}")

    print("\nCache:", dashboard.cache_info())


if __name__ == "__main__":
    main()
