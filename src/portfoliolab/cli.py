"""
Command-line interface for PortfolioLab.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from portfoliolab import __version__
from portfoliolab.core.dashboard import DashboardFilters, PortfolioDashboard, PortfolioSettings
from portfoliolab.core.errors import ConfigError
from portfoliolab.core.kinds import STAGE_KEYS
from portfoliolab.core.loader import load_portfolio
from portfoliolab.core.models import PeriodEnd


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy scalars/arrays, datetime64 and sets."""

    def default(self, obj):
        import numpy as np

        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.datetime64):
            return str(obj)
        elif isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return super().default(obj)


def _save_json(path: str, data: dict) -> None:
    """Save data as JSON to file path."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, cls=NumpyEncoder)


def _format_amount(value: float) -> str:
    return f"{value:,.0f}"


def _format_roi(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.1%}"


def _build_dashboard(args) -> tuple[PortfolioDashboard, DashboardFilters]:
    portfolio = load_portfolio(args.input)
    settings = portfolio.settings
    if args.fiscal_start is not None or args.period_end is not None:
        settings = PortfolioSettings(
            fiscal_start_month=(
                args.fiscal_start
                if args.fiscal_start is not None
                else settings.fiscal_start_month
            ),
            period_end=(
                PeriodEnd.from_value(args.period_end)
                if args.period_end is not None
                else settings.period_end
            ),
            run_rate_window=settings.run_rate_window,
        )
    filters = DashboardFilters(
        stages=frozenset(args.stages) if args.stages is not None else frozenset(STAGE_KEYS),
        include_oneoff=not args.exclude_oneoff,
        workstream_id=args.workstream,
    )
    return PortfolioDashboard(portfolio.initiatives, settings), filters


def _today(args) -> date | None:
    return date.fromisoformat(args.today) if args.today else None


def _print_totals(prefix: str, totals, run_rate: float, roi: float | None) -> None:
    print(f"{prefix}Recurring benefits: {_format_amount(totals.recurring_benefits)}")
    print(f"{prefix}Recurring costs:    {_format_amount(totals.recurring_costs)}")
    print(f"{prefix}One-off benefits:   {_format_amount(totals.oneoff_benefits)}")
    print(f"{prefix}One-off costs:      {_format_amount(totals.oneoff_costs)}")
    print(f"{prefix}Recurring impact:   {_format_amount(totals.recurring_impact)}")
    print(f"{prefix}Run rate:           {_format_amount(run_rate)}")
    print(f"{prefix}ROI:                {_format_roi(roi)}")


def _print_summaries(prefix: str, summaries) -> None:
    fiscal = ", ".join(f"{e.label}: {_format_amount(e.value)}" for e in summaries.fiscal)
    calendar = ", ".join(
        f"{e.label}: {_format_amount(e.value)}" for e in summaries.calendar
    )
    print(f"{prefix}Fiscal years:   {fiscal or '-'}")
    print(f"{prefix}Calendar years: {calendar or '-'}")


def cmd_example(_) -> int:
    """Print a minimal portfolio document."""
    example = {
        "settings": {"fiscalStartMonth": 4, "periodEnd": {"month": 12, "year": 2027}},
        "initiatives": [
            {
                "id": "procurement-consolidation",
                "name": "Procurement consolidation",
                "workstreamId": "operations",
                "activeStage": "l2",
                "stages": {
                    "l2": {
                        "name": "L2 Gate",
                        "financials": {
                            "recurring-benefit": [
                                {
                                    "id": "vendor-savings",
                                    "label": "Vendor savings",
                                    "category": "COGS",
                                    "distribution": {"2027-01": 1000, "2027-02": 1200},
                                    "actuals": {"2027-01": 900},
                                }
                            ],
                            "recurring-cost": [
                                {
                                    "id": "licences",
                                    "label": "Sourcing platform licences",
                                    "category": "Opex: IT",
                                    "distribution": {"2027-01": 400},
                                }
                            ],
                            "oneoff-cost": [
                                {
                                    "id": "implementation",
                                    "label": "Implementation",
                                    "category": "Opex: IT",
                                    "distribution": {"2026-12": 2000},
                                }
                            ],
                        },
                    }
                },
            }
        ],
    }
    json.dump(example, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def cmd_validate(args) -> int:
    """Validate a portfolio document."""
    try:
        portfolio = load_portfolio(args.input)
    except (ConfigError, OSError, ValueError) as e:
        print(f"Validation failed: {e}", file=sys.stderr)
        return 1

    unknown = sorted(
        {i.active_stage for i in portfolio.initiatives if i.active_stage not in STAGE_KEYS}
    )
    print(
        f"✅ {len(portfolio.initiatives)} initiatives across "
        f"{len(portfolio.workstreams())} workstreams"
    )
    if unknown:
        print(f"Warning: unknown active stages: {', '.join(unknown)}")
    return 0


def cmd_outlook(args) -> int:
    """Print or export the planned outlook."""
    try:
        dashboard, filters = _build_dashboard(args)
        view = dashboard.outlook(filters, today=_today(args))
    except (ConfigError, OSError, ValueError) as e:
        print(f"Error computing outlook: {e}", file=sys.stderr)
        return 1

    if args.output:
        _save_json(args.output, view.to_dict())
        print(f"Outlook saved to {args.output}")
    elif args.json:
        json.dump(view.to_dict(), sys.stdout, indent=2, cls=NumpyEncoder)
        sys.stdout.write("\n")
    else:
        print(f"Outlook {view.months[0].key}..{view.months[-1].key}")
        _print_totals("  ", view.totals, view.run_rate, view.roi)
        _print_summaries("  ", view.summaries)
    return 0


def cmd_actuals(args) -> int:
    """Print or export plan versus actuals."""
    try:
        dashboard, filters = _build_dashboard(args)
        view = dashboard.actuals(filters, today=_today(args))
    except (ConfigError, OSError, ValueError) as e:
        print(f"Error computing actuals: {e}", file=sys.stderr)
        return 1

    if args.output:
        _save_json(args.output, view.to_dict())
        print(f"Actuals saved to {args.output}")
    elif args.json:
        json.dump(view.to_dict(), sys.stdout, indent=2, cls=NumpyEncoder)
        sys.stdout.write("\n")
    else:
        print(f"Actuals {view.months[0].key}..{view.months[-1].key}")
        print("Plan:")
        _print_totals("  ", view.plan_totals, view.plan_run_rate, view.plan_roi)
        _print_summaries("  ", view.plan_summaries)
        print("Actual:")
        _print_totals("  ", view.actual_totals, view.actual_run_rate, view.actual_roi)
        _print_summaries("  ", view.actual_summaries)
        print(f"ROI delta: {_format_roi(view.roi_delta)}")
    return 0


def cmd_chart(args) -> int:
    """Render the outlook (or actuals) stacked chart to a file."""
    try:
        from portfoliolab.charts import impact_stack_chart, save_chart

        dashboard, filters = _build_dashboard(args)
        if args.actuals:
            view = dashboard.actuals(filters, today=_today(args))
            fig, _ = impact_stack_chart(
                view.actual_stacks, view.actual_impact, title="Actuals"
            )
        else:
            view = dashboard.outlook(filters, today=_today(args))
            fig, _ = impact_stack_chart(view.stacks, view.impact, title="Outlook")
        fmt = args.output.rsplit(".", 1)[-1].lower() if "." in args.output else "html"
        save_chart(fig, args.output, format=fmt)
    except (ConfigError, ImportError, OSError, ValueError) as e:
        print(f"Error rendering chart: {e}", file=sys.stderr)
        return 1

    print(f"Chart saved to {args.output}")
    return 0


def _add_view_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-i", "--input", required=True, help="Portfolio JSON/YAML file"
    )
    parser.add_argument(
        "--stages",
        nargs="*",
        choices=list(STAGE_KEYS),
        help="Stage keys to include (default: all; no values: none)",
    )
    parser.add_argument("--workstream", help="Restrict to one workstream id")
    parser.add_argument(
        "--exclude-oneoff",
        action="store_true",
        help="Leave one-off benefits and costs out of the view",
    )
    parser.add_argument(
        "--fiscal-start", type=int, help="Fiscal-year start month (1-12)"
    )
    parser.add_argument(
        "--period-end", help="Planning horizon end (YYYY-MM)"
    )
    parser.add_argument(
        "--today", help="Reference date (YYYY-MM-DD), defaults to the current date"
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="portfoliolab",
        description="PortfolioLab - Financial rollups for transformation portfolios",
    )

    parser.add_argument(
        "--version", action="version", version=f"PortfolioLab {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    example_parser = subparsers.add_parser(
        "example", help="Print a minimal portfolio JSON"
    )
    example_parser.set_defaults(func=cmd_example)

    validate_parser = subparsers.add_parser(
        "validate", help="Validate a portfolio document"
    )
    validate_parser.add_argument(
        "-i", "--input", required=True, help="Portfolio JSON/YAML file"
    )
    validate_parser.set_defaults(func=cmd_validate)

    outlook_parser = subparsers.add_parser(
        "outlook", help="Summarise planned benefits and costs"
    )
    _add_view_arguments(outlook_parser)
    outlook_parser.add_argument("--json", action="store_true", help="Print JSON")
    outlook_parser.add_argument("-o", "--output", help="Write JSON to this file")
    outlook_parser.set_defaults(func=cmd_outlook)

    actuals_parser = subparsers.add_parser(
        "actuals", help="Compare plan with recorded actuals"
    )
    _add_view_arguments(actuals_parser)
    actuals_parser.add_argument("--json", action="store_true", help="Print JSON")
    actuals_parser.add_argument("-o", "--output", help="Write JSON to this file")
    actuals_parser.set_defaults(func=cmd_actuals)

    chart_parser = subparsers.add_parser(
        "chart", help="Render the stacked impact chart (requires plotly)"
    )
    _add_view_arguments(chart_parser)
    chart_parser.add_argument(
        "-o", "--output", required=True, help="Output file (.html, .png, .pdf, .svg)"
    )
    chart_parser.add_argument(
        "--actuals", action="store_true", help="Chart recorded actuals instead of plan"
    )
    chart_parser.set_defaults(func=cmd_chart)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
