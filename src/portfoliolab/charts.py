"""
Chart functions for visualizing portfolio rollups.

The rollup engine produces renderer-agnostic :class:`MonthStack` series; the
functions here turn them into Plotly figures for notebooks, reports and the
``portfoliolab chart`` command.

All chart functions return (figure, tidy_dataframe_used) for consistency.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import pandas as pd

from portfoliolab.core.kinds import KIND_LABELS, K
from portfoliolab.core.models import MonthStack, YearSummaries
from portfoliolab.core.stacks import KIND_COLORS

# Plotly imports with graceful fallback
try:
    import plotly.graph_objects as go
    from plotly.subplots import make_subplots

    PLOTLY_AVAILABLE = True
except ImportError:
    PLOTLY_AVAILABLE = False


def _check_plotly() -> None:
    """Check if Plotly is available and raise helpful error if not."""
    if not PLOTLY_AVAILABLE:
        raise ImportError(
            "Plotly is required for chart functions. Install with:\n"
            "pip install plotly kaleido\n"
            "or\n"
            "pip install 'portfoliolab[viz]'"
        )


def _empty_figure(title: str, message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        title=title,
        xaxis={"visible": False, "showticklabels": False},
        yaxis={"visible": False, "showticklabels": False},
        annotations=[
            {
                "text": message,
                "showarrow": False,
                "xref": "paper",
                "yref": "paper",
                "x": 0.5,
                "y": 0.5,
            }
        ],
    )
    return fig


def stacks_to_frame(stacks: Iterable[MonthStack]) -> pd.DataFrame:
    """
    Flatten month stacks into one row per (month, segment).

    Columns: ``month``, ``kind``, ``label``, ``side``, ``value``, ``raw_value``,
    ``color``.
    """
    rows = []
    for stack in stacks:
        for side, segments in (
            ("positive", stack.positive_segments),
            ("negative", stack.negative_segments),
        ):
            for segment in segments:
                rows.append(
                    {
                        "month": stack.key,
                        "kind": segment.kind,
                        "label": segment.label,
                        "side": side,
                        "value": segment.value,
                        "raw_value": segment.raw_value,
                        "color": segment.color,
                    }
                )
    return pd.DataFrame(
        rows, columns=["month", "kind", "label", "side", "value", "raw_value", "color"]
    )


def impact_stack_chart(
    stacks: list[MonthStack],
    impact: Mapping[str, float] | None = None,
    title: str = "Financial Outlook",
) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot benefits above and costs below the axis as monthly stacked bars.

    **Use Cases:**
    - Outlook tab: planned benefits and costs of the filtered initiatives
    - Actuals tab: recorded actuals (pass the shaded-palette stacks)
    - Overlaying the net-impact line to show when the portfolio turns positive

    **Args:**
        stacks: Output of :func:`portfoliolab.core.stacks.build_stacks`
        impact: Optional net impact per month key, drawn as a line
        title: Figure title

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)

    **Example:**
        ```python
        from portfoliolab import PortfolioDashboard
        from portfoliolab.charts import impact_stack_chart

        view = PortfolioDashboard(initiatives).outlook()
        fig, data = impact_stack_chart(view.stacks, view.impact)
        fig.show()
        ```
    """
    _check_plotly()

    tidy = stacks_to_frame(stacks)
    if tidy.empty:
        return _empty_figure(title, "No financial data for the selected filters."), tidy

    months = [stack.key for stack in stacks]
    fig = go.Figure()

    for kind in K.all_kinds():
        kind_rows = tidy[tidy["kind"] == kind]
        if kind_rows.empty:
            continue
        by_month = kind_rows.groupby("month")["raw_value"].sum()
        color = kind_rows["color"].iloc[0]
        fig.add_trace(
            go.Bar(
                name=KIND_LABELS[kind],
                x=months,
                y=[float(by_month.get(m, 0.0)) for m in months],
                marker_color=color or KIND_COLORS[kind],
            )
        )

    if impact is not None:
        fig.add_trace(
            go.Scatter(
                name="Net impact",
                x=months,
                y=[float(impact.get(m, 0.0)) for m in months],
                mode="lines+markers",
                line={"color": "#111827", "width": 2},
            )
        )

    fig.update_layout(
        title=title,
        xaxis_title="Month",
        yaxis_title="Amount",
        barmode="relative",
        legend_title="Category",
    )

    return fig, tidy


def year_summary_chart(
    summaries: YearSummaries, title: str = "Net Impact by Year"
) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot fiscal-year and calendar-year net impact side by side.

    **Args:**
        summaries: Output of :func:`portfoliolab.core.summary.calculate_year_summaries`
        title: Figure title

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)
    """
    _check_plotly()

    rows = [
        {"basis": basis, "label": entry.label, "value": entry.value}
        for basis, entries in (("fiscal", summaries.fiscal), ("calendar", summaries.calendar))
        for entry in entries
    ]
    tidy = pd.DataFrame(rows, columns=["basis", "label", "value"])
    if tidy.empty:
        return _empty_figure(title, "No net impact recorded."), tidy

    fig = make_subplots(rows=1, cols=2, subplot_titles=("Fiscal years", "Calendar years"))
    for col, basis in enumerate(("fiscal", "calendar"), start=1):
        data = tidy[tidy["basis"] == basis]
        fig.add_trace(
            go.Bar(
                name=basis.title(),
                x=data["label"],
                y=data["value"],
                marker_color=["#1d4ed8" if v >= 0 else "#ef4444" for v in data["value"]],
                showlegend=False,
            ),
            row=1,
            col=col,
        )

    fig.update_layout(title=title, yaxis_title="Net impact")
    return fig, tidy


def save_chart(fig: go.Figure, filename: str, format: str = "html") -> None:
    """
    Save chart to file.

    Args:
        fig: Plotly figure
        filename: Output filename
        format: Output format ('html', 'png', 'pdf', 'svg')
    """
    _check_plotly()

    if format == "html":
        fig.write_html(filename)
    elif format in ("png", "pdf", "svg"):
        fig.write_image(filename, format=format)
    else:
        raise ValueError(f"Unsupported format: {format}")
