"""
Chart series builder.

Turns per-kind monthly totals into signed stacked-bar segments. Benefits go
on the positive side, costs always on the negative side whatever sign they
were stored with.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from .kinds import KIND_LABELS, K
from .models import ChartSegment, KindTotals, MonthDescriptor, MonthStack

KIND_COLORS: dict[str, str] = {
    K.RECURRING_BENEFIT: "#1d4ed8",
    K.ONEOFF_BENEFIT: "#3b82f6",
    K.RECURRING_COST: "#ef4444",
    K.ONEOFF_COST: "#f97316",
}

# Lightening applied to the actuals overlay
ACTUAL_SHADE = 0.25


def shade_color(hex_color: str, amount: float) -> str:
    """
    Mix a ``#rrggbb`` colour toward white (amount > 0) or black (amount < 0).

    ``amount`` is clamped to [-1, 1]; 0 returns the colour unchanged.
    """
    clamped = max(-1.0, min(1.0, amount))
    value = int(hex_color.lstrip("#"), 16)
    channels = ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
    target = 255 if clamped >= 0 else 0
    factor = abs(clamped)
    # Halves round up
    mixed = (math.floor(c + (target - c) * factor + 0.5) for c in channels)
    return "#" + "".join(f"{c:02x}" for c in mixed)


def actual_palette(base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Palette for actuals: every kind colour lightened by ``ACTUAL_SHADE``."""
    base = KIND_COLORS if base is None else base
    return {kind: shade_color(color, ACTUAL_SHADE) for kind, color in base.items()}


def build_stacks(
    months: Iterable[MonthDescriptor],
    benefit_kinds: Iterable[str],
    cost_kinds: Iterable[str],
    totals: KindTotals,
    palette: Mapping[str, str] | None = None,
) -> list[MonthStack]:
    """
    Build one stacked bar per grid month.

    Zero amounts produce no segment, so a month without data has empty
    segment lists and zero totals.

    Args:
        months: Month grid
        benefit_kinds: Kinds drawn above the axis
        cost_kinds: Kinds drawn below the axis
        totals: kind -> month key -> amount
        palette: kind -> colour, defaults to ``KIND_COLORS``

    Returns:
        List of MonthStack aligned with ``months``
    """
    palette = KIND_COLORS if palette is None else palette
    benefit_kinds = list(benefit_kinds)
    cost_kinds = list(cost_kinds)

    stacks: list[MonthStack] = []
    for month in months:
        positive = []
        for kind in benefit_kinds:
            amount = totals.get(kind, {}).get(month.key, 0.0)
            if not amount:
                continue
            positive.append(
                ChartSegment(
                    value=abs(amount),
                    raw_value=amount,
                    color=palette[kind],
                    label=KIND_LABELS[kind],
                    kind=kind,
                )
            )
        negative = []
        for kind in cost_kinds:
            amount = totals.get(kind, {}).get(month.key, 0.0)
            if not amount:
                continue
            negative.append(
                ChartSegment(
                    value=abs(amount),
                    raw_value=-abs(amount),
                    color=palette[kind],
                    label=KIND_LABELS[kind],
                    kind=kind,
                )
            )
        stacks.append(
            MonthStack(
                key=month.key,
                positive_segments=tuple(positive),
                negative_segments=tuple(negative),
                positive_total=sum((s.value for s in positive), 0.0),
                negative_total=sum((s.value for s in negative), 0.0),
            )
        )
    return stacks


def has_chart_data(stacks: Iterable[MonthStack]) -> bool:
    """True when at least one month carries a segment."""
    return any(not stack.is_empty for stack in stacks)
