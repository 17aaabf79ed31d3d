"""
Tests for the chart series builder.
"""

import pytest
from portfoliolab.core.kinds import K
from portfoliolab.core.models import MonthDescriptor
from portfoliolab.core.stacks import (
    KIND_COLORS,
    actual_palette,
    build_stacks,
    has_chart_data,
    shade_color,
)

MONTHS = [
    MonthDescriptor(key="2025-01", label="Jan", year=2025, index=0),
    MonthDescriptor(key="2025-02", label="Feb", year=2025, index=1),
    MonthDescriptor(key="2025-03", label="Mar", year=2025, index=2),
]
BENEFITS = [K.RECURRING_BENEFIT, K.ONEOFF_BENEFIT]
COSTS = [K.RECURRING_COST, K.ONEOFF_COST]


def _totals(**by_kind):
    totals = {kind: {} for kind in K.all_kinds()}
    for name, values in by_kind.items():
        totals[name.replace("_", "-")] = values
    return totals


def test_benefits_positive_costs_negative():
    totals = _totals(
        recurring_benefit={"2025-01": 1000.0},
        oneoff_benefit={"2025-01": 250.0},
        recurring_cost={"2025-01": 400.0},
    )

    stack = build_stacks(MONTHS, BENEFITS, COSTS, totals)[0]

    assert [s.kind for s in stack.positive_segments] == [K.RECURRING_BENEFIT, K.ONEOFF_BENEFIT]
    assert [s.raw_value for s in stack.positive_segments] == [1000.0, 250.0]
    assert [s.raw_value for s in stack.negative_segments] == [-400.0]
    assert stack.positive_total == 1250.0
    assert stack.negative_total == 400.0
    assert stack.positive_segments[0].color == KIND_COLORS[K.RECURRING_BENEFIT]
    assert stack.positive_segments[0].label == "Recurring benefits"


@pytest.mark.parametrize("stored", [500.0, -500.0])
def test_cost_sign_is_normalized(stored):
    totals = _totals(recurring_cost={"2025-02": stored})

    stack = build_stacks(MONTHS, BENEFITS, COSTS, totals)[1]

    (segment,) = stack.negative_segments
    assert segment.raw_value == -500.0
    assert segment.value == 500.0
    assert stack.negative_total == 500.0


def test_negative_benefit_keeps_sign_on_positive_side():
    totals = _totals(recurring_benefit={"2025-01": -120.0})

    (segment,) = build_stacks(MONTHS, BENEFITS, COSTS, totals)[0].positive_segments

    assert segment.raw_value == -120.0
    assert segment.value == 120.0


def test_zero_and_missing_amounts_emit_no_segments():
    totals = _totals(recurring_benefit={"2025-01": 0.0})

    stacks = build_stacks(MONTHS, BENEFITS, COSTS, totals)

    assert [s.key for s in stacks] == ["2025-01", "2025-02", "2025-03"]
    assert all(s.is_empty for s in stacks)
    assert all(s.positive_total == 0 and s.negative_total == 0 for s in stacks)
    assert not has_chart_data(stacks)


def test_excluded_kinds_do_not_render():
    totals = _totals(oneoff_cost={"2025-03": 900.0}, recurring_benefit={"2025-03": 10.0})

    stack = build_stacks(MONTHS, [K.RECURRING_BENEFIT], [K.RECURRING_COST], totals)[2]

    assert stack.negative_segments == ()
    assert has_chart_data([stack])


def test_custom_palette():
    totals = _totals(recurring_benefit={"2025-01": 1.0})
    palette = actual_palette()

    (segment,) = build_stacks(MONTHS, BENEFITS, COSTS, totals, palette)[0].positive_segments

    assert segment.color == palette[K.RECURRING_BENEFIT]
    assert segment.color != KIND_COLORS[K.RECURRING_BENEFIT]


class TestShadeColor:
    def test_identity(self):
        assert shade_color("#1d4ed8", 0) == "#1d4ed8"

    def test_towards_white_and_black(self):
        assert shade_color("#000000", 1) == "#ffffff"
        assert shade_color("#ffffff", -1) == "#000000"
        assert shade_color("#000000", 0.5) == "#808080"

    def test_amount_is_clamped(self):
        assert shade_color("#123456", 5) == "#ffffff"

    def test_halves_round_up(self):
        # 249 + 6 * 0.25 = 250.5
        assert shade_color("#f97316", 0.25) == "#fb9650"
        # 2 + 253 * 0.5 = 128.5
        assert shade_color("#020202", 0.5) == "#818181"

    def test_actual_palette_lightens_every_kind(self):
        palette = actual_palette()
        assert set(palette) == set(KIND_COLORS)
        assert palette[K.RECURRING_COST] == shade_color(KIND_COLORS[K.RECURRING_COST], 0.25)
