"""
Tests for net impact, totals, ROI, run rate and year summaries.
"""

import math

import pytest
from portfoliolab.core.errors import ConfigError
from portfoliolab.core.kinds import K
from portfoliolab.core.models import MonthDescriptor, RollupTotals
from portfoliolab.core.summary import (
    aggregate_totals,
    calculate_roi,
    calculate_run_rate,
    calculate_year_summaries,
    fiscal_year_of,
    net_impact,
    roi_delta,
)

MONTHS = [
    MonthDescriptor(key=f"2025-{m:02d}", label="", year=2025, index=m - 1)
    for m in range(1, 4)
]

KIND_TOTALS = {
    K.RECURRING_BENEFIT: {"2025-01": 1000.0, "2025-02": 1200.0},
    K.RECURRING_COST: {"2025-01": 400.0},
    K.ONEOFF_BENEFIT: {"2025-03": 300.0},
    K.ONEOFF_COST: {"2025-01": 2000.0},
}


class TestNetImpact:
    def test_benefits_minus_costs(self):
        impact = net_impact(
            MONTHS,
            [K.RECURRING_BENEFIT, K.ONEOFF_BENEFIT],
            [K.RECURRING_COST, K.ONEOFF_COST],
            KIND_TOTALS,
        )

        assert impact == {"2025-01": -1400.0, "2025-02": 1200.0, "2025-03": 300.0}

    def test_follows_grid_order_and_includes_empty_months(self):
        impact = net_impact(MONTHS, [K.RECURRING_BENEFIT], [K.RECURRING_COST], KIND_TOTALS)

        assert list(impact) == ["2025-01", "2025-02", "2025-03"]
        assert impact["2025-03"] == 0.0


class TestAggregateTotals:
    def test_all_kinds_included(self):
        totals = aggregate_totals(
            KIND_TOTALS,
            [K.RECURRING_BENEFIT, K.ONEOFF_BENEFIT],
            [K.RECURRING_COST, K.ONEOFF_COST],
        )

        assert totals == RollupTotals(
            recurring_benefits=2200.0,
            recurring_costs=400.0,
            oneoff_benefits=300.0,
            oneoff_costs=2000.0,
            recurring_impact=1800.0,
        )

    def test_excluded_oneoffs_are_zeroed(self):
        totals = aggregate_totals(KIND_TOTALS, [K.RECURRING_BENEFIT], [K.RECURRING_COST])

        assert totals.oneoff_benefits == 0
        assert totals.oneoff_costs == 0
        assert totals.recurring_impact == 1800.0

    def test_missing_kind_slots(self):
        totals = aggregate_totals({}, [K.RECURRING_BENEFIT], [K.RECURRING_COST])

        assert totals == RollupTotals()


class TestCalculateRoi:
    def test_zero_oneoff_cost_is_undefined(self):
        assert (
            calculate_roi(
                {
                    "recurringBenefits": 100,
                    "recurringCosts": 0,
                    "oneoffBenefits": 0,
                    "oneoffCosts": 0,
                    "recurringImpact": 100,
                }
            )
            is None
        )

    def test_roi_value(self):
        totals = RollupTotals(
            recurring_benefits=2200.0,
            recurring_costs=400.0,
            oneoff_benefits=300.0,
            oneoff_costs=2000.0,
            recurring_impact=1800.0,
        )

        assert calculate_roi(totals) == pytest.approx(0.05)

    def test_roi_zero_is_not_undefined(self):
        totals = RollupTotals(recurring_benefits=1000.0, oneoff_costs=1000.0)

        assert calculate_roi(totals) == 0.0

    def test_non_finite_inputs(self):
        assert calculate_roi(RollupTotals(oneoff_costs=math.nan)) is None
        assert calculate_roi(RollupTotals(oneoff_costs=math.inf)) is None
        assert calculate_roi(RollupTotals(recurring_benefits=math.nan, oneoff_costs=10.0)) is None
        assert calculate_roi({"oneoff_costs": None}) is None

    def test_snake_case_mapping(self):
        assert calculate_roi({"oneoff_costs": 100.0, "recurring_benefits": 300.0}) == 2.0


def test_roi_delta():
    assert roi_delta(0.5, 0.2) == pytest.approx(0.3)
    assert roi_delta(None, 0.2) is None
    assert roi_delta(0.5, None) is None
    assert roi_delta(math.nan, 0.1) is None


class TestRunRate:
    def test_trailing_twelve_month_sum(self):
        keys = [f"2025-{m:02d}" for m in range(1, 13)] + ["2026-01", "2026-02"]
        impact = {key: 10.0 for key in keys}
        impact["2025-01"] = 1000.0
        impact["2025-02"] = 1000.0

        assert calculate_run_rate(keys, impact) == 120.0

    def test_short_grid_sums_everything(self):
        assert calculate_run_rate(["2025-01", "2025-02"], {"2025-01": 5.0}) == 5.0

    def test_empty_grid(self):
        assert calculate_run_rate([], {"2025-01": 5.0}) == 0.0

    def test_custom_window(self):
        keys = ["2025-01", "2025-02", "2025-03"]
        impact = {"2025-01": 1.0, "2025-02": 2.0, "2025-03": 3.0}
        assert calculate_run_rate(keys, impact, window_size=2) == 5.0

    def test_invalid_window(self):
        with pytest.raises(ConfigError):
            calculate_run_rate(["2025-01"], {}, window_size=0)


class TestYearSummaries:
    def test_april_fiscal_year(self):
        impact = {"2025-03": 10.0, "2025-04": 20.0, "2026-03": 5.0, "2026-04": 1.0}

        summaries = calculate_year_summaries(impact, fiscal_start_month=4)

        assert [(e.label, e.value) for e in summaries.fiscal] == [
            ("FY2025", 10.0),
            ("FY2026", 25.0),
            ("FY2027", 1.0),
        ]
        assert [(e.label, e.value) for e in summaries.calendar] == [
            ("2025", 30.0),
            ("2026", 6.0),
        ]

    def test_january_start_labels_the_following_year(self):
        impact = {"2025-01": 1.0, "2025-12": 2.0, "2026-06": 3.0}

        summaries = calculate_year_summaries(impact, fiscal_start_month=1)

        assert [e.label for e in summaries.fiscal] == ["FY2026", "FY2027"]
        assert [e.label for e in summaries.calendar] == ["2025", "2026"]
        assert [e.value for e in summaries.fiscal] == [e.value for e in summaries.calendar]

    def test_default_start_is_april(self):
        summaries = calculate_year_summaries({"2025-04": 1.0})
        assert summaries.fiscal[0].label == "FY2026"

    def test_sorted_and_skips_bad_data(self):
        impact = {"2027-01": 1.0, "bogus": 5.0, "2024-05": math.nan, "2023-02": 2.0}

        summaries = calculate_year_summaries(impact, fiscal_start_month=7)

        assert [e.label for e in summaries.calendar] == ["2023", "2027"]
        assert [e.label for e in summaries.fiscal] == ["FY2023", "FY2027"]

    def test_empty_series(self):
        summaries = calculate_year_summaries({})
        assert summaries.fiscal == () and summaries.calendar == ()

    @pytest.mark.parametrize("month", [0, 13, 4.5, "4", True])
    def test_invalid_start_month(self, month):
        with pytest.raises(ConfigError):
            calculate_year_summaries({"2025-01": 1.0}, fiscal_start_month=month)

    def test_fiscal_year_of(self):
        assert fiscal_year_of(2025, 3, 4) == 2025
        assert fiscal_year_of(2025, 4, 4) == 2026
        assert fiscal_year_of(2025, 12, 1) == 2026
        assert fiscal_year_of(2025, 1, 1) == 2026
