"""
Shared fixtures for PortfolioLab tests.
"""

from __future__ import annotations

from datetime import date

import pytest
from portfoliolab.core.models import FinancialLineEntry, Initiative, StageData

# Fixed reference date so month grids do not depend on when tests run
TODAY = date(2025, 1, 15)


def make_initiative(
    id: str,
    financials: dict,
    active_stage: str = "l2",
    workstream_id: str | None = "ops",
    period: tuple[int, int] | None = None,
) -> Initiative:
    """
    Build an initiative whose active stage holds ``financials``.

    ``financials`` maps kind -> list of distributions, or of
    ``(distribution, actuals)`` tuples.
    """
    entries = {}
    for kind, lines in financials.items():
        built = []
        for n, line in enumerate(lines):
            distribution, actuals = line if isinstance(line, tuple) else (line, None)
            built.append(
                FinancialLineEntry(
                    id=f"{id}-{kind}-{n}",
                    label=f"{kind} {n}",
                    distribution=dict(distribution),
                    actuals=None if actuals is None else dict(actuals),
                )
            )
        entries[kind] = tuple(built)
    stage = StageData(
        key=active_stage,
        period_month=period[0] if period else None,
        period_year=period[1] if period else None,
        financials=entries,
    )
    return Initiative(
        id=id,
        name=id.title(),
        workstream_id=workstream_id,
        active_stage=active_stage,
        stages={active_stage: stage},
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def two_initiatives():
    """Two l2 initiatives: one with benefits, one with a cost line."""
    return [
        make_initiative(
            "alpha",
            {"recurring-benefit": [{"2025-01": 1000.0, "2025-02": 1200.0}]},
        ),
        make_initiative(
            "beta",
            {"recurring-cost": [{"2025-01": 400.0}]},
        ),
    ]


@pytest.fixture
def mixed_portfolio():
    """Initiatives across stages and workstreams, with one-offs and actuals."""
    return [
        make_initiative(
            "alpha",
            {
                "recurring-benefit": [
                    ({"2025-01": 1000.0, "2025-02": 1000.0}, {"2025-01": 800.0})
                ],
                "oneoff-cost": [({"2024-12": 3000.0}, {"2024-12": 3500.0})],
            },
            active_stage="l2",
            workstream_id="ops",
        ),
        make_initiative(
            "beta",
            {
                "recurring-cost": [({"2025-01": 200.0}, {"2025-01": 250.0})],
                "oneoff-benefit": [{"2025-03": 500.0}],
            },
            active_stage="l3",
            workstream_id="finance",
        ),
        make_initiative(
            "gamma",
            {"recurring-benefit": [{"2025-01": 99999.0}]},
            active_stage="l0",
            workstream_id="ops",
        ),
    ]


@pytest.fixture
def build_initiative():
    """Factory fixture exposing :func:`make_initiative`."""
    return make_initiative
