"""
Value objects for the financial rollup engine.

Every record here is a frozen snapshot: the engine reads them, builds fresh
output objects, and never writes back into caller-owned structures.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import ConfigError, PortfolioLoadError
from .kinds import K, STAGE_KEYS, normalize_kind

KindTotals = Mapping[str, Mapping[str, float]]


def _copy_amounts(raw: Any, path: str) -> dict[str, float]:
    """Copy a month-key -> amount mapping, keeping non-numeric values as NaN."""
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise PortfolioLoadError("expected a mapping of month keys to amounts", path)
    amounts: dict[str, float] = {}
    for key, value in raw.items():
        try:
            amounts[str(key)] = float(value)
        except (TypeError, ValueError):
            # Kept so the aggregator can skip it like any other non-finite value
            amounts[str(key)] = math.nan
    return amounts


@dataclass(frozen=True, slots=True)
class FinancialLineEntry:
    """
    One ledger line within a kind for a single initiative stage.

    Attributes:
        id: Line identifier, unique within the stage
        label: Display label
        category: Free-form P&L category ("Revenue", "Opex: IT", ...)
        distribution: Planned amount per month key
        actuals: Recorded amount per month key; absent months are "not yet
            recorded", not zero. ``None`` when nothing was ever recorded.
    """

    id: str
    label: str = ""
    category: str = ""
    distribution: dict[str, float] = field(default_factory=dict)
    actuals: dict[str, float] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], path: str = "entry") -> FinancialLineEntry:
        if not isinstance(data, Mapping):
            raise PortfolioLoadError("expected an object", path)
        actuals = data.get("actuals")
        return cls(
            id=str(data.get("id", "")),
            label=str(data.get("label", "")),
            category=str(data.get("category", "")),
            distribution=_copy_amounts(data.get("distribution"), f"{path}.distribution"),
            actuals=(
                None
                if actuals is None
                else _copy_amounts(actuals, f"{path}.actuals")
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "category": self.category,
            "distribution": dict(self.distribution),
        }
        if self.actuals is not None:
            out["actuals"] = dict(self.actuals)
        return out


@dataclass(frozen=True, slots=True)
class StageData:
    """Financial lines of one governance stage, keyed by kind."""

    key: str
    name: str = ""
    period_month: int | None = None
    period_year: int | None = None
    financials: dict[str, tuple[FinancialLineEntry, ...]] = field(
        default_factory=dict
    )

    def entries(self, kind: str) -> tuple[FinancialLineEntry, ...]:
        return self.financials.get(kind, ())

    @classmethod
    def from_dict(cls, key: str, data: Mapping[str, Any], path: str = "stage") -> StageData:
        if not isinstance(data, Mapping):
            raise PortfolioLoadError("expected an object", path)
        raw_financials = data.get("financials") or {}
        if not isinstance(raw_financials, Mapping):
            raise PortfolioLoadError("expected an object", f"{path}.financials")

        financials: dict[str, tuple[FinancialLineEntry, ...]] = {
            kind: () for kind in K.all_kinds()
        }
        for raw_kind, raw_entries in raw_financials.items():
            kind_path = f"{path}.financials.{raw_kind}"
            try:
                kind = normalize_kind(str(raw_kind))
            except ConfigError as e:
                raise PortfolioLoadError(str(e), kind_path) from e
            if raw_entries is None:
                continue
            if not isinstance(raw_entries, (list, tuple)):
                raise PortfolioLoadError("expected a list of entries", kind_path)
            financials[kind] = financials[kind] + tuple(
                FinancialLineEntry.from_dict(item, f"{kind_path}[{i}]")
                for i, item in enumerate(raw_entries)
            )

        return cls(
            key=key,
            name=str(data.get("name", "")),
            period_month=_optional_int(
                data.get("periodMonth", data.get("period_month")), f"{path}.periodMonth"
            ),
            period_year=_optional_int(
                data.get("periodYear", data.get("period_year")), f"{path}.periodYear"
            ),
            financials=financials,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "period_month": self.period_month,
            "period_year": self.period_year,
            "financials": {
                kind: [entry.to_dict() for entry in entries]
                for kind, entries in self.financials.items()
            },
        }


def _optional_int(value: Any, path: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise PortfolioLoadError(f"expected an integer, got {value!r}", path) from e


@dataclass(frozen=True, slots=True)
class Initiative:
    """
    A portfolio initiative and its per-stage financial plan.

    Only ``stages[active_stage]`` takes part in stage-filtered rollups.
    """

    id: str
    active_stage: str
    stages: dict[str, StageData] = field(default_factory=dict)
    name: str = ""
    workstream_id: str | None = None

    @property
    def active(self) -> StageData | None:
        return self.stages.get(self.active_stage)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], path: str = "initiative") -> Initiative:
        """
        Build an initiative from an API payload.

        Accepts both the camelCase web shape (``activeStage``, ``workstreamId``)
        and snake_case keys.
        """
        if not isinstance(data, Mapping):
            raise PortfolioLoadError("expected an object", path)
        active_stage = data.get("activeStage", data.get("active_stage"))
        if not active_stage:
            raise PortfolioLoadError("missing activeStage", path)
        raw_stages = data.get("stages") or {}
        if not isinstance(raw_stages, Mapping):
            raise PortfolioLoadError("expected an object", f"{path}.stages")
        stages = {
            str(key): StageData.from_dict(str(key), value, f"{path}.stages.{key}")
            for key, value in raw_stages.items()
        }
        workstream_id = data.get("workstreamId", data.get("workstream_id"))
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            workstream_id=None if workstream_id is None else str(workstream_id),
            active_stage=str(active_stage),
            stages=stages,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "workstream_id": self.workstream_id,
            "active_stage": self.active_stage,
            "stages": {key: stage.to_dict() for key, stage in self.stages.items()},
        }


@dataclass(frozen=True, slots=True)
class PeriodEnd:
    """Configured end of the planning horizon (month 1-12)."""

    month: int | None
    year: int | None

    @classmethod
    def from_value(cls, value: Any) -> PeriodEnd | None:
        """Parse ``{"month": 3, "year": 2027}`` or ``"2027-03"``."""
        if value is None or isinstance(value, PeriodEnd):
            return value
        if isinstance(value, str):
            year_str, _, month_str = value.partition("-")
            try:
                return cls(month=int(month_str), year=int(year_str))
            except ValueError as e:
                raise PortfolioLoadError(
                    f"invalid period end {value!r}, expected YYYY-MM", "settings.periodEnd"
                ) from e
        if isinstance(value, Mapping):
            return cls(
                month=_optional_int(value.get("month"), "settings.periodEnd.month"),
                year=_optional_int(value.get("year"), "settings.periodEnd.year"),
            )
        raise PortfolioLoadError(
            f"invalid period end {value!r}", "settings.periodEnd"
        )


@dataclass(frozen=True, slots=True)
class MonthDescriptor:
    """One column of the month grid; ``index`` is the offset from the first month."""

    key: str
    label: str
    year: int
    index: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "year": self.year,
            "index": self.index,
        }


@dataclass(frozen=True, slots=True)
class ChartSegment:
    """A single coloured block inside a stacked bar."""

    value: float  # always >= 0
    raw_value: float  # signed: benefits positive, costs negative
    color: str
    label: str
    kind: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "raw_value": self.raw_value,
            "color": self.color,
            "label": self.label,
            "kind": self.kind,
        }


@dataclass(frozen=True, slots=True)
class MonthStack:
    """Positive (benefit) and negative (cost) segments for one month."""

    key: str
    positive_segments: tuple[ChartSegment, ...]
    negative_segments: tuple[ChartSegment, ...]
    positive_total: float
    negative_total: float

    @property
    def is_empty(self) -> bool:
        return not self.positive_segments and not self.negative_segments

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "positive_segments": [s.to_dict() for s in self.positive_segments],
            "negative_segments": [s.to_dict() for s in self.negative_segments],
            "positive_total": self.positive_total,
            "negative_total": self.negative_total,
        }


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """
    Output of the kind totals aggregator.

    Attributes:
        totals: kind -> month key -> summed amount
        month_keys: Months where at least one contributing entry had a finite value
    """

    totals: KindTotals
    month_keys: frozenset[str]

    def kind_total(self, kind: str) -> float:
        return float(sum(self.totals.get(kind, {}).values()))


@dataclass(frozen=True, slots=True)
class RollupTotals:
    """Whole-horizon sums per category, as shown in the dashboard header tiles."""

    recurring_benefits: float = 0.0
    recurring_costs: float = 0.0
    oneoff_benefits: float = 0.0
    oneoff_costs: float = 0.0
    recurring_impact: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "recurring_benefits": self.recurring_benefits,
            "recurring_costs": self.recurring_costs,
            "oneoff_benefits": self.oneoff_benefits,
            "oneoff_costs": self.oneoff_costs,
            "recurring_impact": self.recurring_impact,
        }


@dataclass(frozen=True, slots=True)
class YearSummaryEntry:
    label: str
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True, slots=True)
class YearSummaries:
    fiscal: tuple[YearSummaryEntry, ...] = ()
    calendar: tuple[YearSummaryEntry, ...] = ()

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "fiscal": [entry.to_dict() for entry in self.fiscal],
            "calendar": [entry.to_dict() for entry in self.calendar],
        }


__all__ = [
    "AggregationResult",
    "ChartSegment",
    "FinancialLineEntry",
    "Initiative",
    "KindTotals",
    "MonthDescriptor",
    "MonthStack",
    "PeriodEnd",
    "RollupTotals",
    "StageData",
    "STAGE_KEYS",
    "YearSummaries",
    "YearSummaryEntry",
]
