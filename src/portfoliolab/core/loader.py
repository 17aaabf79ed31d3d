"""Utilities for loading portfolio snapshots from YAML/JSON sources."""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .dashboard import PortfolioSettings
from .errors import ConfigError, PortfolioLoadError
from .models import Initiative

__all__ = [
    "Portfolio",
    "load_portfolio",
]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Portfolio:
    """Structured representation of a portfolio document."""

    initiatives: list[Initiative]
    settings: PortfolioSettings = field(default_factory=PortfolioSettings)
    metadata: dict[str, Any] = field(default_factory=dict)
    source: str = "<memory>"

    def workstreams(self) -> list[str]:
        """Workstream ids present in the snapshot, sorted."""
        return sorted({i.workstream_id for i in self.initiatives if i.workstream_id})


def load_portfolio(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> Portfolio:
    """
    Parse a portfolio document from YAML/JSON/dict.

    Expected shape::

        settings:
          fiscalStartMonth: 4
          periodEnd: {month: 12, year: 2027}
        initiatives:
          - id: ini-1
            activeStage: l2
            stages:
              l2:
                financials:
                  recurring-benefit:
                    - id: line-1
                      distribution: {"2026-01": 1000}

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist
        PortfolioLoadError: If the document is malformed
    """
    mapping, label = _read_source(source, format=format)

    try:
        settings = PortfolioSettings.from_dict(
            _ensure_dict(mapping.get("settings"), f"{label}::settings")
        )
    except PortfolioLoadError:
        raise
    except (ConfigError, TypeError, ValueError) as e:
        raise PortfolioLoadError(str(e), f"{label}::settings") from e

    raw_initiatives = mapping.get("initiatives")
    if raw_initiatives is None:
        raw_initiatives = []
    if not isinstance(raw_initiatives, list):
        raise PortfolioLoadError("expected a list", f"{label}::initiatives")

    initiatives = [
        Initiative.from_dict(item, f"{label}::initiatives[{i}]")
        for i, item in enumerate(raw_initiatives)
    ]
    logger.debug("Loaded %d initiatives from %s", len(initiatives), label)
    return Portfolio(
        initiatives=initiatives,
        settings=settings,
        metadata=_ensure_dict(mapping.get("metadata"), f"{label}::metadata"),
        source=label,
    )


def _read_source(
    source: str | Path | dict[str, Any], *, format: str | None
) -> tuple[dict[str, Any], str]:
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    try:
        if fmt in {"yaml", "yml", ""}:
            data = yaml.safe_load(text)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise PortfolioLoadError(f"Unsupported portfolio format '{fmt}'", str(path))
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise PortfolioLoadError(f"could not parse document: {e}", str(path)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise PortfolioLoadError("top-level document must be a mapping", str(path))
    return data, str(path)


def _ensure_dict(value: Any, label: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise PortfolioLoadError("expected a mapping", label)
    return dict(value)
