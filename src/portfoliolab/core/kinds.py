"""
PortfolioLab kind and stage constants.
"""

from __future__ import annotations

import warnings

from .errors import ConfigError


class K:
    # === Benefits (economically positive) ===
    RECURRING_BENEFIT = "recurring-benefit"  # Run-rate savings, new revenue
    ONEOFF_BENEFIT = "oneoff-benefit"  # Asset sales, one-time rebates

    # === Costs (economically negative) ===
    RECURRING_COST = "recurring-cost"  # Licences, added headcount
    ONEOFF_COST = "oneoff-cost"  # Implementation spend, severance

    @classmethod
    def all_kinds(cls) -> list[str]:
        """Enumerate all known kinds in display order."""
        return [
            cls.RECURRING_BENEFIT,
            cls.RECURRING_COST,
            cls.ONEOFF_BENEFIT,
            cls.ONEOFF_COST,
        ]


KIND_LABELS: dict[str, str] = {
    K.RECURRING_BENEFIT: "Recurring benefits",
    K.RECURRING_COST: "Recurring costs",
    K.ONEOFF_BENEFIT: "One-off benefits",
    K.ONEOFF_COST: "One-off costs",
}

# Plural spellings used by the web API payloads
_LEGACY_ALIASES: dict[str, str] = {
    "recurring-benefits": K.RECURRING_BENEFIT,
    "recurring-costs": K.RECURRING_COST,
    "oneoff-benefits": K.ONEOFF_BENEFIT,
    "oneoff-costs": K.ONEOFF_COST,
}

STAGE_KEYS: tuple[str, ...] = ("l0", "l1", "l2", "l3", "l4", "l5")

STAGE_LABELS: dict[str, str] = {key: f"{key.upper()} Gate" for key in STAGE_KEYS}


def is_benefit(kind: str) -> bool:
    return kind in (K.RECURRING_BENEFIT, K.ONEOFF_BENEFIT)


def is_cost(kind: str) -> bool:
    return kind in (K.RECURRING_COST, K.ONEOFF_COST)


def is_oneoff(kind: str) -> bool:
    return kind in (K.ONEOFF_BENEFIT, K.ONEOFF_COST)


def benefit_kinds(include_oneoff: bool = True) -> list[str]:
    """Benefit kinds shown in a view, honouring the one-off toggle."""
    if include_oneoff:
        return [K.RECURRING_BENEFIT, K.ONEOFF_BENEFIT]
    return [K.RECURRING_BENEFIT]


def cost_kinds(include_oneoff: bool = True) -> list[str]:
    """Cost kinds shown in a view, honouring the one-off toggle."""
    if include_oneoff:
        return [K.RECURRING_COST, K.ONEOFF_COST]
    return [K.RECURRING_COST]


def normalize_kind(kind: str) -> str:
    """
    Resolve a kind string to its canonical tag.

    Plural API spellings are accepted with a DeprecationWarning.

    Raises:
        ConfigError: If the kind is not one of the four known tags
    """
    if kind in KIND_LABELS:
        return kind
    if kind in _LEGACY_ALIASES:
        canonical = _LEGACY_ALIASES[kind]
        warnings.warn(
            f"Kind '{kind}' is deprecated; use '{canonical}' instead.",
            DeprecationWarning,
            stacklevel=3,
        )
        return canonical
    raise ConfigError(
        f"Unknown financial kind '{kind}'. Expected one of: {', '.join(K.all_kinds())}"
    )


def validate_kinds(kinds) -> list[str]:
    """Return the kinds as a list, raising ConfigError on unknown tags."""
    resolved = list(kinds)
    unknown = [kind for kind in resolved if kind not in KIND_LABELS]
    if unknown:
        raise ConfigError(
            f"Unknown financial kind(s): {', '.join(map(str, unknown))}"
        )
    return resolved
