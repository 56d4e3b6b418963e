"""
Score/Tier Interpretation

Maps a continuous result (ratio, percentile, score) onto a small ordered
set of qualitative tiers with canned interpretation, recommendation and
warning text.
"""

import math
from typing import List, Dict, Optional, Tuple
from dataclasses import dataclass


@dataclass(frozen=True)
class Tier:
    """A single tier, covering values up to ``upper``."""

    label: str
    upper: Optional[float]  # None = unbounded (top tier)
    interpretation: str
    recommendations: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    inclusive: Optional[bool] = None  # Overrides the table setting


@dataclass
class TierTable:
    """
    Ordered tier ladder for one calculator.

    Tiers are listed by ascending upper bound and the last tier is
    unbounded. With ``inclusive`` (the default) a value sitting exactly on
    a boundary belongs to the lower tier (``value <= upper``); tables that
    mirror a strict ``value < upper`` ladder set ``inclusive=False``.
    """

    name: str
    tiers: List[Tier]
    inclusive: bool = True

    def __post_init__(self):
        if not self.tiers:
            raise ValueError(f"Tier table '{self.name}' has no tiers")
        if self.tiers[-1].upper is not None:
            raise ValueError(f"Last tier of '{self.name}' must be unbounded")
        bounds = [tier.upper for tier in self.tiers[:-1]]
        if any(b is None for b in bounds) or bounds != sorted(bounds):
            raise ValueError(f"Tier bounds of '{self.name}' must be ascending")

    @property
    def labels(self) -> List[str]:
        return [tier.label for tier in self.tiers]

    def tier_for(self, value: float) -> Tier:
        """Return the tier a value falls into."""
        if value is None or not math.isfinite(value):
            raise ValueError(f"Cannot classify non-finite value {value!r}")

        for tier in self.tiers[:-1]:
            inclusive = self.inclusive if tier.inclusive is None else tier.inclusive
            if value < tier.upper or (inclusive and value == tier.upper):
                return tier
        return self.tiers[-1]

    def classify(self, value: float) -> Dict:
        """
        Interpret a value.

        Returns:
            Dict with tier label, interpretation, recommendations and warnings
        """
        tier = self.tier_for(value)
        return {
            "value": value,
            "tier": tier.label,
            "interpretation": tier.interpretation,
            "recommendations": list(tier.recommendations),
            "warnings": list(tier.warnings),
        }
