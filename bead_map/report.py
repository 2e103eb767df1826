# bead_map/report.py
from __future__ import annotations

"""
Colour usage and purchase reporting built on quantization counts.

Exports:
  colour_usage(result) -> list[UsageLine]
  group_by_category(lines) -> dict[str, list[UsageLine]]
  suggested_quantity(count) -> int
  package_for(quantity) -> int
  estimate_purchase(counts, palette) -> PurchaseEstimate
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping

from .constants import (
    COST_PER_BEAD,
    PACKAGE_SIZES,
    PURCHASE_ROUND_TO,
    PURCHASE_SPARE_RATIO,
)
from .core_types import ColourId, QuantizationResult
from .palette import Palette


@dataclass(frozen=True)
class UsageLine:
    id: ColourId
    name: str
    category: str
    hex: str
    count: int


@dataclass(frozen=True)
class PurchaseLine:
    id: ColourId
    name: str
    needed: int
    suggested: int
    package: int


@dataclass(frozen=True)
class PurchaseEstimate:
    lines: List[PurchaseLine]
    total_needed: int
    total_suggested: int
    estimated_cost: float


def _by_count(counts: Mapping[ColourId, int], palette: Palette) -> List[ColourId]:
    """Ids sorted by count descending, ties in catalog order."""
    return sorted(counts, key=lambda cid: (-counts[cid], palette.index_of(cid)))


def colour_usage(result: QuantizationResult) -> List[UsageLine]:
    """One line per bead colour used, most used first."""
    pal = result.palette
    lines: List[UsageLine] = []
    for colour_id in _by_count(result.counts, pal):
        c = pal.get(colour_id)
        lines.append(
            UsageLine(c.id, c.name, c.category, c.hex, int(result.counts[colour_id]))
        )
    return lines


def group_by_category(lines: List[UsageLine]) -> Dict[str, List[UsageLine]]:
    """Category -> lines, categories in order of first appearance."""
    groups: Dict[str, List[UsageLine]] = {}
    for line in lines:
        groups.setdefault(line.category, []).append(line)
    return groups


def suggested_quantity(count: int) -> int:
    """
    Count plus spare, rounded up to the next multiple of PURCHASE_ROUND_TO.

    Exact integer arithmetic, so 1000 beads suggest 1100. The float form
    ceil(count * 1.1 / 100) * 100 gives 1200 there, since 1000 * 1.1 lands
    just above 1100; the two can disagree when count * 1.1 is an exact
    multiple of PURCHASE_ROUND_TO.
    """
    if count <= 0:
        return 0
    spare = count * round(PURCHASE_SPARE_RATIO * 100)
    step = PURCHASE_ROUND_TO * 100
    return -(-spare // step) * PURCHASE_ROUND_TO


def package_for(quantity: int) -> int:
    """Smallest package holding quantity, else the largest package."""
    for size in PACKAGE_SIZES:
        if size >= quantity:
            return size
    return PACKAGE_SIZES[-1]


def estimate_purchase(
    counts: Mapping[ColourId, int], palette: Palette
) -> PurchaseEstimate:
    """
    Shopping list for a bead grid: per colour the count needed, a suggested
    purchase with spare, and the package size to buy; plus totals and cost.
    """
    lines: List[PurchaseLine] = []
    for colour_id in _by_count(counts, palette):
        needed = int(counts[colour_id])
        suggested = suggested_quantity(needed)
        c = palette.get(colour_id)
        lines.append(PurchaseLine(c.id, c.name, needed, suggested, package_for(suggested)))

    total_needed = sum(line.needed for line in lines)
    total_suggested = sum(line.suggested for line in lines)
    return PurchaseEstimate(
        lines=lines,
        total_needed=total_needed,
        total_suggested=total_suggested,
        estimated_cost=round(total_suggested * COST_PER_BEAD, 2),
    )


__all__ = [
    "UsageLine",
    "PurchaseLine",
    "PurchaseEstimate",
    "colour_usage",
    "group_by_category",
    "suggested_quantity",
    "package_for",
    "estimate_purchase",
]
