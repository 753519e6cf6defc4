"""
Design pricing.

price = round(sum(module base cost) * door multiplier * top multiplier)

Rounding is half-up to the nearest whole USD.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable

from design import Design
from materials import door_material, top_material
from module_catalog import get_module

DEPOSIT_RATE = 0.2


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def module_subtotal(module_ids: Iterable[str]) -> int:
    return sum(get_module(module_id).base_cost_usd for module_id in module_ids)


def finishes_multiplier(door: str, top: str) -> float:
    return door_material(door).multiplier * top_material(top).multiplier


def price(design: Design) -> int:
    """Total price of a design in whole USD.

    Depends only on the placements' module ids and the two finishes, so it
    is independent of placement order.

    Raises:
        UnknownModule / UnknownFinish for designs that reference ids missing
        from the catalogs.
    """
    subtotal = module_subtotal(p.module_id for p in design.placements())
    return round_half_up(subtotal * finishes_multiplier(design.door, design.top))


@dataclass(frozen=True)
class PricingBreakdown:
    module_subtotal_usd: int
    door_multiplier: float
    top_multiplier: float
    finishes_multiplier: float
    total_usd: int
    deposit_usd: int


def _breakdown(subtotal: int, door: str, top: str, deposit_rate: float) -> PricingBreakdown:
    if not 0 < deposit_rate <= 1:
        raise ValueError(f"Deposit rate must be in (0, 1], got {deposit_rate}")
    door_multiplier = door_material(door).multiplier
    top_multiplier = top_material(top).multiplier
    combined = door_multiplier * top_multiplier
    if subtotal == 0:
        return PricingBreakdown(0, door_multiplier, top_multiplier, combined, 0, 0)
    total = round_half_up(subtotal * combined)
    return PricingBreakdown(
        module_subtotal_usd=subtotal,
        door_multiplier=door_multiplier,
        top_multiplier=top_multiplier,
        finishes_multiplier=combined,
        total_usd=total,
        deposit_usd=round_half_up(total * deposit_rate),
    )


def pricing_breakdown(design: Design, deposit_rate: float = DEPOSIT_RATE) -> PricingBreakdown:
    """Itemised price of a design including the checkout deposit."""
    subtotal = module_subtotal(p.module_id for p in design.placements())
    return _breakdown(subtotal, design.door, design.top, deposit_rate)


def quote_modules(
    module_ids: Iterable[str],
    door: str,
    top: str,
    deposit_rate: float = DEPOSIT_RATE,
) -> PricingBreakdown:
    """Price a bare list of module ids without building a design."""
    return _breakdown(module_subtotal(module_ids), door, top, deposit_rate)


def format_usd(value: float) -> str:
    if float(value).is_integer():
        return f"${int(value):,}"
    return f"${value:,.2f}"


def summarize_design(design: Design) -> Dict[str, object]:
    return {
        "layout": design.layout,
        "priceUSD": price(design),
        "modules": len(design.placements()),
        "operations": len(design.operations),
    }
