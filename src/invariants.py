"""Consistency checks for Design instances."""

from typing import Set

from design import Design
from errors import DuplicatePlacementId, PriceMismatch
from pricing import price


def assert_invariants(design: Design) -> None:
    """Raise if placement ids repeat or the stored price is stale.

    Raises:
        DuplicatePlacementId: two placements share an id.
        PriceMismatch: ``metadata.current_price_usd`` differs from ``price(design)``.
    """
    seen: Set[str] = set()
    for placement in design.placements():
        if placement.id in seen:
            raise DuplicatePlacementId(placement.id)
        seen.add(placement.id)

    recomputed = price(design)
    if recomputed != design.metadata.current_price_usd:
        raise PriceMismatch(expected=design.metadata.current_price_usd, actual=recomputed)
