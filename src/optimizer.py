"""
Budget optimizer.

Moves a design's price toward a target budget by pulling a fixed sequence
of levers, one pass each, with no search or backtracking:

  1. geometry: drop placements in the template's removal order (price too
     high) or add entries from its addition queue (price too low)
  2. door finish: switch to the cheapest / most premium door
  3. countertop finish: switch to the cheapest / most premium top

The target is not guaranteed to be hit exactly; the optimizer stops once a
lever crosses the target or the levers run out.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List

from builder import make_placement
from design import (
    Design,
    FinishOperation,
    FinishType,
    OperationReason,
    OptimizationOperation,
    PlacementAction,
    PlacementOperation,
    PlacementSource,
)
from errors import DesignInvariantError
from materials import (
    cheapest_door,
    cheapest_top,
    most_premium_door,
    most_premium_top,
)
from pricing import price, round_half_up
from templates import LayoutTemplate, resolve_layout

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    final: Design
    ops: List[OptimizationOperation]
    # Price before the first operation, then after each one.
    price_trace: List[int] = field(default_factory=list)


def normalize_target(target_budget: float) -> int:
    if target_budget is None or math.isnan(target_budget) or math.isinf(target_budget):
        raise ValueError(f"Target budget must be a finite number, got {target_budget!r}")
    if target_budget < 0:
        raise ValueError(f"Target budget must be >= 0, got {target_budget}")
    return round_half_up(target_budget)


def _remove_toward(
    design: Design,
    template: LayoutTemplate,
    target: int,
    ops: List[OptimizationOperation],
    trace: List[int],
) -> None:
    current = price(design)
    for key in template.removal_order:
        if current <= target:
            break
        found = design.find_placement(key)
        if found is None:
            continue
        room, placement = found
        room.placements.remove(placement)
        current = price(design)
        design.metadata.current_price_usd = current
        ops.append(PlacementOperation(
            action=PlacementAction.REMOVE,
            module_id=placement.module_id,
            room_id=room.id,
            key=key,
            reason=OperationReason.BUDGET_DOWN,
        ))
        trace.append(current)
        logger.debug("Removed %s, price now $%d", key, current)


def _add_toward(
    design: Design,
    template: LayoutTemplate,
    target: int,
    ops: List[OptimizationOperation],
    trace: List[int],
) -> None:
    current = price(design)
    for definition in template.addition_queue:
        if current >= target:
            break
        if design.has_placement(definition.key):
            continue
        room_id = definition.resolve_room_id()
        room = design.room(room_id)
        if room is None:
            # Built designs carry every template room.
            raise DesignInvariantError(f"Room {room_id} missing from design {design.layout}")
        room.placements.append(
            make_placement(design.layout, room_id, definition, PlacementSource.ADDED, optional=True)
        )
        current = price(design)
        design.metadata.current_price_usd = current
        ops.append(PlacementOperation(
            action=PlacementAction.ADD,
            module_id=definition.module_id,
            room_id=room_id,
            key=definition.key,
            reason=OperationReason.BUDGET_UP,
        ))
        trace.append(current)
        logger.debug("Added %s, price now $%d", definition.key, current)


def _swap_finish(
    design: Design,
    finish_type: FinishType,
    target: int,
    cheapest: Callable[[], str],
    premium: Callable[[], str],
    ops: List[OptimizationOperation],
    trace: List[int],
) -> None:
    current = price(design)
    if current > target:
        replacement, reason = cheapest(), OperationReason.BUDGET_DOWN
    elif current < target:
        replacement, reason = premium(), OperationReason.BUDGET_UP
    else:
        return

    attr = finish_type.value
    previous = getattr(design, attr)
    # Tokens, not multipliers: a tied finish still moves to the catalog-order pick.
    if previous == replacement:
        return

    setattr(design, attr, replacement)
    design.metadata.current_price_usd = price(design)
    trace.append(design.metadata.current_price_usd)
    ops.append(FinishOperation(
        finish_type=finish_type,
        from_token=previous,
        to_token=replacement,
        reason=reason,
    ))
    logger.debug(
        "Switched %s finish %s -> %s, price now $%d",
        attr, previous, replacement, design.metadata.current_price_usd,
    )


def optimize_to_budget(design: Design, target_budget: float) -> OptimizationResult:
    """Steer a clone of ``design`` toward ``target_budget``.

    The input design is never mutated. ``metadata.current_price_usd`` on the
    clone is kept equal to its price after every step.

    Args:
        design: Design to start from (usually straight from the builder)
        target_budget: Target in USD, >= 0; rounded half-up to whole USD

    Returns:
        OptimizationResult with the mutated clone and the operations taken,
        in the order they were applied.

    Raises:
        UnknownLayout: the design's layout has no template.
        ValueError: negative or non-finite target.
    """
    template = resolve_layout(design.layout)
    target = normalize_target(target_budget)

    working = design.clone()
    ops: List[OptimizationOperation] = []

    if target == 0:
        working.metadata.target_budget_usd = 0
        working.metadata.current_price_usd = price(working)
        trace = [working.metadata.current_price_usd]
        return OptimizationResult(final=working, ops=ops, price_trace=trace)

    starting = price(working)
    working.metadata.current_price_usd = starting
    trace = [starting]
    if starting > target:
        _remove_toward(working, template, target, ops, trace)
    elif starting < target:
        _add_toward(working, template, target, ops, trace)

    _swap_finish(
        working, FinishType.DOOR, target,
        cheapest_door, most_premium_door, ops, trace,
    )
    _swap_finish(
        working, FinishType.TOP, target,
        cheapest_top, most_premium_top, ops, trace,
    )

    final_price = price(working)
    working.operations.extend(ops)
    working.metadata.current_price_usd = final_price
    working.metadata.target_budget_usd = target

    logger.info(
        "Optimized %s toward $%d: $%d -> $%d in %d operation(s)",
        working.layout, target, starting, final_price, len(ops),
    )
    if final_price > target and not any(working.has_placement(k) for k in template.removal_order):
        logger.warning(
            "%s cannot come down to $%d; floor price is $%d",
            working.layout, target, final_price,
        )
    elif final_price < target and all(
        working.has_placement(p.key) for p in template.addition_queue
    ):
        logger.warning(
            "%s cannot go up to $%d; ceiling price is $%d",
            working.layout, target, final_price,
        )
    return OptimizationResult(final=working, ops=ops, price_trace=trace)
