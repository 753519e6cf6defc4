"""
Placement rules for externally generated variants.

Variant generators outside the deterministic optimizer (a language-model
service, a manual editor) return loose placement records. These helpers
bring such records back under the same rules the builder guarantees:
known modules, known rooms, footprints inside the room envelope, rotations
on 90 degree steps and the baseline's module counts. The result can be
turned into a priced Design that passes assert_invariants.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from builder import placement_id
from design import Design, DesignMetadata, DesignRoom, Placement, PlacementSource
from errors import PlacementRuleError, UnknownModule
from materials import door_material, top_material
from module_catalog import MODULES, get_module
from pricing import price, round_half_up
from templates import LayoutTemplate, resolve_layout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedPlacement:
    room_id: str
    module_id: str
    x: int
    y: int
    rotation: Optional[int] = None
    option: Optional[str] = None
    note: Optional[str] = None


def snap_rotation(rotation: float) -> int:
    return (round_half_up(rotation / 90.0) * 90) % 360


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def normalize_placements(
    template: LayoutTemplate,
    raw_placements: Iterable[Mapping[str, Any]],
) -> List[NormalizedPlacement]:
    """Validate and clamp raw placement records against a layout template.

    Each record needs ``roomId``, ``moduleId`` (or ``type``), ``x`` and
    ``y``; ``rotation``, ``option`` and ``note`` are optional.

    Raises:
        UnknownModule: a record names a module missing from the catalog.
        PlacementRuleError: a record names a room the layout does not have.
    """
    results: List[NormalizedPlacement] = []
    for raw in raw_placements:
        module_id = str(raw.get("moduleId") or raw.get("type") or "").upper()
        if module_id not in MODULES:
            raise UnknownModule(module_id or repr(raw))
        spec = get_module(module_id)

        room = template.room(raw.get("roomId", ""))
        if room is None:
            raise PlacementRuleError(
                f"Unknown roomId {raw.get('roomId')!r} for layout {template.id}"
            )

        min_x, min_y = room.origin
        max_x = room.origin[0] + room.width - spec.width
        max_y = room.origin[1] + room.depth - spec.depth
        x = _clamp(float(raw["x"]), min_x, max_x)
        y = _clamp(float(raw["y"]), min_y, max_y)
        if (x, y) != (float(raw["x"]), float(raw["y"])):
            logger.debug("Clamped %s in %s to (%s, %s)", module_id, room.id, x, y)

        rotation = raw.get("rotation")
        results.append(NormalizedPlacement(
            room_id=room.id,
            module_id=module_id,
            x=round_half_up(x),
            y=round_half_up(y),
            rotation=snap_rotation(rotation) if rotation is not None else None,
            option=raw.get("option"),
            note=raw.get("note"),
        ))
    return results


def validate_module_counts(
    template: LayoutTemplate,
    placements: Sequence[NormalizedPlacement],
) -> None:
    """Require exactly the baseline's number of each module.

    Raises:
        PlacementRuleError: on the first module whose count differs.
    """
    expected = Counter(p.module_id for _, p in template.baseline_placements())
    received = Counter(p.module_id for p in placements)
    for module_id in list(expected) + [m for m in received if m not in expected]:
        if expected[module_id] != received[module_id]:
            raise PlacementRuleError(
                f"Module count mismatch for {module_id}: expected "
                f"{expected[module_id]}, received {received[module_id]}"
            )


def design_from_placements(
    layout_id: str,
    door: str,
    top: str,
    placements: Sequence[NormalizedPlacement],
    created_at: str = "",
) -> Design:
    """Build a priced Design from normalized placements.

    Keys are synthesised per room as ``{room}:{module}:{n}``.
    """
    template = resolve_layout(layout_id)
    door_option = door_material(door)
    top_option = top_material(top)

    rooms = [
        DesignRoom(id=r.id, label=r.label, width=r.width, depth=r.depth, origin=r.origin)
        for r in template.rooms
    ]
    by_id = {room.id: room for room in rooms}
    for normalized in placements:
        room = by_id.get(normalized.room_id)
        if room is None:
            raise PlacementRuleError(
                f"Unknown roomId {normalized.room_id!r} for layout {template.id}"
            )
        spec = get_module(normalized.module_id)
        key = f"{room.id}:{spec.id}:{len(room.placements) + 1}"
        room.placements.append(Placement(
            id=placement_id(template.id, room.id, key),
            key=key,
            room_id=room.id,
            module_id=spec.id,
            x=normalized.x,
            y=normalized.y,
            width=spec.width,
            depth=spec.depth,
            height=spec.height,
            category=spec.category,
            rotation=normalized.rotation,
            note=normalized.note,
            optional=False,
            source=PlacementSource.BASE,
        ))

    design = Design(
        layout=template.id,
        name=template.name,
        summary=template.summary,
        door=door_option.token,
        top=top_option.token,
        rooms=rooms,
        created_at=created_at,
    )
    total = price(design)
    design.metadata = DesignMetadata(base_price_usd=total, current_price_usd=total)
    return design
