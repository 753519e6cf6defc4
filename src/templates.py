"""
Kitchen layout templates.

A template is the static floor plan a Design is built from: its rooms, the
baseline cabinet placements in each room, the order in which placements are
dropped when a budget has to come down (removal order) and the queue of
extra placements offered when a budget allows more (addition queue).

Both orders are authored by hand and are part of the pricing contract;
they are kept as tuples and must never be re-sorted.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Set, Tuple

from errors import LayoutTemplateError, UnknownLayout
from module_catalog import get_module

MILLIMETER_TO_PIXEL = 0.2


@dataclass(frozen=True)
class PlacementDefinition:
    """A module position authored in a template (absolute mm coordinates)."""

    module_id: str
    x: float
    y: float
    key: str
    rotation: Optional[float] = None
    note: Optional[str] = None
    optional: bool = False
    room_id: Optional[str] = None  # Only needed for addition-queue entries

    def resolve_room_id(self) -> str:
        """Room of this placement; keys are written as ``room:MODULE-n``."""
        if self.room_id:
            return self.room_id
        return self.key.split(":", 1)[0]


@dataclass(frozen=True)
class RoomTemplate:
    id: str
    label: str
    width: float
    depth: float
    origin: Tuple[float, float]
    placements: Tuple[PlacementDefinition, ...]


@dataclass(frozen=True)
class LayoutTemplate:
    id: str
    name: str
    summary: str
    default_scale: float
    rooms: Tuple[RoomTemplate, ...]
    removal_order: Tuple[str, ...]
    addition_queue: Tuple[PlacementDefinition, ...]

    def baseline_placements(self) -> Iterator[Tuple[RoomTemplate, PlacementDefinition]]:
        for room in self.rooms:
            for placement in room.placements:
                yield room, placement

    def baseline_keys(self) -> Set[str]:
        return {placement.key for _, placement in self.baseline_placements()}

    def room(self, room_id: str) -> Optional[RoomTemplate]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None


def _p(module_id: str, x: float, y: float, key: str, **kwargs) -> PlacementDefinition:
    return PlacementDefinition(module_id=module_id, x=x, y=y, key=key, **kwargs)


BACK_KITCHEN = LayoutTemplate(
    id="BACK_KITCHEN",
    name="2X Kitchen (Show + Prep)",
    summary=(
        "Dual-room layout with a showcase kitchen and offset prep space "
        "for parallel workflows."
    ),
    default_scale=MILLIMETER_TO_PIXEL,
    rooms=(
        RoomTemplate(
            id="show",
            label="Show Kitchen",
            width=6000,
            depth=3500,
            origin=(0, 0),
            placements=(
                _p("CAFI", 200, 0, "show:CAFI-1"),
                _p("CAOV", 800, 0, "show:CAOV-1"),
                _p("CAMI", 1400, 0, "show:CAMI-1"),
                _p("BARA", 2000, 0, "show:BARA-1"),
                _p("BSDD", 3200, 0, "show:BSDD-1"),
                _p("CSSP", 4400, 0, "show:CSSP-1"),
                _p("BSSD", 5000, 0, "show:BSSD-1", optional=True),
                _p("ISNA", 1800, 1900, "show:ISNA-1", note="Show island left", optional=True),
                _p("ISNA", 3200, 1900, "show:ISNA-2", note="Show island right", optional=True),
            ),
        ),
        RoomTemplate(
            id="prep",
            label="Prep Kitchen",
            width=4500,
            depth=3000,
            origin=(7000, 0),
            placements=(
                _p("CSSP", 7100, 0, "prep:CSSP-1"),
                _p("USDO", 7700, 0, "prep:USDO-1"),
                _p("BSDD", 8300, 0, "prep:BSDD-1"),
                _p("BSDR", 9500, 0, "prep:BSDR-1", optional=True),
                _p("CAFE", 10900, 0, "prep:CAFE-1"),
            ),
        ),
    ),
    removal_order=(
        "show:ISNA-1",
        "show:ISNA-2",
        "show:BSSD-1",
        "prep:BSDR-1",
        "show:BSDD-1",
    ),
    addition_queue=(
        _p("BADI", 200, 0, "show:BADI-1", room_id="show", rotation=0, note="Upper fridge cab", optional=True),
        _p("BADI", 800, 0, "show:BADI-2", room_id="show", rotation=0, note="Upper oven cab", optional=True),
        _p("BADI", 2000, 0, "show:BADI-3", room_id="show", rotation=0, note="Upper range cab", optional=True),
        _p("BSSD", 8900, 0, "prep:BSSD-1", room_id="prep", note="Prep single base", optional=True),
    ),
)

DUAL_ISLAND = LayoutTemplate(
    id="DUAL_ISLAND",
    name="Dual Island",
    summary="Symmetric dual-island layout for entertaining and prep zones.",
    default_scale=MILLIMETER_TO_PIXEL,
    rooms=(
        RoomTemplate(
            id="primary",
            label="Dual Island Room",
            width=6000,
            depth=4000,
            origin=(0, 0),
            placements=(
                _p("CAFI", 200, 0, "primary:CAFI-1"),
                _p("USDO", 800, 0, "primary:USDO-1"),
                _p("BARA", 1400, 0, "primary:BARA-1"),
                _p("BSDD", 2600, 0, "primary:BSDD-1"),
                _p("CSSP", 3800, 0, "primary:CSSP-1"),
                _p("CAOV", 4400, 0, "primary:CAOV-1"),
                _p("CAMI", 5000, 0, "primary:CAMI-1"),
                _p("ISNA", 1500, 2000, "primary:ISNA-1", note="Wet island", optional=True),
                _p("ISNA", 3000, 2600, "primary:ISNA-2", note="Dry island", optional=True),
            ),
        ),
    ),
    removal_order=("primary:ISNA-1", "primary:ISNA-2", "primary:BSDD-1"),
    addition_queue=(
        _p("BADI", 200, 0, "primary:BADI-1", room_id="primary", note="Upper fridge cab", optional=True),
        _p("BADI", 800, 0, "primary:BADI-2", room_id="primary", note="Upper dishwasher cab", optional=True),
        _p("BADI", 1400, 0, "primary:BADI-3", room_id="primary", note="Upper range cab", optional=True),
    ),
)

BROKEN_PLAN = LayoutTemplate(
    id="BROKEN_PLAN",
    name="Broken Plan Kitchen",
    summary="Partition-ready layout balancing pantry storage and preparation zones.",
    default_scale=MILLIMETER_TO_PIXEL,
    rooms=(
        RoomTemplate(
            id="primary",
            label="Broken Plan Kitchen",
            width=6500,
            depth=4200,
            origin=(0, 0),
            placements=(
                _p("CAFI", 200, 0, "primary:CAFI-1"),
                _p("USDO", 800, 0, "primary:USDO-1"),
                _p("BARA", 1400, 0, "primary:BARA-1"),
                _p("BSDD", 2600, 0, "primary:BSDD-1"),
                _p("CSDP", 3800, 0, "primary:CSDP-1", note="Ends at 5056"),
                _p("CAMI", 5056, 0, "primary:CAMI-1"),
                _p("CAOV", 5656, 0, "primary:CAOV-1"),
                _p("ISNA", 2600, 2400, "primary:ISNA-1", optional=True),
            ),
        ),
    ),
    removal_order=("primary:ISNA-1", "primary:BSDD-1"),
    addition_queue=(
        _p("BADI", 200, 0, "primary:BADI-1", room_id="primary", note="Upper fridge cab", optional=True),
        _p("BADI", 800, 0, "primary:BADI-2", room_id="primary", note="Upper dishwasher cab", optional=True),
        _p("BADI", 1400, 0, "primary:BADI-3", room_id="primary", note="Upper range cab", optional=True),
        _p("BSSD", 6200, 0, "primary:BSSD-1", room_id="primary", note="End cap base", optional=True),
    ),
)

DISAPPEARING_LINEAR = LayoutTemplate(
    id="DISAPPEARING_LINEAR",
    name="Disappearing Linear",
    summary=(
        "Concealed functional wall with a monolithic island for minimal "
        "visual clutter."
    ),
    default_scale=MILLIMETER_TO_PIXEL,
    rooms=(
        RoomTemplate(
            id="primary",
            label="Linear Kitchen",
            width=5200,
            depth=3600,
            origin=(0, 0),
            placements=(
                _p("CSDP", 200, 0, "primary:CSDP-1", note="Ends at 1456"),
                _p("CAFI", 1456, 0, "primary:CAFI-1"),
                _p("CAMI", 2056, 0, "primary:CAMI-1"),
                _p("CAOV", 2656, 0, "primary:CAOV-1"),
                _p("BARA", 3256, 0, "primary:BARA-1"),
                _p("CSSP", 4456, 0, "primary:CSSP-1"),
                _p("ISNA", 1400, 2200, "primary:ISNA-1", optional=True),
                _p("ISNA", 2800, 2200, "primary:ISNA-2", optional=True),
            ),
        ),
    ),
    removal_order=("primary:ISNA-1", "primary:ISNA-2"),
    addition_queue=(
        _p("BADI", 1456, 0, "primary:BADI-1", room_id="primary", note="Upper fridge cab", optional=True),
        _p("BADI", 2056, 0, "primary:BADI-2", room_id="primary", note="Upper microwave cab", optional=True),
        _p("BADI", 3256, 0, "primary:BADI-3", room_id="primary", note="Upper range cab", optional=True),
    ),
)


def validate_template(template: LayoutTemplate) -> None:
    """Check that every key and module a template references is resolvable.

    Raises:
        UnknownModule: a placement names a module missing from the catalog.
        LayoutTemplateError: duplicate keys, a removal key outside the
            baseline, an addition key already in the baseline, or an
            addition whose room does not exist.
    """
    baseline: Dict[str, str] = {}
    for room, placement in template.baseline_placements():
        get_module(placement.module_id)
        if placement.key in baseline:
            raise LayoutTemplateError(
                f"Duplicate placement key {placement.key} in layout {template.id}"
            )
        baseline[placement.key] = room.id

    for key in template.removal_order:
        if key not in baseline:
            raise LayoutTemplateError(
                f"Removal key {key} is not a baseline placement of {template.id}"
            )

    queued: Set[str] = set()
    for placement in template.addition_queue:
        get_module(placement.module_id)
        if placement.key in baseline or placement.key in queued:
            raise LayoutTemplateError(
                f"Addition key {placement.key} already exists in layout {template.id}"
            )
        if template.room(placement.resolve_room_id()) is None:
            raise LayoutTemplateError(
                f"Addition {placement.key} targets unknown room "
                f"{placement.resolve_room_id()} in layout {template.id}"
            )
        queued.add(placement.key)


def _build_registry(*templates: LayoutTemplate) -> Mapping[str, LayoutTemplate]:
    for template in templates:
        validate_template(template)
    return MappingProxyType({template.id: template for template in templates})


LAYOUTS = _build_registry(BACK_KITCHEN, DUAL_ISLAND, BROKEN_PLAN, DISAPPEARING_LINEAR)
LAYOUT_OPTIONS: Tuple[str, ...] = tuple(LAYOUTS)

# Historical layout ids, one per canonical id.
_LEGACY_TO_CANONICAL: Mapping[str, str] = MappingProxyType({
    "TWO_X_KITCHEN": "BACK_KITCHEN",
    "DUAL_ISLAND": "DUAL_ISLAND",
    "WOKE_KITCHEN": "BROKEN_PLAN",
    "LINEAR": "DISAPPEARING_LINEAR",
})
_CANONICAL_TO_LEGACY: Mapping[str, str] = MappingProxyType(
    {canonical: legacy for legacy, canonical in _LEGACY_TO_CANONICAL.items()}
)
LEGACY_LAYOUT_IDS: Tuple[str, ...] = tuple(_LEGACY_TO_CANONICAL)


def _normalize_token(value: str) -> str:
    return re.sub(r"[^A-Z_]", "_", value.upper())


def canonical_layout_id(value: str) -> str:
    """Map a canonical or legacy layout id onto its canonical id."""
    key = _normalize_token(value)
    if key in LAYOUTS:
        return key
    canonical = _LEGACY_TO_CANONICAL.get(key)
    if canonical is None:
        raise UnknownLayout(value)
    return canonical


def legacy_layout_id(value: str) -> str:
    """Map a canonical (or legacy) layout id onto its legacy id."""
    return _CANONICAL_TO_LEGACY[canonical_layout_id(value)]


def resolve_layout(layout_id: str) -> LayoutTemplate:
    return LAYOUTS[canonical_layout_id(layout_id)]
