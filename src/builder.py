"""
Design builder: layout template + finishes -> priced Design.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from design import Design, DesignMetadata, DesignRoom, Placement, PlacementSource
from materials import DEFAULT_DOOR, DEFAULT_TOP, door_material, top_material
from module_catalog import get_module
from pricing import price
from templates import LayoutTemplate, PlacementDefinition, resolve_layout

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def placement_id(layout_id: str, room_id: str, key: str) -> str:
    return f"{layout_id}-{room_id}-{key}"


def make_placement(
    layout_id: str,
    room_id: str,
    definition: PlacementDefinition,
    source: PlacementSource,
    optional: Optional[bool] = None,
) -> Placement:
    """Instance a template placement, copying module geometry from the catalog now."""
    spec = get_module(definition.module_id)
    return Placement(
        id=placement_id(layout_id, room_id, definition.key),
        key=definition.key,
        room_id=room_id,
        module_id=spec.id,
        x=definition.x,
        y=definition.y,
        width=spec.width,
        depth=spec.depth,
        height=spec.height,
        category=spec.category,
        rotation=definition.rotation,
        note=definition.note,
        optional=definition.optional if optional is None else optional,
        source=source,
    )


def build_design_from_template(
    template: LayoutTemplate,
    door: str = DEFAULT_DOOR,
    top: str = DEFAULT_TOP,
    created_at: Optional[str] = None,
) -> Design:
    """Expand every baseline placement of ``template`` into a priced Design.

    Raises:
        UnknownFinish: door or top token is not in the finish catalog.
        UnknownModule: the template references a module missing from the
            catalog (a corrupt template).
    """
    door_option = door_material(door)
    top_option = top_material(top)

    rooms = []
    for room in template.rooms:
        placements = [
            make_placement(template.id, room.id, definition, PlacementSource.BASE)
            for definition in room.placements
        ]
        rooms.append(DesignRoom(
            id=room.id,
            label=room.label,
            width=room.width,
            depth=room.depth,
            origin=room.origin,
            placements=placements,
        ))

    design = Design(
        layout=template.id,
        name=template.name,
        summary=template.summary,
        door=door_option.token,
        top=top_option.token,
        rooms=rooms,
        created_at=created_at or _utc_now_iso(),
    )
    initial = price(design)
    design.metadata = DesignMetadata(base_price_usd=initial, current_price_usd=initial)
    logger.debug(
        "Built %s with %d placements at $%d",
        template.id, len(design.placements()), initial,
    )
    return design


def build_design(
    layout_id: str,
    door: str = DEFAULT_DOOR,
    top: str = DEFAULT_TOP,
    created_at: Optional[str] = None,
) -> Design:
    """Build the baseline design for a canonical or legacy layout id.

    Raises:
        UnknownLayout, UnknownFinish, UnknownModule
    """
    return build_design_from_template(resolve_layout(layout_id), door, top, created_at)
