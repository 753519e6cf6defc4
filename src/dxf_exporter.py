"""
DXF floor-plan export for kitchen designs.

Uses ezdxf to produce a plan with one layer per module category:
  - COLUMN (ACI 1), BASE (ACI 3), SNACK (ACI 4), UPPER (ACI 6)
  - ROOMS (ACI 8): room envelopes
  - LABELS (ACI 7): module labels

Units: millimeters. Format: R2010. Y grows downward in the design model
and upward in DXF, so plan coordinates are mirrored about y = 0.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import ezdxf
from ezdxf.enums import TextEntityAlignment
from shapely import affinity
from shapely.geometry import MultiPolygon, Polygon, box

from design import Design
from module_catalog import ModuleCategory, get_module

logger = logging.getLogger(__name__)


@dataclass
class DXFPlanConfig:
    """Configuration for DXF plan export."""
    category_colors: Dict[ModuleCategory, int] = field(default_factory=lambda: {
        ModuleCategory.COLUMN: 1,
        ModuleCategory.BASE: 3,
        ModuleCategory.SNACK: 4,
        ModuleCategory.UPPER: 6,
    })
    room_layer: str = "ROOMS"
    room_color: int = 8
    label_layer: str = "LABELS"
    label_color: int = 7
    add_labels: bool = True
    label_height_mm: float = 80.0


def category_layer(category: ModuleCategory) -> str:
    return category.value.upper()


def design_to_dxf(
    design: Design,
    filepath: str,
    config: Optional[DXFPlanConfig] = None,
) -> str:
    """Export the design's plan to a DXF file.

    Args:
        design: Design to export.
        filepath: Output DXF file path.
        config: DXF export settings.

    Returns:
        Path to created DXF file.
    """
    if config is None:
        config = DXFPlanConfig()

    doc = ezdxf.new("R2010")
    doc.units = ezdxf.units.MM
    msp = doc.modelspace()
    _setup_layers(doc, config)

    for room in design.rooms:
        envelope = box(
            room.origin[0], room.origin[1],
            room.origin[0] + room.width, room.origin[1] + room.depth,
        )
        _add_polygon_to_dxf(msp, _to_dxf_frame(envelope), config.room_layer)

    for placement in design.placements():
        footprint = _to_dxf_frame(box(
            placement.x, placement.y,
            placement.x + placement.width, placement.y + placement.depth,
        ))
        _add_polygon_to_dxf(msp, footprint, category_layer(placement.category))

        if config.add_labels:
            centroid = footprint.centroid
            msp.add_text(
                get_module(placement.module_id).label,
                height=config.label_height_mm,
                dxfattribs={"layer": config.label_layer},
            ).set_placement(
                (centroid.x, centroid.y),
                align=TextEntityAlignment.MIDDLE_CENTER,
            )

    os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
    doc.saveas(filepath)
    logger.info("Exported DXF plan: %s", filepath)
    return filepath


# ─── Internal helpers ────────────────────────────────────────────────────────

def _setup_layers(doc, config: DXFPlanConfig) -> None:
    for category, color in config.category_colors.items():
        doc.layers.add(category_layer(category), color=color)
    doc.layers.add(config.room_layer, color=config.room_color)
    doc.layers.add(config.label_layer, color=config.label_color)


def _to_dxf_frame(polygon: Polygon) -> Polygon:
    return affinity.scale(polygon, xfact=1.0, yfact=-1.0, origin=(0, 0))


def _add_polygon_to_dxf(msp, polygon: Polygon, layer: str) -> None:
    """Add a Shapely polygon as a closed LWPolyline."""
    if polygon.is_empty:
        return

    if isinstance(polygon, MultiPolygon):
        for geom in polygon.geoms:
            _add_polygon_to_dxf(msp, geom, layer)
        return

    coords = list(polygon.exterior.coords)
    if len(coords) >= 3:
        msp.add_lwpolyline(
            coords,
            close=True,
            dxfattribs={"layer": layer},
        )
