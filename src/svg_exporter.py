"""
SVG floor-plan export for kitchen designs.

Renders every placement as a rounded rectangle inside a padded bounding box
of the whole design, over a 500 mm grid, with a footer naming the layout,
finishes and price. Units: ``scale`` pixels per millimetre.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import svgwrite
from shapely.geometry import box
from shapely.ops import unary_union

from design import Design, PlacementSource
from materials import door_material, top_material
from module_catalog import get_module
from pricing import price

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 0.1  # px per mm
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'


@dataclass
class SVGPlanStyle:
    """Plan styling."""
    padding_mm: float = 300.0
    grid_mm: float = 500.0
    background: str = "#0f1014"
    grid_stroke: str = "#1f2937"
    outline: str = "#111827"
    optional_outline: str = "#FBBF24"  # Optional placements stand out
    added_opacity: float = 0.85
    label_fill: str = "#FFFFFF"
    footer_fill: str = "#D1D5DB"
    corner_radius: float = 16.0
    stroke_width: float = 4.0
    label_font_size: int = 28
    footer_font_size: int = 32


def plan_bounds(design: Design) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of all placement footprints, in mm."""
    footprints = [
        box(p.x, p.y, p.x + p.width, p.y + p.depth) for p in design.placements()
    ]
    if not footprints:
        return (0.0, 0.0, 1000.0, 1000.0)
    return tuple(float(v) for v in unary_union(footprints).bounds)


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def export_svg_plan(
    design: Design,
    scale: float = DEFAULT_SCALE,
    style: Optional[SVGPlanStyle] = None,
) -> str:
    """Render the plan as SVG text.

    Args:
        design: Design to draw
        scale: Pixels per millimetre
        style: Colours and sizes (defaults to SVGPlanStyle())

    Returns:
        SVG document text, XML declaration included
    """
    if scale <= 0:
        raise ValueError(f"Scale must be positive, got {scale}")
    if style is None:
        style = SVGPlanStyle()

    min_x, min_y, max_x, max_y = plan_bounds(design)
    origin_x = min_x - style.padding_mm
    origin_y = min_y - style.padding_mm
    width_mm = max_x - min_x + style.padding_mm * 2
    height_mm = max_y - min_y + style.padding_mm * 2
    width_px = width_mm * scale
    height_px = height_mm * scale

    door = door_material(design.door)
    top = top_material(design.top)

    dwg = svgwrite.Drawing(
        size=(_fmt(width_px), _fmt(height_px)),
        viewBox=f"0 0 {_fmt(width_px)} {_fmt(height_px)}",
    )
    dwg.defs.add(dwg.style(f"svg {{ background: {style.background}; }}"))
    dwg.add(dwg.rect(insert=(0, 0), size=(_fmt(width_px), _fmt(height_px)), fill=style.background))

    grid = dwg.g(fill="none", stroke=style.grid_stroke, stroke_width=1)
    rows = int(np.ceil(height_mm / style.grid_mm)) + 1
    cols = int(np.ceil(width_mm / style.grid_mm)) + 1
    for y in np.arange(rows) * style.grid_mm * scale:
        grid.add(dwg.line(start=(0, _fmt(y)), end=(_fmt(width_px), _fmt(y))))
    for x in np.arange(cols) * style.grid_mm * scale:
        grid.add(dwg.line(start=(_fmt(x), 0), end=(_fmt(x), _fmt(height_px))))
    dwg.add(grid)

    modules = dwg.g()
    for placement in design.placements():
        spec = get_module(placement.module_id)
        x = (placement.x - origin_x) * scale
        y = (placement.y - origin_y) * scale
        w = placement.width * scale
        h = placement.depth * scale
        opacity = style.added_opacity if placement.source is PlacementSource.ADDED else 1.0
        group = dwg.g(
            transform=f"translate({_fmt(x)}, {_fmt(y)})",
            opacity=_fmt(opacity),
        )
        group.add(dwg.rect(
            insert=(0, 0),
            size=(_fmt(w), _fmt(h)),
            rx=style.corner_radius,
            ry=style.corner_radius,
            fill=door.hex,
            stroke=style.optional_outline if placement.optional else style.outline,
            stroke_width=style.stroke_width,
        ))
        group.add(dwg.text(
            spec.label,
            insert=(_fmt(w / 2), _fmt(h / 2)),
            fill=style.label_fill,
            font_size=style.label_font_size,
            font_family="sans-serif",
            text_anchor="middle",
            dominant_baseline="middle",
        ))
        modules.add(group)
    dwg.add(modules)

    footer = (
        f"{design.name} · Door {door.label} · Top {top.label} "
        f"· ${price(design):,}"
    )
    dwg.add(dwg.text(
        footer,
        insert=(_fmt(24), _fmt(height_px - 32)),
        fill=style.footer_fill,
        font_size=style.footer_font_size,
        font_family="sans-serif",
    ))

    return XML_HEADER + dwg.tostring()


def save_svg_plan(design: Design, filepath: str, scale: float = DEFAULT_SCALE) -> str:
    """Write the SVG plan to ``filepath`` and return the path."""
    os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(export_svg_plan(design, scale=scale))
    logger.info("Exported SVG plan: %s", filepath)
    return filepath
