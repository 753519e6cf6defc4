"""
Wavefront OBJ export: one axis-aligned cuboid per placement.

Coordinates are converted from millimetres to metres. Every cuboid has 8
vertices and 6 quad faces; vertex indices continue across placements in
design order, so the file is byte-for-byte reproducible.
"""

import logging
import os
from typing import List

import numpy as np
import trimesh

from design import Design, Placement

logger = logging.getLogger(__name__)

MM_TO_M = 1.0 / 1000.0

# Quad faces over the 8 cuboid corners: bottom, top, then the four sides.
CUBOID_FACES = np.array([
    [0, 1, 2, 3],
    [4, 5, 6, 7],
    [0, 1, 5, 4],
    [1, 2, 6, 5],
    [2, 3, 7, 6],
    [3, 0, 4, 7],
], dtype=np.int64)


def placement_vertices(placement: Placement) -> np.ndarray:
    """8x3 corner array of a placement's cuboid, in metres."""
    x1, y1 = placement.x, placement.y
    x2, y2 = placement.x + placement.width, placement.y + placement.depth
    z1, z2 = 0.0, placement.height
    corners = np.array([
        [x1, y1, z1],
        [x2, y1, z1],
        [x2, y2, z1],
        [x1, y2, z1],
        [x1, y1, z2],
        [x2, y1, z2],
        [x2, y2, z2],
        [x1, y2, z2],
    ], dtype=np.float64)
    return corners * MM_TO_M


def export_obj(design: Design) -> str:
    """Render the design as OBJ text (trailing newline included)."""
    lines: List[str] = [
        "# Kitchen design generated by the kitchen design engine",
        f"# Layout: {design.layout}",
        f"# Door: {design.door}  Top: {design.top}",
    ]
    offset = 1
    for placement in design.placements():
        for vertex in placement_vertices(placement):
            lines.append("v " + " ".join(f"{value:.4f}" for value in vertex))
        for face in CUBOID_FACES + offset:
            lines.append("f " + " ".join(str(int(index)) for index in face))
        offset += 8
    return "\n".join(lines) + "\n"


def design_to_mesh(design: Design) -> trimesh.Trimesh:
    """Single triangulated mesh of all cuboids, in metres."""
    boxes = []
    for placement in design.placements():
        corners = placement_vertices(placement)
        extents = corners.max(axis=0) - corners.min(axis=0)
        center = (corners.max(axis=0) + corners.min(axis=0)) / 2.0
        cuboid = trimesh.creation.box(extents=extents)
        cuboid.apply_translation(center)
        boxes.append(cuboid)
    if not boxes:
        return trimesh.Trimesh()
    return trimesh.util.concatenate(boxes)


def save_obj(design: Design, filepath: str) -> str:
    os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(export_obj(design))
    logger.info("Exported OBJ: %s", filepath)
    return filepath
