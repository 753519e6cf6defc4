"""
Bill of materials and cut list for a design, plus their CSV rendering.

CSV files are consumed by external tooling: a header row taken from the
first row's field names, one line per record, no quoting. Field values
come from controlled vocabularies and never contain commas; the writer
refuses to emit a value that would need quoting.
"""

import csv
import io
from collections import OrderedDict
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Mapping, Sequence

from design import Design
from module_catalog import get_module

PANEL_THICKNESS_MM = 20


@dataclass
class BOMRow:
    moduleId: str
    label: str
    quantity: int
    width_mm: float
    depth_mm: float
    height_mm: float
    unit_cost_usd: int
    extended_cost_usd: int
    door_finish: str
    top_finish: str


@dataclass
class CutlistRow:
    moduleId: str
    component: str  # "cabinet" | "top"
    width_mm: float
    depth_mm: float
    thickness_mm: float
    quantity: int


def bom(design: Design) -> List[BOMRow]:
    """One row per module id, in order of first appearance in the design."""
    rows: "OrderedDict[str, BOMRow]" = OrderedDict()
    for placement in design.placements():
        spec = get_module(placement.module_id)
        row = rows.get(spec.id)
        if row is None:
            rows[spec.id] = BOMRow(
                moduleId=spec.id,
                label=spec.label,
                quantity=1,
                width_mm=spec.width,
                depth_mm=spec.depth,
                height_mm=spec.height,
                unit_cost_usd=spec.base_cost_usd,
                extended_cost_usd=spec.base_cost_usd,
                door_finish=design.door,
                top_finish=design.top,
            )
        else:
            row.quantity += 1
            row.extended_cost_usd = row.quantity * spec.base_cost_usd
    return list(rows.values())


def cutlist(design: Design) -> List[CutlistRow]:
    """Panel pair (width x height) per placement, plus a worktop panel for Base/Snack units."""
    rows: List[CutlistRow] = []
    for placement in design.placements():
        spec = get_module(placement.module_id)
        rows.append(CutlistRow(
            moduleId=spec.id,
            component="cabinet",
            width_mm=spec.width,
            depth_mm=spec.height,
            thickness_mm=PANEL_THICKNESS_MM,
            quantity=2,
        ))
        if spec.carries_worktop:
            rows.append(CutlistRow(
                moduleId=spec.id,
                component="top",
                width_mm=spec.width,
                depth_mm=spec.depth,
                thickness_mm=PANEL_THICKNESS_MM,
                quantity=1,
            ))
    return rows


def _as_mapping(row) -> Mapping[str, object]:
    if isinstance(row, Mapping):
        return row
    return asdict(row)


def to_csv(rows: Sequence) -> str:
    """Render dataclass or dict rows as unquoted CSV text ("" for no rows).

    Raises:
        csv.Error: a value contains a comma, quote or newline.
    """
    if not rows:
        return ""
    records: List[Mapping[str, object]] = [_as_mapping(row) for row in rows]
    fieldnames = list(records[0].keys())
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=fieldnames,
        quoting=csv.QUOTE_NONE,
        escapechar=None,
        lineterminator="\n",
        extrasaction="ignore",
    )
    writer.writeheader()
    for record in records:
        writer.writerow({key: "" if record.get(key) is None else record.get(key) for key in fieldnames})
    return buffer.getvalue().rstrip("\n")


def bom_totals(rows: Iterable[BOMRow]) -> Dict[str, int]:
    quantity = 0
    cost = 0
    for row in rows:
        quantity += row.quantity
        cost += row.extended_cost_usd
    return {"modules": quantity, "subtotal_usd": cost}
