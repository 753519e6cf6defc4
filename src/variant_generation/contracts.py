"""Contracts for variant generation runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from design import Design, OptimizationOperation, operation_to_dict
from materials import DEFAULT_DOOR, DEFAULT_TOP

# Applied in this order to the centre price; variant n gets the n-th factor.
BUDGET_MULTIPLIERS: Tuple[float, ...] = (1.00, 0.92, 1.08, 0.98)
MIN_VARIANTS = 1
MAX_VARIANTS = len(BUDGET_MULTIPLIERS)
DEFAULT_SVG_SCALE = 0.12


@dataclass(frozen=True)
class GenerationConfig:
    """Inputs for one generation run.

    An empty ``layouts`` tuple means every registered layout. Layout ids may
    be canonical or legacy. ``per_layout`` is clamped to 1..4 (None -> 4).
    Without a ``budget`` the variants spread around each layout's
    baseline price.
    """

    layouts: Tuple[str, ...] = ()
    per_layout: Optional[int] = None
    budget: Optional[float] = None
    base_door: str = DEFAULT_DOOR
    base_top: str = DEFAULT_TOP
    runs_dir: str = "runs"
    svg_scale: float = DEFAULT_SVG_SCALE
    export_dxf: bool = False
    run_id: Optional[str] = None


@dataclass
class VariantFiles:
    root: str
    design_json: str
    plan_svg: str
    model_obj: str
    bom_csv: str
    cut_csv: str
    plan_dxf: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        payload = {
            "root": self.root,
            "designJson": self.design_json,
            "planSvg": self.plan_svg,
            "modelObj": self.model_obj,
            "bomCsv": self.bom_csv,
            "cutCsv": self.cut_csv,
        }
        if self.plan_dxf is not None:
            payload["planDxf"] = self.plan_dxf
        return payload


@dataclass
class VariantSummary:
    """One generated variant, as returned to callers."""

    variant_id: str
    layout: str  # Legacy id
    layout_canonical: str
    target_usd: int
    price_usd: int
    operations: List[OptimizationOperation]
    files: VariantFiles
    design: Design
    mesh_extents_m: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    @property
    def ops_count(self) -> int:
        return len(self.operations)

    def to_dict(self, include_design: bool = True) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "variant_id": self.variant_id,
            "layout": self.layout,
            "layout_canonical": self.layout_canonical,
            "target_usd": self.target_usd,
            "price_usd": self.price_usd,
            "ops_count": self.ops_count,
            "operations": [operation_to_dict(op) for op in self.operations],
            "files": self.files.to_dict(),
            "mesh_extents_m": list(self.mesh_extents_m),
        }
        if include_design:
            payload["design"] = self.design.to_dict()
        return payload


@dataclass
class GenerationOutput:
    run_id: str
    run_dir: str
    results: Dict[str, List[VariantSummary]] = field(default_factory=dict)

    def variants(self) -> List[VariantSummary]:
        return [variant for summaries in self.results.values() for variant in summaries]
