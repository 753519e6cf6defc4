"""Deterministic variant generation: baseline -> budget targets -> optimized variants."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from builder import build_design
from design import Design
from dxf_exporter import design_to_dxf
from invariants import assert_invariants
from materials import door_material, top_material
from obj_exporter import design_to_mesh, save_obj
from optimizer import normalize_target, optimize_to_budget
from pricing import format_usd, round_half_up
from run_protocol import (
    RunPaths,
    create_run_id,
    prepare_run_dir,
    update_latest_pointer,
    write_json,
    write_text,
)
from schedules import bom, cutlist, to_csv
from svg_exporter import save_svg_plan
from templates import LAYOUT_OPTIONS, canonical_layout_id, legacy_layout_id
from variant_generation.audit import DecisionLog
from variant_generation.contracts import (
    BUDGET_MULTIPLIERS,
    MAX_VARIANTS,
    MIN_VARIANTS,
    GenerationConfig,
    GenerationOutput,
    VariantFiles,
    VariantSummary,
)

logger = logging.getLogger(__name__)


def clamp_variants(count: Optional[int]) -> int:
    if not count:
        return MAX_VARIANTS
    return max(MIN_VARIANTS, min(MAX_VARIANTS, int(count)))


def budget_targets(center_usd: float, count: Optional[int]) -> List[int]:
    """Target prices for ``count`` variants spread around ``center_usd``.

    The multiplier sequence is always applied in the same order, so the
    same centre and count give the same targets.
    """
    center = normalize_target(center_usd)
    return [
        round_half_up(center * multiplier)
        for multiplier in BUDGET_MULTIPLIERS[:clamp_variants(count)]
    ]


def resolve_layouts(layouts: Sequence[str]) -> List[str]:
    """Canonical ids for the requested layouts, in request order without repeats.

    An empty request selects every registered layout.
    """
    if not layouts:
        return list(LAYOUT_OPTIONS)
    resolved: List[str] = []
    for value in layouts:
        canonical = canonical_layout_id(value)
        if canonical not in resolved:
            resolved.append(canonical)
    return resolved


def make_variant_id(legacy_id: str, run_id: str, index: int) -> str:
    return f"{legacy_id}-{run_id}-v{index}-{uuid.uuid4().hex[:6]}"


def write_variant_artifacts(
    design: Design,
    variant_dir: Path,
    svg_scale: float,
    export_dxf: bool = False,
) -> VariantFiles:
    """Write design.json, plan.svg, model.obj, bom.csv and cutlist.csv."""
    variant_dir.mkdir(parents=True, exist_ok=True)
    files = VariantFiles(
        root=str(variant_dir),
        design_json=str(variant_dir / "design.json"),
        plan_svg=str(variant_dir / "plan.svg"),
        model_obj=str(variant_dir / "model.obj"),
        bom_csv=str(variant_dir / "bom.csv"),
        cut_csv=str(variant_dir / "cutlist.csv"),
    )
    write_json(Path(files.design_json), design.to_dict())
    save_svg_plan(design, files.plan_svg, scale=svg_scale)
    save_obj(design, files.model_obj)
    write_text(Path(files.bom_csv), to_csv(bom(design)))
    write_text(Path(files.cut_csv), to_csv(cutlist(design)))
    if export_dxf:
        files.plan_dxf = design_to_dxf(design, str(variant_dir / "plan.dxf"))
    return files


def _mesh_extents(design: Design) -> Tuple[float, float, float]:
    mesh = design_to_mesh(design)
    if mesh.is_empty:
        return (0.0, 0.0, 0.0)
    return tuple(round(float(v), 4) for v in mesh.extents)


def generate_layout_variants(
    layout_id: str,
    config: GenerationConfig,
    run_paths: RunPaths,
    decision_log: DecisionLog,
) -> List[VariantSummary]:
    canonical = canonical_layout_id(layout_id)
    legacy = legacy_layout_id(canonical)
    baseline = build_design(canonical, config.base_door, config.base_top)
    # A zero budget means no budget.
    center = config.budget if config.budget else baseline.metadata.base_price_usd
    targets = budget_targets(center, config.per_layout)
    logger.info(
        "%s: baseline %s, %d target(s) around %s",
        canonical, format_usd(baseline.metadata.base_price_usd),
        len(targets), format_usd(round_half_up(center)),
    )

    summaries: List[VariantSummary] = []
    for index, target in enumerate(targets, start=1):
        result = optimize_to_budget(baseline, target)
        assert_invariants(result.final)

        variant_id = make_variant_id(legacy, run_paths.run_id, index)
        decision_log.record_variant(
            variant_id=variant_id,
            layout=canonical,
            operations=result.ops,
            price_trace=result.price_trace,
            target_usd=target,
        )
        files = write_variant_artifacts(
            result.final,
            run_paths.variant_dir(canonical, variant_id),
            svg_scale=config.svg_scale,
            export_dxf=config.export_dxf,
        )
        final_price = result.final.metadata.current_price_usd
        if final_price != target:
            logger.debug(
                "%s settled at %s for target %s",
                variant_id, format_usd(final_price), format_usd(target),
            )
        summaries.append(VariantSummary(
            variant_id=variant_id,
            layout=legacy,
            layout_canonical=canonical,
            target_usd=target,
            price_usd=final_price,
            operations=list(result.ops),
            files=files,
            design=result.final,
            mesh_extents_m=_mesh_extents(result.final),
        ))
    return summaries


def _build_summary(output: GenerationOutput, elapsed_s: float) -> str:
    lines = [
        f"# Run {output.run_id}",
        "",
        f"- Duration: {elapsed_s:.2f}s",
        f"- Layouts: {len(output.results)}",
        f"- Variants: {len(output.variants())}",
        "",
        "| Variant | Layout | Target | Price | Ops |",
        "| --- | --- | --- | --- | --- |",
    ]
    for variant in output.variants():
        lines.append(
            f"| {variant.variant_id} | {variant.layout_canonical} "
            f"| {format_usd(variant.target_usd)} | {format_usd(variant.price_usd)} "
            f"| {variant.ops_count} |"
        )
    lines.append("")
    return "\n".join(lines)


def generate_all(config: GenerationConfig) -> GenerationOutput:
    """Generate, persist and summarize variants for every requested layout.

    Raises:
        UnknownLayout: a requested layout id is neither canonical nor legacy.
        UnknownFinish: a default finish token is not in the catalog.
        ValueError: the budget is negative or not finite.
    """
    # Fail before touching the filesystem.
    layouts = resolve_layouts(config.layouts)
    door_material(config.base_door)
    top_material(config.base_top)
    if config.budget is not None:
        normalize_target(config.budget)
    if config.svg_scale <= 0:
        raise ValueError(f"SVG scale must be positive, got {config.svg_scale}")

    started = time.perf_counter()
    run_id = config.run_id or create_run_id("variants")
    run_paths = prepare_run_dir(config.runs_dir, run_id)
    decision_log = DecisionLog(run_id=run_id, artifacts_dir=run_paths.artifacts_dir)

    output = GenerationOutput(run_id=run_id, run_dir=str(run_paths.run_dir))
    for canonical in layouts:
        summaries = generate_layout_variants(canonical, config, run_paths, decision_log)
        output.results[legacy_layout_id(canonical)] = summaries
    chain_path = decision_log.finalize()
    elapsed = time.perf_counter() - started

    manifest = {
        "run_id": run_id,
        "created_utc": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": {**asdict(config), "layouts": layouts},
        "layouts": {
            legacy: [summary.to_dict(include_design=False) for summary in summaries]
            for legacy, summaries in output.results.items()
        },
        "artifacts": {
            "summary": str(run_paths.summary_path),
            "decision_log": str(decision_log.decision_log_path),
            "decision_hash_chain": str(chain_path),
        },
    }
    write_json(run_paths.manifest_path, manifest)
    write_text(run_paths.summary_path, _build_summary(output, elapsed))
    update_latest_pointer(config.runs_dir, run_paths.run_dir)

    logger.info(
        "Run %s: %d variant(s) across %d layout(s) in %.2fs",
        run_id, len(output.variants()), len(layouts), elapsed,
    )
    return output
