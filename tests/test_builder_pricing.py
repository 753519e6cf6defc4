"""Tests for the design builder, pricing and invariant checks."""
import json
import random
from dataclasses import replace

import pytest

from builder import build_design, build_design_from_template
from design import Design, PlacementSource, designs_equivalent
from errors import DuplicatePlacementId, PriceMismatch, UnknownFinish, UnknownLayout, UnknownModule
from invariants import assert_invariants
from module_catalog import get_module
from pricing import (
    format_usd,
    module_subtotal,
    price,
    pricing_breakdown,
    quote_modules,
    round_half_up,
    summarize_design,
)
from templates import BACK_KITCHEN, PlacementDefinition, RoomTemplate


class TestBuildDesign:

    def test_back_kitchen_price(self, back_kitchen):
        """Sum of baseline costs times door 1.0 and top 1.1."""
        subtotal = sum(
            get_module(p.module_id).base_cost_usd
            for _, p in BACK_KITCHEN.baseline_placements()
        )
        assert subtotal == 14400
        assert price(back_kitchen) == round_half_up(subtotal * 1.0 * 1.1) == 15840
        assert back_kitchen.metadata.base_price_usd == 15840
        assert back_kitchen.metadata.current_price_usd == 15840
        assert back_kitchen.metadata.target_budget_usd is None

    def test_placements_follow_template_order(self, back_kitchen):
        assert [p.key for p in back_kitchen.placements()] == [
            p.key for _, p in BACK_KITCHEN.baseline_placements()
        ]
        assert all(p.source is PlacementSource.BASE for p in back_kitchen.placements())
        assert back_kitchen.operations == []

    def test_placement_ids(self, back_kitchen):
        first = back_kitchen.placements()[0]
        assert first.id == "BACK_KITCHEN-show-show:CAFI-1"
        assert first.room_id == "show"

    def test_geometry_copied_from_catalog(self, back_kitchen):
        _, island = back_kitchen.find_placement("show:ISNA-1")
        spec = get_module("ISNA")
        assert (island.width, island.depth, island.height) == (spec.width, spec.depth, spec.height)
        assert island.optional
        assert island.note == "Show island left"

    def test_legacy_id_builds_canonical_layout(self):
        design = build_design("TWO_X_KITCHEN")
        assert design.layout == "BACK_KITCHEN"

    def test_unknown_finish(self):
        with pytest.raises(UnknownFinish):
            build_design("BACK_KITCHEN", "NOPE", "CDZM")
        with pytest.raises(UnknownFinish):
            build_design("BACK_KITCHEN", "DFKW", "NOPE")

    def test_unknown_layout(self):
        with pytest.raises(UnknownLayout):
            build_design("GALLEY")

    def test_corrupt_template_fails_with_unknown_module(self):
        room = RoomTemplate(
            id="show", label="Show", width=1000, depth=1000, origin=(0, 0),
            placements=(PlacementDefinition("ZZZZ", 0, 0, "show:ZZZZ-1"),),
        )
        corrupt = replace(BACK_KITCHEN, rooms=(room,), removal_order=(), addition_queue=())
        with pytest.raises(UnknownModule):
            build_design_from_template(corrupt)

    def test_builder_output_passes_invariants(self, baseline_design):
        assert_invariants(baseline_design)


class TestPrice:

    def test_deterministic(self, baseline_design):
        assert price(baseline_design) == price(baseline_design)

    def test_independent_of_placement_order(self, back_kitchen):
        shuffled = back_kitchen.clone()
        rng = random.Random(7)
        for room in shuffled.rooms:
            rng.shuffle(room.placements)
        shuffled.rooms.reverse()
        assert price(shuffled) == price(back_kitchen)

    def test_finishes_scale_price(self, back_kitchen):
        premium = back_kitchen.clone()
        premium.door, premium.top = "DFHS", "CMCA"
        assert price(premium) == round_half_up(14400 * 1.2 * 1.6)

    def test_unknown_module_in_design(self, back_kitchen):
        back_kitchen.placements()[0].module_id = "ZZZZ"
        with pytest.raises(UnknownModule):
            price(back_kitchen)

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2


class TestBreakdown:

    def test_breakdown_and_deposit(self, back_kitchen):
        breakdown = pricing_breakdown(back_kitchen)
        assert breakdown.module_subtotal_usd == 14400
        assert breakdown.door_multiplier == 1.0
        assert breakdown.top_multiplier == 1.1
        assert breakdown.total_usd == 15840
        assert breakdown.deposit_usd == 3168

    def test_quote_modules(self):
        quote = quote_modules(["BSSD", "BSSD", "ISNA"], "DFHS", "CMSW", deposit_rate=0.5)
        assert quote.module_subtotal_usd == module_subtotal(["BSSD", "BSSD", "ISNA"]) == 2800
        assert quote.total_usd == round_half_up(2800 * 1.2 * 1.4)
        assert quote.deposit_usd == round_half_up(quote.total_usd * 0.5)

    def test_empty_quote(self):
        quote = quote_modules([], "DFKW", "CDZM")
        assert (quote.module_subtotal_usd, quote.total_usd, quote.deposit_usd) == (0, 0, 0)
        assert quote.top_multiplier == 1.1

    @pytest.mark.parametrize("rate", [0, -0.1, 1.5])
    def test_invalid_deposit_rate(self, back_kitchen, rate):
        with pytest.raises(ValueError):
            pricing_breakdown(back_kitchen, deposit_rate=rate)

    def test_format_usd(self):
        assert format_usd(15840) == "$15,840"
        assert format_usd(1234.5) == "$1,234.50"

    def test_summarize_design(self, back_kitchen):
        assert summarize_design(back_kitchen) == {
            "layout": "BACK_KITCHEN",
            "priceUSD": 15840,
            "modules": 14,
            "operations": 0,
        }


class TestInvariants:

    def test_duplicate_placement_id(self, back_kitchen):
        room = back_kitchen.rooms[0]
        room.placements.append(replace(room.placements[0]))
        back_kitchen.metadata.current_price_usd = price(back_kitchen)
        with pytest.raises(DuplicatePlacementId) as excinfo:
            assert_invariants(back_kitchen)
        assert excinfo.value.placement_id == room.placements[0].id

    def test_stale_price(self, back_kitchen):
        back_kitchen.rooms[0].placements.pop()
        with pytest.raises(PriceMismatch) as excinfo:
            assert_invariants(back_kitchen)
        assert excinfo.value.expected == 15840
        assert excinfo.value.actual == price(back_kitchen)


class TestDesignModel:

    def test_clone_is_independent(self, back_kitchen):
        clone = back_kitchen.clone()
        clone.rooms[0].placements.clear()
        clone.metadata.current_price_usd = 0
        assert len(back_kitchen.placements()) == 14
        assert back_kitchen.metadata.current_price_usd == 15840

    def test_json_round_trip(self, back_kitchen):
        payload = json.loads(json.dumps(back_kitchen.to_dict()))
        assert payload["metadata"] == {"basePriceUSD": 15840, "currentPriceUSD": 15840}
        assert payload["rooms"][1]["origin"] == {"x": 7000, "y": 0}
        assert payload["rooms"][0]["placements"][0]["roomId"] == "show"

        restored = Design.from_dict(payload)
        assert designs_equivalent(restored, back_kitchen)
        assert [p.id for p in restored.placements()] == [p.id for p in back_kitchen.placements()]
        assert_invariants(restored)

    def test_equivalence_ignores_timestamps(self, back_kitchen):
        other = build_design("BACK_KITCHEN", created_at="2030-05-05T00:00:00+00:00")
        assert designs_equivalent(back_kitchen, other)
        other.door = "DFHS"
        assert not designs_equivalent(back_kitchen, other)
