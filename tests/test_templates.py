"""Tests for the layout template registry."""
from dataclasses import replace

import pytest

from errors import LayoutTemplateError, UnknownLayout, UnknownModule
from templates import (
    BACK_KITCHEN,
    LAYOUT_OPTIONS,
    LAYOUTS,
    LEGACY_LAYOUT_IDS,
    MILLIMETER_TO_PIXEL,
    PlacementDefinition,
    canonical_layout_id,
    legacy_layout_id,
    resolve_layout,
    validate_template,
)


class TestRegistry:

    def test_layouts_in_registry_order(self):
        assert LAYOUT_OPTIONS == (
            "BACK_KITCHEN", "DUAL_ISLAND", "BROKEN_PLAN", "DISAPPEARING_LINEAR",
        )

    @pytest.mark.parametrize("layout_id", LAYOUT_OPTIONS)
    def test_every_template_validates(self, layout_id):
        validate_template(LAYOUTS[layout_id])

    def test_resolve_accepts_legacy_ids(self):
        assert resolve_layout("TWO_X_KITCHEN") is BACK_KITCHEN
        assert resolve_layout("WOKE_KITCHEN").id == "BROKEN_PLAN"
        assert resolve_layout("LINEAR").id == "DISAPPEARING_LINEAR"

    def test_resolve_normalizes_case_and_separators(self):
        assert resolve_layout("back-kitchen") is BACK_KITCHEN
        assert canonical_layout_id("two x kitchen") == "BACK_KITCHEN"

    def test_unknown_layout(self):
        with pytest.raises(UnknownLayout) as excinfo:
            resolve_layout("GALLEY")
        assert excinfo.value.identifier == "GALLEY"

    def test_removal_order_is_exact(self):
        assert BACK_KITCHEN.removal_order == (
            "show:ISNA-1",
            "show:ISNA-2",
            "show:BSSD-1",
            "prep:BSDR-1",
            "show:BSDD-1",
        )

    def test_addition_queue_is_exact(self):
        assert [p.key for p in BACK_KITCHEN.addition_queue] == [
            "show:BADI-1", "show:BADI-2", "show:BADI-3", "prep:BSSD-1",
        ]
        assert BACK_KITCHEN.addition_queue[-1].resolve_room_id() == "prep"


class TestLegacyRoundTrip:

    @pytest.mark.parametrize("legacy", LEGACY_LAYOUT_IDS)
    def test_legacy_round_trip(self, legacy):
        assert legacy_layout_id(canonical_layout_id(legacy)) == legacy

    @pytest.mark.parametrize("canonical", LAYOUT_OPTIONS)
    def test_canonical_round_trip(self, canonical):
        assert canonical_layout_id(legacy_layout_id(canonical)) == canonical

    def test_mapping_is_total(self):
        assert len(LEGACY_LAYOUT_IDS) == len(LAYOUT_OPTIONS)
        assert {canonical_layout_id(legacy) for legacy in LEGACY_LAYOUT_IDS} == set(LAYOUT_OPTIONS)

    def test_dual_island_maps_to_itself(self):
        assert legacy_layout_id("DUAL_ISLAND") == "DUAL_ISLAND"


class TestValidateTemplate:

    def test_removal_key_outside_baseline(self):
        broken = replace(BACK_KITCHEN, removal_order=("show:GHOST-1",))
        with pytest.raises(LayoutTemplateError):
            validate_template(broken)

    def test_addition_key_already_in_baseline(self):
        clash = PlacementDefinition("BSSD", 5000, 0, "show:BSSD-1", room_id="show")
        broken = replace(BACK_KITCHEN, addition_queue=(clash,))
        with pytest.raises(LayoutTemplateError):
            validate_template(broken)

    def test_addition_into_unknown_room(self):
        stray = PlacementDefinition("BADI", 0, 0, "attic:BADI-1")
        broken = replace(BACK_KITCHEN, addition_queue=(stray,))
        with pytest.raises(LayoutTemplateError):
            validate_template(broken)

    def test_unknown_module_in_addition_queue(self):
        bogus = PlacementDefinition("ZZZZ", 0, 0, "show:ZZZZ-1")
        broken = replace(BACK_KITCHEN, addition_queue=(bogus,))
        with pytest.raises(UnknownModule):
            validate_template(broken)


def test_templates_share_plan_scale():
    assert {template.default_scale for template in LAYOUTS.values()} == {MILLIMETER_TO_PIXEL}
