"""Tests for the module and finish catalogs."""
import pytest

from errors import DesignEngineError, UnknownFinish, UnknownIdentifier, UnknownModule
from materials import (
    DEFAULT_DOOR,
    DEFAULT_TOP,
    DOOR_MATERIALS,
    DOOR_OPTIONS,
    TOP_OPTIONS,
    cheapest_door,
    cheapest_top,
    door_material,
    manifest_id_to_door_token,
    manifest_id_to_top_token,
    most_premium_door,
    most_premium_top,
    top_material,
)
from module_catalog import MODULE_IDS, MODULES, ModuleCategory, ModuleSpec, get_module


class TestModuleCatalog:

    def test_has_thirteen_modules(self):
        assert len(MODULE_IDS) == 13
        assert set(MODULE_IDS) == set(MODULES)

    def test_lookup_returns_spec(self):
        spec = get_module("ISNA")
        assert spec.category is ModuleCategory.SNACK
        assert (spec.width, spec.depth, spec.height) == (1200, 1240, 932)
        assert spec.base_cost_usd == 2000

    def test_double_pantry_is_wider(self):
        assert get_module("CSDP").width == 1256
        assert get_module("CSDP").base_cost_usd == 1800

    def test_unknown_module_names_id_and_catalog(self):
        with pytest.raises(UnknownModule) as excinfo:
            get_module("NOPE")
        assert excinfo.value.identifier == "NOPE"
        assert excinfo.value.catalog == "module"
        assert "NOPE" in str(excinfo.value)

    def test_unknown_module_is_lookup_and_value_error(self):
        with pytest.raises(LookupError):
            get_module("NOPE")
        with pytest.raises(ValueError):
            get_module("NOPE")

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            MODULES["NEW"] = get_module("BSSD")

    def test_worktop_categories(self):
        assert get_module("BSDR").carries_worktop
        assert get_module("ISNA").carries_worktop
        assert not get_module("CAFI").carries_worktop
        assert not get_module("BADI").carries_worktop

    def test_rejects_non_positive_geometry(self):
        with pytest.raises(ValueError):
            ModuleSpec("BAD", ModuleCategory.BASE, "Bad", 0, 600, 800, 100)


class TestFinishCatalog:

    def test_defaults_exist(self):
        assert DEFAULT_DOOR in DOOR_OPTIONS
        assert DEFAULT_TOP in TOP_OPTIONS

    def test_multipliers(self):
        assert [door_material(t).multiplier for t in DOOR_OPTIONS] == [1.0, 1.0, 1.0, 1.2]
        assert [top_material(t).multiplier for t in TOP_OPTIONS] == [1.1, 1.1, 1.4, 1.6]

    def test_tops_carry_texture_repeat(self):
        assert top_material("CMCA").repeat_uv == (0.5, 0.5)
        assert door_material("DFKW").repeat_uv is None

    def test_unknown_finish(self):
        with pytest.raises(UnknownFinish) as excinfo:
            door_material("XXXX")
        assert excinfo.value.catalog == "door finish"
        with pytest.raises(UnknownFinish):
            top_material("DFKW")

    def test_errors_share_a_root(self):
        assert issubclass(UnknownFinish, UnknownIdentifier)
        assert issubclass(UnknownIdentifier, DesignEngineError)

    def test_extremes_break_ties_by_catalog_order(self):
        """DFIB, DFKW and DFLG all sit at 1.0; the first listed wins."""
        assert cheapest_door() == "DFIB"
        assert most_premium_door() == "DFHS"
        assert cheapest_top() == "CDSM"
        assert most_premium_top() == "CMCA"

    def test_manifest_lookup_is_case_insensitive(self):
        manifest = DOOR_MATERIALS["DFLG"].manifest_id
        assert manifest_id_to_door_token(manifest.upper()) == "DFLG"
        assert manifest_id_to_top_token("marble-calacatta") == "CMCA"

    def test_unknown_manifest(self):
        with pytest.raises(UnknownFinish):
            manifest_id_to_top_token("Granite-Nowhere")
