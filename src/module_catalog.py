"""
Cabinet module catalog.

Fixed footprint, height and base cost for every cabinet/appliance unit a
layout can place. Dimensions are millimetres, costs are whole USD.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

from errors import UnknownModule


class ModuleCategory(Enum):
    """Cabinet families; Base and Snack units carry a worktop panel."""
    COLUMN = "Column"
    BASE = "Base"
    SNACK = "Snack"
    UPPER = "Upper"


@dataclass(frozen=True)
class ModuleSpec:
    """A single catalog entry."""

    id: str
    category: ModuleCategory
    label: str
    width: int  # mm
    depth: int  # mm
    height: int  # mm
    base_cost_usd: int

    def __post_init__(self):
        if min(self.width, self.depth, self.height) <= 0:
            raise ValueError(f"Module {self.id} must have positive geometry")
        if self.base_cost_usd < 0:
            raise ValueError(f"Module {self.id} must have a non-negative cost")

    @property
    def carries_worktop(self) -> bool:
        return self.category in (ModuleCategory.BASE, ModuleCategory.SNACK)


def _column(module_id: str, label: str, width: int = 600, cost: int = 1200) -> ModuleSpec:
    return ModuleSpec(
        id=module_id,
        category=ModuleCategory.COLUMN,
        label=label,
        width=width,
        depth=595,
        height=2123,
        base_cost_usd=cost,
    )


_MODULE_LIST: Tuple[ModuleSpec, ...] = (
    _column("CAFI", "Fridge Unit"),
    _column("CAMI", "Microwave Unit"),
    _column("CAOV", "Oven Unit"),
    _column("CAFE", "Freezer Unit"),
    _column("CSSP", "Pantry"),
    _column("CSDP", "Double Pantry", width=1256, cost=1800),
    ModuleSpec("BARA", ModuleCategory.BASE, "Range Unit", 1200, 745, 828, 800),
    ModuleSpec("BSDR", ModuleCategory.BASE, "Drawer Base", 1200, 745, 828, 600),
    ModuleSpec("BSDD", ModuleCategory.BASE, "Double Door Base", 1200, 595, 633, 500),
    ModuleSpec("BSSD", ModuleCategory.BASE, "Single Door Base", 600, 595, 633, 400),
    ModuleSpec("ISNA", ModuleCategory.SNACK, "Island Extension", 1200, 1240, 932, 2000),
    ModuleSpec("BADI", ModuleCategory.UPPER, "Upper Door", 600, 595, 722, 400),
    ModuleSpec("USDO", ModuleCategory.BASE, "Dishwasher Unit", 600, 595, 828, 400),
)

MODULES: Mapping[str, ModuleSpec] = MappingProxyType(
    {spec.id: spec for spec in _MODULE_LIST}
)
MODULE_IDS: Tuple[str, ...] = tuple(MODULES)


def get_module(module_id: str) -> ModuleSpec:
    """Look up a module spec, failing with UnknownModule."""
    spec = MODULES.get(module_id)
    if spec is None:
        raise UnknownModule(module_id)
    return spec
