"""
Finish catalog for cabinet doors and countertops.

Each finish contributes a price multiplier; the door and top multipliers
are applied together to the module subtotal. Catalog order matters: when
several finishes share the cheapest or most premium multiplier, the one
listed first wins.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from errors import UnknownFinish

DEFAULT_DOOR = "DFKW"
DEFAULT_TOP = "CDZM"


@dataclass(frozen=True)
class MaterialOption:
    """A door or countertop finish."""

    token: str
    label: str
    manifest_id: str
    hex: str  # Display colour
    img: str
    jpg: str
    multiplier: float
    repeat_uv: Optional[Tuple[float, float]] = None  # Countertop texture repeat

    def __post_init__(self):
        if self.multiplier <= 0:
            raise ValueError(f"Finish {self.token} must have a positive multiplier")


def _door(token: str, label: str, hex_color: str, multiplier: float) -> MaterialOption:
    manifest_id = label.replace(" ", "-")
    return MaterialOption(
        token=token,
        label=label,
        manifest_id=manifest_id,
        hex=hex_color,
        img=f"/materials/doors/{manifest_id}.webp",
        jpg=f"/materials/doors/{manifest_id}.jpg",
        multiplier=multiplier,
    )


def _top(token: str, label: str, hex_color: str, multiplier: float) -> MaterialOption:
    manifest_id = label.replace(" ", "-")
    return MaterialOption(
        token=token,
        label=label,
        manifest_id=manifest_id,
        hex=hex_color,
        img=f"/materials/tops/{manifest_id}.webp",
        jpg=f"/materials/tops/{manifest_id}.jpg",
        multiplier=multiplier,
        repeat_uv=(0.5, 0.5),
    )


DOOR_MATERIALS: Mapping[str, MaterialOption] = MappingProxyType({
    "DFIB": _door("DFIB", "Fenix Ingo Black", "#111214", 1.0),
    "DFKW": _door("DFKW", "Fenix Kos White", "#F5F4F2", 1.0),
    "DFLG": _door("DFLG", "Fenix London Grey", "#7D868E", 1.0),
    "DFHS": _door("DFHS", "Fenix Hamilton Steel", "#8D8F91", 1.2),
})

TOP_MATERIALS: Mapping[str, MaterialOption] = MappingProxyType({
    "CDSM": _top("CDSM", "Dekton Sirius Matt", "#1A1A1A", 1.1),
    "CDZM": _top("CDZM", "Dekton Zenith Matt", "#EEECEA", 1.1),
    "CMSW": _top("CMSW", "Marble Super White", "#EDEAE6", 1.4),
    "CMCA": _top("CMCA", "Marble Calacatta", "#F2EFEA", 1.6),
})

DOOR_OPTIONS: Tuple[str, ...] = tuple(DOOR_MATERIALS)
TOP_OPTIONS: Tuple[str, ...] = tuple(TOP_MATERIALS)


def door_material(token: str) -> MaterialOption:
    option = DOOR_MATERIALS.get(token)
    if option is None:
        raise UnknownFinish(token, "door finish")
    return option


def top_material(token: str) -> MaterialOption:
    option = TOP_MATERIALS.get(token)
    if option is None:
        raise UnknownFinish(token, "top finish")
    return option


def _token_for_manifest(catalog: Mapping[str, MaterialOption], manifest_id: str, kind: str) -> str:
    wanted = manifest_id.lower()
    for token, option in catalog.items():
        if option.manifest_id.lower() == wanted:
            return token
    raise UnknownFinish(manifest_id, f"{kind} manifest")


def manifest_id_to_door_token(manifest_id: str) -> str:
    return _token_for_manifest(DOOR_MATERIALS, manifest_id, "door")


def manifest_id_to_top_token(manifest_id: str) -> str:
    return _token_for_manifest(TOP_MATERIALS, manifest_id, "top")


# min()/max() return the first extreme element, which gives catalog-order tie-breaks.

def cheapest_door() -> str:
    return min(DOOR_OPTIONS, key=lambda token: DOOR_MATERIALS[token].multiplier)


def most_premium_door() -> str:
    return max(DOOR_OPTIONS, key=lambda token: DOOR_MATERIALS[token].multiplier)


def cheapest_top() -> str:
    return min(TOP_OPTIONS, key=lambda token: TOP_MATERIALS[token].multiplier)


def most_premium_top() -> str:
    return max(TOP_OPTIONS, key=lambda token: TOP_MATERIALS[token].multiplier)
