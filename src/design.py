"""
Core data structures for a priced kitchen design.

A Design is a concrete arrangement of cabinet placements for one layout
template and one door/countertop finish pair. The builder creates it, the
budget optimizer mutates clones of it, and the exporters only read it.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from module_catalog import ModuleCategory


class PlacementSource(Enum):
    """Where a placement came from."""
    BASE = "base"
    ADDED = "added"


class OperationReason(Enum):
    BUDGET_DOWN = "budget-down"
    BUDGET_UP = "budget-up"


class PlacementAction(Enum):
    REMOVE = "remove"
    ADD = "add"


class FinishType(Enum):
    DOOR = "door"
    TOP = "top"


@dataclass(frozen=True)
class PlacementOperation:
    """A placement removed from or added to a design."""
    action: PlacementAction
    module_id: str
    room_id: str
    key: str
    reason: OperationReason

    @property
    def type(self) -> str:
        return self.action.value


@dataclass(frozen=True)
class FinishOperation:
    """A door or countertop finish swapped for another."""
    finish_type: FinishType
    from_token: str
    to_token: str
    reason: OperationReason

    @property
    def type(self) -> str:
        return "finish"


OptimizationOperation = Union[PlacementOperation, FinishOperation]


def operation_to_dict(operation: OptimizationOperation) -> Dict[str, Any]:
    if isinstance(operation, PlacementOperation):
        return {
            "type": operation.action.value,
            "moduleId": operation.module_id,
            "roomId": operation.room_id,
            "key": operation.key,
            "reason": operation.reason.value,
        }
    if isinstance(operation, FinishOperation):
        return {
            "type": "finish",
            "finishType": operation.finish_type.value,
            "from": operation.from_token,
            "to": operation.to_token,
            "reason": operation.reason.value,
        }
    raise TypeError(f"Unsupported operation: {operation!r}")


def operation_from_dict(payload: Dict[str, Any]) -> OptimizationOperation:
    op_type = payload["type"]
    reason = OperationReason(payload["reason"])
    if op_type == "finish":
        return FinishOperation(
            finish_type=FinishType(payload["finishType"]),
            from_token=payload["from"],
            to_token=payload["to"],
            reason=reason,
        )
    return PlacementOperation(
        action=PlacementAction(op_type),
        module_id=payload["moduleId"],
        room_id=payload["roomId"],
        key=payload["key"],
        reason=reason,
    )


@dataclass
class Placement:
    """
    A module instanced into a room of a design.

    Geometry (width/depth/height/category) is copied from the module
    catalog when the placement is created and never re-read afterwards.

    Attributes:
        id: Unique within the design, ``{layout}-{room}-{key}``
        key: Stable key shared with the layout template
        x, y: Absolute position in mm
    """
    id: str
    key: str
    room_id: str
    module_id: str
    x: float
    y: float
    width: float
    depth: float
    height: float
    category: ModuleCategory
    rotation: Optional[float] = None
    note: Optional[str] = None
    optional: bool = False
    source: PlacementSource = PlacementSource.BASE

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "key": self.key,
            "roomId": self.room_id,
            "moduleId": self.module_id,
            "x": self.x,
            "y": self.y,
        }
        if self.rotation is not None:
            payload["rotation"] = self.rotation
        if self.note is not None:
            payload["note"] = self.note
        payload.update({
            "optional": self.optional,
            "source": self.source.value,
            "width": self.width,
            "depth": self.depth,
            "height": self.height,
            "category": self.category.value,
        })
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Placement":
        return cls(
            id=payload["id"],
            key=payload["key"],
            room_id=payload["roomId"],
            module_id=payload["moduleId"],
            x=payload["x"],
            y=payload["y"],
            width=payload["width"],
            depth=payload["depth"],
            height=payload["height"],
            category=ModuleCategory(payload["category"]),
            rotation=payload.get("rotation"),
            note=payload.get("note"),
            optional=bool(payload.get("optional", False)),
            source=PlacementSource(payload.get("source", "base")),
        )


@dataclass
class DesignRoom:
    id: str
    label: str
    width: float
    depth: float
    origin: Tuple[float, float]
    placements: List[Placement] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "width": self.width,
            "depth": self.depth,
            "origin": {"x": self.origin[0], "y": self.origin[1]},
            "placements": [p.to_dict() for p in self.placements],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DesignRoom":
        origin = payload.get("origin") or {"x": 0, "y": 0}
        return cls(
            id=payload["id"],
            label=payload["label"],
            width=payload["width"],
            depth=payload["depth"],
            origin=(origin["x"], origin["y"]),
            placements=[Placement.from_dict(p) for p in payload.get("placements", [])],
        )


@dataclass
class DesignMetadata:
    base_price_usd: int = 0
    current_price_usd: int = 0
    target_budget_usd: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "basePriceUSD": self.base_price_usd,
            "currentPriceUSD": self.current_price_usd,
        }
        if self.target_budget_usd is not None:
            payload["targetBudgetUSD"] = self.target_budget_usd
        return payload


@dataclass
class Design:
    """
    Complete kitchen design: rooms, placements, finishes, operations log.

    ``metadata.current_price_usd`` must always equal ``price(design)``;
    invariants.assert_invariants checks this.
    """
    layout: str
    name: str
    summary: str
    door: str
    top: str
    rooms: List[DesignRoom] = field(default_factory=list)
    operations: List[OptimizationOperation] = field(default_factory=list)
    metadata: DesignMetadata = field(default_factory=DesignMetadata)
    created_at: str = ""

    def placements(self) -> List[Placement]:
        """All placements, rooms first then placements, in design order."""
        return [p for room in self.rooms for p in room.placements]

    def room(self, room_id: str) -> Optional[DesignRoom]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def find_placement(self, key: str) -> Optional[Tuple[DesignRoom, Placement]]:
        for room in self.rooms:
            for placement in room.placements:
                if placement.key == key:
                    return room, placement
        return None

    def has_placement(self, key: str) -> bool:
        return self.find_placement(key) is not None

    def clone(self) -> "Design":
        """Deep copy; mutating the clone never touches this design."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layout": self.layout,
            "name": self.name,
            "summary": self.summary,
            "door": self.door,
            "top": self.top,
            "rooms": [room.to_dict() for room in self.rooms],
            "operations": [operation_to_dict(op) for op in self.operations],
            "metadata": self.metadata.to_dict(),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Design":
        metadata = payload.get("metadata", {})
        return cls(
            layout=payload["layout"],
            name=payload.get("name", ""),
            summary=payload.get("summary", ""),
            door=payload["door"],
            top=payload["top"],
            rooms=[DesignRoom.from_dict(r) for r in payload.get("rooms", [])],
            operations=[operation_from_dict(op) for op in payload.get("operations", [])],
            metadata=DesignMetadata(
                base_price_usd=metadata.get("basePriceUSD", 0),
                current_price_usd=metadata.get("currentPriceUSD", 0),
                target_budget_usd=metadata.get("targetBudgetUSD"),
            ),
            created_at=payload.get("createdAt", ""),
        )


def designs_equivalent(a: Design, b: Design) -> bool:
    """Compare layout, finishes and placement positions; ids and timestamps are ignored."""
    def snapshot(design: Design):
        return (
            design.layout,
            design.door,
            design.top,
            [
                (room.id, [(p.module_id, p.x, p.y) for p in room.placements])
                for room in design.rooms
            ],
        )

    return snapshot(a) == snapshot(b)
