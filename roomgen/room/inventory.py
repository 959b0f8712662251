"""NPC inventory management.

Inventory items belong to their NPC, not to the room: they never appear in
``room.items`` and never touch the grid.
"""

from __future__ import annotations

from typing import List, Optional

from ..errors import EntityNotFoundError
from ..schemas import NPC, CellType, Item, Room, new_entity_id
from .grid import require_room
from .placement import get_entity


def _require_npc(room: Optional[Room], npc_id: str) -> NPC:
    room = require_room(room)
    npc = get_entity(room, npc_id, CellType.NPC)
    if npc is None:
        raise EntityNotFoundError(npc_id, what="NPC")
    return npc


def get_npc_inventory(room: Optional[Room], npc_id: str) -> List[Item]:
    """Return copies of the items in the NPC's inventory."""

    return [item.model_copy(deep=True) for item in _require_npc(room, npc_id).inventory]


def add_item_to_npc_inventory(room: Optional[Room], npc_id: str, item: Item) -> Item:
    """Append a copy of ``item`` to the NPC's inventory and return the stored copy."""

    npc = _require_npc(room, npc_id)
    stored = item.model_copy(deep=True)
    if not stored.id:
        stored.id = new_entity_id()
    npc.inventory.append(stored)
    return stored


def remove_item_from_npc_inventory(room: Optional[Room], npc_id: str, item_id: str) -> Item:
    """Remove and return the item with ``item_id`` from the NPC's inventory."""

    npc = _require_npc(room, npc_id)
    for index, item in enumerate(npc.inventory):
        if item.id == item_id:
            return npc.inventory.pop(index)
    raise EntityNotFoundError(item_id, what=f"inventory item of NPC {npc_id}")


__all__ = [
    "get_npc_inventory",
    "add_item_to_npc_inventory",
    "remove_item_from_npc_inventory",
]
