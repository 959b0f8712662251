"""Bulk removal of entities with XP aggregation."""

from __future__ import annotations

from typing import Callable, List, NamedTuple, Optional, Sequence

from ..errors import InvalidConfigError
from ..schemas import CellType, Monster, Room
from .grid import require_room
from .placement import remove_entity


class CleanupResult(NamedTuple):
    total_xp: int
    not_removed: List[str]


def cleanup_room(
    room: Optional[Room],
    cell_type: CellType,
    ids: Optional[Sequence[str]] = None,
    *,
    xp_for: Optional[Callable[[Monster], int]] = None,
) -> CleanupResult:
    """Remove entities of ``cell_type`` from ``room``.

    With no ``ids`` every entity of that type is removed. Otherwise only the
    listed ids are removed; ids that are not in the room come back in
    ``not_removed`` (input order) instead of raising.

    ``total_xp`` sums the XP of removed monsters and is 0 for other types.
    ``xp_for`` overrides how a monster's XP is read (defaults to ``monster.xp``).
    """

    room = require_room(room)
    if cell_type is CellType.EMPTY:
        raise InvalidConfigError("cannot clean up entities of cell type 'empty'")

    collection = room.collection_for(cell_type)
    targets = list(ids) if ids else [entity.id for entity in collection]
    read_xp = xp_for or (lambda monster: monster.xp)

    total_xp = 0
    not_removed: List[str] = []
    for entity_id in targets:
        stored = next((entity for entity in collection if entity.id == entity_id), None)
        if stored is None or not remove_entity(room, entity_id, cell_type):
            not_removed.append(entity_id)
            continue
        if cell_type is CellType.MONSTER:
            total_xp += read_xp(stored)

    return CleanupResult(total_xp=total_xp, not_removed=not_removed)


__all__ = ["CleanupResult", "cleanup_room"]
