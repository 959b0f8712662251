"""Placement engine: single-entity place, remove, move and lookup.

These functions are the only writers of a room's collections and grid. On a
grid-backed room they enforce bounds and occupancy and keep every occupied
cell pointing at exactly one live entity. On a gridless room both checks are
skipped and positions are advisory.
"""

from __future__ import annotations

import random
from typing import Optional

from ..errors import (
    CellOccupiedError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidConfigError,
    NoEmptyPositionsError,
)
from ..logging_utils import log_deterministic
from ..schemas import CellType, Placeable, Position, Room
from .grid import (
    cell_at,
    check_bounds,
    clear_cell,
    empty_positions,
    require_room,
    set_cell,
)

# Lookup order when a caller does not say which collection an id lives in.
_SEARCH_ORDER = (
    CellType.PLAYER,
    CellType.MONSTER,
    CellType.NPC,
    CellType.OBSTACLE,
    CellType.ITEM,
)


def _collection(room: Room, cell_type: CellType) -> list:
    try:
        return room.collection_for(cell_type)
    except ValueError as exc:
        raise InvalidConfigError(str(exc)) from exc


def _require_entity(entity: Optional[Placeable]) -> Placeable:
    if entity is None:
        raise InvalidConfigError("entity cannot be None")
    return entity


def _index_of(collection: list, entity_id: str) -> int:
    for index, stored in enumerate(collection):
        if stored.id == entity_id:
            return index
    return -1


def place_entity(room: Optional[Room], entity: Placeable) -> None:
    """Add ``entity`` to ``room`` at its current position.

    The room stores its own copy of the entity. On a grid-backed room the
    position must be in bounds and the cell empty; otherwise nothing is
    written.

    Raises:
        NilRoomError: room is None
        InvalidPositionError: position outside the room (grid-backed only)
        CellOccupiedError: target cell already taken (grid-backed only)
        DuplicateEntityError: an entity with the same id is already stored
    """

    room = require_room(room)
    entity = _require_entity(entity)
    position = entity.position
    collection = _collection(room, entity.cell_type)

    if any(stored.id == entity.id for stored in room.all_entities()):
        raise DuplicateEntityError(entity.id)

    if room.has_grid:
        check_bounds(room, position)
        cell = cell_at(room, position)
        if not cell.is_empty:
            raise CellOccupiedError(position=position, occupant_id=cell.entity_id)

    collection.append(entity.model_copy(deep=True))
    if room.has_grid:
        set_cell(room, position, entity.cell_type, entity.id)

    log_deterministic(f"[Placement] {entity.cell_type.value} {entity.id} placed at {position}")


def remove_entity(room: Optional[Room], entity_id: str, cell_type: CellType) -> bool:
    """Remove the entity with ``entity_id`` from the ``cell_type`` collection.

    Returns True if it was found and removed, False if it was not there.
    Not-found is a normal answer, not an error.
    """

    room = require_room(room)
    collection = _collection(room, cell_type)

    index = _index_of(collection, entity_id)
    if index < 0:
        return False

    removed = collection.pop(index)
    if room.has_grid:
        clear_cell(room, removed.position, removed.id)

    log_deterministic(f"[Placement] {cell_type.value} {entity_id} removed from {removed.position}")
    return True


def remove_placeable(room: Optional[Room], entity: Placeable) -> bool:
    """Remove ``entity`` from ``room``. See ``remove_entity``."""

    room = require_room(room)
    entity = _require_entity(entity)
    return remove_entity(room, entity.id, entity.cell_type)


def get_entity(
    room: Optional[Room],
    entity_id: str,
    cell_type: Optional[CellType] = None,
) -> Optional[Placeable]:
    """Return the room's stored entity with ``entity_id``, or None.

    The returned object is the live stored record. Change it only through
    the placement functions, or the grid will drift out of sync.
    """

    room = require_room(room)
    search = (cell_type,) if cell_type is not None else _SEARCH_ORDER
    for kind in search:
        collection = _collection(room, kind)
        index = _index_of(collection, entity_id)
        if index >= 0:
            return collection[index]
    return None


def entity_at(room: Optional[Room], position: Position) -> Optional[Placeable]:
    """Return the entity at ``position``.

    Grid-backed rooms answer from the grid. Gridless rooms return the first
    stored entity whose advisory position matches, if any.
    """

    room = require_room(room)
    if room.has_grid:
        if not (0 <= position.x < room.width and 0 <= position.y < room.height):
            return None
        cell = cell_at(room, position)
        if cell.is_empty:
            return None
        return get_entity(room, cell.entity_id, cell.type)

    for stored in room.all_entities():
        if stored.position == position:
            return stored
    return None


def move_entity(
    room: Optional[Room],
    entity_id: str,
    new_position: Position,
    cell_type: Optional[CellType] = None,
) -> None:
    """Move a stored entity to ``new_position``.

    Moving onto the entity's own cell is allowed and changes nothing. On any
    error neither the grid nor the stored position is touched.

    Raises:
        NilRoomError: room is None
        EntityNotFoundError: no entity with ``entity_id`` (in ``cell_type``)
        InvalidPositionError: target outside the room (grid-backed only)
        CellOccupiedError: target holds a different entity (grid-backed only)
    """

    room = require_room(room)
    stored = get_entity(room, entity_id, cell_type)
    if stored is None:
        raise EntityNotFoundError(entity_id)

    old_position = stored.position

    if room.has_grid:
        check_bounds(room, new_position)
        target = cell_at(room, new_position)
        if new_position != old_position and not target.is_empty:
            raise CellOccupiedError(position=new_position, occupant_id=target.entity_id)

        clear_cell(room, old_position, entity_id)
        set_cell(room, new_position, stored.cell_type, entity_id)

    stored.position = new_position
    log_deterministic(
        f"[Placement] {stored.cell_type.value} {entity_id} moved {old_position} -> {new_position}"
    )


def move_placeable(room: Optional[Room], entity: Placeable, new_position: Position) -> None:
    """Move ``entity`` and keep the caller's object in sync with the room copy."""

    room = require_room(room)
    entity = _require_entity(entity)
    move_entity(room, entity.id, new_position, entity.cell_type)
    entity.position = new_position


def find_empty_position(room: Optional[Room], rng: Optional[random.Random] = None) -> Position:
    """Pick a position for a new entity uniformly at random.

    Grid-backed rooms choose among EMPTY cells only. Gridless rooms cannot
    know occupancy, so any in-bounds position may come back.

    Raises:
        NilRoomError: room is None
        NoEmptyPositionsError: every cell of a grid-backed room is taken
    """

    room = require_room(room)
    chooser = rng if rng is not None else random

    if not room.has_grid:
        return Position(x=chooser.randrange(room.width), y=chooser.randrange(room.height))

    candidates = empty_positions(room)
    if not candidates:
        raise NoEmptyPositionsError()
    return chooser.choice(candidates)


__all__ = [
    "place_entity",
    "remove_entity",
    "remove_placeable",
    "get_entity",
    "entity_at",
    "move_entity",
    "move_placeable",
    "find_empty_position",
]
