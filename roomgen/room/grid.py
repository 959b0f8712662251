"""Spatial grid for rooms.

A room may carry a ``height x width`` grid of ``Cell`` values recording which
entity occupies each coordinate. The grid is a derived index over the room's
entity collections; gridless rooms (``room.grid is None``) skip collision
detection entirely.
"""

from __future__ import annotations

from typing import List, Optional

from ..errors import InvalidDimensionsError, InvalidPositionError, NilRoomError
from ..schemas import Cell, CellType, LightLevel, Position, Room


def require_room(room: Optional[Room]) -> Room:
    """Return ``room`` or raise NilRoomError when it is None."""

    if room is None:
        raise NilRoomError()
    return room


def create_room(
    width: int,
    height: int,
    light_level: LightLevel = LightLevel.BRIGHT,
    description: str = "",
    *,
    use_grid: bool = False,
) -> Room:
    """Create an empty room, optionally with an all-empty occupancy grid."""

    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(width=width, height=height)

    room = Room(
        width=width,
        height=height,
        light_level=light_level,
        description=description,
    )
    if use_grid:
        initialize_grid(room)
    return room


def initialize_grid(room: Optional[Room]) -> None:
    """(Re)create the room grid with every cell EMPTY.

    Entities already stored in the room are not indexed; call this before
    placing anything.
    """

    room = require_room(room)
    room.grid = [[Cell() for _ in range(room.width)] for _ in range(room.height)]


def in_bounds(room: Room, position: Position) -> bool:
    return 0 <= position.x < room.width and 0 <= position.y < room.height


def check_bounds(room: Room, position: Position) -> None:
    if not in_bounds(room, position):
        raise InvalidPositionError(position=position, width=room.width, height=room.height)


def cell_at(room: Room, position: Position) -> Cell:
    """Return the grid cell at ``position``. The room must be grid-backed."""

    return room.grid[position.y][position.x]


def set_cell(room: Room, position: Position, cell_type: CellType, entity_id: str) -> None:
    room.grid[position.y][position.x] = Cell(type=cell_type, entity_id=entity_id)


def clear_cell(room: Room, position: Position, entity_id: Optional[str] = None) -> None:
    """Reset a cell to EMPTY.

    With ``entity_id`` the cell is only cleared if it still records that
    entity, so a stale position never wipes out someone else's cell.
    """

    if not in_bounds(room, position):
        return
    cell = cell_at(room, position)
    if entity_id is not None and cell.entity_id != entity_id:
        return
    room.grid[position.y][position.x] = Cell()


def empty_positions(room: Room) -> List[Position]:
    """Every EMPTY cell of a grid-backed room in row-major order."""

    return [
        Position(x=x, y=y)
        for y, row in enumerate(room.grid)
        for x, cell in enumerate(row)
        if cell.is_empty
    ]
