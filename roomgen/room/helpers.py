"""Read-only utilities over rooms: distance, occupancy and invariant checks."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List

from ..schemas import Cell, Position, Room


def calculate_distance(a: Position, b: Position) -> int:
    """Return the distance between two positions in grid units.

    Uses the D&D 5e movement rule where a diagonal step costs the same as an
    orthogonal one (Chebyshev distance).
    """

    return max(abs(b.x - a.x), abs(b.y - a.y))


def occupied_positions(room: Room) -> Dict[Position, Cell]:
    """Map every occupied cell of a grid-backed room to its Cell.

    Gridless rooms have no occupancy index and return an empty mapping.
    """

    if not room.has_grid:
        return {}
    return {
        Position(x=x, y=y): cell
        for y, row in enumerate(room.grid)
        for x, cell in enumerate(row)
        if not cell.is_empty
    }


def check_grid_consistency(room: Room) -> List[str]:
    """Describe every place where the grid and the entity collections disagree.

    An empty list means the room satisfies the invariant: each occupied cell
    names exactly one live entity of the matching type standing on it, and
    every live entity's cell names it back. Gridless rooms are always
    consistent.
    """

    if not room.has_grid:
        return []

    problems: List[str] = []
    entities = room.all_entities()

    # Two live entities recorded on the same cell is a double placement.
    counts = Counter(entity.position for entity in entities)
    for position, count in counts.items():
        if count > 1:
            problems.append(f"{count} entities share cell {position}")

    by_id = {entity.id: entity for entity in entities}

    for entity in entities:
        pos = entity.position
        if not (0 <= pos.x < room.width and 0 <= pos.y < room.height):
            problems.append(f"{entity.cell_type.value} {entity.id} is out of bounds at {pos}")
            continue
        cell = room.grid[pos.y][pos.x]
        if cell.entity_id != entity.id or cell.type != entity.cell_type:
            problems.append(
                f"{entity.cell_type.value} {entity.id} at {pos} but cell records "
                f"{cell.type.value} {cell.entity_id}"
            )

    for position, cell in occupied_positions(room).items():
        owner = by_id.get(cell.entity_id)
        if owner is None:
            problems.append(f"cell {position} records missing entity {cell.entity_id}")
        elif owner.position != position:
            problems.append(
                f"cell {position} records {cell.entity_id} which stands at {owner.position}"
            )

    return problems


__all__ = ["calculate_distance", "occupied_positions", "check_grid_consistency"]
