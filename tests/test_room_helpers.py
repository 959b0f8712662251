"""Tests for read-only room utilities."""

from roomgen.room import (
    calculate_distance,
    check_grid_consistency,
    create_room,
    occupied_positions,
    place_entity,
)
from roomgen.schemas import Cell, CellType, Monster, Player, Position


def test_distance_counts_diagonals_as_one_step():
    assert calculate_distance(Position(x=0, y=0), Position(x=3, y=4)) == 4
    assert calculate_distance(Position(x=2, y=2), Position(x=2, y=2)) == 0
    assert calculate_distance(Position(x=5, y=1), Position(x=1, y=1)) == 4


def test_occupied_positions():
    room = create_room(3, 3, use_grid=True)
    player = Player(name="Aria", position=Position(x=2, y=1))
    place_entity(room, player)

    occupied = occupied_positions(room)

    assert occupied == {Position(x=2, y=1): Cell(type=CellType.PLAYER, entity_id=player.id)}
    assert occupied_positions(create_room(3, 3)) == {}


def test_consistency_check_flags_tampered_grid():
    room = create_room(3, 3, use_grid=True)
    monster = Monster(name="Imp", position=Position(x=0, y=0))
    place_entity(room, monster)

    assert check_grid_consistency(room) == []

    # Stale cell plus a moved entity the grid never heard of.
    room.grid[2][2] = Cell(type=CellType.ITEM, entity_id="ghost")
    room.monsters[0].position = Position(x=1, y=1)

    problems = check_grid_consistency(room)
    assert any("ghost" in p for p in problems)
    assert any(monster.id in p for p in problems)


def test_consistency_check_flags_shared_cell():
    room = create_room(3, 3, use_grid=True)
    place_entity(room, Monster(name="A", position=Position(x=0, y=0)))
    room.monsters.append(Monster(name="B", position=Position(x=0, y=0)))

    assert any("share cell" in p for p in check_grid_consistency(room))
