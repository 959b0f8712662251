"""Tests for the RoomService facade."""

import random

import pytest

from roomgen.config import Config
from roomgen.errors import EmptyPartyError, InvalidConfigError, InvalidDimensionsError, NoEmptyPositionsError
from roomgen.repositories import InMemoryItemRepository, InMemoryMonsterRepository
from roomgen.room import check_grid_consistency
from roomgen.schemas import (
    CellType,
    EncounterDifficulty,
    Item,
    ItemConfig,
    LightLevel,
    MonsterConfig,
    NPCConfig,
    ObstacleConfig,
    Party,
    PartyMember,
    PlayerConfig,
    Position,
    RoomConfig,
)
from roomgen.service import TREASURE_ROOM_NOTE, RoomService


def loot_repo():
    return InMemoryItemRepository(
        [
            Item(key="dagger", name="Dagger", category="simple-weapons"),
            Item(key="leather-armor", name="Leather Armor", category="light-armor"),
            Item(key="potion-of-healing", name="Potion of Healing", category="potion"),
            Item(key="rope", name="Rope", category="adventuring-gear"),
            Item(key="torch", name="Torch", category="adventuring-gear"),
        ]
    )


def test_generate_room_uses_configured_default_light(monkeypatch):
    monkeypatch.setattr(Config, "DEFAULT_LIGHT_LEVEL", "dim")
    service = RoomService()

    room = service.generate_room(RoomConfig(width=6, height=4, use_grid=True))

    assert room.light_level is LightLevel.DIM
    assert room.has_grid

    lit = service.generate_room(RoomConfig(width=2, height=2, light_level=LightLevel.DARK))
    assert lit.light_level is LightLevel.DARK
    assert lit.grid is None


def test_generate_room_rejects_bad_dimensions():
    with pytest.raises(InvalidDimensionsError):
        RoomService().generate_room(RoomConfig(width=0, height=3))


def test_populate_room_places_everything():
    service = RoomService(rng=random.Random(4))

    room = service.populate_room(
        RoomConfig(width=10, height=10, use_grid=True),
        monsters=[MonsterConfig(name="Goblin", key="goblin", cr=0.25, xp=50, count=3)],
        players=[PlayerConfig(name="Aria", level=3, random_place=False, position=Position(x=0, y=0))],
        items=[ItemConfig(key="gold", name="Gold", count=2)],
        npcs=[NPCConfig(name="Tobin", key="merchant", inventory=[Item(name="Map")])],
        obstacles=[ObstacleConfig(name="Pillar", key="pillar", count=2)],
    )

    assert len(room.monsters) == 3
    assert len({m.id for m in room.monsters}) == 3
    assert room.players[0].position == Position(x=0, y=0)
    assert [i.name for i in room.items] == ["Gold", "Gold"]
    assert room.npcs[0].inventory[0].name == "Map"
    assert len(room.obstacles) == 2
    assert check_grid_consistency(room) == []


def test_populate_room_fails_when_overfilled():
    service = RoomService(rng=random.Random(0))

    with pytest.raises(NoEmptyPositionsError):
        service.populate_room(
            RoomConfig(width=2, height=2, use_grid=True),
            monsters=[MonsterConfig(name="Rat", count=5)],
        )


def test_add_to_existing_room_returns_batch_result():
    service = RoomService(rng=random.Random(2))
    room = service.generate_room(RoomConfig(width=5, height=5, use_grid=True))
    service.add_players_to_room(room, [PlayerConfig(name="Aria", random_place=False, position=Position(x=1, y=1))])

    result = service.add_monsters_to_room(
        room, [MonsterConfig(name="Wolf", random_place=False, position=Position(x=1, y=1))]
    )

    assert len(result.placed) == 1
    assert len(result.displaced) == 1
    assert room.grid[1][1].type is CellType.PLAYER
    assert check_grid_consistency(room) == []


def test_items_resolve_through_repository():
    service = RoomService(item_repo=loot_repo(), rng=random.Random(1))
    room = service.generate_room(RoomConfig(width=4, height=4, use_grid=True))

    service.add_items_to_room(room, [ItemConfig(key="dagger", count=2)])

    assert [i.category for i in room.items] == ["simple-weapons", "simple-weapons"]
    assert room.items[0].id != room.items[1].id


def test_add_npcs_and_obstacles():
    service = RoomService(rng=random.Random(8))
    room = service.generate_room(RoomConfig(width=4, height=4, use_grid=True))

    service.add_npcs_to_room(room, [NPCConfig(name="Guard")])
    service.add_obstacles_to_room(room, [ObstacleConfig(name="Boulder", count=3)])

    assert len(room.npcs) == 1
    assert len(room.obstacles) == 3


def test_populate_treasure_room():
    service = RoomService(item_repo=loot_repo(), rng=random.Random(6))

    room = service.populate_treasure_room(
        RoomConfig(width=5, height=5, use_grid=True),
        item_count=3,
        guardians=[MonsterConfig(name="Mimic", cr=2, xp=450)],
    )

    assert len(room.items) == 3
    assert len(room.monsters) == 1
    assert check_grid_consistency(room) == []


def test_treasure_room_checks_space_and_repository():
    with pytest.raises(InvalidConfigError):
        RoomService(item_repo=loot_repo()).populate_treasure_room(
            RoomConfig(width=2, height=2, use_grid=True),
            item_count=4,
            guardians=[MonsterConfig(name="Mimic")],
        )
    with pytest.raises(InvalidConfigError):
        RoomService().populate_treasure_room(RoomConfig(width=5, height=5), item_count=1)


def test_random_treasure_room_with_party():
    service = RoomService(item_repo=loot_repo(), rng=random.Random(12))
    party = Party(members=[PartyMember(name="Aria", level=3), PartyMember(name="Bram", level=3)])

    room = service.populate_random_treasure_room_with_party(
        RoomConfig(width=10, height=10, use_grid=True),
        party,
        include_guardian=True,
        difficulty=EncounterDifficulty.MEDIUM,
    )

    assert sorted(p.name for p in room.players) == ["Aria", "Bram"]
    assert len(room.items) == 3
    assert room.monsters and all(m.name == "Guardian" for m in room.monsters)
    assert room.description.endswith(TREASURE_ROOM_NOTE)
    assert check_grid_consistency(room) == []


def test_random_treasure_room_needs_party():
    with pytest.raises(EmptyPartyError):
        RoomService(item_repo=loot_repo()).populate_random_treasure_room_with_party(
            RoomConfig(width=5, height=5), Party()
        )


def test_balance_and_difficulty():
    service = RoomService(rng=random.Random(3))
    party = Party(members=[PartyMember(name=f"h{i}", level=4) for i in range(4)])

    balanced = service.balance_monster_configs(
        [MonsterConfig(name="Goblin", cr=0.25, count=4)], party, EncounterDifficulty.MEDIUM
    )
    assert balanced[0].count == 12

    room = service.populate_room_with_balanced_monsters(
        RoomConfig(width=6, height=6, use_grid=True),
        [MonsterConfig(name="Goblin", cr=0.25, count=4)],
        party,
        EncounterDifficulty.MEDIUM,
    )
    assert len(room.monsters) == 12
    assert service.determine_room_difficulty(room, party) is EncounterDifficulty.MEDIUM


def test_room_difficulty_defaults_to_room_players():
    service = RoomService(rng=random.Random(5))
    room = service.populate_room(
        RoomConfig(width=6, height=6, use_grid=True),
        players=[PlayerConfig(name="Solo", level=2)],
        monsters=[MonsterConfig(name="Ogre", cr=2)],
    )

    # One level 2 player has strength 1.0, so CR 2 is deadly.
    assert service.determine_room_difficulty(room) is EncounterDifficulty.DEADLY


def test_cleanup_fills_missing_xp_from_repository():
    service = RoomService(monster_repo=InMemoryMonsterRepository({"goblin": 50}), rng=random.Random(9))
    room = service.populate_room(
        RoomConfig(width=5, height=5, use_grid=True),
        monsters=[
            MonsterConfig(name="Goblin", key="goblin", count=2),
            MonsterConfig(name="Ogre", key="ogre", xp=450),
            MonsterConfig(name="Mystery", key="mystery"),
        ],
    )

    result = service.cleanup_room(room, CellType.MONSTER)

    assert result.total_xp == 550
    assert result.not_removed == []
    assert room.monsters == []
    assert check_grid_consistency(room) == []
