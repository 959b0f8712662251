"""Room service: build and populate rooms from configuration objects.

RoomService sits between callers and the placement core. It turns per-type
configs (``MonsterConfig``, ``ItemConfig``...) into entities, sends them
through one priority-resolved batch, and wires in the optional content
repositories and the encounter balancer.

Data flow for ``populate_room``:
1. ``generate_room`` validates dimensions and builds the (optionally gridded) room
2. Each config expands into ``count`` fresh entities with new ids
3. ``add_placeables_to_room`` places them Player > Monster > NPC > Obstacle > Item
4. Any entity that could not be placed at all fails the call
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence

from .balancer import Balancer, StandardBalancer
from .config import Config
from .errors import EmptyPartyError, InvalidConfigError, RepositoryError
from .logging_utils import log_error, log_info, log_success
from .room import (
    BatchPlacementResult,
    CleanupResult,
    add_placeables_to_room,
    cleanup_room,
    create_room,
)
from .repositories import ItemRepository, MonsterRepository
from .schemas import (
    NPC,
    CellType,
    EncounterDifficulty,
    Item,
    ItemConfig,
    LightLevel,
    Monster,
    MonsterConfig,
    NPCConfig,
    Obstacle,
    ObstacleConfig,
    Party,
    PlaceableConfig,
    Player,
    PlayerConfig,
    Room,
    RoomConfig,
)

TREASURE_ROOM_NOTE = "Remember to clear the room after collecting all treasure."

# Treasure quantity scaling per requested difficulty.
TREASURE_MULTIPLIERS = {
    EncounterDifficulty.EASY: 0.75,
    EncounterDifficulty.MEDIUM: 1.0,
    EncounterDifficulty.HARD: 1.25,
    EncounterDifficulty.DEADLY: 1.5,
}


class RoomService:
    """Business logic for room generation and management.

    All collaborators are injected; none is required for plain placement.
    ``item_repo`` is needed to resolve ``ItemConfig`` keys and for treasure
    rooms. ``monster_repo`` fills in XP at cleanup for monsters created
    without it.
    """

    def __init__(
        self,
        monster_repo: Optional[MonsterRepository] = None,
        item_repo: Optional[ItemRepository] = None,
        balancer: Optional[Balancer] = None,
        rng: Optional[random.Random] = None,
    ):
        self.monster_repo = monster_repo
        self.item_repo = item_repo
        self.balancer = balancer or StandardBalancer()
        self.rng = rng

    # ------------------------------------------------------------------
    # Room creation
    # ------------------------------------------------------------------

    def generate_room(self, config: RoomConfig) -> Room:
        """Create an empty room from ``config``; light level falls back to Config."""

        light_level = config.light_level or LightLevel(Config.DEFAULT_LIGHT_LEVEL.lower())
        room = create_room(
            config.width,
            config.height,
            light_level,
            config.description,
            use_grid=config.use_grid,
        )
        log_info(
            f"[Room] generated {room.width}x{room.height} {room.light_level.value} room"
            f" ({'grid' if room.has_grid else 'gridless'})"
        )
        return room

    # ------------------------------------------------------------------
    # Config expansion
    # ------------------------------------------------------------------

    @staticmethod
    def _request(entity, random_place: bool, position) -> PlaceableConfig:
        return PlaceableConfig(entity=entity, random_place=random_place, position=position)

    def monster_requests(self, configs: Sequence[MonsterConfig]) -> List[PlaceableConfig]:
        return [
            self._request(
                Monster(key=config.key, name=config.name, cr=config.cr, xp=config.xp),
                config.random_place,
                config.position,
            )
            for config in configs
            for _ in range(config.count)
        ]

    def player_requests(self, configs: Sequence[PlayerConfig]) -> List[PlaceableConfig]:
        return [
            self._request(Player(name=config.name, level=config.level), config.random_place, config.position)
            for config in configs
        ]

    def item_requests(self, configs: Sequence[ItemConfig]) -> List[PlaceableConfig]:
        requests: List[PlaceableConfig] = []
        for config in configs:
            for _ in range(config.count):
                if self.item_repo is not None:
                    item = self.item_repo.get_item_by_key(config.key)
                else:
                    item = Item(key=config.key, name=config.name)
                requests.append(self._request(item, config.random_place, config.position))
        return requests

    def npc_requests(self, configs: Sequence[NPCConfig]) -> List[PlaceableConfig]:
        return [
            self._request(
                NPC(
                    key=config.key,
                    name=config.name,
                    inventory=[item.model_copy(deep=True) for item in config.inventory],
                ),
                config.random_place,
                config.position,
            )
            for config in configs
        ]

    def obstacle_requests(self, configs: Sequence[ObstacleConfig]) -> List[PlaceableConfig]:
        return [
            self._request(
                Obstacle(key=config.key, name=config.name, blocking=config.blocking),
                config.random_place,
                config.position,
            )
            for config in configs
            for _ in range(config.count)
        ]

    # ------------------------------------------------------------------
    # Adding entities to an existing room
    # ------------------------------------------------------------------

    def _place(self, room: Room, requests: List[PlaceableConfig]) -> BatchPlacementResult:
        result = add_placeables_to_room(room, requests, self.rng)
        for failure in result.failed:
            log_error(f"[Room] could not place {failure.entity_id}: {failure.error}")
        if result.displaced:
            log_info(f"[Room] {len(result.displaced)} requested position(s) were taken; entities displaced")
        return result

    def add_monsters_to_room(self, room: Room, configs: Sequence[MonsterConfig]) -> BatchPlacementResult:
        return self._place(room, self.monster_requests(configs))

    def add_players_to_room(self, room: Room, configs: Sequence[PlayerConfig]) -> BatchPlacementResult:
        return self._place(room, self.player_requests(configs))

    def add_items_to_room(self, room: Room, configs: Sequence[ItemConfig]) -> BatchPlacementResult:
        return self._place(room, self.item_requests(configs))

    def add_npcs_to_room(self, room: Room, configs: Sequence[NPCConfig]) -> BatchPlacementResult:
        return self._place(room, self.npc_requests(configs))

    def add_obstacles_to_room(self, room: Room, configs: Sequence[ObstacleConfig]) -> BatchPlacementResult:
        return self._place(room, self.obstacle_requests(configs))

    # ------------------------------------------------------------------
    # Generating populated rooms
    # ------------------------------------------------------------------

    def populate_room(
        self,
        room_config: RoomConfig,
        *,
        monsters: Sequence[MonsterConfig] = (),
        players: Sequence[PlayerConfig] = (),
        items: Sequence[ItemConfig] = (),
        npcs: Sequence[NPCConfig] = (),
        obstacles: Sequence[ObstacleConfig] = (),
    ) -> Room:
        """Generate a room and place everything in one priority-resolved batch.

        Raises:
            InvalidDimensionsError: room_config has a non-positive dimension
            InvalidConfigError: a fixed-position config has no position
            NoEmptyPositionsError / InvalidPositionError: an entity could not
                be placed anywhere
        """

        room = self.generate_room(room_config)
        requests = [
            *self.player_requests(players),
            *self.monster_requests(monsters),
            *self.npc_requests(npcs),
            *self.obstacle_requests(obstacles),
            *self.item_requests(items),
        ]
        result = self._place(room, requests)
        if result.failed:
            raise result.failed[0].error

        log_success(f"[Room] placed {len(result.placed)} entities")
        return room

    def populate_treasure_room(
        self,
        room_config: RoomConfig,
        item_count: int,
        guardians: Sequence[MonsterConfig] = (),
    ) -> Room:
        """Generate a room filled with ``item_count`` random items and optional guardians."""

        item_repo = self._require_item_repo()
        guardian_count = sum(config.count for config in guardians)
        available = room_config.width * room_config.height - guardian_count
        if item_count > available:
            raise InvalidConfigError(
                f"not enough space in room for {item_count} items (available space: {available})"
            )

        loot = item_repo.get_random_items(item_count, self.rng)
        room = self.generate_room(room_config)
        requests = [
            *self.monster_requests(guardians),
            *(self._request(item, True, None) for item in loot),
        ]
        result = self._place(room, requests)
        if result.failed:
            raise result.failed[0].error
        return room

    def populate_random_treasure_room_with_party(
        self,
        room_config: RoomConfig,
        party: Party,
        include_guardian: bool = False,
        difficulty: EncounterDifficulty = EncounterDifficulty.MEDIUM,
    ) -> Room:
        """Generate a treasure room with loot scaled to ``party`` and place the party in it.

        Loot count is one item per member plus one per three average levels,
        scaled by difficulty. Categories widen with level: martial weapons
        from level 5, medium armor from 5 and heavy armor from 10.
        """

        if party is None or party.size == 0:
            raise EmptyPartyError()
        item_repo = self._require_item_repo()

        avg_level = party.average_level
        base_count = party.size + int(avg_level / 3)
        item_count = max(1, int(base_count * TREASURE_MULTIPLIERS.get(difficulty, 1.0)))

        categories = ["martial-weapons" if avg_level >= 5 else "simple-weapons"]
        if avg_level >= 10:
            categories.append("heavy-armor")
        elif avg_level >= 5:
            categories.append("medium-armor")
        else:
            categories.append("light-armor")
        categories.extend(["potion", "adventuring-gear"])

        guardians: List[MonsterConfig] = []
        if include_guardian:
            guardian_cr = max(1.0, avg_level - 2)
            if difficulty in (EncounterDifficulty.HARD, EncounterDifficulty.DEADLY):
                guardian_cr = max(1.0, avg_level)
            guardians = [MonsterConfig(name="Guardian", cr=guardian_cr, count=1, random_place=True)]
            guardians = self.balancer.adjust_monster_selection(guardians, party, difficulty)

        loot: List[Item] = []
        per_category = max(1, item_count // len(categories))
        for category in categories:
            try:
                loot.extend(item_repo.get_random_items_by_category(category, per_category, self.rng))
            except RepositoryError as exc:
                log_error(f"[Room] no loot from category '{category}': {exc}")
        if len(loot) < item_count:
            try:
                loot.extend(item_repo.get_random_items(item_count - len(loot), self.rng))
            except RepositoryError as exc:
                log_error(f"[Room] could not top up loot: {exc}")
        loot = loot[:item_count]

        guardian_count = sum(config.count for config in guardians)
        available = room_config.width * room_config.height - guardian_count - party.size
        if len(loot) > available:
            raise InvalidConfigError(
                f"not enough space in room for {len(loot)} items, {guardian_count} monsters, "
                f"and {party.size} party members (available space: {available})"
            )

        room = self.generate_room(room_config)
        requests = [
            *self.player_requests(
                [PlayerConfig(name=m.name, level=m.level, random_place=True) for m in party.members]
            ),
            *self.monster_requests(guardians),
            *(self._request(item, True, None) for item in loot),
        ]
        result = self._place(room, requests)
        if result.failed:
            raise result.failed[0].error

        base = room.description or "A treasure room with valuable items."
        room.description = f"{base} {TREASURE_ROOM_NOTE}"
        return room

    # ------------------------------------------------------------------
    # Balancing
    # ------------------------------------------------------------------

    def balance_monster_configs(
        self,
        configs: Sequence[MonsterConfig],
        party: Party,
        difficulty: EncounterDifficulty,
    ) -> List[MonsterConfig]:
        return self.balancer.adjust_monster_selection(configs, party, difficulty)

    def populate_room_with_balanced_monsters(
        self,
        room_config: RoomConfig,
        configs: Sequence[MonsterConfig],
        party: Party,
        difficulty: EncounterDifficulty,
    ) -> Room:
        balanced = self.balance_monster_configs(configs, party, difficulty)
        return self.populate_room(room_config, monsters=balanced)

    def determine_room_difficulty(self, room: Room, party: Optional[Party] = None) -> EncounterDifficulty:
        """Classify the room's monsters against ``party`` (defaults to the room's players)."""

        if room is None:
            raise InvalidConfigError("room cannot be None")
        party = party if party is not None else Party.from_players(room.players)
        return self.balancer.determine_encounter_difficulty(room.monsters, party)

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def _monster_xp(self, monster: Monster) -> int:
        if monster.xp or self.monster_repo is None or not monster.key:
            return monster.xp
        try:
            return self.monster_repo.get_monster_xp(monster.key)
        except RepositoryError as exc:
            log_error(f"[Cleanup] failed to get XP for monster {monster.key}: {exc}")
            return 0

    def cleanup_room(
        self,
        room: Room,
        cell_type: CellType,
        ids: Optional[Sequence[str]] = None,
    ) -> CleanupResult:
        """Remove entities and total monster XP; see ``roomgen.room.cleanup_room``."""

        result = cleanup_room(room, cell_type, ids, xp_for=self._monster_xp)
        log_success(
            f"[Cleanup] removed {cell_type.value} entities; {result.total_xp} XP,"
            f" {len(result.not_removed)} not found"
        )
        return result

    def _require_item_repo(self) -> ItemRepository:
        if self.item_repo is None:
            raise InvalidConfigError("an item repository is required for treasure rooms")
        return self.item_repo


__all__ = ["RoomService", "TREASURE_ROOM_NOTE"]
