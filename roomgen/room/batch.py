"""Batch placement with priority conflict resolution.

A mixed list of placement requests is placed in one pass. Requests are
bucketed by entity type and buckets are processed in ``PLACEMENT_PRIORITY``
order, so a player's exact request always beats a monster asking for the same
cell. A fixed-position request that lands on an occupied cell is displaced to
a random empty cell instead of failing the batch.

Policy details:
- A bucket is placed completely before the next lower bucket starts.
- Once placed, an entity is never moved again by the same batch.
- A request that cannot be placed at all (no empty cell left, fixed position
  out of bounds) is reported in ``BatchPlacementResult.failed`` and the batch
  carries on with the remaining requests.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..errors import (
    CellOccupiedError,
    DuplicateEntityError,
    InvalidConfigError,
    InvalidPositionError,
    NoEmptyPositionsError,
    RoomError,
)
from ..logging_utils import log_deterministic
from ..schemas import CellType, Placeable, PlaceableConfig, Position, Room
from .grid import require_room
from .placement import find_empty_position, place_entity

# Highest priority first.
PLACEMENT_PRIORITY: tuple[CellType, ...] = (
    CellType.PLAYER,
    CellType.MONSTER,
    CellType.NPC,
    CellType.OBSTACLE,
    CellType.ITEM,
)


@dataclass
class Displacement:
    """A fixed-position request that was moved to a fallback cell."""

    entity_id: str
    requested: Position
    actual: Position


@dataclass
class PlacementFailure:
    """A request that could not be placed anywhere."""

    entity_id: str
    error: RoomError


@dataclass
class BatchPlacementResult:
    """Outcome of ``add_placeables_to_room``."""

    placed: List[Placeable] = field(default_factory=list)
    displaced: List[Displacement] = field(default_factory=list)
    failed: List[PlacementFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def _validate_configs(room: Room, configs: Sequence[PlaceableConfig]) -> None:
    seen = {stored.id for stored in room.all_entities()}
    for index, config in enumerate(configs):
        if config is None or config.entity is None:
            raise InvalidConfigError(f"placement config #{index} has no entity")
        if not config.random_place and config.position is None:
            raise InvalidConfigError(
                f"{config.entity.cell_type.value} {config.entity.id} needs a position "
                "when random_place is False"
            )
        if config.entity.id in seen:
            raise DuplicateEntityError(config.entity.id)
        seen.add(config.entity.id)


def bucket_by_priority(
    configs: Sequence[PlaceableConfig],
) -> Dict[CellType, List[PlaceableConfig]]:
    """Group configs by entity type, preserving input order inside each group."""

    buckets: Dict[CellType, List[PlaceableConfig]] = {kind: [] for kind in PLACEMENT_PRIORITY}
    for config in configs:
        buckets[config.entity.cell_type].append(config)
    return buckets


def _place_with_fallback(
    room: Room,
    config: PlaceableConfig,
    result: BatchPlacementResult,
    rng: Optional[random.Random],
) -> None:
    entity = config.entity

    if config.random_place:
        entity.position = find_empty_position(room, rng)
        place_entity(room, entity)
        result.placed.append(entity)
        return

    requested = config.position
    entity.position = requested
    try:
        place_entity(room, entity)
    except CellOccupiedError:
        # Lost the cell to a higher-priority or earlier request.
        entity.position = find_empty_position(room, rng)
        place_entity(room, entity)
        result.displaced.append(
            Displacement(entity_id=entity.id, requested=requested, actual=entity.position)
        )
        log_deterministic(
            f"[Batch] {entity.cell_type.value} {entity.id} displaced {requested} -> {entity.position}"
        )
    result.placed.append(entity)


def add_placeables_to_room(
    room: Optional[Room],
    configs: Sequence[PlaceableConfig],
    rng: Optional[random.Random] = None,
) -> BatchPlacementResult:
    """Place every request in ``configs`` into ``room``, resolving conflicts by priority.

    The config entities are updated in place with their final positions; the
    room stores copies.

    Raises:
        NilRoomError: room is None
        InvalidConfigError: a config has no entity, or asks for a fixed
            position without giving one, or two configs share an entity id.
            Checked before anything is placed.
    """

    room = require_room(room)
    _validate_configs(room, configs)

    result = BatchPlacementResult()
    buckets = bucket_by_priority(configs)

    for kind in PLACEMENT_PRIORITY:
        for config in buckets[kind]:
            try:
                _place_with_fallback(room, config, result, rng)
            except (NoEmptyPositionsError, InvalidPositionError) as exc:
                result.failed.append(PlacementFailure(entity_id=config.entity.id, error=exc))
                log_deterministic(f"[Batch] {kind.value} {config.entity.id} not placed: {exc}")

    return result


__all__ = [
    "PLACEMENT_PRIORITY",
    "Displacement",
    "PlacementFailure",
    "BatchPlacementResult",
    "bucket_by_priority",
    "add_placeables_to_room",
]
