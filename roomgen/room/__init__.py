"""Room spatial model: grid, placement engine, batch placement, cleanup, inventory."""

from .grid import create_room, initialize_grid, in_bounds, empty_positions
from .placement import (
    place_entity,
    remove_entity,
    remove_placeable,
    get_entity,
    entity_at,
    move_entity,
    move_placeable,
    find_empty_position,
)
from .batch import (
    PLACEMENT_PRIORITY,
    BatchPlacementResult,
    Displacement,
    PlacementFailure,
    add_placeables_to_room,
)
from .cleanup import CleanupResult, cleanup_room
from .inventory import (
    get_npc_inventory,
    add_item_to_npc_inventory,
    remove_item_from_npc_inventory,
)
from .helpers import calculate_distance, occupied_positions, check_grid_consistency

__all__ = [
    "create_room",
    "initialize_grid",
    "in_bounds",
    "empty_positions",
    "place_entity",
    "remove_entity",
    "remove_placeable",
    "get_entity",
    "entity_at",
    "move_entity",
    "move_placeable",
    "find_empty_position",
    "PLACEMENT_PRIORITY",
    "BatchPlacementResult",
    "Displacement",
    "PlacementFailure",
    "add_placeables_to_room",
    "CleanupResult",
    "cleanup_room",
    "get_npc_inventory",
    "add_item_to_npc_inventory",
    "remove_item_from_npc_inventory",
    "calculate_distance",
    "occupied_positions",
    "check_grid_consistency",
]
