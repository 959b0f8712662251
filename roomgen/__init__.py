"""
roomgen - spatial and entity model for tabletop RPG rooms.

Build rooms, place monsters, players, NPCs, obstacles and items on an
optional occupancy grid, resolve placement conflicts by priority, and clean
up encounters for XP.

No network required. Content repositories and the balancer are optional
collaborators injected by the user.
"""

__version__ = "0.1.0"

# Main service
from .service import RoomService

# Core schemas
from .schemas import (
    Position,
    CellType,
    Cell,
    LightLevel,
    EncounterDifficulty,
    Monster,
    Player,
    Item,
    NPC,
    Obstacle,
    Placeable,
    Room,
    PartyMember,
    Party,
    PlaceableConfig,
    RoomConfig,
    MonsterConfig,
    PlayerConfig,
    ItemConfig,
    NPCConfig,
    ObstacleConfig,
)

# Placement engine
from .room import (
    create_room,
    initialize_grid,
    place_entity,
    remove_entity,
    remove_placeable,
    get_entity,
    entity_at,
    move_entity,
    move_placeable,
    find_empty_position,
    add_placeables_to_room,
    BatchPlacementResult,
    cleanup_room,
    CleanupResult,
    get_npc_inventory,
    add_item_to_npc_inventory,
    remove_item_from_npc_inventory,
    calculate_distance,
    check_grid_consistency,
)

# Balancing and content
from .balancer import Balancer, StandardBalancer
from .repositories import (
    MonsterRepository,
    ItemRepository,
    InMemoryMonsterRepository,
    InMemoryItemRepository,
    APIMonsterRepository,
    APIItemRepository,
)

# Errors
from .errors import (
    RoomError,
    NilRoomError,
    InvalidPositionError,
    CellOccupiedError,
    NoEmptyPositionsError,
    EntityNotFoundError,
    InvalidDimensionsError,
    InvalidDifficultyError,
    EmptyPartyError,
    DuplicateEntityError,
    InvalidConfigError,
    RepositoryError,
)

# Configuration
from .config import Config

__all__ = [
    # Main class
    "RoomService",
    # Schemas
    "Position",
    "CellType",
    "Cell",
    "LightLevel",
    "EncounterDifficulty",
    "Monster",
    "Player",
    "Item",
    "NPC",
    "Obstacle",
    "Placeable",
    "Room",
    "PartyMember",
    "Party",
    "PlaceableConfig",
    "RoomConfig",
    "MonsterConfig",
    "PlayerConfig",
    "ItemConfig",
    "NPCConfig",
    "ObstacleConfig",
    # Placement engine
    "create_room",
    "initialize_grid",
    "place_entity",
    "remove_entity",
    "remove_placeable",
    "get_entity",
    "entity_at",
    "move_entity",
    "move_placeable",
    "find_empty_position",
    "add_placeables_to_room",
    "BatchPlacementResult",
    "cleanup_room",
    "CleanupResult",
    "get_npc_inventory",
    "add_item_to_npc_inventory",
    "remove_item_from_npc_inventory",
    "calculate_distance",
    "check_grid_consistency",
    # Balancing and content
    "Balancer",
    "StandardBalancer",
    "MonsterRepository",
    "ItemRepository",
    "InMemoryMonsterRepository",
    "InMemoryItemRepository",
    "APIMonsterRepository",
    "APIItemRepository",
    # Errors
    "RoomError",
    "NilRoomError",
    "InvalidPositionError",
    "CellOccupiedError",
    "NoEmptyPositionsError",
    "EntityNotFoundError",
    "InvalidDimensionsError",
    "InvalidDifficultyError",
    "EmptyPartyError",
    "DuplicateEntityError",
    "InvalidConfigError",
    "RepositoryError",
    # Config
    "Config",
]
