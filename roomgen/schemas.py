"""
Pydantic schemas for the roomgen room model.

All data structures shared by the placement engine, the balancer and the
service layer are defined here.

Design Philosophy:
- Entities are a closed tagged union (``Placeable``) discriminated by ``kind``
- Every entity exposes the same ``id`` / ``position`` / ``cell_type`` surface so
  placement algorithms stay generic over "any placeable"
- The ``Room`` is the single owned aggregate: per-type collections are the
  authoritative store, the optional grid is a derived index
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, ClassVar, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


def new_entity_id() -> str:
    """Return a fresh, globally unique entity identifier."""

    return str(uuid4())


# ============================================================================
# Spatial primitives
# ============================================================================


class Position(BaseModel):
    """Integer (x, y) coordinate. Validity is relative to a Room."""

    model_config = ConfigDict(frozen=True)

    x: int = 0
    y: int = 0

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class CellType(str, Enum):
    """What occupies a grid cell."""

    EMPTY = "empty"
    MONSTER = "monster"
    ITEM = "item"
    PLAYER = "player"
    NPC = "npc"
    OBSTACLE = "obstacle"


class Cell(BaseModel):
    """One grid unit. An EMPTY cell never records an entity id."""

    type: CellType = CellType.EMPTY
    entity_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.type is CellType.EMPTY


class LightLevel(str, Enum):
    BRIGHT = "bright"
    DIM = "dim"
    DARK = "dark"


class EncounterDifficulty(str, Enum):
    """Target difficulty of an encounter, consumed by the balancer."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    DEADLY = "deadly"


# ============================================================================
# Entities
# ============================================================================


class PlaceableBase(BaseModel):
    """Shared identity and position for every entity that can sit in a room.

    Subclasses pin ``kind`` to a literal (the union discriminator) and
    ``CELL_TYPE`` to the grid marker they write when placed.
    """

    CELL_TYPE: ClassVar[CellType] = CellType.EMPTY

    id: str = Field(default_factory=new_entity_id, description="Unique instance id")
    position: Position = Field(default_factory=Position, description="Position in the room")

    @property
    def cell_type(self) -> CellType:
        return self.CELL_TYPE


class Monster(PlaceableBase):
    CELL_TYPE: ClassVar[CellType] = CellType.MONSTER

    kind: Literal["monster"] = "monster"
    key: str = Field("", description="Reference key into the monster content source")
    name: str = ""
    cr: float = Field(0.0, description="Challenge Rating")
    xp: int = Field(0, description="Experience awarded when the monster is removed")


class Player(PlaceableBase):
    CELL_TYPE: ClassVar[CellType] = CellType.PLAYER

    kind: Literal["player"] = "player"
    name: str = ""
    level: int = 1


class Item(PlaceableBase):
    """Treasure or equipment. Weapon and armor fields stay empty for plain gear."""

    CELL_TYPE: ClassVar[CellType] = CellType.ITEM

    kind: Literal["item"] = "item"
    key: str = ""
    name: str = ""
    type: str = Field("", description="equipment, weapon or armor")
    category: str = Field("", description="Equipment category key (e.g. simple-weapons)")
    value: int = 0
    value_unit: str = ""
    weight: int = 0
    properties: List[str] = Field(default_factory=list)
    damage_dice: str = ""
    damage_type: str = ""
    armor_class: int = 0
    stealth_disadvantage: bool = False


class NPC(PlaceableBase):
    """Non-player character. Its inventory is not part of the room grid."""

    CELL_TYPE: ClassVar[CellType] = CellType.NPC

    kind: Literal["npc"] = "npc"
    key: str = ""
    name: str = ""
    inventory: List[Item] = Field(default_factory=list)


class Obstacle(PlaceableBase):
    CELL_TYPE: ClassVar[CellType] = CellType.OBSTACLE

    kind: Literal["obstacle"] = "obstacle"
    key: str = ""
    name: str = ""
    blocking: bool = True


Placeable = Annotated[
    Union[Monster, Player, Item, NPC, Obstacle],
    Field(discriminator="kind"),
]


# ============================================================================
# Room aggregate
# ============================================================================


class Room(BaseModel):
    """Rectangular room holding entities, optionally backed by an occupancy grid.

    Mutate through ``roomgen.room`` operations only; they keep the grid and the
    per-type collections consistent. ``grid`` is indexed ``grid[y][x]``.
    """

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    light_level: LightLevel = LightLevel.BRIGHT
    description: str = ""
    monsters: List[Monster] = Field(default_factory=list)
    players: List[Player] = Field(default_factory=list)
    items: List[Item] = Field(default_factory=list)
    npcs: List[NPC] = Field(default_factory=list)
    obstacles: List[Obstacle] = Field(default_factory=list)
    grid: Optional[List[List[Cell]]] = Field(
        None, description="height x width occupancy index; None means gridless",
    )

    @model_validator(mode="after")
    def _check_grid_shape(self) -> "Room":
        if self.grid is None:
            return self
        if len(self.grid) != self.height or any(len(row) != self.width for row in self.grid):
            raise ValueError(f"grid must be {self.height} rows of {self.width} cells")
        return self

    @property
    def has_grid(self) -> bool:
        return self.grid is not None

    def collection_for(self, cell_type: CellType) -> list:
        """Return the live list that stores entities of ``cell_type``."""

        collections = {
            CellType.MONSTER: self.monsters,
            CellType.PLAYER: self.players,
            CellType.ITEM: self.items,
            CellType.NPC: self.npcs,
            CellType.OBSTACLE: self.obstacles,
        }
        try:
            return collections[cell_type]
        except KeyError:
            raise ValueError(f"No entity collection for cell type {cell_type.value!r}") from None

    def all_entities(self) -> list:
        return [*self.players, *self.monsters, *self.npcs, *self.obstacles, *self.items]


# ============================================================================
# Party
# ============================================================================


class PartyMember(BaseModel):
    name: str
    level: int = 1


class Party(BaseModel):
    """Ordered group of player characters, consumed by the balancer."""

    members: List[PartyMember] = Field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def average_level(self) -> float:
        if not self.members:
            return 0.0
        return sum(member.level for member in self.members) / len(self.members)

    @classmethod
    def from_players(cls, players: List[Player]) -> "Party":
        return cls(members=[PartyMember(name=p.name, level=p.level) for p in players])


# ============================================================================
# Placement and generation configs
# ============================================================================


class PlaceableConfig(BaseModel):
    """One request for the batch placer.

    When ``random_place`` is False, ``position`` is the exact cell requested.
    """

    entity: Placeable
    random_place: bool = False
    position: Optional[Position] = None


class RoomConfig(BaseModel):
    width: int
    height: int
    light_level: Optional[LightLevel] = None
    description: str = ""
    use_grid: bool = False


class MonsterConfig(BaseModel):
    name: str = ""
    key: str = ""
    cr: float = 0.0
    xp: int = 0
    count: int = 1
    random_place: bool = True
    position: Optional[Position] = None


class PlayerConfig(BaseModel):
    name: str = ""
    level: int = 1
    random_place: bool = True
    position: Optional[Position] = None


class ItemConfig(BaseModel):
    key: str = ""
    name: str = ""
    count: int = 1
    random_place: bool = True
    position: Optional[Position] = None


class NPCConfig(BaseModel):
    name: str = ""
    key: str = ""
    inventory: List[Item] = Field(default_factory=list)
    random_place: bool = True
    position: Optional[Position] = None


class ObstacleConfig(BaseModel):
    name: str = ""
    key: str = ""
    blocking: bool = True
    count: int = 1
    random_place: bool = True
    position: Optional[Position] = None


__all__ = [
    "Position",
    "CellType",
    "Cell",
    "LightLevel",
    "EncounterDifficulty",
    "PlaceableBase",
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
    "new_entity_id",
]
