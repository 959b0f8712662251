"""Exceptions raised by roomgen.

Structural errors (missing room, malformed input) propagate straight to the
caller. Not-found conditions during removal and cleanup are reported through
return values instead, so they have no exception here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .schemas import Position


class RoomError(Exception):
    """Base class for every roomgen error."""


class NilRoomError(RoomError):
    """Raised when an operation receives ``None`` instead of a Room."""

    def __init__(self, message: str = "room is None") -> None:
        super().__init__(message)


class InvalidPositionError(RoomError):
    """Raised when a position lies outside the room boundaries."""

    def __init__(self, *, position: "Position", width: int, height: int) -> None:
        self.position = position
        self.width = width
        self.height = height
        super().__init__(
            f"position {position} is outside room bounds ({width}, {height})"
        )


class CellOccupiedError(RoomError):
    """Raised when the target cell already holds another entity."""

    def __init__(self, *, position: "Position", occupant_id: Optional[str] = None) -> None:
        self.position = position
        self.occupant_id = occupant_id
        message = f"cell {position} is already occupied"
        if occupant_id:
            message += f" by {occupant_id}"
        super().__init__(message)


class NoEmptyPositionsError(RoomError):
    """Raised when every cell of a grid-backed room is occupied."""

    def __init__(self, message: str = "no empty positions available in room") -> None:
        super().__init__(message)


class EntityNotFoundError(RoomError):
    """Raised when a move or inventory operation targets a missing entity."""

    def __init__(self, entity_id: str, *, what: str = "entity") -> None:
        self.entity_id = entity_id
        super().__init__(f"{what} with ID {entity_id} not found")


class InvalidDimensionsError(RoomError):
    """Raised when a room is created with a non-positive width or height."""

    def __init__(self, *, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(
            f"room dimensions must be positive, got width={width} height={height}"
        )


class InvalidDifficultyError(RoomError):
    """Raised when the balancer receives an unknown encounter difficulty."""

    def __init__(self, difficulty: object) -> None:
        self.difficulty = difficulty
        super().__init__(f"invalid difficulty: {difficulty}")


class EmptyPartyError(RoomError):
    """Raised when the balancer receives a party with no members."""

    def __init__(self, message: str = "party cannot be empty") -> None:
        super().__init__(message)


class InvalidConfigError(RoomError):
    """Raised for malformed placement or generation configs."""


class DuplicateEntityError(InvalidConfigError):
    """Raised when an entity id is already stored in the room."""

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"entity with ID {entity_id} is already in the room")


class RepositoryError(RoomError):
    """Raised when a content repository cannot produce the requested data."""


__all__ = [
    "RoomError",
    "NilRoomError",
    "InvalidPositionError",
    "CellOccupiedError",
    "NoEmptyPositionsError",
    "EntityNotFoundError",
    "InvalidDimensionsError",
    "InvalidDifficultyError",
    "EmptyPartyError",
    "InvalidConfigError",
    "DuplicateEntityError",
    "RepositoryError",
]
