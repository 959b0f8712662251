"""Encounter balancing using Challenge Rating arithmetic.

The balancer sizes monster groups to a party and a target difficulty. It is a
pure numeric component: it reads ``Party`` and ``Monster``/``MonsterConfig``
values and never touches a room.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from .errors import EmptyPartyError, InvalidDifficultyError
from .schemas import EncounterDifficulty, Monster, MonsterConfig, Party

# Encounter CR as a fraction of the average party level.
DIFFICULTY_MULTIPLIERS: Dict[EncounterDifficulty, float] = {
    EncounterDifficulty.EASY: 0.5,
    EncounterDifficulty.MEDIUM: 0.75,
    EncounterDifficulty.HARD: 1.0,
    EncounterDifficulty.DEADLY: 1.5,
}

# Parties of 3-4 are the baseline; larger parties than 6 use the 6 entry.
PARTY_SIZE_ADJUSTMENTS: Dict[int, float] = {
    1: 0.5,
    2: 0.75,
    3: 1.0,
    4: 1.0,
    5: 1.25,
    6: 1.5,
}

# Counts are left alone when the current total CR is this close to the target.
CR_TOLERANCE = 0.1


def _round_half_up(value: float) -> int:
    # round() would send 2.5 to 2; CR math expects halves to round up.
    return int(math.floor(value + 0.5))


def _size_adjustment(party: Party) -> float:
    if party.size > max(PARTY_SIZE_ADJUSTMENTS):
        return PARTY_SIZE_ADJUSTMENTS[max(PARTY_SIZE_ADJUSTMENTS)]
    return PARTY_SIZE_ADJUSTMENTS.get(party.size, 1.0)


def _require_party(party: Party) -> None:
    if party is None or party.size == 0:
        raise EmptyPartyError()


def _multiplier(difficulty: EncounterDifficulty) -> float:
    try:
        return DIFFICULTY_MULTIPLIERS[EncounterDifficulty(difficulty)]
    except (ValueError, KeyError):
        raise InvalidDifficultyError(difficulty) from None


class Balancer(ABC):
    """Interface for encounter balancing."""

    @abstractmethod
    def calculate_target_cr(self, party: Party, difficulty: EncounterDifficulty) -> float:
        """Return the total CR an encounter should have."""

    @abstractmethod
    def determine_encounter_difficulty(
        self, monsters: Sequence[Monster], party: Party
    ) -> EncounterDifficulty:
        """Classify an existing group of monsters against a party."""

    @abstractmethod
    def adjust_monster_selection(
        self,
        monster_configs: Sequence[MonsterConfig],
        party: Party,
        difficulty: EncounterDifficulty,
    ) -> List[MonsterConfig]:
        """Rescale monster counts towards the target CR."""


class StandardBalancer(Balancer):
    """Balancer following the D&D 5e CR-per-level rule of thumb."""

    def calculate_target_cr(self, party: Party, difficulty: EncounterDifficulty) -> float:
        _require_party(party)
        multiplier = _multiplier(difficulty)
        target = party.average_level * multiplier * _size_adjustment(party)
        # Standard CR increments are quarters.
        return _round_half_up(target * 4) / 4

    def determine_encounter_difficulty(
        self, monsters: Sequence[Monster], party: Party
    ) -> EncounterDifficulty:
        _require_party(party)
        total_cr = sum(monster.cr for monster in monsters)
        party_strength = party.average_level * _size_adjustment(party)
        if party_strength <= 0:
            return EncounterDifficulty.DEADLY if total_cr > 0 else EncounterDifficulty.EASY
        ratio = total_cr / party_strength

        for difficulty in (
            EncounterDifficulty.DEADLY,
            EncounterDifficulty.HARD,
            EncounterDifficulty.MEDIUM,
        ):
            if ratio >= DIFFICULTY_MULTIPLIERS[difficulty]:
                return difficulty
        # Anything below medium, trivial encounters included, reads as easy.
        return EncounterDifficulty.EASY

    def adjust_monster_selection(
        self,
        monster_configs: Sequence[MonsterConfig],
        party: Party,
        difficulty: EncounterDifficulty,
    ) -> List[MonsterConfig]:
        _require_party(party)
        target_cr = self.calculate_target_cr(party, difficulty)
        current_cr = sum(config.cr * config.count for config in monster_configs)

        if current_cr <= 0 or target_cr <= 0:
            return list(monster_configs)
        if abs(current_cr - target_cr) / target_cr < CR_TOLERANCE:
            return list(monster_configs)

        scale = target_cr / current_cr
        adjusted: List[MonsterConfig] = []
        for config in monster_configs:
            new_count = _round_half_up(config.count * scale)
            if config.count > 0 and new_count < 1:
                new_count = 1
            adjusted.append(config.model_copy(update={"count": new_count}))
        return adjusted


__all__ = [
    "DIFFICULTY_MULTIPLIERS",
    "PARTY_SIZE_ADJUSTMENTS",
    "Balancer",
    "StandardBalancer",
]
