"""Conversion from D&D 5e SRD API JSON shapes into roomgen models.

Payloads follow the public API at ``/api/monsters/{index}`` and
``/api/equipment/{index}``. Missing optional blocks simply leave the matching
model fields at their defaults.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from .schemas import Item, ItemConfig, Monster, MonsterConfig


def _ref_index(block: Any) -> str:
    """Return ``block["index"]`` for an API reference object, else ''."""

    if isinstance(block, Mapping):
        return str(block.get("index") or "")
    return ""


def item_category(data: Mapping[str, Any]) -> str:
    """Derive the category key used to group loot.

    Weapons and armor use the SRD category names ("martial-weapons",
    "light-armor"); everything else uses its equipment category index.
    """

    if data.get("weapon_category"):
        return f"{str(data['weapon_category']).lower()}-weapons"
    if data.get("armor_category"):
        return f"{str(data['armor_category']).lower()}-armor"
    return _ref_index(data.get("equipment_category"))


def item_type(data: Mapping[str, Any]) -> str:
    if data.get("weapon_category") or data.get("damage"):
        return "weapon"
    if data.get("armor_category") or data.get("armor_class"):
        return "armor"
    return "equipment"


def item_from_api(data: Mapping[str, Any]) -> Item:
    """Build an ``Item`` (with a fresh id) from an equipment payload."""

    cost = data.get("cost") or {}
    damage = data.get("damage") or {}
    armor_class = data.get("armor_class") or {}

    return Item(
        key=str(data.get("index", "")),
        name=str(data.get("name", "")),
        type=item_type(data),
        category=item_category(data),
        value=int(cost.get("quantity", 0) or 0),
        value_unit=str(cost.get("unit", "") or ""),
        weight=int(data.get("weight", 0) or 0),
        properties=[_ref_index(prop) for prop in data.get("properties") or [] if _ref_index(prop)],
        damage_dice=str(damage.get("damage_dice", "") or ""),
        damage_type=_ref_index(damage.get("damage_type")),
        armor_class=int(armor_class.get("base", 0) or 0) if isinstance(armor_class, Mapping) else 0,
        stealth_disadvantage=bool(data.get("stealth_disadvantage", False)),
    )


def monster_from_api(data: Mapping[str, Any]) -> Monster:
    """Build an unplaced ``Monster`` (with a fresh id) from a monster payload."""

    return Monster(
        key=str(data.get("index", "")),
        name=str(data.get("name", "")),
        cr=float(data.get("challenge_rating", 0) or 0),
        xp=int(data.get("xp", 0) or 0),
    )


def monster_config_from_api(data: Mapping[str, Any], count: int = 1) -> MonsterConfig:
    """Turn a monster payload into a ``MonsterConfig``; counts below 1 become 1."""

    return MonsterConfig(
        key=str(data.get("index", "")),
        name=str(data.get("name", "")),
        cr=float(data.get("challenge_rating", 0) or 0),
        xp=int(data.get("xp", 0) or 0),
        count=max(1, count),
    )


def monster_configs_from_api(payloads: Iterable[Mapping[str, Any]], count: int = 1) -> List[MonsterConfig]:
    return [monster_config_from_api(data, count) for data in payloads]


def item_config_from_api(data: Mapping[str, Any], count: int = 1) -> ItemConfig:
    """Turn an equipment payload into a randomly placed ``ItemConfig``."""

    return ItemConfig(
        key=str(data.get("index", "")),
        name=str(data.get("name", "")),
        count=max(1, count),
        random_place=True,
    )


def item_configs_from_api(payloads: Iterable[Mapping[str, Any]], count: int = 1) -> List[ItemConfig]:
    return [item_config_from_api(data, count) for data in payloads]


def equipment_index(payload: Dict[str, Any]) -> List[str]:
    """Extract the equipment keys from an ``/api/equipment`` listing."""

    return [str(entry["index"]) for entry in payload.get("results", []) if entry.get("index")]


__all__ = [
    "item_category",
    "item_type",
    "item_from_api",
    "monster_from_api",
    "monster_config_from_api",
    "monster_configs_from_api",
    "item_config_from_api",
    "item_configs_from_api",
    "equipment_index",
]
