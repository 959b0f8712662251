"""Tests for D&D 5e API payload conversion."""

from roomgen.converters import (
    equipment_index,
    item_config_from_api,
    item_from_api,
    monster_config_from_api,
    monster_configs_from_api,
    monster_from_api,
)

LONGSWORD = {
    "index": "longsword",
    "name": "Longsword",
    "equipment_category": {"index": "weapon", "name": "Weapon"},
    "weapon_category": "Martial",
    "cost": {"quantity": 15, "unit": "gp"},
    "damage": {"damage_dice": "1d8", "damage_type": {"index": "slashing"}},
    "weight": 3,
    "properties": [{"index": "versatile", "name": "Versatile"}],
}

CHAIN_MAIL = {
    "index": "chain-mail",
    "name": "Chain Mail",
    "equipment_category": {"index": "armor"},
    "armor_category": "Heavy",
    "armor_class": {"base": 16, "dex_bonus": False},
    "stealth_disadvantage": True,
    "cost": {"quantity": 75, "unit": "gp"},
    "weight": 55,
}

ROPE = {
    "index": "rope-hempen-50-feet",
    "name": "Rope, hempen (50 feet)",
    "equipment_category": {"index": "adventuring-gear"},
    "cost": {"quantity": 1, "unit": "gp"},
    "weight": 10,
}

GOBLIN = {"index": "goblin", "name": "Goblin", "challenge_rating": 0.25, "xp": 50}


def test_weapon_payload():
    item = item_from_api(LONGSWORD)

    assert item.key == "longsword"
    assert item.type == "weapon"
    assert item.category == "martial-weapons"
    assert (item.value, item.value_unit, item.weight) == (15, "gp", 3)
    assert item.damage_dice == "1d8"
    assert item.damage_type == "slashing"
    assert item.properties == ["versatile"]
    assert item.id


def test_armor_payload():
    item = item_from_api(CHAIN_MAIL)

    assert item.type == "armor"
    assert item.category == "heavy-armor"
    assert item.armor_class == 16
    assert item.stealth_disadvantage is True


def test_plain_gear_payload():
    item = item_from_api(ROPE)

    assert item.type == "equipment"
    assert item.category == "adventuring-gear"
    assert item.damage_dice == ""
    assert item.armor_class == 0


def test_monster_payload():
    monster = monster_from_api(GOBLIN)

    assert (monster.key, monster.name, monster.cr, monster.xp) == ("goblin", "Goblin", 0.25, 50)


def test_monster_config_count_is_at_least_one():
    assert monster_config_from_api(GOBLIN, count=0).count == 1
    assert [c.count for c in monster_configs_from_api([GOBLIN, GOBLIN], count=3)] == [3, 3]


def test_item_config_is_random_placed():
    config = item_config_from_api(LONGSWORD, count=2)

    assert config.key == "longsword"
    assert config.count == 2
    assert config.random_place is True


def test_equipment_index():
    listing = {"count": 2, "results": [{"index": "club"}, {"index": "dagger"}, {"name": "no index"}]}

    assert equipment_index(listing) == ["club", "dagger"]
