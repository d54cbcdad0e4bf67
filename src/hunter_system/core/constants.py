"""Engine-wide constants for the Hunter System progression engine.

This module defines the fixed rules of the progression economy: caps,
rank and rarity tables, and the default equipment generation ranges.
Numeric tuning that balancing may change lives in ``core.config`` instead.
"""

from __future__ import annotations

# =============================================================================
# Character Progression
# =============================================================================

MIN_CHARACTER_LEVEL = 1
"""Minimum character level."""

MAX_CHARACTER_LEVEL = 10_000
"""Level cap. XP past the cap stops short of the next threshold."""

MAX_OUT_LEVEL = 100
"""Target level of the max-out debug command."""

DEFAULT_BASE_ATTRIBUTE = 10
"""Starting value of each of the six base attributes."""

# =============================================================================
# Equipment
# =============================================================================

MAX_ITEM_LEVEL = 20
"""Highest enhancement level an equipment item can reach."""

UPGRADE_COST_PER_LEVEL = 100
"""Upgrade cost in shards is this value times the target level."""

SALVAGE_LEVEL_BONUS = 20
"""Extra shards granted per enhancement level when salvaging."""

SALVAGE_SHARD_VALUES: dict[str, int] = {
    "common": 5,
    "uncommon": 15,
    "rare": 30,
    "epic": 60,
    "legendary": 120,
    "mythic": 250,
    "godlike": 500,
    "celestial": 1000,
}

# Inclusive (min, max) roll range of a single stat line per rarity
BASE_STAT_RANGES: dict[str, tuple[int, int]] = {
    "common": (1, 1),
    "uncommon": (1, 2),
    "rare": (2, 3),
    "epic": (3, 4),
    "legendary": (4, 5),
    "mythic": (5, 5),
    "godlike": (5, 5),
    "celestial": (5, 5),
}

STAT_LINES_BY_RARITY: dict[str, int] = {
    "common": 1,
    "uncommon": 2,
    "rare": 3,
    "epic": 4,
    "legendary": 5,
    "mythic": 5,
    "godlike": 5,
    "celestial": 5,
}

DEFAULT_SHOP_RARITY_WEIGHTS: dict[str, float] = {
    "common": 50.0,
    "uncommon": 30.0,
    "rare": 15.0,
    "epic": 4.0,
    "legendary": 0.9,
    "mythic": 0.1,
    "godlike": 0.01,
    "celestial": 0.001,
}

BOSS_BOOSTED_RARITIES = ("mythic", "godlike", "celestial")
"""Rarities whose drop weight is tripled for the extra boss drop."""

ITEM_NAME_PREFIXES = (
    "Ancient", "Cursed", "Ethereal", "Forgotten", "Glowing", "Iron", "Jagged",
    "Obsidian", "Shadow", "Silent", "Twisted", "Umbral", "Void", "Radiant",
)

ITEM_NAME_SUFFIXES = (
    "of the Wolf", "of the Dragon", "of the Night", "of Ash", "of Blood",
    "of Glory", "of the Moon", "of Zenith", "of War", "of Time",
)

ITEM_ROOTS: dict[str, tuple[str, ...]] = {
    "weapon": ("Blade", "Katana", "Scythe", "Spear", "Dagger", "Staff"),
    "helmet": ("Helm", "Visor", "Crown", "Hood"),
    "chest": ("Armor", "Plate", "Cuirass", "Robe"),
    "gloves": ("Gauntlets", "Grips", "Bracers"),
    "boots": ("Boots", "Greaves", "Treads"),
    "necklace": ("Amulet", "Pendant", "Talisman"),
    "ring": ("Ring", "Band", "Signet"),
    "ring2": ("Ring", "Band", "Loop"),
    "earrings": ("Earrings", "Studs", "Hoops"),
}

# =============================================================================
# Dungeons
# =============================================================================

RANK_TIERS = ("E", "D", "C", "B", "A", "S", "SS", "SSS")
"""Dungeon difficulty ranks, easiest first."""

FLOORS_PER_RANK = 20
"""Procedural floors share a rank in blocks of this many floors."""

FLOORS_PER_ZONE = 150
"""Procedural floors grouped into zones for cosmetic drops."""

BOSS_FLOOR_INTERVAL = 10
"""Every tenth procedural floor hosts a boss."""

FLOOR_BASE_POWER = 10_000
FLOOR_LINEAR_POWER = 3_000
FLOOR_QUADRATIC_POWER = 5
"""Recommended power of floor f is base + (f-1) * linear + (f-1)^2 * quadratic."""

FLOOR_XP_SHARE = 0.05
"""Base XP of a procedural floor as a share of its recommended power."""

BOSS_LEVEL_OFFSET = 5

BOSS_SHADOW_BONUS_PER_FLOOR = 2.5

COSMETIC_PREFIXES = (
    "Void", "Eternal", "Abyssal", "Celestial", "Infernal", "Divine", "Shadow",
    "Storm", "Frost", "Blood", "Ancient", "Cursed", "Blessed", "Arcane",
    "Cosmic", "Titan", "Dragon", "Phoenix", "Demon", "Soul",
)

COSMETIC_SUFFIXES = (
    "Walker", "Slayer", "Monarch", "Emperor", "Lord", "King", "Guardian",
    "Reaper", "Bringer", "Master", "Knight", "Warrior", "Hunter", "Assassin",
    "Mage", "Sorcerer", "Priest", "Oracle", "Prophet", "God",
)
"""Name parts of the per-zone titles and frames of procedural floors."""

BOSS_NAMES = (
    "Razan the Ferocious", "Steel-Fanged Lycan", "Blue Venom Kasaka",
    "Igris the Bloodred", "Tank the Bear", "Tusk the Orc High Shaman",
    "Baruka the Ice Elf", "Kaisel the Wyvern", "Beru the Ant King",
    "Kamish the Dragon", "Bellion the Grand Marshal",
    "Ashborn the Shadow Monarch", "Celestial Guardian", "Void Walker",
    "Abyssal Titan", "Cosmic Horror",
)

SHADOW_NAMES = (
    "Razan", "Fang", "Kasaka", "Igris", "Tank", "Tusk",
    "Baruka", "Kaisel", "Beru", "Kamish", "Bellion", "Ashborn",
)
"""Extractable shadows, indexed by boss order. Later bosses cannot be extracted."""

# =============================================================================
# Shadows
# =============================================================================

MAX_EVOLUTION_LEVEL = 2
"""Shadows evolve at most twice: Elite, then Marshal."""

INITIAL_EVOLUTION_THRESHOLD = 500
"""XP a freshly extracted shadow needs for its first evolution."""

EVOLUTION_THRESHOLDS: dict[int, int | None] = {
    1: 2000,
    2: None,
}
"""Threshold applied after reaching an evolution level (None = unbounded)."""

EVOLUTION_STAGE_NAMES: dict[int, str] = {
    1: "Elite",
    2: "Marshal",
}


__all__ = [
    # Progression
    "MIN_CHARACTER_LEVEL",
    "MAX_CHARACTER_LEVEL",
    "MAX_OUT_LEVEL",
    "DEFAULT_BASE_ATTRIBUTE",
    # Equipment
    "MAX_ITEM_LEVEL",
    "UPGRADE_COST_PER_LEVEL",
    "SALVAGE_LEVEL_BONUS",
    "SALVAGE_SHARD_VALUES",
    "BASE_STAT_RANGES",
    "STAT_LINES_BY_RARITY",
    "DEFAULT_SHOP_RARITY_WEIGHTS",
    "BOSS_BOOSTED_RARITIES",
    "ITEM_NAME_PREFIXES",
    "ITEM_NAME_SUFFIXES",
    "ITEM_ROOTS",
    # Dungeons
    "RANK_TIERS",
    "FLOORS_PER_RANK",
    "FLOORS_PER_ZONE",
    "BOSS_FLOOR_INTERVAL",
    "FLOOR_BASE_POWER",
    "FLOOR_LINEAR_POWER",
    "FLOOR_QUADRATIC_POWER",
    "FLOOR_XP_SHARE",
    "BOSS_LEVEL_OFFSET",
    "BOSS_SHADOW_BONUS_PER_FLOOR",
    "COSMETIC_PREFIXES",
    "COSMETIC_SUFFIXES",
    "BOSS_NAMES",
    "SHADOW_NAMES",
    # Shadows
    "MAX_EVOLUTION_LEVEL",
    "INITIAL_EVOLUTION_THRESHOLD",
    "EVOLUTION_THRESHOLDS",
    "EVOLUTION_STAGE_NAMES",
]
