"""Dungeon catalog.

Two kinds of dungeons exist: a fixed set of static gates with hand-tuned
requirements and guaranteed cosmetic unlocks, and an endless procedural
tower whose floors are addressed as ``dungeon_<floor>``. Procedural floors
are pure functions of the floor number, so a floor id always resolves to
the same definition.
"""

from __future__ import annotations

import math
import re
from functools import lru_cache

from hunter_system.core.constants import (
    BOSS_FLOOR_INTERVAL,
    BOSS_LEVEL_OFFSET,
    BOSS_NAMES,
    BOSS_SHADOW_BONUS_PER_FLOOR,
    COSMETIC_PREFIXES,
    COSMETIC_SUFFIXES,
    FLOOR_BASE_POWER,
    FLOOR_LINEAR_POWER,
    FLOOR_QUADRATIC_POWER,
    FLOOR_XP_SHARE,
    FLOORS_PER_RANK,
    FLOORS_PER_ZONE,
    RANK_TIERS,
    SHADOW_NAMES,
)
from hunter_system.core.exceptions import NotFoundError
from hunter_system.core.logging import get_logger
from hunter_system.models.character import StatBonus
from hunter_system.models.dungeons import (
    BossDefinition,
    CosmeticReward,
    DungeonDefinition,
    RewardTable,
)
from hunter_system.models.enums import RankTier, Rarity, StatType
from hunter_system.models.shadows import ShadowTemplate


logger = get_logger(__name__)

FLOOR_ID_PREFIX = "dungeon_"
_FLOOR_ID_PATTERN = re.compile(r"dungeon_([1-9][0-9]{0,8})")


# =============================================================================
# Static Gates
# =============================================================================

_STARTER_DROPS = {
    Rarity.COMMON: 0.5,
    Rarity.UNCOMMON: 0.3,
    Rarity.RARE: 0.15,
    Rarity.EPIC: 0.04,
    Rarity.LEGENDARY: 0.01,
}

_HIGH_RANK_DROPS = {
    Rarity.COMMON: 0.2,
    Rarity.UNCOMMON: 0.3,
    Rarity.RARE: 0.3,
    Rarity.EPIC: 0.12,
    Rarity.LEGENDARY: 0.06,
    Rarity.MYTHIC: 0.02,
}


def _gate(
    dungeon_id: str,
    name: str,
    description: str,
    difficulty: RankTier,
    recommended_power: int,
    base_xp: int,
    title: tuple[str, str],
    frame: tuple[str, str],
    drop_rates: dict[Rarity, float],
    cosmetic_rarity: Rarity = Rarity.EPIC,
) -> DungeonDefinition:
    return DungeonDefinition(
        id=dungeon_id,
        name=name,
        description=description,
        difficulty=difficulty,
        recommended_power=recommended_power,
        rewards=RewardTable(
            base_xp=base_xp,
            drop_rates=drop_rates,
            cosmetics=(
                CosmeticReward(kind="title", id=title[0], name=title[1], rarity=cosmetic_rarity),
                CosmeticReward(kind="frame", id=frame[0], name=frame[1], rarity=cosmetic_rarity),
            ),
            cosmetic_chance=1.0,
        ),
    )


STATIC_DUNGEONS: tuple[DungeonDefinition, ...] = (
    _gate(
        "dungeon_goblin_den",
        "E-Rank Gate: Goblin Den",
        "A low-level dungeon infested with goblins. Good for warming up.",
        RankTier.E,
        50,
        200,
        ("goblin_slayer", "Goblin Slayer"),
        ("goblin_frame", "Goblin Frame"),
        _STARTER_DROPS,
        Rarity.UNCOMMON,
    ),
    _gate(
        "dungeon_insect_pit",
        "C-Rank Gate: Insect Pit",
        "A humid nest of giant insects. Tests your endurance and poison resistance.",
        RankTier.C,
        500,
        800,
        ("bug_squasher", "Bug Squasher"),
        ("insect_carapace", "Insect Carapace"),
        _STARTER_DROPS,
        Rarity.RARE,
    ),
    _gate(
        "dungeon_red_gate",
        "B-Rank Gate: Red Gate",
        "A frozen wasteland where the gate has closed behind you. Survive.",
        RankTier.B,
        2_000,
        2_500,
        ("survivor", "Survivor"),
        ("red_gate_frost", "Red Gate Frost"),
        _STARTER_DROPS,
        Rarity.RARE,
    ),
    _gate(
        "dungeon_orc_citadel",
        "A-Rank Gate: High Orc Citadel",
        "The stronghold of the High Orcs. Brute force is required.",
        RankTier.A,
        8_000,
        8_000,
        ("orc_conqueror", "Orc Conqueror"),
        ("orc_tusk", "Orc Tusk"),
        _HIGH_RANK_DROPS,
    ),
    _gate(
        "dungeon_jeju_island",
        "S-Rank Gate: Jeju Island",
        "The ant colony that destroyed a nation. Face the King.",
        RankTier.S,
        25_000,
        25_000,
        ("ant_king_slayer", "Ant King Slayer"),
        ("ant_king_crown", "Ant King Crown"),
        _HIGH_RANK_DROPS,
        Rarity.LEGENDARY,
    ),
    _gate(
        "dungeon_double_dungeon",
        "Double Dungeon: Cartenon Temple",
        "Where it all began. Face the Architect and the False God.",
        RankTier.SS,
        80_000,
        100_000,
        ("god_slayer", "God Slayer"),
        ("god_statue_aura", "God Statue Aura"),
        _HIGH_RANK_DROPS,
        Rarity.MYTHIC,
    ),
)

_STATIC_BY_ID = {dungeon.id: dungeon for dungeon in STATIC_DUNGEONS}


# =============================================================================
# Procedural Tower
# =============================================================================


def floor_rank(floor: int) -> RankTier:
    """Rank tier of a floor; ranks advance every FLOORS_PER_RANK floors and cap at SSS."""
    index = min((floor - 1) // FLOORS_PER_RANK, len(RANK_TIERS) - 1)
    return RankTier(RANK_TIERS[index])


def floor_zone(floor: int) -> int:
    """1-based zone a floor belongs to."""
    return (floor - 1) // FLOORS_PER_ZONE + 1


def floor_recommended_power(floor: int) -> int:
    steps = floor - 1
    return math.floor(FLOOR_BASE_POWER + steps * FLOOR_LINEAR_POWER + steps**2 * FLOOR_QUADRATIC_POWER)


def floor_drop_rates(floor: int) -> dict[Rarity, float]:
    """Equipment rarity weights of a floor.

    Low rarities fade out and high rarities phase in as the floor rises;
    mythic opens after floor 50, godlike after 80 and celestial after 120.
    """
    return {
        Rarity.COMMON: max(0.0, 0.5 - floor * 0.005),
        Rarity.UNCOMMON: max(0.0, 0.3 - floor * 0.003),
        Rarity.RARE: min(0.5, 0.15 + floor * 0.001),
        Rarity.EPIC: min(0.3, 0.04 + floor * 0.001),
        Rarity.LEGENDARY: min(0.1, 0.01 + floor * 0.0005),
        Rarity.MYTHIC: min(0.05, 0.001 + (floor - 50) * 0.0005) if floor > 50 else 0.0,
        Rarity.GODLIKE: min(0.02, (floor - 80) * 0.0002) if floor > 80 else 0.0,
        Rarity.CELESTIAL: min(0.01, (floor - 120) * 0.0001) if floor > 120 else 0.0,
    }


def zone_cosmetics(zone: int) -> tuple[CosmeticReward, CosmeticReward]:
    """The title and frame that procedural floors of a zone can drop."""
    prefix = COSMETIC_PREFIXES[(zone - 1) % len(COSMETIC_PREFIXES)]
    suffix = COSMETIC_SUFFIXES[(zone - 1) % len(COSMETIC_SUFFIXES)]
    rarity = Rarity.GODLIKE if zone == 1 else Rarity.CELESTIAL
    return (
        CosmeticReward(kind="title", id=f"tower_title_zone_{zone}", name=f"{prefix} {suffix}", rarity=rarity),
        CosmeticReward(kind="frame", id=f"tower_frame_zone_{zone}", name=f"{prefix} Frame", rarity=rarity),
    )


def _floor_boss(floor: int, rank: RankTier, recommended_power: int) -> BossDefinition | None:
    if floor % BOSS_FLOOR_INTERVAL != 0:
        return None

    boss_index = floor // BOSS_FLOOR_INTERVAL - 1
    shadow = None
    if boss_index < len(SHADOW_NAMES):
        shadow = ShadowTemplate(
            name=SHADOW_NAMES[boss_index],
            rank=rank,
            bonus=StatBonus(
                stat=StatType.STRENGTH,
                value=math.floor(floor * BOSS_SHADOW_BONUS_PER_FLOOR),
            ),
        )
    return BossDefinition(
        id=f"boss_{floor}",
        name=BOSS_NAMES[boss_index % len(BOSS_NAMES)],
        level=floor + BOSS_LEVEL_OFFSET,
        power_level=recommended_power,
        can_extract=shadow is not None,
        shadow=shadow,
    )


@lru_cache(maxsize=512)
def get_floor_dungeon(floor: int) -> DungeonDefinition:
    """Build the procedural dungeon of a tower floor.

    Args:
        floor: Floor number (>= 1).

    Returns:
        The floor's DungeonDefinition.

    Raises:
        NotFoundError: If the floor number is below 1.
    """
    if floor < 1:
        raise NotFoundError("Tower floors start at 1", entity="dungeon", entity_id=f"{FLOOR_ID_PREFIX}{floor}")

    rank = floor_rank(floor)
    recommended_power = floor_recommended_power(floor)
    boss = _floor_boss(floor, rank, recommended_power)
    name = (
        f"Boss Raid: {boss.name} (Floor {floor})"
        if boss is not None
        else f"{rank.value}-Rank Demon Tower [Floor {floor}]"
    )

    return DungeonDefinition(
        id=f"{FLOOR_ID_PREFIX}{floor}",
        name=name,
        description=f"Floor {floor} of the Demon Tower. Recommended Power: {recommended_power:,}",
        difficulty=rank,
        recommended_power=recommended_power,
        floor=floor,
        rewards=RewardTable(
            base_xp=math.floor(recommended_power * FLOOR_XP_SHARE),
            drop_rates=floor_drop_rates(floor),
            cosmetics=zone_cosmetics(floor_zone(floor)),
        ),
        boss=boss,
    )


def parse_floor_id(dungeon_id: str) -> int | None:
    """Floor number of a ``dungeon_<floor>`` id, or None for any other id."""
    match = _FLOOR_ID_PATTERN.fullmatch(dungeon_id)
    return int(match.group(1)) if match else None


def resolve_dungeon(dungeon_id: str) -> DungeonDefinition:
    """Look up a dungeon by static id or procedural floor id.

    Args:
        dungeon_id: Catalog id or ``dungeon_<floor>``.

    Returns:
        The matching DungeonDefinition.

    Raises:
        NotFoundError: If the id matches neither.
    """
    static = _STATIC_BY_ID.get(dungeon_id)
    if static is not None:
        return static

    floor = parse_floor_id(dungeon_id)
    if floor is None:
        logger.info("Dungeon lookup failed", dungeon_id=dungeon_id)
        raise NotFoundError("Dungeon not found", entity="dungeon", entity_id=dungeon_id)
    return get_floor_dungeon(floor)


__all__ = [
    "FLOOR_ID_PREFIX",
    "STATIC_DUNGEONS",
    "floor_rank",
    "floor_zone",
    "floor_recommended_power",
    "floor_drop_rates",
    "zone_cosmetics",
    "get_floor_dungeon",
    "parse_floor_id",
    "resolve_dungeon",
]
