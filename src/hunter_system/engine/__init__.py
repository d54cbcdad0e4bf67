"""Progression and reward resolution engine.

Submodules:
    rng: Injectable, seedable random source
    stats: Effective stats and power calculation
    progression: XP thresholds and level progression
    catalog: Static gates and the procedural tower
    equipment: Equipment generation and inventory operations
    rewards: Dungeon reward generation
    shadows: Shadow evolution and equipping
    upgrade: Pity-adjusted item enhancement
    dungeon: Dungeon resolution
    system: Commands, transitions and the HunterSystem facade

Example:
    >>> from hunter_system.engine import HunterSystem
    >>>
    >>> system = HunterSystem(seed=7)
    >>> outcome = system.request_dungeon_run("dungeon_goblin_den")
    >>> if outcome.victory:
    ...     for reward in system.drain_rewards():
    ...         print(reward.kind, reward.name)
"""

from __future__ import annotations

# =============================================================================
# Randomness
# =============================================================================
from hunter_system.engine.rng import RandomSource

# =============================================================================
# Stats & Progression
# =============================================================================
from hunter_system.engine.stats import (
    EffectiveStats,
    PowerBreakdown,
    effective_stats,
    player_breakdown,
    player_power,
    power,
    power_breakdown,
)
from hunter_system.engine.progression import (
    LevelResult,
    apply_level_result,
    apply_xp,
    max_out,
    xp_for_level,
)

# =============================================================================
# Dungeons & Rewards
# =============================================================================
from hunter_system.engine.catalog import (
    STATIC_DUNGEONS,
    get_floor_dungeon,
    resolve_dungeon,
)
from hunter_system.engine.rewards import RewardBundle, RewardGenerator
from hunter_system.engine.shadows import ShadowProgress, equip_shadow, grant_shadow_xp
from hunter_system.engine.dungeon import DungeonResolver, DungeonRunOutcome

# =============================================================================
# Equipment
# =============================================================================
from hunter_system.engine.equipment import (
    equip_item,
    generate_equipment,
    purchase_equipment,
    salvage_item,
    unequip_item,
)
from hunter_system.engine.upgrade import (
    UpgradeResult,
    base_chance,
    success_probability,
    upgrade,
    upgrade_cost,
)

# =============================================================================
# State Machine
# =============================================================================
from hunter_system.engine.system import (
    Command,
    HunterSystem,
    Transition,
    apply_command,
)


__all__ = [
    # Randomness
    "RandomSource",
    # Stats
    "EffectiveStats",
    "PowerBreakdown",
    "effective_stats",
    "power",
    "power_breakdown",
    "player_breakdown",
    "player_power",
    # Progression
    "LevelResult",
    "xp_for_level",
    "apply_xp",
    "apply_level_result",
    "max_out",
    # Dungeons
    "STATIC_DUNGEONS",
    "get_floor_dungeon",
    "resolve_dungeon",
    "DungeonResolver",
    "DungeonRunOutcome",
    # Rewards
    "RewardBundle",
    "RewardGenerator",
    # Shadows
    "ShadowProgress",
    "grant_shadow_xp",
    "equip_shadow",
    # Equipment
    "generate_equipment",
    "equip_item",
    "unequip_item",
    "purchase_equipment",
    "salvage_item",
    # Upgrade
    "UpgradeResult",
    "base_chance",
    "success_probability",
    "upgrade_cost",
    "upgrade",
    # State machine
    "Command",
    "Transition",
    "apply_command",
    "HunterSystem",
]
