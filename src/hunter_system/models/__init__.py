"""Pydantic V2 data model of the Hunter System engine.

Modules:
    enums: Stat, rarity, rank, slot and outcome enumerations.
    character: CharacterStats and StatBonus.
    equipment: EquipmentItem.
    shadows: ShadowTemplate and ShadowCompanion.
    dungeons: Dungeon definitions and run results.
    rewards: Reward queue records and the RewardQueue outbox.
    game_state: PlayerState, audit log and persisted shape.
"""

from __future__ import annotations

from hunter_system.models.character import Attribute, CharacterStats, StatBonus
from hunter_system.models.dungeons import (
    BossDefinition,
    CosmeticReward,
    DungeonDefinition,
    DungeonRunResult,
    RewardTable,
)
from hunter_system.models.enums import (
    EquipmentSlot,
    LogCategory,
    RankTier,
    Rarity,
    RejectionReason,
    StatType,
    UpgradeOutcome,
)
from hunter_system.models.equipment import EquipmentItem, new_item_id
from hunter_system.models.game_state import (
    CURRENT_SCHEMA_VERSION,
    LevelChange,
    LogEntry,
    PlayerState,
    StatChange,
    create_log,
    create_player_state,
    dump_state,
    load_state,
    migrate_state_data,
)
from hunter_system.models.rewards import (
    CurrencyReward,
    FrameReward,
    ItemReward,
    LevelUpReward,
    RewardQueue,
    RewardQueueItem,
    ShadowReward,
    TitleReward,
)
from hunter_system.models.shadows import ShadowCompanion, ShadowTemplate


__all__ = [
    # Enums
    "StatType",
    "Rarity",
    "RankTier",
    "EquipmentSlot",
    "LogCategory",
    "UpgradeOutcome",
    "RejectionReason",
    # Character
    "Attribute",
    "StatBonus",
    "CharacterStats",
    # Equipment
    "EquipmentItem",
    "new_item_id",
    # Shadows
    "ShadowTemplate",
    "ShadowCompanion",
    # Dungeons
    "CosmeticReward",
    "RewardTable",
    "BossDefinition",
    "DungeonDefinition",
    "DungeonRunResult",
    # Rewards
    "LevelUpReward",
    "ItemReward",
    "TitleReward",
    "FrameReward",
    "CurrencyReward",
    "ShadowReward",
    "RewardQueueItem",
    "RewardQueue",
    # State
    "CURRENT_SCHEMA_VERSION",
    "LevelChange",
    "StatChange",
    "LogEntry",
    "create_log",
    "PlayerState",
    "create_player_state",
    "dump_state",
    "load_state",
    "migrate_state_data",
]
