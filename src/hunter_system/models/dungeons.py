"""Dungeon definitions and run results.

Definitions are static data (catalog entries or procedurally generated
floors). A DungeonRunResult is immutable once created and is appended to the
player's run history for both victories and defeats.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from hunter_system.models.enums import RankTier, Rarity
from hunter_system.models.equipment import EquipmentItem
from hunter_system.models.shadows import ShadowTemplate


class CosmeticReward(BaseModel):
    """A title or avatar frame a dungeon can unlock."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["title", "frame"]
    id: str = Field(min_length=1)
    name: str
    rarity: Rarity = Rarity.EPIC


class RewardTable(BaseModel):
    """Rewards a dungeon grants on victory.

    Attributes:
        base_xp: XP before the victory share is applied.
        drop_rates: Probability weight of each equipment rarity.
        cosmetics: Titles and frames the dungeon can unlock.
        cosmetic_chance: Chance of the cosmetic roll. None means the tower
            default (boss or regular floor chance from settings).
    """

    model_config = ConfigDict(frozen=True)

    base_xp: int = Field(default=0, ge=0)
    drop_rates: dict[Rarity, float] = Field(default_factory=lambda: {Rarity.COMMON: 1.0})
    cosmetics: tuple[CosmeticReward, ...] = ()
    cosmetic_chance: float | None = Field(default=None, ge=0, le=1)


class BossDefinition(BaseModel):
    """Boss guarding a dungeon, optionally yielding an extractable shadow."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    level: int = Field(default=1, ge=1)
    power_level: int = Field(default=0, ge=0)
    can_extract: bool = False
    shadow: ShadowTemplate | None = None

    @property
    def extractable_shadow(self) -> ShadowTemplate | None:
        """The shadow this boss yields, if extraction is allowed."""
        return self.shadow if self.can_extract else None


class DungeonDefinition(BaseModel):
    """A dungeon the hunter can attempt.

    Attributes:
        id: Static catalog id or ``dungeon_<floor>`` for procedural floors.
        name: Display name.
        description: Flavor text.
        difficulty: Rank tier; drives the shard reward.
        recommended_power: Minimum power that guarantees victory.
        floor: Floor number for procedural dungeons.
        rewards: Reward table applied on victory.
        boss: Optional boss descriptor.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    difficulty: RankTier = RankTier.E
    recommended_power: int = Field(default=0, ge=0)
    floor: int | None = Field(default=None, ge=1)
    rewards: RewardTable = Field(default_factory=RewardTable)
    boss: BossDefinition | None = None

    @property
    def is_boss_dungeon(self) -> bool:
        return self.boss is not None


class DungeonRunResult(BaseModel):
    """Immutable record of one dungeon resolution."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    dungeon_id: str
    boss_id: str | None = None
    victory: bool
    timestamp: datetime = Field(default_factory=datetime.now)
    xp_earned: int = Field(default=0, ge=0)
    equipment: tuple[EquipmentItem, ...] = ()
    unlocked_title_id: str | None = None
    unlocked_frame_id: str | None = None
    extracted_shadow: str | None = None
    shards_earned: int | None = Field(default=None, ge=0)


__all__ = [
    "CosmeticReward",
    "RewardTable",
    "BossDefinition",
    "DungeonDefinition",
    "DungeonRunResult",
]
