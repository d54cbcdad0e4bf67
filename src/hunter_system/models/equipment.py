"""Equipment item model.

Items are created by dungeon drops or shop purchases at enhancement level 0
and are only leveled by the upgrade engine.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from hunter_system.core.constants import MAX_ITEM_LEVEL
from hunter_system.models.character import StatBonus
from hunter_system.models.enums import EquipmentSlot, Rarity


def new_item_id() -> str:
    """Generate a fresh unique equipment id."""
    return uuid4().hex


class EquipmentItem(BaseModel):
    """An owned piece of equipment.

    Attributes:
        id: Unique identifier.
        name: Display name.
        slot: Equipment slot the item occupies.
        rarity: Quality tier.
        level: Enhancement level (0..20).
        base_stats: Stat lines granted by the item at level 0 scaling.
        consecutive_failures: Pity counter of failed upgrades since the last success.
        is_equipped: Whether the item currently occupies its slot.
        description: Flavor text.
        acquired_at: When the item entered the inventory.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: str = Field(default_factory=new_item_id)
    name: str = Field(min_length=1)
    slot: EquipmentSlot
    rarity: Rarity = Rarity.COMMON
    level: int = Field(default=0, ge=0, le=MAX_ITEM_LEVEL)
    base_stats: list[StatBonus] = Field(default_factory=list)
    consecutive_failures: int = Field(default=0, ge=0)
    is_equipped: bool = False
    description: str = ""
    acquired_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_max_level(self) -> bool:
        return self.level >= MAX_ITEM_LEVEL

    @property
    def stat_total(self) -> int:
        """Sum of the unscaled stat lines."""
        return sum(bonus.value for bonus in self.base_stats)

    def to_summary(self) -> str:
        """One-line description for logs."""
        return f"{self.name} +{self.level} ({self.rarity.value})"


__all__ = [
    "EquipmentItem",
    "new_item_id",
]
