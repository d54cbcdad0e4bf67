"""Character progression models.

CharacterStats holds the hunter's level, XP, and six base attributes along
with the unlocked cosmetics. Only the level calculator changes level, XP and
attributes; unlock events only ever add to the title and frame sets.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hunter_system.core.constants import DEFAULT_BASE_ATTRIBUTE, MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL
from hunter_system.models.enums import StatType


Attribute = Annotated[int, Field(ge=0, description="Base attribute value")]


class StatBonus(BaseModel):
    """A (stat, magnitude) pair used by equipment lines and shadow bonuses."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    stat: StatType
    value: int = Field(ge=0, description="Bonus magnitude")


class CharacterStats(BaseModel):
    """Level, XP and base attributes of the hunter.

    Attributes:
        level: Current character level, from 1 to MAX_CHARACTER_LEVEL.
        xp_current: XP accumulated towards the next level.
        xp_for_next_level: XP threshold of the current level.
        strength, vitality, agility, intelligence, fortune, metabolism:
            The six base attributes.
        passive_points: Unspent passive skill points.
        unlocked_title_ids: Unlocked titles, in unlock order, no duplicates.
        unlocked_frame_ids: Unlocked avatar frames, in unlock order, no duplicates.
        equipped_title_id: Title shown on the profile.
        equipped_frame_id: Frame shown on the profile.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    level: int = Field(default=MIN_CHARACTER_LEVEL, ge=MIN_CHARACTER_LEVEL, le=MAX_CHARACTER_LEVEL)
    xp_current: int = Field(default=0, ge=0)
    xp_for_next_level: int = Field(default=150, ge=1)

    strength: Attribute = DEFAULT_BASE_ATTRIBUTE
    vitality: Attribute = DEFAULT_BASE_ATTRIBUTE
    agility: Attribute = DEFAULT_BASE_ATTRIBUTE
    intelligence: Attribute = DEFAULT_BASE_ATTRIBUTE
    fortune: Attribute = DEFAULT_BASE_ATTRIBUTE
    metabolism: Attribute = DEFAULT_BASE_ATTRIBUTE

    passive_points: int = Field(default=0, ge=0)

    unlocked_title_ids: list[str] = Field(default_factory=list)
    unlocked_frame_ids: list[str] = Field(default_factory=list)
    equipped_title_id: str | None = None
    equipped_frame_id: str | None = None

    @field_validator("unlocked_title_ids", "unlocked_frame_ids", mode="before")
    @classmethod
    def dedupe_unlocks(cls, v: Any) -> list[str]:
        """Collapse duplicate unlock ids, keeping first-unlock order."""
        if v is None:
            return []
        return list(dict.fromkeys(v))

    def get_attribute(self, stat: StatType) -> int:
        """Get the base value of one attribute."""
        return getattr(self, stat.value)

    def attributes(self) -> dict[StatType, int]:
        """All six base attributes keyed by stat."""
        return {stat: self.get_attribute(stat) for stat in StatType}

    @property
    def attribute_total(self) -> int:
        """Sum of the six base attributes."""
        return sum(self.attributes().values())

    def has_title(self, title_id: str) -> bool:
        return title_id in self.unlocked_title_ids

    def has_frame(self, frame_id: str) -> bool:
        return frame_id in self.unlocked_frame_ids


__all__ = [
    "Attribute",
    "StatBonus",
    "CharacterStats",
]
