"""Shadow companion models.

A ShadowTemplate describes the shadow a boss yields on extraction; a
ShadowCompanion is an extracted, owned shadow with its own evolution track.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from hunter_system.core.constants import (
    EVOLUTION_STAGE_NAMES,
    INITIAL_EVOLUTION_THRESHOLD,
    MAX_EVOLUTION_LEVEL,
)
from hunter_system.models.character import StatBonus
from hunter_system.models.enums import RankTier


class ShadowTemplate(BaseModel):
    """Extractable shadow carried by a boss descriptor."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    rank: RankTier
    bonus: StatBonus


class ShadowCompanion(BaseModel):
    """An extracted shadow.

    Attributes:
        id: Unique identifier.
        name: Shadow name; unique across a player's army.
        rank: Rank tier inherited from the boss dungeon.
        bonus: Passive stat bonus applied while equipped.
        evolution_level: 0 = base, 1 = Elite, 2 = Marshal.
        experience_points: XP accumulated towards the next evolution.
        xp_to_next_evolution: Threshold of the next evolution; None once maxed.
        is_equipped: Whether this is the active companion.
        extracted_at: Extraction timestamp.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str = Field(min_length=1)
    rank: RankTier
    bonus: StatBonus
    evolution_level: int = Field(default=0, ge=0, le=MAX_EVOLUTION_LEVEL)
    experience_points: int = Field(default=0, ge=0)
    xp_to_next_evolution: int | None = Field(default=INITIAL_EVOLUTION_THRESHOLD, ge=1)
    is_equipped: bool = False
    extracted_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_template(cls, template: ShadowTemplate) -> "ShadowCompanion":
        """Create a freshly extracted shadow at evolution level 0."""
        return cls(name=template.name, rank=template.rank, bonus=template.bonus)

    @property
    def is_max_evolution(self) -> bool:
        return self.evolution_level >= MAX_EVOLUTION_LEVEL

    @property
    def display_name(self) -> str:
        """Name including the evolution stage, e.g. 'Igris Elite'."""
        stage = EVOLUTION_STAGE_NAMES.get(self.evolution_level)
        return f"{self.name} {stage}" if stage else self.name


__all__ = [
    "ShadowTemplate",
    "ShadowCompanion",
]
