"""Reward queue records.

Each reward kind is its own model carrying only its own payload; the
``kind`` field discriminates them inside RewardQueueItem. The RewardQueue is
an outbox: the engine appends, the presentation layer drains everything at
once. Because it is part of the persisted state, a non-empty queue survives
a save/load cycle and draining can resume after a reload.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from hunter_system.models.character import StatBonus
from hunter_system.models.enums import Rarity


class _RewardBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    icon: str = ""
    value: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)


class LevelUpReward(_RewardBase):
    """The hunter reached a new level. ``value`` holds the new level."""

    kind: Literal["levelup"] = "levelup"
    icon: str = "⚡"
    levels_gained: int = Field(default=1, ge=1)
    stat_points_granted: int = Field(default=0, ge=0)


class ItemReward(_RewardBase):
    """An equipment drop."""

    kind: Literal["item"] = "item"
    icon: str = "🛡️"
    item_id: str
    rarity: Rarity
    stats: tuple[StatBonus, ...] = ()


class TitleReward(_RewardBase):
    """A newly unlocked title."""

    kind: Literal["title"] = "title"
    icon: str = "🏆"
    title_id: str
    rarity: Rarity | None = None
    description: str = ""


class FrameReward(_RewardBase):
    """A newly unlocked avatar frame."""

    kind: Literal["frame"] = "frame"
    icon: str = "🖼️"
    frame_id: str
    rarity: Rarity | None = None


class CurrencyReward(_RewardBase):
    """Shards earned from a clear. ``value`` holds the shard amount."""

    kind: Literal["currency"] = "currency"
    icon: str = "💎"
    xp: int = Field(default=0, ge=0)


class ShadowReward(_RewardBase):
    """A shadow joined the army or evolved. ``value`` holds the evolution level."""

    kind: Literal["shadow"] = "shadow"
    icon: str = "👻"
    shadow_id: str
    bonus: StatBonus


RewardQueueItem = Annotated[
    Union[LevelUpReward, ItemReward, TitleReward, FrameReward, CurrencyReward, ShadowReward],
    Field(discriminator="kind"),
]


class RewardQueue(BaseModel):
    """Append-only FIFO of rewards awaiting presentation."""

    model_config = ConfigDict(extra="ignore")

    items: list[RewardQueueItem] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def append(self, reward: RewardQueueItem) -> None:
        """Add a reward at the tail."""
        self.items.append(reward)

    def extend(self, rewards: list[RewardQueueItem]) -> None:
        self.items.extend(rewards)

    def snapshot(self) -> tuple[RewardQueueItem, ...]:
        """Read-only view of the queued rewards, oldest first."""
        return tuple(self.items)

    def drain(self) -> tuple[RewardQueueItem, ...]:
        """Remove and return every queued reward, oldest first."""
        drained = tuple(self.items)
        self.items.clear()
        return drained


__all__ = [
    "LevelUpReward",
    "ItemReward",
    "TitleReward",
    "FrameReward",
    "CurrencyReward",
    "ShadowReward",
    "RewardQueueItem",
    "RewardQueue",
]
