"""Enumerations shared across the Hunter System data model."""

from __future__ import annotations

from enum import StrEnum


class StatType(StrEnum):
    """The six base attributes of a hunter."""

    STRENGTH = "strength"
    VITALITY = "vitality"
    AGILITY = "agility"
    INTELLIGENCE = "intelligence"
    FORTUNE = "fortune"
    METABOLISM = "metabolism"


class Rarity(StrEnum):
    """Equipment and cosmetic quality, totally ordered from common to celestial.

    Declaration order is the rarity order; compare with ``order``.
    """

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"
    GODLIKE = "godlike"
    CELESTIAL = "celestial"

    @property
    def order(self) -> int:
        """Position in the rarity ladder (common = 0)."""
        return list(Rarity).index(self)

    @classmethod
    def rarest_first(cls) -> list["Rarity"]:
        """All rarities from celestial down to common."""
        return sorted(cls, key=lambda rarity: rarity.order, reverse=True)


class RankTier(StrEnum):
    """Dungeon difficulty and shadow ranks, easiest first."""

    E = "E"
    D = "D"
    C = "C"
    B = "B"
    A = "A"
    S = "S"
    SS = "SS"
    SSS = "SSS"


class EquipmentSlot(StrEnum):
    """Equipment slots. At most one item per slot can be equipped."""

    WEAPON = "weapon"
    HELMET = "helmet"
    CHEST = "chest"
    GLOVES = "gloves"
    BOOTS = "boots"
    NECKLACE = "necklace"
    RING = "ring"
    RING2 = "ring2"
    EARRINGS = "earrings"


class LogCategory(StrEnum):
    """Categories of audit log entries."""

    SYSTEM = "system"
    LEVEL_UP = "level_up"
    DUNGEON = "dungeon"
    EQUIPMENT = "equipment"
    SHADOW = "shadow"
    UNLOCK = "unlock"


class UpgradeOutcome(StrEnum):
    """Outcome of an enhancement attempt."""

    SUCCESS = "success"
    FAILURE = "failure"
    REJECTED = "rejected"


class RejectionReason(StrEnum):
    """Why a command was rejected before any mutation."""

    NOT_FOUND = "not_found"
    MAX_LEVEL = "max_level"
    INSUFFICIENT_SHARDS = "insufficient_shards"


__all__ = [
    "StatType",
    "Rarity",
    "RankTier",
    "EquipmentSlot",
    "LogCategory",
    "UpgradeOutcome",
    "RejectionReason",
]
