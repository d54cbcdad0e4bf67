"""Player state container and its persisted JSON shape.

PlayerState is the single source of truth for one player. The engine never
mutates a state it was handed: each transition works on a deep copy and
returns the new state, and the host swaps its reference.

Persisted saves go through ``dump_state`` / ``load_state``. Loading runs an
explicit, versioned migration so records written by older releases are
normalized to the current schema once, at load time.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hunter_system.core.constants import INITIAL_EVOLUTION_THRESHOLD
from hunter_system.core.exceptions import MigrationError
from hunter_system.core.logging import get_logger
from hunter_system.models.character import CharacterStats
from hunter_system.models.dungeons import DungeonRunResult
from hunter_system.models.enums import EquipmentSlot, LogCategory, StatType
from hunter_system.models.equipment import EquipmentItem
from hunter_system.models.rewards import RewardQueue
from hunter_system.models.shadows import ShadowCompanion


logger = get_logger(__name__)

CURRENT_SCHEMA_VERSION = 2


# =============================================================================
# Audit Log
# =============================================================================


class LevelChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_level: int = Field(ge=1)
    to_level: int = Field(ge=1)


class StatChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    stat: StatType
    amount: int


class LogEntry(BaseModel):
    """Append-only audit record of a mutating operation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = Field(default_factory=datetime.now)
    category: LogCategory
    title: str
    message: str = ""
    xp_change: int | None = None
    level_change: LevelChange | None = None
    stat_change: StatChange | None = None


def create_log(
    category: LogCategory,
    title: str,
    message: str = "",
    *,
    xp_change: int | None = None,
    level_change: tuple[int, int] | None = None,
    stat_change: tuple[StatType, int] | None = None,
) -> LogEntry:
    """Build a log entry from plain values."""
    return LogEntry(
        category=category,
        title=title,
        message=message,
        xp_change=xp_change,
        level_change=(
            LevelChange(from_level=level_change[0], to_level=level_change[1])
            if level_change
            else None
        ),
        stat_change=(
            StatChange(stat=stat_change[0], amount=stat_change[1]) if stat_change else None
        ),
    )


# =============================================================================
# Player State
# =============================================================================


class PlayerState(BaseModel):
    """Complete progression state of one player.

    Attributes:
        schema_version: Version of the persisted shape.
        player_id: Stable player identifier.
        character: Level, XP and attributes.
        inventory: Owned equipment.
        shadows: Extracted shadow companions.
        dungeon_runs: Run history, oldest first.
        reward_queue: Rewards awaiting presentation.
        shards: Upgrade currency.
        logs: Audit log, oldest first.
        updated_at: Time of the last transition.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )

    schema_version: int = Field(default=CURRENT_SCHEMA_VERSION)
    player_id: str = Field(default_factory=lambda: uuid4().hex)
    character: CharacterStats = Field(default_factory=CharacterStats)
    inventory: list[EquipmentItem] = Field(default_factory=list)
    shadows: list[ShadowCompanion] = Field(default_factory=list)
    dungeon_runs: list[DungeonRunResult] = Field(default_factory=list)
    reward_queue: RewardQueue = Field(default_factory=RewardQueue)
    shards: int = Field(default=0, ge=0)
    logs: list[LogEntry] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def validate_equipped(self) -> "PlayerState":
        """At most one equipped item per slot and at most one equipped shadow."""
        slots = Counter(item.slot for item in self.inventory if item.is_equipped)
        doubled = [slot.value for slot, count in slots.items() if count > 1]
        if doubled:
            raise ValueError(f"More than one item equipped in slot(s): {', '.join(doubled)}")
        if sum(1 for shadow in self.shadows if shadow.is_equipped) > 1:
            raise ValueError("More than one shadow equipped")
        return self

    def get_item(self, item_id: str) -> EquipmentItem | None:
        """Get an inventory item by id."""
        return next((item for item in self.inventory if item.id == item_id), None)

    def get_shadow(self, shadow_id: str) -> ShadowCompanion | None:
        """Get a shadow by id."""
        return next((shadow for shadow in self.shadows if shadow.id == shadow_id), None)

    def has_shadow_named(self, name: str) -> bool:
        return any(shadow.name == name for shadow in self.shadows)

    @property
    def equipped_items(self) -> list[EquipmentItem]:
        return [item for item in self.inventory if item.is_equipped]

    @property
    def equipped_shadow(self) -> ShadowCompanion | None:
        return next((shadow for shadow in self.shadows if shadow.is_equipped), None)

    def equipped_in(self, slot: EquipmentSlot) -> EquipmentItem | None:
        return next((item for item in self.equipped_items if item.slot == slot), None)

    def add_log(self, entry: LogEntry) -> None:
        """Append an audit entry. Entries are never edited or removed."""
        self.logs.append(entry)

    def touch(self) -> None:
        self.updated_at = datetime.now()


def create_player_state(
    *,
    shards: int = 0,
    character: CharacterStats | None = None,
) -> PlayerState:
    """Create a fresh player state with a consistent XP threshold."""
    from hunter_system.engine.progression import xp_for_level

    if character is None:
        character = CharacterStats()
        character.xp_for_next_level = xp_for_level(character.level)
    return PlayerState(character=character, shards=shards)


# =============================================================================
# Persistence Shape
# =============================================================================


def dump_state(state: PlayerState) -> dict[str, Any]:
    """Serialize a state to its JSON-compatible persisted shape."""
    return state.model_dump(mode="json")


def _normalize_threshold(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, str):
        if value.strip().lower() in {"infinity", "inf"}:
            return None
        value = float(value)
    if isinstance(value, float) and math.isinf(value):
        return None
    return int(value)


def _migrate_v1(data: dict[str, Any]) -> dict[str, Any]:
    """v1 saves predate shadow evolution and tracked the equipped shadow by id."""
    equipped_shadow_id = data.pop("equipped_shadow_id", None)
    shadows = []
    for raw in data.get("shadows", []):
        shadow = dict(raw)
        if not isinstance(shadow.get("evolution_level"), int):
            shadow["evolution_level"] = 0
        if not isinstance(shadow.get("experience_points"), int):
            shadow["experience_points"] = 0
        if "xp_to_next_evolution" not in shadow:
            shadow["xp_to_next_evolution"] = INITIAL_EVOLUTION_THRESHOLD
        else:
            shadow["xp_to_next_evolution"] = _normalize_threshold(shadow["xp_to_next_evolution"])
        if equipped_shadow_id is not None:
            shadow["is_equipped"] = shadow.get("id") == equipped_shadow_id
        shadows.append(shadow)
    data["shadows"] = shadows

    queue = data.get("reward_queue")
    if isinstance(queue, list):
        data["reward_queue"] = {"items": queue}

    data["schema_version"] = 2
    return data


_MIGRATIONS = {
    1: _migrate_v1,
}


def migrate_state_data(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize a persisted payload to the current schema version.

    Args:
        data: Raw persisted payload (not modified).

    Returns:
        A new payload at CURRENT_SCHEMA_VERSION.

    Raises:
        MigrationError: If the payload comes from a newer or unknown version.
    """
    payload = dict(data)
    version = payload.get("schema_version", 1)
    if not isinstance(version, int) or version < 1:
        raise MigrationError("Invalid schema version", schema_version=None, details={"raw": version})
    if version > CURRENT_SCHEMA_VERSION:
        raise MigrationError(
            "State was written by a newer engine",
            schema_version=version,
        )

    while version < CURRENT_SCHEMA_VERSION:
        migrate = _MIGRATIONS.get(version)
        if migrate is None:
            raise MigrationError("No migration path", schema_version=version)
        payload = migrate(payload)
        logger.info("State migrated", from_version=version, to_version=payload["schema_version"])
        version = payload["schema_version"]

    return payload


def load_state(data: dict[str, Any]) -> PlayerState:
    """Load a persisted payload into a PlayerState, migrating it first."""
    return PlayerState.model_validate(migrate_state_data(data))


__all__ = [
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
