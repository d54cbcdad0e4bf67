"""State transitions and the host facade.

``apply_command(state, command, rng)`` is the single entry point that
changes a PlayerState. It works on a deep copy, so the caller's state is
never touched, and converts every engine error into a rejected Transition
that carries the original state. No exception crosses this boundary.

``HunterSystem`` owns the one mutable state reference of a host, serializes
transitions with a lock and exposes request methods that return plain
result objects.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from hunter_system.core.config import Settings, get_settings
from hunter_system.core.constants import MAX_CHARACTER_LEVEL, MAX_OUT_LEVEL
from hunter_system.core.exceptions import (
    HunterSystemError,
    InsufficientResourceError,
    NotFoundError,
    ValidationError,
)
from hunter_system.core.logging import bind_context, clear_context, get_logger
from hunter_system.engine.dungeon import DungeonResolver, DungeonRunOutcome
from hunter_system.engine.equipment import equip_item, purchase_equipment, salvage_item, unequip_item
from hunter_system.engine.progression import LevelResult, apply_level_result, apply_xp, max_out
from hunter_system.engine.rng import RandomSource
from hunter_system.engine.shadows import equip_shadow
from hunter_system.engine.upgrade import UpgradeResult, upgrade_item
from hunter_system.models.enums import LogCategory, Rarity, RejectionReason, StatType, UpgradeOutcome
from hunter_system.models.game_state import (
    LogEntry,
    PlayerState,
    create_log,
    create_player_state,
    dump_state,
    load_state,
)
from hunter_system.models.rewards import LevelUpReward, RewardQueueItem


logger = get_logger(__name__)


# =============================================================================
# Commands
# =============================================================================


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class RunDungeon(_Command):
    kind: Literal["run_dungeon"] = "run_dungeon"
    dungeon_id: str
    buffs: dict[StatType, int] | None = None


class UpgradeItem(_Command):
    kind: Literal["upgrade_item"] = "upgrade_item"
    item_id: str


class ApplyXp(_Command):
    kind: Literal["apply_xp"] = "apply_xp"
    xp_delta: int


class PurchaseEquipment(_Command):
    kind: Literal["purchase_equipment"] = "purchase_equipment"
    cost: int = Field(ge=0)
    rarity: Rarity | None = None


class SalvageItem(_Command):
    kind: Literal["salvage_item"] = "salvage_item"
    item_id: str


class EquipItem(_Command):
    kind: Literal["equip_item"] = "equip_item"
    item_id: str


class UnequipItem(_Command):
    kind: Literal["unequip_item"] = "unequip_item"
    item_id: str


class EquipShadow(_Command):
    kind: Literal["equip_shadow"] = "equip_shadow"
    shadow_id: str


class MaxOut(_Command):
    kind: Literal["max_out"] = "max_out"
    target_level: int = Field(default=MAX_OUT_LEVEL, ge=1, le=MAX_CHARACTER_LEVEL)


class DrainRewards(_Command):
    kind: Literal["drain_rewards"] = "drain_rewards"


Command = Annotated[
    Union[
        RunDungeon,
        UpgradeItem,
        ApplyXp,
        PurchaseEquipment,
        SalvageItem,
        EquipItem,
        UnequipItem,
        EquipShadow,
        MaxOut,
        DrainRewards,
    ],
    Field(discriminator="kind"),
]


# =============================================================================
# Transitions
# =============================================================================


_REJECTION_BY_ERROR: dict[type[HunterSystemError], RejectionReason] = {
    NotFoundError: RejectionReason.NOT_FOUND,
    InsufficientResourceError: RejectionReason.INSUFFICIENT_SHARDS,
}


@dataclass(frozen=True)
class Transition:
    """Result of applying one command.

    Attributes:
        state: The state after the command (the input state when rejected).
        result: Command-specific result value.
        logs: Log entries appended by the command.
        rewards: Reward queue items appended by the command.
        rejection: Why the command was rejected, if it was.
        error: The engine error behind a rejection, if any.
    """

    state: PlayerState
    result: Any = None
    logs: tuple[LogEntry, ...] = ()
    rewards: tuple[RewardQueueItem, ...] = ()
    rejection: RejectionReason | None = None
    error: HunterSystemError | None = None

    @property
    def ok(self) -> bool:
        return self.rejection is None and self.error is None

    @property
    def effects(self) -> tuple[LogEntry | RewardQueueItem, ...]:
        """Every log entry and reward the command produced."""
        return (*self.logs, *self.rewards)


Handler = Callable[[PlayerState, Any, RandomSource, Settings], Any]


def _run_dungeon(state: PlayerState, command: RunDungeon, rng: RandomSource, settings: Settings) -> DungeonRunOutcome:
    return DungeonResolver(settings=settings).run(state, command.dungeon_id, rng, buffs=command.buffs)


def _upgrade_item(state: PlayerState, command: UpgradeItem, rng: RandomSource, settings: Settings) -> UpgradeResult:
    return upgrade_item(state, command.item_id, rng, settings.upgrade)


def _apply_xp(state: PlayerState, command: ApplyXp, rng: RandomSource, settings: Settings) -> LevelResult:
    previous_level = state.character.level
    result = apply_xp(state.character, command.xp_delta, settings.progression)
    state.character = apply_level_result(state.character, result)

    state.add_log(
        create_log(
            LogCategory.SYSTEM,
            "Experience Gained",
            f"Gained {result.xp_applied} XP.",
            xp_change=result.xp_applied,
        )
    )
    if result.leveled_up:
        state.add_log(
            create_log(
                LogCategory.LEVEL_UP,
                f"LEVEL UP - {result.level}",
                "Your power grows.",
                level_change=(previous_level, result.level),
            )
        )
        state.reward_queue.append(
            LevelUpReward(
                name=f"Level {result.level}",
                value=result.level,
                levels_gained=result.levels_gained,
                stat_points_granted=result.stat_points_granted,
            )
        )
    return result


def _purchase(state: PlayerState, command: PurchaseEquipment, rng: RandomSource, settings: Settings) -> Any:
    return purchase_equipment(state, command.cost, rng, command.rarity)


def _salvage(state: PlayerState, command: SalvageItem, rng: RandomSource, settings: Settings) -> int:
    return salvage_item(state, command.item_id)


def _equip_item(state: PlayerState, command: EquipItem, rng: RandomSource, settings: Settings) -> Any:
    return equip_item(state, command.item_id)


def _unequip_item(state: PlayerState, command: UnequipItem, rng: RandomSource, settings: Settings) -> Any:
    return unequip_item(state, command.item_id)


def _equip_shadow(state: PlayerState, command: EquipShadow, rng: RandomSource, settings: Settings) -> Any:
    return equip_shadow(state, command.shadow_id)


def _max_out(state: PlayerState, command: MaxOut, rng: RandomSource, settings: Settings) -> Any:
    previous_level = state.character.level
    state.character = max_out(state.character, command.target_level, settings.progression)
    state.add_log(
        create_log(
            LogCategory.SYSTEM,
            "System Override",
            f"Character set to level {state.character.level}.",
            level_change=(previous_level, state.character.level),
        )
    )
    return state.character


def _drain(state: PlayerState, command: DrainRewards, rng: RandomSource, settings: Settings) -> tuple[RewardQueueItem, ...]:
    return state.reward_queue.drain()


_HANDLERS: dict[type[_Command], Handler] = {
    RunDungeon: _run_dungeon,
    UpgradeItem: _upgrade_item,
    ApplyXp: _apply_xp,
    PurchaseEquipment: _purchase,
    SalvageItem: _salvage,
    EquipItem: _equip_item,
    UnequipItem: _unequip_item,
    EquipShadow: _equip_shadow,
    MaxOut: _max_out,
    DrainRewards: _drain,
}


def _result_rejection(result: Any) -> RejectionReason | None:
    if isinstance(result, DungeonRunOutcome):
        return result.rejection
    if isinstance(result, UpgradeResult) and result.outcome == UpgradeOutcome.REJECTED:
        return result.reason
    return None


def _error_rejection(error: HunterSystemError) -> RejectionReason | None:
    for error_type, reason in _REJECTION_BY_ERROR.items():
        if isinstance(error, error_type):
            return reason
    return None


def apply_command(
    state: PlayerState,
    command: Command,
    rng: RandomSource,
    settings: Settings | None = None,
) -> Transition:
    """Apply one command to a state.

    Args:
        state: Current state (never modified).
        command: The command to apply.
        rng: Random source for any draws the command makes.
        settings: Optional engine settings override.

    Returns:
        Transition holding the new state, or the input state if the command
        was rejected.
    """
    cfg = settings if settings is not None else get_settings()
    handler = _HANDLERS[type(command)]
    working = state.model_copy(deep=True)

    try:
        result = handler(working, command, rng, cfg)
    except HunterSystemError as exc:
        logger.info("Command rejected", command=command.kind, error=exc.message, **exc.details)
        return Transition(state=state, rejection=_error_rejection(exc), error=exc)
    except PydanticValidationError as exc:
        error = ValidationError(f"Command produced an invalid state: {exc.error_count()} error(s)")
        logger.warning("Command rejected", command=command.kind, error=str(exc))
        return Transition(state=state, error=error)

    rejection = _result_rejection(result)
    if rejection is not None:
        return Transition(state=state, result=result, rejection=rejection)

    working.touch()
    new_rewards = (
        ()
        if isinstance(command, DrainRewards)
        else tuple(working.reward_queue.items[len(state.reward_queue):])
    )
    return Transition(
        state=working,
        result=result,
        logs=tuple(working.logs[len(state.logs):]),
        rewards=new_rewards,
    )


# =============================================================================
# Host Facade
# =============================================================================


class HunterSystem:
    """Thread-safe owner of one player's state.

    Every request builds a command, applies it under a lock and swaps the
    state reference on success. Requests never raise for domain errors.

    Example:
        >>> system = HunterSystem(seed=42)
        >>> outcome = system.request_dungeon_run("dungeon_goblin_den")
        >>> rewards = system.drain_rewards()
    """

    def __init__(
        self,
        state: PlayerState | None = None,
        *,
        rng: RandomSource | None = None,
        seed: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            state: Starting state; a fresh player is created when omitted.
            rng: Random source; one seeded with ``seed`` is created when omitted.
            seed: Seed for the default random source.
            settings: Optional engine settings override.
        """
        self._state = state if state is not None else create_player_state()
        self._rng = rng if rng is not None else RandomSource(seed=seed)
        self._settings = settings
        self._lock = threading.Lock()
        logger.info("HunterSystem initialized", player_id=self._state.player_id)

    @classmethod
    def from_saved(cls, data: dict[str, Any], **kwargs: Any) -> "HunterSystem":
        """Create a facade from a persisted payload, migrating it first.

        Raises:
            MigrationError: If the payload cannot be migrated.
        """
        return cls(load_state(data), **kwargs)

    @property
    def state(self) -> PlayerState:
        """The current state. Treat as read-only."""
        return self._state

    def save(self) -> dict[str, Any]:
        """Persisted JSON shape of the current state."""
        with self._lock:
            return dump_state(self._state)

    def dispatch(self, command: Command) -> Transition:
        """Apply a command and adopt the resulting state.

        Args:
            command: The command to apply.

        Returns:
            The Transition.
        """
        with self._lock:
            bind_context(player_id=self._state.player_id, command=command.kind)
            try:
                transition = apply_command(self._state, command, self._rng, self._settings)
                self._state = transition.state
            finally:
                clear_context()
        return transition

    def _request(self, command_type: type[_Command], **fields: Any) -> Transition:
        """Build a command from raw request values and dispatch it.

        Values the command model refuses are reported as a rejected
        Transition on the current state.
        """
        try:
            command = command_type(**fields)
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            error = ValidationError(
                f"Invalid request: {exc.error_count()} error(s)",
                field_name=".".join(str(part) for part in first["loc"]),
            )
            logger.info("Request rejected", command=command_type.__name__, error=str(exc))
            with self._lock:
                return Transition(state=self._state, error=error)
        return self.dispatch(command)

        return transition

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    def request_dungeon_run(
        self,
        dungeon_id: str,
        buffs: dict[StatType, int] | None = None,
    ) -> DungeonRunOutcome:
        """Run a dungeon. ``result`` is None only for an unknown dungeon id."""
        transition = self._request(RunDungeon, dungeon_id=dungeon_id, buffs=buffs)
        if isinstance(transition.result, DungeonRunOutcome):
            return transition.result
        return DungeonRunOutcome(result=None, rejection=transition.rejection)

    def request_upgrade(self, item_id: str) -> UpgradeResult:
        """Attempt to upgrade an inventory item."""
        transition = self._request(UpgradeItem, item_id=item_id)
        if isinstance(transition.result, UpgradeResult):
            return transition.result
        return UpgradeResult(
            item=self._state.get_item(item_id),
            wallet_shards=self._state.shards,
            outcome=UpgradeOutcome.REJECTED,
            reason=transition.rejection,
        )

    def request_level_apply(self, xp_delta: int) -> LevelResult:
        """Apply an XP delta (negative deltas count as zero)."""
        transition = self._request(ApplyXp, xp_delta=xp_delta)
        if isinstance(transition.result, LevelResult):
            return transition.result
        return apply_xp(self._state.character, 0)

    def request_purchase(self, cost: int, rarity: Rarity | None = None) -> Transition:
        """Buy a generated item; ``result`` is the item when successful."""
        return self._request(PurchaseEquipment, cost=max(0, cost), rarity=rarity)

    def request_salvage(self, item_id: str) -> Transition:
        """Salvage an item; ``result`` is the shard amount when successful."""
        return self._request(SalvageItem, item_id=item_id)

    def request_equip_item(self, item_id: str) -> Transition:
        return self._request(EquipItem, item_id=item_id)

    def request_unequip_item(self, item_id: str) -> Transition:
        return self._request(UnequipItem, item_id=item_id)

    def request_equip_shadow(self, shadow_id: str) -> Transition:
        """Toggle a shadow; ``result`` is the equipped shadow or None."""
        return self._request(EquipShadow, shadow_id=shadow_id)

    def request_max_out(self, target_level: int = MAX_OUT_LEVEL) -> Transition:
        return self._request(MaxOut, target_level=min(max(1, target_level), MAX_CHARACTER_LEVEL))

    # -------------------------------------------------------------------------
    # Reward Queue
    # -------------------------------------------------------------------------

    def reward_snapshot(self) -> tuple[RewardQueueItem, ...]:
        """Read-only view of the queued rewards."""
        with self._lock:
            return self._state.reward_queue.snapshot()

    def drain_rewards(self) -> tuple[RewardQueueItem, ...]:
        """Remove and return every queued reward, oldest first."""
        transition = self.dispatch(DrainRewards())
        return transition.result if transition.ok else ()


__all__ = [
    "RunDungeon",
    "UpgradeItem",
    "ApplyXp",
    "PurchaseEquipment",
    "SalvageItem",
    "EquipItem",
    "UnequipItem",
    "EquipShadow",
    "MaxOut",
    "DrainRewards",
    "Command",
    "Transition",
    "apply_command",
    "HunterSystem",
]
