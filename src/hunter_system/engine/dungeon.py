"""Dungeon resolution.

A run looks the dungeon up, compares the player's power with the dungeon's
recommended power and, on victory, assembles every reward: loot, unlocks,
shards, shadow extraction, character XP and shadow evolution. The outcome
is a pure function of the state for the win/lose decision; randomness only
shapes the loot.

Reward queue order for a victory is fixed: equipment, titles, frames,
shards, one level-up item, then shadow events.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from hunter_system.core.config import Settings, get_settings
from hunter_system.core.exceptions import NotFoundError
from hunter_system.core.logging import get_logger
from hunter_system.engine.catalog import resolve_dungeon
from hunter_system.engine.progression import LevelResult, apply_level_result, apply_xp
from hunter_system.engine.rewards import RewardGenerator
from hunter_system.engine.rng import RandomSource
from hunter_system.engine.shadows import ShadowProgress, grant_shadow_xp
from hunter_system.engine.stats import player_power
from hunter_system.models.dungeons import BossDefinition, DungeonDefinition, DungeonRunResult
from hunter_system.models.enums import LogCategory, RejectionReason, StatType
from hunter_system.models.game_state import PlayerState, create_log
from hunter_system.models.rewards import LevelUpReward, RewardQueueItem, ShadowReward


logger = get_logger(__name__)


@dataclass(frozen=True)
class DungeonRunOutcome:
    """Result of a dungeon run request.

    Attributes:
        result: The run record; None only when the dungeon id did not resolve.
        boss: The dungeon's boss descriptor, if any.
        rejection: Why the run was rejected, if it was.
        power: Player power the run was resolved with.
        required_power: The dungeon's recommended power.
        level: Level progression of the run (victory only).
        shadow: Equipped shadow progress of the run (victory with a shadow only).
    """

    result: DungeonRunResult | None
    boss: BossDefinition | None = None
    rejection: RejectionReason | None = None
    power: int = 0
    required_power: int = 0
    level: LevelResult | None = None
    shadow: ShadowProgress | None = None

    @property
    def victory(self) -> bool:
        return self.result is not None and self.result.victory


class DungeonResolver:
    """Resolve dungeon runs against a working state.

    Example:
        >>> resolver = DungeonResolver()
        >>> outcome = resolver.run(state, "dungeon_goblin_den", RandomSource(seed=7))
        >>> outcome.victory
        True
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rewards: RewardGenerator | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            settings: Optional engine settings override.
            rewards: Optional reward generator override.
        """
        self._settings = settings if settings is not None else get_settings()
        self._rewards = rewards if rewards is not None else RewardGenerator(self._settings.reward)

    def run(
        self,
        state: PlayerState,
        dungeon_id: str,
        rng: RandomSource,
        *,
        buffs: Mapping[StatType, int] | None = None,
    ) -> DungeonRunOutcome:
        """Resolve one dungeon run.

        Args:
            state: Working state, mutated in place unless the id does not resolve.
            dungeon_id: Static catalog id or ``dungeon_<floor>``.
            rng: Random source for loot.
            buffs: Optional flat stat buffs active for the run.

        Returns:
            DungeonRunOutcome. ``result`` is None only for an unknown id.
        """
        try:
            dungeon = resolve_dungeon(dungeon_id)
        except NotFoundError:
            return DungeonRunOutcome(result=None, rejection=RejectionReason.NOT_FOUND)

        user_power = player_power(state, buffs, self._settings.power)
        victory = user_power >= dungeon.recommended_power
        logger.info(
            "Dungeon resolved",
            dungeon_id=dungeon.id,
            power=user_power,
            required_power=dungeon.recommended_power,
            victory=victory,
        )

        if not victory:
            return self._defeat(state, dungeon, user_power)
        return self._victory(state, dungeon, user_power, rng)

    def _defeat(self, state: PlayerState, dungeon: DungeonDefinition, user_power: int) -> DungeonRunOutcome:
        result = DungeonRunResult(
            dungeon_id=dungeon.id,
            boss_id=dungeon.boss.id if dungeon.boss else None,
            victory=False,
        )
        state.dungeon_runs.append(result)
        state.add_log(
            create_log(
                LogCategory.DUNGEON,
                "Dungeon Failed",
                f"Defeated by {dungeon.name}. Power {user_power} / {dungeon.recommended_power}.",
            )
        )
        return DungeonRunOutcome(
            result=result,
            boss=dungeon.boss,
            power=user_power,
            required_power=dungeon.recommended_power,
        )

    def _victory(
        self,
        state: PlayerState,
        dungeon: DungeonDefinition,
        user_power: int,
        rng: RandomSource,
    ) -> DungeonRunOutcome:
        bundle = self._rewards.roll(dungeon, state, rng)
        granted = self._rewards.grant(state, dungeon, bundle)

        state.add_log(
            create_log(
                LogCategory.DUNGEON,
                "Dungeon Cleared",
                f"Defeated {dungeon.name}. Rewards: {bundle.xp} XP.",
                xp_change=bundle.xp,
            )
        )

        previous_level = state.character.level
        level = apply_xp(state.character, bundle.xp, self._settings.progression)
        state.character = apply_level_result(state.character, level)

        queue: list[RewardQueueItem] = granted.leading()
        if level.leveled_up:
            state.add_log(
                create_log(
                    LogCategory.LEVEL_UP,
                    f"LEVEL UP - {level.level}",
                    "Your power grows.",
                    level_change=(previous_level, level.level),
                )
            )
            queue.append(
                LevelUpReward(
                    name=f"Level {level.level}",
                    value=level.level,
                    levels_gained=level.levels_gained,
                    stat_points_granted=level.stat_points_granted,
                )
            )

        queue.extend(granted.shadows)

        progress = None
        shadow = state.equipped_shadow
        if shadow is not None:
            progress = grant_shadow_xp(shadow, bundle.xp, self._settings.shadow)
            if progress.evolved:
                state.add_log(
                    create_log(
                        LogCategory.SHADOW,
                        "Shadow Evolution",
                        f"{shadow.name} has evolved to {shadow.display_name}!",
                    )
                )
                queue.append(
                    ShadowReward(
                        name=shadow.display_name,
                        icon="👑",
                        shadow_id=shadow.id,
                        bonus=shadow.bonus,
                        value=shadow.evolution_level,
                    )
                )

        result = DungeonRunResult(
            dungeon_id=dungeon.id,
            boss_id=dungeon.boss.id if dungeon.boss else None,
            victory=True,
            xp_earned=bundle.xp,
            equipment=tuple(item.model_copy(deep=True) for item in bundle.equipment),
            unlocked_title_id=granted.unlocked_title_id,
            unlocked_frame_id=granted.unlocked_frame_id,
            extracted_shadow=bundle.shadow.name if granted.shadows else None,
            shards_earned=bundle.shards,
        )
        state.dungeon_runs.append(result)
        state.reward_queue.extend(queue)

        return DungeonRunOutcome(
            result=result,
            boss=dungeon.boss,
            power=user_power,
            required_power=dungeon.recommended_power,
            level=level,
            shadow=progress,
        )


__all__ = [
    "DungeonRunOutcome",
    "DungeonResolver",
]
