"""Dungeon reward generation.

Rewards are produced in two steps. ``RewardGenerator.roll`` makes every
random decision for a victory (equipment drops, cosmetic roll) and computes
the deterministic amounts (XP, shards, shadow extraction), reading the
state only to keep unlocks and extractions idempotent. ``RewardGenerator.grant``
then writes that bundle into a working state and returns the reward queue
items grouped so the resolver can enqueue them in presentation order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from hunter_system.core.config import RewardSettings, get_settings
from hunter_system.core.logging import get_logger
from hunter_system.engine.equipment import boosted_rates, generate_equipment
from hunter_system.engine.rng import RandomSource
from hunter_system.models.character import CharacterStats
from hunter_system.models.dungeons import CosmeticReward, DungeonDefinition
from hunter_system.models.enums import LogCategory, RankTier, Rarity
from hunter_system.models.equipment import EquipmentItem
from hunter_system.models.game_state import PlayerState, create_log
from hunter_system.models.rewards import (
    CurrencyReward,
    FrameReward,
    ItemReward,
    RewardQueueItem,
    ShadowReward,
    TitleReward,
)
from hunter_system.models.shadows import ShadowCompanion, ShadowTemplate


logger = get_logger(__name__)


def shadow_master_title(boss_id: str, shadow_name: str) -> CosmeticReward:
    """Title unlocked alongside the extraction of a boss's shadow."""
    return CosmeticReward(
        kind="title",
        id=f"shadow_master_{boss_id}",
        name=f"Monarch of {shadow_name}",
        rarity=Rarity.LEGENDARY,
    )


def unlock_title(character: CharacterStats, title_id: str) -> bool:
    """Add a title to the unlocked set.

    Returns:
        True if the title was newly unlocked, False if it was already owned.
    """
    if character.has_title(title_id):
        return False
    character.unlocked_title_ids = [*character.unlocked_title_ids, title_id]
    return True


def unlock_frame(character: CharacterStats, frame_id: str) -> bool:
    """Add a frame to the unlocked set.

    Returns:
        True if the frame was newly unlocked, False if it was already owned.
    """
    if character.has_frame(frame_id):
        return False
    character.unlocked_frame_ids = [*character.unlocked_frame_ids, frame_id]
    return True


@dataclass
class RewardBundle:
    """Everything a victory awards, before it is applied to a state.

    Attributes:
        xp: Character XP earned.
        shards: Shards earned.
        equipment: Generated items.
        cosmetics: Titles and frames to unlock (owned ones are skipped on grant).
        shadow: Shadow to extract, if the boss yields one not yet owned.
    """

    xp: int = 0
    shards: int = 0
    equipment: list[EquipmentItem] = field(default_factory=list)
    cosmetics: list[CosmeticReward] = field(default_factory=list)
    shadow: ShadowCompanion | None = None


@dataclass
class GrantedRewards:
    """Queue items produced by granting a bundle, grouped by kind.

    Attributes:
        items: One ItemReward per equipment drop.
        titles: One TitleReward per newly unlocked title.
        frames: One FrameReward per newly unlocked frame.
        currency: The shard reward.
        shadows: Shadow extraction events.
        unlocked_title_id: First newly unlocked title.
        unlocked_frame_id: First newly unlocked frame.
    """

    items: list[ItemReward] = field(default_factory=list)
    titles: list[TitleReward] = field(default_factory=list)
    frames: list[FrameReward] = field(default_factory=list)
    currency: list[CurrencyReward] = field(default_factory=list)
    shadows: list[ShadowReward] = field(default_factory=list)
    unlocked_title_id: str | None = None
    unlocked_frame_id: str | None = None

    def leading(self) -> list[RewardQueueItem]:
        """Queue items that precede the level-up: items, titles, frames, currency."""
        return [*self.items, *self.titles, *self.frames, *self.currency]


class RewardGenerator:
    """Generate and grant dungeon victory rewards.

    Example:
        >>> generator = RewardGenerator()
        >>> bundle = generator.roll(dungeon, state, RandomSource(seed=1))
        >>> granted = generator.grant(state, dungeon, bundle)
    """

    def __init__(self, settings: RewardSettings | None = None) -> None:
        """Initialize the reward generator.

        Args:
            settings: Optional reward settings override.
        """
        self._settings = settings if settings is not None else get_settings().reward

    @property
    def settings(self) -> RewardSettings:
        return self._settings

    # -------------------------------------------------------------------------
    # Deterministic amounts
    # -------------------------------------------------------------------------

    def xp_for(self, dungeon: DungeonDefinition) -> int:
        """Character XP earned by clearing a dungeon."""
        return math.floor(dungeon.rewards.base_xp * self._settings.xp_share)

    def shards_for(self, difficulty: RankTier) -> int:
        """Shards earned by clearing a dungeon of the given rank."""
        multiplier = self._settings.rank_multipliers.get(difficulty.value, 1)
        return math.floor(
            self._settings.shard_base * (1 + multiplier * self._settings.shard_rank_factor)
        )

    def extra_drop_chance(self, floor: int | None) -> float:
        cfg = self._settings
        return min(cfg.extra_drop_cap, cfg.extra_drop_base + (floor or 0) * cfg.extra_drop_per_floor)

    def cosmetic_chance(self, dungeon: DungeonDefinition) -> float:
        """Chance of the cosmetic roll for a dungeon."""
        if dungeon.rewards.cosmetic_chance is not None:
            return dungeon.rewards.cosmetic_chance
        if dungeon.floor is None:
            return 1.0
        if dungeon.is_boss_dungeon:
            return self._settings.boss_cosmetic_chance
        return self._settings.floor_cosmetic_chance

    # -------------------------------------------------------------------------
    # Rolling
    # -------------------------------------------------------------------------

    def roll_equipment(self, dungeon: DungeonDefinition, rng: RandomSource) -> list[EquipmentItem]:
        """Roll the equipment drops of a victory.

        One drop is guaranteed. Boss dungeons add a drop with the top
        rarities boosted, a floor-scaled chance adds one more, and deep
        floors roll a further bonus drop.
        """
        rates = dungeon.rewards.drop_rates
        drops = [generate_equipment(rng, drop_rates=rates)]

        if dungeon.is_boss_dungeon:
            boosted = boosted_rates(rates, self._settings.boss_rarity_boost)
            drops.append(generate_equipment(rng, drop_rates=boosted))

        if rng.chance(self.extra_drop_chance(dungeon.floor)):
            drops.append(generate_equipment(rng, drop_rates=rates))

        floor = dungeon.floor or 0
        if floor >= self._settings.deep_floor and rng.chance(self._settings.deep_floor_drop_chance):
            drops.append(generate_equipment(rng, drop_rates=rates))

        return drops

    def roll_cosmetics(self, dungeon: DungeonDefinition, rng: RandomSource) -> list[CosmeticReward]:
        """Roll the title and frame unlocks of a victory.

        Static gates grant their whole cosmetic pool when the roll hits;
        tower floors grant one title or frame of their zone.
        """
        pool = list(dungeon.rewards.cosmetics)
        if not pool or not rng.chance(self.cosmetic_chance(dungeon)):
            return []
        if dungeon.floor is None:
            return pool
        return [rng.choice(pool)]

    def extraction_for(self, dungeon: DungeonDefinition, state: PlayerState) -> ShadowTemplate | None:
        """The shadow a victory extracts, or None if there is none or it is already owned."""
        if dungeon.boss is None:
            return None
        template = dungeon.boss.extractable_shadow
        if template is None or state.has_shadow_named(template.name):
            return None
        return template

    def roll(self, dungeon: DungeonDefinition, state: PlayerState, rng: RandomSource) -> RewardBundle:
        """Make every reward decision for a victory.

        Args:
            dungeon: The cleared dungeon.
            state: Current state, read only.
            rng: Random source for drops and cosmetic rolls.

        Returns:
            The RewardBundle to grant.
        """
        bundle = RewardBundle(
            xp=self.xp_for(dungeon),
            shards=self.shards_for(dungeon.difficulty),
            equipment=self.roll_equipment(dungeon, rng),
            cosmetics=self.roll_cosmetics(dungeon, rng),
        )

        template = self.extraction_for(dungeon, state)
        if template is not None and dungeon.boss is not None:
            bundle.shadow = ShadowCompanion.from_template(template)
            bundle.cosmetics.append(shadow_master_title(dungeon.boss.id, template.name))

        logger.debug(
            "Rewards rolled",
            dungeon_id=dungeon.id,
            xp=bundle.xp,
            shards=bundle.shards,
            drops=len(bundle.equipment),
            cosmetics=len(bundle.cosmetics),
            extraction=bundle.shadow.name if bundle.shadow else None,
        )
        return bundle

    # -------------------------------------------------------------------------
    # Granting
    # -------------------------------------------------------------------------

    def grant(self, state: PlayerState, dungeon: DungeonDefinition, bundle: RewardBundle) -> GrantedRewards:
        """Write a bundle into a working state.

        Adds the equipment, unlocks cosmetics idempotently, credits shards
        and extracts the shadow. XP is not applied here; the resolver runs
        it through level progression.

        Args:
            state: Working state, mutated in place.
            dungeon: The cleared dungeon.
            bundle: Rewards to grant.

        Returns:
            GrantedRewards with one queue item per awarded entity.
        """
        granted = GrantedRewards()

        for item in bundle.equipment:
            state.inventory.append(item)
            state.add_log(
                create_log(
                    LogCategory.DUNGEON,
                    "Dungeon Loot",
                    f"Obtained: {item.name} ({item.rarity.value})",
                )
            )
            granted.items.append(
                ItemReward(
                    name=item.name,
                    item_id=item.id,
                    rarity=item.rarity,
                    stats=tuple(item.base_stats),
                    value=item.stat_total,
                )
            )

        for cosmetic in bundle.cosmetics:
            if cosmetic.kind == "title":
                if not unlock_title(state.character, cosmetic.id):
                    continue
                granted.unlocked_title_id = granted.unlocked_title_id or cosmetic.id
                state.add_log(create_log(LogCategory.UNLOCK, "Title Unlocked", f"Unlocked Title: {cosmetic.name}"))
                granted.titles.append(
                    TitleReward(
                        name=cosmetic.name,
                        title_id=cosmetic.id,
                        rarity=cosmetic.rarity,
                        description=f"Earned in {dungeon.name}",
                    )
                )
            else:
                if not unlock_frame(state.character, cosmetic.id):
                    continue
                granted.unlocked_frame_id = granted.unlocked_frame_id or cosmetic.id
                state.add_log(create_log(LogCategory.UNLOCK, "Frame Unlocked", f"Unlocked Frame: {cosmetic.name}"))
                granted.frames.append(
                    FrameReward(name=cosmetic.name, frame_id=cosmetic.id, rarity=cosmetic.rarity)
                )

        state.shards += bundle.shards
        state.add_log(create_log(LogCategory.DUNGEON, "Dungeon Reward", f"Obtained {bundle.shards} Shards"))
        granted.currency.append(
            CurrencyReward(name=f"{bundle.shards} Shards", value=bundle.shards, xp=bundle.xp)
        )

        shadow = bundle.shadow
        if shadow is not None and not state.has_shadow_named(shadow.name):
            state.shadows.append(shadow)
            state.add_log(
                create_log(LogCategory.SHADOW, "Shadow Extraction", f"ARISE! {shadow.name} has joined your army.")
            )
            granted.shadows.append(
                ShadowReward(
                    name=shadow.display_name,
                    shadow_id=shadow.id,
                    bonus=shadow.bonus,
                    value=shadow.evolution_level,
                )
            )
            logger.info("Shadow extracted", shadow_id=shadow.id, name=shadow.name)

        return granted


__all__ = [
    "shadow_master_title",
    "unlock_title",
    "unlock_frame",
    "RewardBundle",
    "GrantedRewards",
    "RewardGenerator",
]
