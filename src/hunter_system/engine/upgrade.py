"""Pity-adjusted item enhancement.

Each attempt costs ``100 * (level + 1)`` shards whether it succeeds or not.
The success chance falls with the item level and rises by a pity step for
every consecutive failure, capped below certainty. Low-level upgrades whose
base chance is already 1.0 stay guaranteed.

Rejected attempts (missing item, level cap, empty wallet) change nothing
and carry a machine-readable reason.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from hunter_system.core.config import UpgradeSettings, get_settings
from hunter_system.core.constants import UPGRADE_COST_PER_LEVEL
from hunter_system.core.logging import get_logger
from hunter_system.engine.rng import RandomSource
from hunter_system.models.character import StatBonus
from hunter_system.models.enums import LogCategory, RejectionReason, UpgradeOutcome
from hunter_system.models.equipment import EquipmentItem
from hunter_system.models.game_state import PlayerState, create_log


logger = get_logger(__name__)


def _upgrade_settings(settings: UpgradeSettings | None) -> UpgradeSettings:
    return settings if settings is not None else get_settings().upgrade


def base_chance(level: int, settings: UpgradeSettings | None = None) -> float:
    """Base success chance of upgrading an item at ``level``."""
    cfg = _upgrade_settings(settings)
    for min_level, chance in cfg.success_bands:
        if level >= min_level:
            return chance
    return cfg.success_bands[-1][1]


def success_probability(
    level: int,
    consecutive_failures: int,
    settings: UpgradeSettings | None = None,
) -> float:
    """Success chance after pity.

    Args:
        level: Current item level.
        consecutive_failures: Failed attempts since the last success.
        settings: Optional upgrade settings override.

    Returns:
        1.0 when the base chance is already certain, otherwise the base
        chance plus the pity bonus, capped at the pity cap.
    """
    cfg = _upgrade_settings(settings)
    base = base_chance(level, cfg)
    if base >= 1.0:
        return 1.0
    return min(base + max(0, consecutive_failures) * cfg.pity_step, cfg.pity_cap)


def upgrade_cost(level: int) -> int:
    """Shard cost of upgrading an item from ``level`` to ``level + 1``."""
    return UPGRADE_COST_PER_LEVEL * (level + 1)


def grow_stat(value: int, growth: float) -> int:
    """Stat magnitude after one successful upgrade; always grows by at least 1."""
    return max(math.floor(value * growth), value + 1)


@dataclass(frozen=True)
class UpgradeResult:
    """Outcome of an enhancement attempt.

    Attributes:
        item: The item after the attempt (unchanged on rejection, None if missing).
        wallet_shards: Shard balance after the attempt.
        outcome: success, failure or rejected.
        reason: Why the attempt was rejected, if it was.
        probability: Success chance the roll was made against.
        cost: Shards spent (0 on rejection).
    """

    item: EquipmentItem | None
    wallet_shards: int
    outcome: UpgradeOutcome
    reason: RejectionReason | None = None
    probability: float = 0.0
    cost: int = 0

    @property
    def succeeded(self) -> bool:
        return self.outcome == UpgradeOutcome.SUCCESS

    @property
    def rejected(self) -> bool:
        return self.outcome == UpgradeOutcome.REJECTED


def _rejected(item: EquipmentItem | None, wallet: int, reason: RejectionReason) -> UpgradeResult:
    return UpgradeResult(
        item=item,
        wallet_shards=wallet,
        outcome=UpgradeOutcome.REJECTED,
        reason=reason,
    )


def upgrade(
    item: EquipmentItem | None,
    wallet_shards: int,
    rng: RandomSource,
    settings: UpgradeSettings | None = None,
) -> UpgradeResult:
    """Attempt to enhance an item by one level.

    The input item is not modified; the result carries an updated copy.

    Args:
        item: The item to upgrade, or None if the lookup failed.
        wallet_shards: Current shard balance.
        rng: Random source for the success roll.
        settings: Optional upgrade settings override.

    Returns:
        UpgradeResult with the new item and wallet.
    """
    cfg = _upgrade_settings(settings)

    if item is None:
        return _rejected(None, wallet_shards, RejectionReason.NOT_FOUND)
    if item.is_max_level:
        return _rejected(item, wallet_shards, RejectionReason.MAX_LEVEL)

    cost = upgrade_cost(item.level)
    if wallet_shards < cost:
        return _rejected(item, wallet_shards, RejectionReason.INSUFFICIENT_SHARDS)

    probability = success_probability(item.level, item.consecutive_failures, cfg)
    updated = item.model_copy(deep=True)

    if rng.random() < probability:
        updated.level = item.level + 1
        updated.consecutive_failures = 0
        updated.base_stats = [
            StatBonus(stat=bonus.stat, value=grow_stat(bonus.value, cfg.stat_growth))
            for bonus in item.base_stats
        ]
        outcome = UpgradeOutcome.SUCCESS
    else:
        updated.consecutive_failures = item.consecutive_failures + 1
        outcome = UpgradeOutcome.FAILURE

    return UpgradeResult(
        item=updated,
        wallet_shards=wallet_shards - cost,
        outcome=outcome,
        probability=probability,
        cost=cost,
    )


def upgrade_item(
    state: PlayerState,
    item_id: str,
    rng: RandomSource,
    settings: UpgradeSettings | None = None,
) -> UpgradeResult:
    """Run an upgrade against an inventory item and write the outcome back.

    Args:
        state: Working state, mutated in place unless the attempt is rejected.
        item_id: Inventory item to upgrade.
        rng: Random source for the success roll.
        settings: Optional upgrade settings override.

    Returns:
        The UpgradeResult.
    """
    current = state.get_item(item_id)
    result = upgrade(current, state.shards, rng, settings)

    if result.rejected or result.item is None:
        logger.info(
            "Upgrade rejected",
            item_id=item_id,
            reason=result.reason.value if result.reason else None,
        )
        return result

    state.inventory = [result.item if item.id == item_id else item for item in state.inventory]
    state.shards = result.wallet_shards

    if result.succeeded:
        state.add_log(
            create_log(
                LogCategory.EQUIPMENT,
                "Item Upgraded",
                f"SUCCESS! Upgraded {result.item.name} to +{result.item.level} for {result.cost} Shards",
            )
        )
    else:
        state.add_log(
            create_log(
                LogCategory.EQUIPMENT,
                "Upgrade Failed",
                f"Failed to upgrade {result.item.name}. Consumed {result.cost} Shards.",
            )
        )

    logger.info(
        "Upgrade attempted",
        item_id=item_id,
        outcome=result.outcome.value,
        probability=result.probability,
        cost=result.cost,
        level=result.item.level,
    )
    return result


__all__ = [
    "base_chance",
    "success_probability",
    "upgrade_cost",
    "grow_stat",
    "UpgradeResult",
    "upgrade",
    "upgrade_item",
]
