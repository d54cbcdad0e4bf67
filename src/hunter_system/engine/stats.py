"""Stat aggregation and power calculation.

Effective stats combine the six base attributes with level-scaled bonuses
from equipped items, the equipped shadow's bonus and optional flat buffs.
Power reduces those effective stats, the equipped items' enhancement levels
and the shadow bonus to a single integer with non-negative weights, so no
increase in any input can lower it.

All functions here are pure: no randomness and no state mutation.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from hunter_system.core.config import PowerSettings, get_settings
from hunter_system.core.exceptions import InvariantViolationError
from hunter_system.core.logging import get_logger
from hunter_system.models.character import CharacterStats
from hunter_system.models.enums import StatType
from hunter_system.models.equipment import EquipmentItem
from hunter_system.models.game_state import PlayerState
from hunter_system.models.shadows import ShadowCompanion


logger = get_logger(__name__)


def _power_settings(settings: PowerSettings | None) -> PowerSettings:
    return settings if settings is not None else get_settings().power


@dataclass(frozen=True)
class EffectiveStats:
    """The six attributes after all bonuses.

    Attributes:
        values: Effective value per stat.
    """

    values: dict[StatType, int]

    def __getitem__(self, stat: StatType) -> int:
        return self.values[stat]

    @property
    def total(self) -> int:
        return sum(self.values.values())


@dataclass(frozen=True)
class PowerBreakdown:
    """Per-term contributions to a power value.

    Attributes:
        stats: Contribution of effective stats.
        equipment: Contribution of equipped item levels.
        shadow: Contribution of the equipped shadow bonus.
        total: Final power.
        fallback_used: Whether the zero-power fallback replaced the sum.
    """

    stats: int
    equipment: int
    shadow: int
    total: int
    fallback_used: bool = False


def scaled_bonus(value: int, level: int, settings: PowerSettings | None = None) -> int:
    """Bonus of one item stat line at the given enhancement level."""
    cfg = _power_settings(settings)
    return math.floor(value * (1 + level * cfg.equipment_level_bonus))


def effective_stats(
    character: CharacterStats,
    equipment: Iterable[EquipmentItem],
    shadow: ShadowCompanion | None = None,
    buffs: Mapping[StatType, int] | None = None,
    settings: PowerSettings | None = None,
) -> EffectiveStats:
    """Aggregate base attributes with equipment, shadow and buff bonuses.

    Args:
        character: The character whose base attributes are used.
        equipment: Candidate items; only equipped ones contribute.
        shadow: The equipped shadow, if any.
        buffs: Optional flat bonus per stat.
        settings: Optional power settings override.

    Returns:
        EffectiveStats keyed by stat.
    """
    values = character.attributes()

    for item in equipment:
        if not item.is_equipped:
            continue
        for bonus in item.base_stats:
            values[bonus.stat] += scaled_bonus(bonus.value, item.level, settings)

    if shadow is not None:
        values[shadow.bonus.stat] += shadow.bonus.value

    if buffs:
        for stat, amount in buffs.items():
            values[StatType(stat)] += max(0, amount)

    return EffectiveStats(values=values)


def _ensure_nonzero_power(total: int, base_stat_total: int) -> None:
    if total == 0 and base_stat_total > 0:
        raise InvariantViolationError(
            "Power computed as zero for a character with nonzero stats",
            invariant="power_nonzero",
            details={"base_stat_total": base_stat_total},
        )


def power_breakdown(
    stats: EffectiveStats,
    equipment_levels: Iterable[int],
    shadow_bonus: int = 0,
    *,
    base_stat_total: int = 0,
    settings: PowerSettings | None = None,
) -> PowerBreakdown:
    """Compute power and its per-term contributions.

    Args:
        stats: Effective stats.
        equipment_levels: Enhancement levels of the equipped items.
        shadow_bonus: Magnitude of the equipped shadow's bonus.
        base_stat_total: Sum of the unmodified base attributes, used by the
            zero-power fallback.
        settings: Optional power settings override.

    Returns:
        PowerBreakdown with the final total.
    """
    cfg = _power_settings(settings)
    stat_term = stats.total * cfg.scale * cfg.stat_weight
    equipment_term = sum(equipment_levels) * cfg.scale * cfg.equipment_level_weight
    shadow_term = shadow_bonus * cfg.scale * cfg.shadow_weight
    total = stat_term + equipment_term + shadow_term

    try:
        _ensure_nonzero_power(total, base_stat_total)
    except InvariantViolationError as exc:
        fallback = base_stat_total * cfg.scale * cfg.fallback_multiplier
        logger.warning(
            "Zero power recovered with fallback",
            fallback=fallback,
            **exc.details,
        )
        return PowerBreakdown(
            stats=stat_term,
            equipment=equipment_term,
            shadow=shadow_term,
            total=fallback,
            fallback_used=True,
        )

    return PowerBreakdown(
        stats=stat_term,
        equipment=equipment_term,
        shadow=shadow_term,
        total=total,
    )


def power(
    stats: EffectiveStats,
    equipment_levels: Iterable[int],
    shadow_bonus: int = 0,
    *,
    base_stat_total: int = 0,
    settings: PowerSettings | None = None,
) -> int:
    """Reduce effective stats, item levels and shadow bonus to one power value."""
    return power_breakdown(
        stats,
        equipment_levels,
        shadow_bonus,
        base_stat_total=base_stat_total,
        settings=settings,
    ).total


def player_breakdown(
    state: PlayerState,
    buffs: Mapping[StatType, int] | None = None,
    settings: PowerSettings | None = None,
) -> PowerBreakdown:
    """Power breakdown of a player from its equipped items and shadow."""
    equipped = state.equipped_items
    shadow = state.equipped_shadow
    stats = effective_stats(state.character, equipped, shadow, buffs, settings)
    return power_breakdown(
        stats,
        [item.level for item in equipped],
        shadow.bonus.value if shadow is not None else 0,
        base_stat_total=state.character.attribute_total,
        settings=settings,
    )


def player_power(
    state: PlayerState,
    buffs: Mapping[StatType, int] | None = None,
    settings: PowerSettings | None = None,
) -> int:
    """Current power of a player."""
    return player_breakdown(state, buffs, settings).total


__all__ = [
    "EffectiveStats",
    "PowerBreakdown",
    "scaled_bonus",
    "effective_stats",
    "power_breakdown",
    "power",
    "player_breakdown",
    "player_power",
]
