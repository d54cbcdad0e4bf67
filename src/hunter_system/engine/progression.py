"""Character level progression.

XP thresholds follow ``floor(base * level ** exponent)`` (150 * L^2.5 by
default), which is strictly increasing in the level. Applying XP is a total
function: negative deltas are clamped to zero and any amount, however
large, resolves to a well-defined level by looping over the thresholds.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from hunter_system.core.config import ProgressionSettings, get_settings
from hunter_system.core.constants import MAX_CHARACTER_LEVEL, MAX_OUT_LEVEL, MIN_CHARACTER_LEVEL
from hunter_system.core.logging import get_logger
from hunter_system.models.character import CharacterStats
from hunter_system.models.enums import StatType


logger = get_logger(__name__)


def _progression_settings(settings: ProgressionSettings | None) -> ProgressionSettings:
    return settings if settings is not None else get_settings().progression


def xp_for_level(level: int, settings: ProgressionSettings | None = None) -> int:
    """XP needed to advance from ``level`` to ``level + 1``.

    Args:
        level: Current character level, clamped to the level range.
        settings: Optional progression settings override.

    Returns:
        The XP threshold of the level.
    """
    cfg = _progression_settings(settings)
    level = min(max(MIN_CHARACTER_LEVEL, level), MAX_CHARACTER_LEVEL)
    return max(1, math.floor(cfg.xp_curve_base * level**cfg.xp_curve_exponent))


@dataclass(frozen=True)
class LevelResult:
    """Outcome of applying an XP delta to a character.

    Attributes:
        level: Level after the delta.
        xp_current: XP carried towards the next level.
        xp_for_next_level: Threshold of the resulting level.
        leveled_up: Whether at least one level was gained.
        levels_gained: Number of levels gained.
        stat_points_granted: Points added to each of the six attributes.
        passive_points_granted: Passive skill points granted.
        xp_applied: The XP actually applied after clamping.
    """

    level: int
    xp_current: int
    xp_for_next_level: int
    leveled_up: bool
    levels_gained: int
    stat_points_granted: int
    passive_points_granted: int
    xp_applied: int = 0


def apply_xp(
    stats: CharacterStats,
    xp_gained: int,
    settings: ProgressionSettings | None = None,
) -> LevelResult:
    """Resolve an XP delta against the character's level curve.

    Multi-level jumps are resolved by looping until the remaining XP is below
    the next threshold. At the level cap the carried XP stops one short of
    the threshold. Each level grants the configured attribute gain to
    all six attributes plus passive points.

    Args:
        stats: Current character stats (not modified).
        xp_gained: XP to add. Negative values are treated as zero.
        settings: Optional progression settings override.

    Returns:
        LevelResult describing the new level and grants.
    """
    cfg = _progression_settings(settings)
    applied = max(0, xp_gained)

    level = stats.level
    xp_current = stats.xp_current + applied
    threshold = stats.xp_for_next_level
    levels_gained = 0

    while level < MAX_CHARACTER_LEVEL and xp_current >= threshold:
        xp_current -= threshold
        level += 1
        levels_gained += 1
        threshold = xp_for_level(level, cfg)
    if level >= MAX_CHARACTER_LEVEL:
        xp_current = min(xp_current, threshold - 1)

    return LevelResult(
        level=level,
        xp_current=xp_current,
        xp_for_next_level=threshold,
        leveled_up=levels_gained > 0,
        levels_gained=levels_gained,
        stat_points_granted=levels_gained * cfg.attribute_gain_per_level,
        passive_points_granted=levels_gained * cfg.passive_points_per_level,
        xp_applied=applied,
    )


def apply_level_result(stats: CharacterStats, result: LevelResult) -> CharacterStats:
    """Return a copy of ``stats`` with a LevelResult applied."""
    updated = stats.model_copy(deep=True)
    updated.level = result.level
    updated.xp_current = result.xp_current
    updated.xp_for_next_level = result.xp_for_next_level
    if result.stat_points_granted:
        for stat in StatType:
            setattr(updated, stat.value, updated.get_attribute(stat) + result.stat_points_granted)
    updated.passive_points += result.passive_points_granted

    if result.leveled_up:
        logger.info(
            "Level up",
            from_level=stats.level,
            to_level=result.level,
            levels_gained=result.levels_gained,
        )
    return updated


def max_out(
    stats: CharacterStats,
    target_level: int = MAX_OUT_LEVEL,
    settings: ProgressionSettings | None = None,
) -> CharacterStats:
    """Debug path that jumps a character straight to ``target_level``.

    Uses the same threshold function as normal leveling so the resulting
    state stays consistent with ``apply_xp``.

    Args:
        stats: Current character stats (not modified).
        target_level: Level to set, clamped to the level range.
        settings: Optional progression settings override.

    Returns:
        New CharacterStats at the target level with zero XP and every
        attribute raised to at least the target level.
    """
    target = min(max(MIN_CHARACTER_LEVEL, target_level), MAX_CHARACTER_LEVEL)
    updated = stats.model_copy(deep=True)
    updated.level = target
    updated.xp_current = 0
    updated.xp_for_next_level = xp_for_level(target, settings)
    for stat in StatType:
        setattr(updated, stat.value, max(updated.get_attribute(stat), target))

    logger.warning("Character maxed out", from_level=stats.level, to_level=target)
    return updated


__all__ = [
    "xp_for_level",
    "LevelResult",
    "apply_xp",
    "apply_level_result",
    "max_out",
]
