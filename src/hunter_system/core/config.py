"""Configuration management for the Hunter System engine.

This module provides centralized tuning configuration using pydantic-settings,
supporting environment variables, .env files, and runtime overrides. The
engine's balancing constants (power weights, XP curve, pity rules, shard
table) are empirically chosen, so they live here rather than in code.

Example:
    >>> from hunter_system.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.upgrade.pity_cap
    0.95

Environment Variables:
    HUNTER_SYSTEM_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    HUNTER_SYSTEM_POWER_SCALE: Global power scale factor
    HUNTER_SYSTEM_UPGRADE_PITY_STEP: Pity bonus per consecutive failure
    HUNTER_SYSTEM_REWARD_RANK_MULTIPLIERS: JSON object of rank -> shard multiplier
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hunter_system.core.constants import RANK_TIERS
from hunter_system.core.exceptions import ConfigurationError


class PowerSettings(BaseSettings):
    """Weights of the linear power reduction.

    Attributes:
        scale: Global scale factor applied to every power term.
        stat_weight: Power per effective stat point (before scale).
        equipment_level_weight: Power per enhancement level of equipped items.
        shadow_weight: Power per point of equipped shadow bonus.
        equipment_level_bonus: Fraction by which each item level scales its stats.
        fallback_multiplier: Multiplier of the zero-power fallback.
    """

    model_config = SettingsConfigDict(
        env_prefix="HUNTER_SYSTEM_POWER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    scale: int = Field(default=12, ge=0, description="Global power scale factor")
    stat_weight: int = Field(default=40, ge=0, description="Power per effective stat point")
    equipment_level_weight: int = Field(
        default=50,
        ge=0,
        description="Power per equipped item enhancement level",
    )
    shadow_weight: int = Field(default=10, ge=0, description="Power per shadow bonus point")
    equipment_level_bonus: float = Field(
        default=0.1,
        ge=0,
        description="Per-level scaling of item stat bonuses",
    )
    fallback_multiplier: int = Field(
        default=10,
        ge=1,
        description="Multiplier used when power is computed as zero",
    )


class ProgressionSettings(BaseSettings):
    """Character level curve and per-level grants.

    Attributes:
        xp_curve_base: Coefficient of the XP threshold curve.
        xp_curve_exponent: Exponent of the XP threshold curve.
        attribute_gain_per_level: Points added to each base attribute per level.
        passive_points_per_level: Passive skill points granted per level.
    """

    model_config = SettingsConfigDict(
        env_prefix="HUNTER_SYSTEM_PROGRESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    xp_curve_base: int = Field(default=150, ge=1, description="XP curve coefficient")
    xp_curve_exponent: float = Field(
        default=2.5,
        ge=1.0,
        le=5.0,
        description="XP curve exponent (>= 1 keeps thresholds strictly increasing)",
    )
    attribute_gain_per_level: int = Field(default=1, ge=0, description="Attribute gain per level")
    passive_points_per_level: int = Field(default=5, ge=0, description="Passive points per level")


class UpgradeSettings(BaseSettings):
    """Pity-adjusted enhancement rules.

    Attributes:
        success_bands: (minimum level, base chance) pairs, highest level first.
        pity_step: Chance added per consecutive failure.
        pity_cap: Upper bound of a non-guaranteed success chance.
        stat_growth: Multiplier applied to item stats on each success.
    """

    model_config = SettingsConfigDict(
        env_prefix="HUNTER_SYSTEM_UPGRADE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    success_bands: list[tuple[int, float]] = Field(
        default_factory=lambda: [(15, 0.30), (10, 0.50), (5, 0.80), (0, 1.0)],
        description="Base success chance by minimum item level",
    )
    pity_step: float = Field(default=0.15, ge=0, le=1, description="Pity bonus per failure")
    pity_cap: float = Field(default=0.95, gt=0, le=1, description="Maximum pity-adjusted chance")
    stat_growth: float = Field(default=1.10, ge=1.0, description="Stat multiplier per success")

    @model_validator(mode="after")
    def validate_success_bands(self) -> "UpgradeSettings":
        """Ensure bands descend by level, end at level 0, and hold valid chances.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the bands are malformed.
        """
        levels = [level for level, _ in self.success_bands]
        if not levels or levels != sorted(levels, reverse=True) or levels[-1] != 0:
            raise ConfigurationError(
                "success_bands must be sorted by descending level and end at level 0",
                config_key="success_bands",
            )
        if any(not 0 < chance <= 1 for _, chance in self.success_bands):
            raise ConfigurationError(
                "success_bands chances must lie in (0, 1]",
                config_key="success_bands",
            )
        return self


class RewardSettings(BaseSettings):
    """Dungeon reward tuning.

    Attributes:
        xp_share: Fraction of a dungeon's base XP awarded on victory.
        shard_base: Base shard reward of a clear.
        shard_rank_factor: Weight of the rank multiplier in the shard formula.
        rank_multipliers: Shard multiplier per difficulty rank.
        boss_cosmetic_chance: Cosmetic drop chance on procedural boss floors.
        floor_cosmetic_chance: Cosmetic drop chance on other procedural floors.
        boss_rarity_boost: Weight multiplier for top rarities on the boss drop.
        extra_drop_base: Base chance of an extra equipment drop.
        extra_drop_per_floor: Extra drop chance added per floor.
        extra_drop_cap: Maximum extra drop chance.
        deep_floor: First floor that rolls the deep-floor bonus drop.
        deep_floor_drop_chance: Chance of the deep-floor bonus drop.
    """

    model_config = SettingsConfigDict(
        env_prefix="HUNTER_SYSTEM_REWARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    xp_share: float = Field(default=0.15, gt=0, le=1, description="Share of base XP awarded")
    shard_base: int = Field(default=10, ge=0, description="Base shard reward")
    shard_rank_factor: float = Field(default=0.5, ge=0, description="Rank weight in shard reward")
    rank_multipliers: dict[str, int] = Field(
        default_factory=lambda: {
            "E": 1,
            "D": 2,
            "C": 3,
            "B": 4,
            "A": 5,
            "S": 6,
            "SS": 8,
            "SSS": 10,
        },
        description="Shard multiplier per difficulty rank",
    )
    boss_cosmetic_chance: float = Field(default=0.10, ge=0, le=1)
    floor_cosmetic_chance: float = Field(default=0.01, ge=0, le=1)
    boss_rarity_boost: float = Field(default=3.0, ge=1.0)
    extra_drop_base: float = Field(default=0.2, ge=0, le=1)
    extra_drop_per_floor: float = Field(default=0.002, ge=0)
    extra_drop_cap: float = Field(default=0.5, ge=0, le=1)
    deep_floor: int = Field(default=100, ge=1)
    deep_floor_drop_chance: float = Field(default=0.3, ge=0, le=1)

    @model_validator(mode="after")
    def validate_rank_multipliers(self) -> "RewardSettings":
        """Ensure every difficulty rank has a non-negative multiplier.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If a rank is missing or negative.
        """
        missing = [rank for rank in RANK_TIERS if rank not in self.rank_multipliers]
        if missing:
            raise ConfigurationError(
                f"rank_multipliers is missing ranks: {', '.join(missing)}",
                config_key="rank_multipliers",
            )
        if any(value < 0 for value in self.rank_multipliers.values()):
            raise ConfigurationError(
                "rank_multipliers values must be non-negative",
                config_key="rank_multipliers",
            )
        return self


class ShadowSettings(BaseSettings):
    """Shadow companion evolution tuning.

    Attributes:
        xp_share: Fraction of dungeon XP the equipped shadow receives.
        evolution_bonus_step: Bonus gained per evolution, times the new level.
    """

    model_config = SettingsConfigDict(
        env_prefix="HUNTER_SYSTEM_SHADOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    xp_share: float = Field(default=0.2, ge=0, le=1, description="Share of dungeon XP")
    evolution_bonus_step: int = Field(default=5, ge=0, description="Bonus per evolution level")


class Settings(BaseSettings):
    """Main engine settings aggregating all tuning domains.

    Attributes:
        app_name: Application name.
        debug: Enable debug mode.
        log_level: Engine logging level.
        json_logs: Emit logs as JSON.
        power: Power calculation weights.
        progression: Level curve settings.
        upgrade: Enhancement settings.
        reward: Dungeon reward settings.
        shadow: Shadow evolution settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="HUNTER_SYSTEM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Hunter System", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON logs")

    power: PowerSettings = Field(default_factory=PowerSettings)
    progression: ProgressionSettings = Field(default_factory=ProgressionSettings)
    upgrade: UpgradeSettings = Field(default_factory=UpgradeSettings)
    reward: RewardSettings = Field(default_factory=RewardSettings)
    shadow: ShadowSettings = Field(default_factory=ShadowSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "PowerSettings",
    "ProgressionSettings",
    "UpgradeSettings",
    "RewardSettings",
    "ShadowSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
