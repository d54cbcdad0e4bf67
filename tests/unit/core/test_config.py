"""Tests for configuration management."""

from __future__ import annotations

import pytest

from hunter_system.core.config import (
    PowerSettings,
    ProgressionSettings,
    RewardSettings,
    Settings,
    UpgradeSettings,
    clear_settings_cache,
    get_settings,
)
from hunter_system.core.exceptions import ConfigurationError


class TestPowerSettings:
    """Tests for PowerSettings configuration."""

    def test_default_values(self) -> None:
        """Test default power weights."""
        settings = PowerSettings()

        assert settings.scale == 12
        assert settings.stat_weight == 40
        assert settings.equipment_level_weight == 50
        assert settings.shadow_weight == 10
        assert settings.fallback_multiplier == 10

    def test_negative_weight_rejected(self) -> None:
        """Test that weights must be non-negative."""
        with pytest.raises(ValueError):
            PowerSettings(stat_weight=-1)


class TestProgressionSettings:
    """Tests for ProgressionSettings configuration."""

    def test_default_curve(self) -> None:
        """Test the default XP curve parameters."""
        settings = ProgressionSettings()

        assert settings.xp_curve_base == 150
        assert settings.xp_curve_exponent == 2.5
        assert settings.attribute_gain_per_level == 1
        assert settings.passive_points_per_level == 5

    def test_exponent_below_one_rejected(self) -> None:
        """Test that a flattening curve is rejected."""
        with pytest.raises(ValueError):
            ProgressionSettings(xp_curve_exponent=0.5)


class TestUpgradeSettings:
    """Tests for UpgradeSettings configuration."""

    def test_default_bands(self) -> None:
        """Test default success bands and pity rules."""
        settings = UpgradeSettings()

        assert settings.success_bands == [(15, 0.30), (10, 0.50), (5, 0.80), (0, 1.0)]
        assert settings.pity_step == 0.15
        assert settings.pity_cap == 0.95

    def test_unsorted_bands_rejected(self) -> None:
        """Test that bands must descend by level."""
        with pytest.raises(ConfigurationError) as exc_info:
            UpgradeSettings(success_bands=[(0, 1.0), (10, 0.5)])

        assert "success_bands" in str(exc_info.value)

    def test_bands_must_end_at_zero(self) -> None:
        """Test that the last band covers level 0."""
        with pytest.raises(ConfigurationError):
            UpgradeSettings(success_bands=[(10, 0.5), (5, 0.8)])

    def test_band_chance_out_of_range_rejected(self) -> None:
        """Test that band chances lie in (0, 1]."""
        with pytest.raises(ConfigurationError):
            UpgradeSettings(success_bands=[(10, 1.5), (0, 1.0)])

    def test_pity_cap_bounds(self) -> None:
        """Test that the pity cap cannot exceed certainty."""
        with pytest.raises(ValueError):
            UpgradeSettings(pity_cap=1.2)


class TestRewardSettings:
    """Tests for RewardSettings configuration."""

    def test_default_rank_multipliers(self) -> None:
        """Test the default shard multiplier table."""
        settings = RewardSettings()

        assert settings.rank_multipliers == {
            "E": 1,
            "D": 2,
            "C": 3,
            "B": 4,
            "A": 5,
            "S": 6,
            "SS": 8,
            "SSS": 10,
        }
        assert settings.shard_rank_factor == 0.5

    def test_missing_rank_rejected(self) -> None:
        """Test that every rank needs a multiplier."""
        with pytest.raises(ConfigurationError) as exc_info:
            RewardSettings(rank_multipliers={"E": 1})

        assert "rank_multipliers" in str(exc_info.value)

    def test_negative_multiplier_rejected(self) -> None:
        """Test that multipliers must be non-negative."""
        multipliers = {rank: 1 for rank in ("E", "D", "C", "B", "A", "S", "SS", "SSS")}
        multipliers["S"] = -2

        with pytest.raises(ConfigurationError):
            RewardSettings(rank_multipliers=multipliers)


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self) -> None:
        """Test default settings initialization."""
        settings = Settings()

        assert settings.app_name == "Hunter System"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.power.scale == 12
        assert settings.shadow.xp_share == 0.2

    def test_env_override(self, mock_env_vars: dict[str, str]) -> None:
        """Test environment variable overrides reach nested settings."""
        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.power.scale == 20
        assert settings.upgrade.pity_step == 0.2

    def test_invalid_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test invalid log level is rejected."""
        monkeypatch.setenv("HUNTER_SYSTEM_LOG_LEVEL", "INVALID")

        with pytest.raises(ValueError):
            Settings()


class TestGetSettings:
    """Tests for the get_settings function."""

    def test_singleton_behavior(self) -> None:
        """Test that get_settings returns cached instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_cache_clear(self) -> None:
        """Test that clearing cache creates new instance."""
        settings1 = get_settings()
        clear_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2

    def test_invalid_env_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that load failures surface as ConfigurationError."""
        monkeypatch.setenv("HUNTER_SYSTEM_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError):
            get_settings()
