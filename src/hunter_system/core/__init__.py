"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        HunterSystemError: Base exception for all engine errors.
        NotFoundError, InsufficientResourceError,
        InvariantViolationError, MigrationError: Engine domain errors.
        ConfigurationError, ValidationError: Configuration and data errors.

    Configuration:
        Settings: Main engine settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        configure_logging_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from hunter_system.core.config import (
    PowerSettings,
    ProgressionSettings,
    RewardSettings,
    Settings,
    ShadowSettings,
    UpgradeSettings,
    clear_settings_cache,
    get_settings,
)
from hunter_system.core.exceptions import (
    ConfigurationError,
    EngineError,
    HunterSystemError,
    InsufficientResourceError,
    InvariantViolationError,
    MigrationError,
    NotFoundError,
    ValidationError,
)
from hunter_system.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)


__all__ = [
    # Base exception
    "HunterSystemError",
    # Engine exceptions
    "EngineError",
    "NotFoundError",
    "InsufficientResourceError",
    "InvariantViolationError",
    "MigrationError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "PowerSettings",
    "ProgressionSettings",
    "UpgradeSettings",
    "RewardSettings",
    "ShadowSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
