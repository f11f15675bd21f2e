"""Configuration loading for racefuel."""

from racefuel.config.settings import (
    DefaultsConfig,
    PlannerConfig,
    RatesConfig,
    Settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "DefaultsConfig",
    "PlannerConfig",
    "RatesConfig",
    "Settings",
    "get_settings",
    "reload_settings",
]
