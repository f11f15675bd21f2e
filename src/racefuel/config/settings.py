"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".racefuel"


@dataclass
class RatesConfig:
    """Default per-hour intake rates used when a rate is not supplied."""

    carbs_per_hour: float = 60.0  # g/h
    sodium_per_hour: float = 300.0  # mg/h
    water_per_hour: float = 500.0  # ml/h


@dataclass
class PlannerConfig:
    """Tunable constants for the plan selection engine.

    Percentages are expressed on a 0-100 scale. Caps are inclusive unless
    noted otherwise.

    Attributes:
        band_floor: Lower edge of the acceptance band (% of target)
        band_ceiling: Upper edge of the acceptance band (% of target)
        carbs_overshoot: Hard multiplier on the carb band ceiling
        sodium_overshoot: Hard multiplier on the sodium band ceiling
        water_overshoot: Hard multiplier on the water band ceiling
        primary_item_cap: Max entries added by the primary fill phase
        per_item_cap: Max servings of one item during composition
        plan_entry_cap: Max entries in a composed plan
        sodium_switch_pct: Sodium coverage at which primary fill stops
        real_food_max_sodium: Sodium ceiling (mg/serving) for gap-fill food
        real_food_min_carbs: Minimum carbs (g/serving) for gap-fill food
        drink_mix_water_ml: Assumed reconstitution volume for drink mixes
        fine_tune_carb_slack: Points below the floor carbs may drop when trimming
        search_start_count: Number of catalog rotations tried by the searcher
        search_base_entry_cap: Entry cap for the searcher's carb base phase
        search_entry_cap: Entry cap for the searcher's gap-fill phases
        search_zero_carb_qty_cap: Serving cap for carb-free sodium sources
        sodium_candidate_min: Minimum sodium (mg/serving) for a sodium source
        refine_max_iterations: Max additions made by the refinement pass
        refine_item_cap: Max servings of one item after refinement
        refine_entry_cap: Max entries in a refined plan
    """

    band_floor: float = 90.0
    # NOTE: older docs describe a 90-105% band; 120% is the operative ceiling.
    band_ceiling: float = 120.0
    carbs_overshoot: float = 1.05
    sodium_overshoot: float = 1.15
    water_overshoot: float = 1.10
    primary_item_cap: int = 3
    per_item_cap: int = 2
    plan_entry_cap: int = 5
    sodium_switch_pct: float = 95.0
    real_food_max_sodium: float = 15.0
    real_food_min_carbs: float = 5.0
    drink_mix_water_ml: float = 500.0
    fine_tune_carb_slack: float = 10.0
    search_start_count: int = 5
    search_base_entry_cap: int = 4
    search_entry_cap: int = 6
    search_zero_carb_qty_cap: int = 3
    sodium_candidate_min: float = 50.0
    refine_max_iterations: int = 10
    refine_item_cap: int = 4
    refine_entry_cap: int = 8


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table", "json", "markdown"


@dataclass
class Settings:
    """Main application settings."""

    rates: RatesConfig = field(default_factory=RatesConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.racefuel/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse rates config
        if "rates" in data:
            rates_data = data["rates"] or {}
            for key in ("carbs_per_hour", "sodium_per_hour", "water_per_hour"):
                if key in rates_data:
                    setattr(settings.rates, key, float(rates_data[key]))

        # Parse planner config, coercing to the declared field types
        if "planner" in data:
            planner_data = data["planner"] or {}
            for f in fields(PlannerConfig):
                if f.name in planner_data:
                    default = getattr(settings.planner, f.name)
                    setattr(settings.planner, f.name, type(default)(planner_data[f.name]))

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.racefuel/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict:
        """Return settings as a plain nested dict."""
        return {
            "rates": {
                "carbs_per_hour": self.rates.carbs_per_hour,
                "sodium_per_hour": self.rates.sodium_per_hour,
                "water_per_hour": self.rates.water_per_hour,
            },
            "planner": {
                f.name: getattr(self.planner, f.name) for f in fields(PlannerConfig)
            },
            "defaults": {
                "output_format": self.defaults.output_format,
            },
        }


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
