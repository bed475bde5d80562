"""Application settings and configuration management."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CUTPLAN_CONFIG"


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".cutplan"


def _default_db_path() -> Path:
    return _default_config_dir() / "cutplan.db"


def default_config_path() -> Path:
    """Config file location, overridable with $CUTPLAN_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _default_config_dir() / "config.yaml"


def _sexagesimal(value: object, pad: bool) -> str:
    """Undo YAML 1.1 reading unquoted ``12:00`` or ``16:8`` as base-60 ints."""
    if isinstance(value, int) and not isinstance(value, bool):
        hours, minutes = divmod(value, 60)
        return f"{hours:02d}:{minutes:02d}" if pad else f"{hours}:{minutes}"
    return str(value)


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Path = field(default_factory=_default_db_path)


@dataclass
class ChallengeConfig:
    """Defaults applied when a new challenge is created."""

    step_goal: int = 10000
    sleep_goal: float = 8.0
    workouts_per_week: int = 4
    fasting_type: str = "16:8"
    eating_start: str = "12:00"
    activity_level: str = "moderate"
    unit: str = "lbs"


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table", "json", "markdown"


@dataclass
class Settings:
    """Main application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    challenge: ChallengeConfig = field(default_factory=ChallengeConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses $CUTPLAN_CONFIG
                         or ~/.cutplan/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = default_config_path()

        if not config_path.exists():
            logger.debug("No config at %s, using defaults", config_path)
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse database config
        if "database" in data:
            db_data = data["database"] or {}
            if db_data.get("path"):
                settings.database.path = Path(db_data["path"]).expanduser()

        # Parse challenge defaults
        if "challenge" in data:
            ch_data = data["challenge"] or {}
            ch = settings.challenge
            if "step_goal" in ch_data:
                ch.step_goal = int(ch_data["step_goal"])
            if "sleep_goal" in ch_data:
                ch.sleep_goal = float(ch_data["sleep_goal"])
            if "workouts_per_week" in ch_data:
                ch.workouts_per_week = int(ch_data["workouts_per_week"])
            if "fasting_type" in ch_data:
                ch.fasting_type = _sexagesimal(ch_data["fasting_type"], pad=False)
            if "eating_start" in ch_data:
                ch.eating_start = _sexagesimal(ch_data["eating_start"], pad=True)
            if "activity_level" in ch_data:
                ch.activity_level = ch_data["activity_level"]
            if "unit" in ch_data:
                ch.unit = ch_data["unit"]

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]

        logger.debug("Loaded settings from %s", config_path)
        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses the default path
        """
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": {
                "path": str(self.database.path),
            },
            "challenge": {
                "step_goal": self.challenge.step_goal,
                "sleep_goal": self.challenge.sleep_goal,
                "workouts_per_week": self.challenge.workouts_per_week,
                "fasting_type": self.challenge.fasting_type,
                "eating_start": self.challenge.eating_start,
                "activity_level": self.challenge.activity_level,
                "unit": self.challenge.unit,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


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
