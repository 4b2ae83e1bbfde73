from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .models import AppConfig
from ..exceptions import ConfigurationError

class ConfigManager:
    """Loads the YAML configuration on top of the structured defaults and validates it."""

    def __init__(self, config_dir: Path = Path("conf")):
        self.config_dir = config_dir

    def load(self, profile: str = "config") -> DictConfig:
        """Loads conf/<profile>.yaml merged over the AppConfig schema."""
        config_path = self.config_dir / f"{profile}.yaml"

        if not config_path.exists():
            raise FileNotFoundError(f"Config not found: {config_path}")

        return self.build(OmegaConf.load(config_path))

    @staticmethod
    def build(overrides: Optional[Any] = None) -> DictConfig:
        """
        Merges a dict or DictConfig over the AppConfig schema.
        Type mismatches against the schema surface as ConfigurationError.
        """
        schema = OmegaConf.structured(AppConfig)
        try:
            cfg = OmegaConf.merge(schema, overrides or {})
        except OmegaConfBaseException as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
        ConfigManager.validate(cfg)
        return cfg

    @staticmethod
    def validate(cfg: DictConfig):
        if not cfg.checkpoints:
            raise ConfigurationError("At least one checkpoint must be configured")

        ids = [c.id for c in cfg.checkpoints]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate checkpoint ids: {duplicates}")

        try:
            ZoneInfo(cfg.estimation.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone: {cfg.estimation.timezone}") from e

        if cfg.estimation.live_window_hours <= 0:
            raise ConfigurationError("estimation.live_window_hours must be positive")
        if cfg.reporting.cooldown_seconds < 0:
            raise ConfigurationError("reporting.cooldown_seconds must be non-negative")
        if cfg.persistence.type not in ("sqlalchemy", "memory"):
            raise ConfigurationError(f"Unsupported persistence type: {cfg.persistence.type}")
