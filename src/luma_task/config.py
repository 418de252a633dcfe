"""Configuration management for Luma Task."""

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class ConfigModel:
    """Global configuration model for Luma Task."""

    # Storage
    data_dir: str = "~/.luma"
    store_file: str = "tasks.md"

    # Parsing defaults
    default_due_hour: int = 9
    default_due_minute: int = 0
    fallback_title: str = "Aufgabe"
    extra_tag_keywords: Dict[str, str] = field(default_factory=dict)
    extra_icon_keywords: Dict[str, str] = field(default_factory=dict)

    # Display preferences
    date_format: str = "%d.%m.%Y"
    time_format: str = "%H:%M"
    use_emoji: bool = True

    log_level: str = "WARNING"

    def __post_init__(self):
        self.data_dir = os.path.expanduser(self.data_dir)
        if not 0 <= self.default_due_hour <= 23 or not 0 <= self.default_due_minute <= 59:
            raise ValueError(
                f"Invalid default due time {self.default_due_hour}:{self.default_due_minute}"
            )

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        return yaml.safe_dump(asdict(self), default_flow_style=False, allow_unicode=True)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**{key: value for key, value in data.items() if key in known})

    def get_store_path(self) -> Path:
        """Get the task store file path."""
        return Path(self.data_dir) / self.store_file

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"


class Config:
    """Configuration manager for Luma Task."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file or create default."""
        if cls._instance is not None:
            return cls._instance

        config = ConfigModel()

        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        if config_path.exists():
            try:
                config = ConfigModel.from_yaml(config_path.read_text(encoding="utf-8"))
                logger.debug(f"Loaded configuration from {config_path}")
            except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
                logger.warning(f"Failed to load config from {config_path}: {e}. Using defaults.")
                config = ConfigModel()
        else:
            try:
                cls.save(config, config_path)
                logger.info(f"Created default configuration at {config_path}")
            except OSError as e:
                logger.warning(f"Could not write default config to {config_path}: {e}")

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(config.to_yaml(), encoding="utf-8")
        logger.debug(f"Configuration saved to {config_path}")

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the cached configuration (useful for testing)."""
        cls._instance = None


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)
