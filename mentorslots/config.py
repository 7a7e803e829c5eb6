"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.recurrence import DAILY_DAY_LIMIT
from .domain.slot_views import SESSION_DURATION_MINUTES


class ExpansionConfig(BaseModel):
    """Settings for turning rules into bookable slots."""
    daily_day_limit: int = DAILY_DAY_LIMIT
    session_minutes: int = SESSION_DURATION_MINUTES
    week_starts_on: int = 0  # 0=Monday, 6=Sunday

    @field_validator("daily_day_limit", "session_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure limits and lengths are positive."""
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value

    @field_validator("week_starts_on")
    @classmethod
    def validate_weekday(cls, value: int) -> int:
        """Validate weekday is between 0 and 6."""
        if value not in range(7):
            raise ValueError(f"week_starts_on must be between 0 and 6, got {value}")
        return value


class StorageConfig(BaseModel):
    """Hosted database holding the ``availability_slots`` table."""
    url: str
    api_key: str
    table: str = "availability_slots"
    timeout_seconds: int = 30

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize the base URL so paths can be appended."""
        return value.rstrip("/")


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    expansion: ExpansionConfig = Field(default_factory=ExpansionConfig)
    rules_file: Optional[Path] = None
    storage: Optional[StorageConfig] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative ``rules_file`` paths are resolved against the directory of
        the config file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        if config.rules_file is not None and not config.rules_file.is_absolute():
            config.rules_file = config_path.parent / config.rules_file

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
