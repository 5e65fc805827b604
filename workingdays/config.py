"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .adapters.holiday_client import DEFAULT_HOLIDAYS_URL, DEFAULT_TIMEOUT_SECONDS

CONFIG_PATH_ENV = "WORKINGDAYS_CONFIG"


class ValidationProfile(str, Enum):
    """Request validation policy applied at the boundary."""
    LENIENT = "lenient"
    STRICT = "strict"


class HolidaySourceConfig(BaseModel):
    """Where the holiday calendar is fetched from."""
    url: str = DEFAULT_HOLIDAYS_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Ensure the fetch timeout is positive."""
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value


class ServerConfig(BaseModel):
    """HTTP server settings."""
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        """Validate port is between 1 and 65535."""
        if not 1 <= value <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {value}")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    holidays: HolidaySourceConfig = Field(default_factory=HolidaySourceConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    validation_profile: ValidationProfile = ValidationProfile.LENIENT
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        name = value.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown log level: {value}")
        return name

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

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
                f"See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """
        Load configuration from an explicit path or the default location.

        An explicit path (argument or $WORKINGDAYS_CONFIG) must exist. When
        no path is given and no default file is present, built-in defaults
        are used.
        """
        if config_path is None and os.getenv(CONFIG_PATH_ENV):
            config_path = Path(os.environ[CONFIG_PATH_ENV])

        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)

        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
