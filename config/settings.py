"""
Application settings for fleet compartments.

Loads settings from environment variables or uses defaults.
Provides centralized configuration management.
"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

from .constants import (
    APP_VERSION,
    DEFAULT_USER_NAME,
    DEFAULT_LOG_LEVEL,
    DEFAULT_DATABASE_NAME,
)
from .paths import get_database_path, get_data_base_path

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class Settings:
    """
    Application settings.

    Can be loaded from environment variables or initialized with defaults.
    """

    # Application info
    app_version: str = APP_VERSION
    user_name: str = DEFAULT_USER_NAME

    # Database settings
    database_type: str = "sqlite"
    database_path: Path = field(default_factory=get_database_path)

    # Data directory (created automatically if missing)
    data_dir: Path = field(default_factory=get_data_base_path)

    # Debug settings
    debug_mode: bool = False
    log_level: str = DEFAULT_LOG_LEVEL  # DEBUG, INFO, WARNING, ERROR

    def __post_init__(self):
        """Normalize values and ensure directories exist."""
        self.log_level = (self.log_level or DEFAULT_LOG_LEVEL).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got '{self.log_level}'")
        if self.debug_mode:
            self.log_level = "DEBUG"
        self._ensure_directories()

    def _ensure_directories(self):
        """Create required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load settings from environment variables.

        Environment variables:
        - FLEET_USER_NAME: User name for logging
        - FLEET_DATABASE_PATH: Path to SQLite database
        - FLEET_DATA_DIR: Data directory (defaults to the database directory)
        - FLEET_DEBUG: Enable debug mode (true/false)
        - FLEET_LOG_LEVEL: Logging level (DEBUG/INFO/WARNING/ERROR)

        Returns:
            Settings instance with values from environment or defaults
        """
        data_dir = os.getenv("FLEET_DATA_DIR")
        database_path = os.getenv("FLEET_DATABASE_PATH")

        # Default data dir (next to the app) only when neither variable is set
        if data_dir and not database_path:
            database_path = str(Path(data_dir) / DEFAULT_DATABASE_NAME)
        elif database_path and not data_dir:
            data_dir = str(Path(database_path).parent)

        return cls(
            user_name=os.getenv("FLEET_USER_NAME", DEFAULT_USER_NAME),
            database_path=Path(database_path) if database_path else get_database_path(),
            data_dir=Path(data_dir) if data_dir else get_data_base_path(),
            debug_mode=os.getenv("FLEET_DEBUG", "false").lower() == "true",
            log_level=os.getenv("FLEET_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )

    def to_dict(self) -> dict:
        """Convert settings to dictionary for serialization."""
        return {
            "app_version": self.app_version,
            "user_name": self.user_name,
            "database_type": self.database_type,
            "database_path": str(self.database_path),
            "data_dir": str(self.data_dir),
            "debug_mode": self.debug_mode,
            "log_level": self.log_level,
        }


# Global settings instance (lazy-loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get global settings instance.

    Lazy-loaded on first call. Loads from environment variables.

    Returns:
        Settings instance

    Example:
        >>> from config.settings import get_settings
        >>> settings = get_settings()
        >>> print(settings.database_path)
    """
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings():
    """
    Reset global settings instance.

    Useful for testing - forces reload from environment on next get_settings() call.
    """
    global _settings
    _settings = None
