"""Configuration management using pydantic-settings.

Two layers:

- ``Settings``: where things live on disk (config file, restriction table,
  profiles directory, logs). Read from environment variables / ``.env``.
- ``RestrictionConfig``: the restriction policy itself, loaded once from the
  JSON config file and frozen for the lifetime of the process.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when the restriction config file exists but cannot be used."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings use the MARKETLOCK_ prefix (e.g., MARKETLOCK_STORE_PATH).
    """

    # NOTE: Prefix is spelled out in each validation_alias rather than through
    # env_prefix, which dotenv files would otherwise apply to aliased fields too.
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    # === Paths ===
    config_path: Path = Field(
        default=Path("./config/config.json"),
        validation_alias="MARKETLOCK_CONFIG_PATH",
        description="JSON file holding enabled/durationInDays/restrictedLevel",
    )
    store_path: Path = Field(
        default=Path("./restrictedProfiles.json"),
        validation_alias="MARKETLOCK_STORE_PATH",
        description="JSON file holding the restriction table",
    )
    profiles_dir: Path = Field(
        default=Path("./profiles"),
        validation_alias="MARKETLOCK_PROFILES_DIR",
        description="Directory of <profileId>.json profile files",
    )
    log_dir: Path = Field(
        default=Path("./logs"),
        validation_alias="MARKETLOCK_LOG_DIR",
        description="Directory for log files",
    )


class RestrictionConfig(BaseModel):
    """Restriction policy. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    enabled: bool = True
    duration_in_days: float = Field(default=3, ge=0, alias="durationInDays")
    restricted_level: int = Field(default=15, alias="restrictedLevel")


def load_restriction_config(path: Path) -> RestrictionConfig:
    """Load the restriction policy from a JSON file.

    A missing file falls back to the defaults. A file that exists but does not
    parse or validate raises ConfigError.

    Args:
        path: Location of the JSON config file.

    Returns:
        The frozen RestrictionConfig.
    """
    if not path.exists():
        logger.warning("Config file %s not found, using defaults", path)
        return RestrictionConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return RestrictionConfig.model_validate(data)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
