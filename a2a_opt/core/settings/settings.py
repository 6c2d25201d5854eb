"""Settings and configuration management.

This module provides configuration for the OPT extension service, with
environment variable handling (OPT_ prefix, optional .env file) and
optional YAML configuration files.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from a2a_opt.extension.agent_card import OPTExtensionParams
from a2a_opt.providers.store.base import DEFAULT_PAGE_SIZE, OPTStoreSettings

logger = logging.getLogger(__name__)

CONFIG_SECTION = "opt"


class OPTSettings(BaseSettings):
    """Settings for an OPT enabled agent.

    Values come from OPT_* environment variables; the python field names
    are accepted as well when constructing directly.
    """

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("OPT_LOG_LEVEL", "log_level"))

    # Storage
    store_provider: str = Field(default="memory-opt", validation_alias=AliasChoices("OPT_STORE_PROVIDER", "store_provider"))
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, validation_alias=AliasChoices("OPT_DEFAULT_PAGE_SIZE", "default_page_size"))

    # Advertised extension params
    max_plans_per_objective: int = Field(default=10, validation_alias=AliasChoices("OPT_MAX_PLANS_PER_OBJECTIVE", "max_plans_per_objective"))
    max_tasks_per_plan: int = Field(default=50, validation_alias=AliasChoices("OPT_MAX_TASKS_PER_PLAN", "max_tasks_per_plan"))
    persistence_enabled: bool = Field(default=False, validation_alias=AliasChoices("OPT_PERSISTENCE_ENABLED", "persistence_enabled"))
    extension_required: bool = Field(default=False, validation_alias=AliasChoices("OPT_EXTENSION_REQUIRED", "extension_required"))

    # Reject RPC calls that do not activate the extension via header
    require_activation: bool = Field(default=False, validation_alias=AliasChoices("OPT_REQUIRE_ACTIVATION", "require_activation"))

    model_config = SettingsConfigDict(
        env_prefix="OPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator('default_page_size', 'max_plans_per_objective', 'max_tasks_per_plan')
    @classmethod
    def validate_positive_integers(cls, v):
        """Validate positive integer fields."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    def extension_params(self) -> OPTExtensionParams:
        """Build the params advertised in the agent card."""
        return OPTExtensionParams(
            max_plans_per_objective=self.max_plans_per_objective,
            max_tasks_per_plan=self.max_tasks_per_plan,
            persistence_enabled=self.persistence_enabled,
        )

    def store_settings(self) -> OPTStoreSettings:
        """Build the settings handed to the store provider."""
        return OPTStoreSettings(default_page_size=self.default_page_size)


def _read_config_file(config_file: Path) -> Dict[str, Any]:
    with open(config_file, 'r') as f:
        config_data = yaml.safe_load(f) or {}

    if not isinstance(config_data, dict):
        raise ValueError(f"Configuration file {config_file} must contain a mapping")

    # Accept either a flat file or one with an "opt:" section.
    section = config_data.get(CONFIG_SECTION)
    if isinstance(section, dict):
        return section
    return config_data


def load_settings(config_file: Optional[Union[str, Path]] = None) -> OPTSettings:
    """Load settings, layering environment variables over a YAML file.

    Args:
        config_file: Optional path to a YAML configuration file

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ValueError: If the file does not hold a mapping
    """
    env_settings = OPTSettings()
    if config_file is None:
        return env_settings

    path = Path(config_file)
    try:
        file_data = _read_config_file(path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.error(f"Failed to load configuration from file {path}: {e}")
        raise

    # Fields set from the environment take precedence over the file.
    merged = {**file_data, **env_settings.model_dump(include=env_settings.model_fields_set)}
    settings = OPTSettings(**merged)
    logger.info(f"Loaded configuration from {path}")
    return settings
