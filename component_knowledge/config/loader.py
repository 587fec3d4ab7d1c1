"""Configuration loading with file and environment support."""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from ..knowledge_logging import get_logger
from .models import KnowledgeConfig

logger = get_logger()

CONFIG_FILENAME = "component-knowledge.json"
ENV_PREFIX = "COMPONENT_KNOWLEDGE_"


class ConfigLoader:
    """Configuration loader merging file, environment and explicit values."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = Path(config_path) if config_path else Path.cwd() / CONFIG_FILENAME

    def load(self, **overrides: Any) -> KnowledgeConfig:
        """Load configuration from all sources.

        Precedence (highest to lowest):
        1. Explicit overrides
        2. Environment variables (COMPONENT_KNOWLEDGE_*)
        3. Config file (component-knowledge.json)
        4. Defaults

        Raises:
            ConfigurationError: If the file is unreadable or a value is invalid.
        """
        config_dict: dict[str, Any] = {}

        if self.config_path.exists():
            file_settings = self._load_file()
            config_dict.update(file_settings)
            logger.debug(f"Loaded {len(file_settings)} settings from {self.config_path}")

        env_settings = self._load_env()
        if env_settings:
            config_dict.update(env_settings)
            logger.debug(f"Applied {len(env_settings)} environment variables")

        explicit = {k: v for k, v in overrides.items() if v is not None}
        config_dict.update(explicit)
        if explicit:
            logger.debug(f"Applied {len(explicit)} explicit overrides")

        try:
            return KnowledgeConfig(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e.errors()[0]['msg']}",
                config_file=str(self.config_path) if self.config_path.exists() else None,
            ) from e

    def _load_file(self) -> dict[str, Any]:
        try:
            with open(self.config_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read config file: {e}", config_file=str(self.config_path)
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a JSON object",
                config_file=str(self.config_path),
            )
        return data

    def _load_env(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for field_name in KnowledgeConfig.model_fields:
            value = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
            if value is not None:
                settings[field_name] = value
        return settings


def load_config(config_path: Path | None = None, **overrides: Any) -> KnowledgeConfig:
    """Load configuration from multiple sources with precedence.

    Args:
        config_path: Optional explicit config file path.
        **overrides: Explicit values; None values are ignored.

    Returns:
        Validated KnowledgeConfig.
    """
    return ConfigLoader(config_path).load(**overrides)
