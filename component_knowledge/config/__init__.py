"""Configuration package for the knowledge pipeline."""

from .loader import CONFIG_FILENAME, ENV_PREFIX, ConfigLoader, load_config
from .models import KnowledgeConfig

__all__ = [
    "CONFIG_FILENAME",
    "ENV_PREFIX",
    "ConfigLoader",
    "KnowledgeConfig",
    "load_config",
]
