"""Application configuration helpers."""

from __future__ import annotations

from .env import ENV_PREFIX, read_environment
from .errors import ConfigurationError
from .proxy import DEFAULT_TYPE_NAME_SUFFIX, ObservableConfig, get_observable_config

__all__ = [
    "DEFAULT_TYPE_NAME_SUFFIX",
    "ENV_PREFIX",
    "ConfigurationError",
    "ObservableConfig",
    "get_observable_config",
    "read_environment",
]
