"""Config module exports."""

from gitscope.config.loader import GitScopeSettings, load_config
from gitscope.config.models import (
    CacheConfig,
    DiffConfig,
    GitScopeConfig,
    LimitsConfig,
    LoggingConfig,
    LogOutputConfig,
    SearchConfig,
)

__all__ = [
    "load_config",
    "GitScopeConfig",
    "GitScopeSettings",
    "CacheConfig",
    "DiffConfig",
    "LimitsConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SearchConfig",
]
