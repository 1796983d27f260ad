"""Configuration module."""

from auditstream.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    StateBackend,
    get_config,
    reset_config,
)

__all__ = [
    "Config",
    "Environment",
    "LogLevel",
    "StateBackend",
    "get_config",
    "reset_config",
]
