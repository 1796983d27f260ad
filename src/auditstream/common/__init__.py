"""Common utilities - logging, config, exceptions."""

from auditstream.common.logging.logger import get_logger
from auditstream.common.config import Config, get_config, reset_config
from auditstream.common.exceptions import (
    AuditStreamException,
    ConfigurationError,
    InvalidConfigurationError,
    MalformedIdentityError,
    RemoteError,
    RemoteNotFoundError,
    RemoteFailureError,
    StateStoreError,
    LifecycleError,
)

__all__ = [
    # Logging
    "get_logger",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Exceptions
    "AuditStreamException",
    "ConfigurationError",
    "InvalidConfigurationError",
    "MalformedIdentityError",
    "RemoteError",
    "RemoteNotFoundError",
    "RemoteFailureError",
    "StateStoreError",
    "LifecycleError",
]
