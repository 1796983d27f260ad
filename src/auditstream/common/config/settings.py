"""Configuration management - Centralized configuration for auditstream.

Provides environment-aware configuration with sensible defaults.
All configuration is loaded from environment variables with fallbacks.
"""

import os
import warnings
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from auditstream.common.constants import APIConstants, StateConstants
from auditstream.common.exceptions import ConfigurationError


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StateBackend(str, Enum):
    """Reconciled state storage backend types."""
    LOCAL = "local"
    S3 = "s3"


def _env_enum(enum_cls, name: str, default: str):
    raw = os.getenv(name, default)
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Invalid value for {name}: {raw!r} (expected one of: {allowed})",
            details={"variable": name, "value": raw},
        )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(
            f"Invalid value for {name}: {raw!r} (expected a number)",
            details={"variable": name, "value": raw},
        )
    if value <= 0:
        raise ConfigurationError(
            f"{name} must be positive", details={"variable": name, "value": raw}
        )
    return value


def _github_token() -> Optional[str]:
    return os.getenv("AUDITSTREAM_GITHUB_TOKEN") or os.getenv("GITHUB_TOKEN")


@dataclass
class Config:
    """Central configuration object for auditstream.
    
    All settings can be overridden via environment variables prefixed with
    AUDITSTREAM_.
    
    Example:
        AUDITSTREAM_ENVIRONMENT=production
        AUDITSTREAM_LOG_LEVEL=DEBUG
        AUDITSTREAM_STATE_BACKEND=s3
    """
    
    # Core settings
    environment: Environment = field(
        default_factory=lambda: _env_enum(
            Environment, "AUDITSTREAM_ENVIRONMENT", "development"
        )
    )
    log_level: LogLevel = field(
        default_factory=lambda: _env_enum(LogLevel, "AUDITSTREAM_LOG_LEVEL", "INFO")
    )
    
    # Remote API settings
    api_url: str = field(
        default_factory=lambda: os.getenv(
            "AUDITSTREAM_API_URL", APIConstants.DEFAULT_BASE_URL
        )
    )
    api_version: str = field(
        default_factory=lambda: os.getenv(
            "AUDITSTREAM_API_VERSION", APIConstants.DEFAULT_API_VERSION
        )
    )
    github_token: Optional[str] = field(default_factory=_github_token, repr=False)
    http_timeout: float = field(
        default_factory=lambda: _env_float(
            "AUDITSTREAM_HTTP_TIMEOUT", APIConstants.DEFAULT_TIMEOUT_SECONDS
        )
    )
    
    # State settings
    state_backend: StateBackend = field(
        default_factory=lambda: _env_enum(
            StateBackend, "AUDITSTREAM_STATE_BACKEND", "local"
        )
    )
    state_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("AUDITSTREAM_STATE_DIR", StateConstants.DEFAULT_STATE_DIR)
        )
    )
    state_s3_bucket: Optional[str] = field(
        default_factory=lambda: os.getenv("AUDITSTREAM_STATE_S3_BUCKET")
    )
    state_s3_prefix: str = field(
        default_factory=lambda: os.getenv(
            "AUDITSTREAM_STATE_S3_PREFIX", StateConstants.DEFAULT_S3_PREFIX
        )
    )
    
    # AWS settings (for the S3 state backend)
    aws_region: str = field(
        default_factory=lambda: os.getenv("AWS_DEFAULT_REGION", "us-east-1")
    )
    
    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.state_backend == StateBackend.S3 and not self.state_s3_bucket:
            raise ConfigurationError(
                "AUDITSTREAM_STATE_S3_BUCKET must be set when using S3 state storage"
            )
        if not self.api_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"AUDITSTREAM_API_URL must be an http(s) URL, got {self.api_url!r}"
            )
        
        # The token travels in a header on every request
        if self.is_production and self.api_url.startswith("http://"):
            warnings.warn(
                "AUDITSTREAM_API_URL uses plain http in production environment",
                RuntimeWarning,
                stacklevel=2
            )
    
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.
    
    Returns:
        Config: The global configuration singleton.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
