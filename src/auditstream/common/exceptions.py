"""Custom exceptions for auditstream.

Provides a hierarchy of exceptions for the lifecycle controller.
All auditstream exceptions inherit from AuditStreamException.
"""

from typing import Any, Dict, Optional


class AuditStreamException(Exception):
    """Base exception for all auditstream errors.
    
    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """
    
    def __init__(
        self,
        message: str,
        code: str = "AUDITSTREAM_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for CLI output."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(AuditStreamException):
    """Raised when process configuration (environment) is invalid."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIG_ERROR", details=details)


class InvalidConfigurationError(AuditStreamException):
    """Raised when a stream declaration is invalid. Not retried."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="INVALID_CONFIGURATION", details=details)


class MalformedIdentityError(AuditStreamException):
    """Raised when a durable stream identity cannot be decoded."""
    
    def __init__(
        self,
        message: str,
        identity: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        if identity is not None:
            details["identity"] = identity
        super().__init__(message, code="MALFORMED_IDENTITY", details=details)


class RemoteError(AuditStreamException):
    """Base class for errors reported by the remote stream service."""
    pass


class RemoteNotFoundError(RemoteError):
    """Raised when the remote service reports the stream does not exist."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="REMOTE_NOT_FOUND", details=details)


class RemoteFailureError(RemoteError):
    """Raised for any other remote call failure."""
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, code="REMOTE_FAILURE", details=details)


class StateStoreError(AuditStreamException):
    """Raised when reconciled state cannot be loaded or persisted."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="STATE_STORE_ERROR", details=details)


class LifecycleError(AuditStreamException):
    """Raised when a lifecycle call is invalid for the resource's current state."""
    
    def __init__(
        self,
        message: str,
        resource: str,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        details["resource"] = resource
        super().__init__(message, code="LIFECYCLE_ERROR", details=details)
