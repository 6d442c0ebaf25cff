"""
Infrastructure exceptions for pogoprofile.

Purpose
-------
Define the structured exception hierarchy for failures that abort an
orchestrator step: dispatcher/session failures, undecodable responses,
half-finished two-phase steps, runaway codename claims and configuration
errors.

Design Notes
------------
- All infrastructure exceptions inherit from `ProfileSyncException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict)
  - `severity`: `ErrorSeverity` value for logging/alerting
  - `is_retryable`: whether the caller may retry the operation
  - `error_code`: short, stable identifier for programmatic use
- Domain rejections (codename taken, level not reached) are NOT exceptions;
  they are returned as result objects by the services.
- Helper functions (`is_transient_error`, `get_error_severity`, `should_alert`)
  centralize common exception handling patterns.

Hierarchy
---------
ProfileSyncException
├── DispatchError          transport failure reported by the dispatcher
│   └── SessionError       authentication/session rejected
├── RemoteServerError      server answered with something unusable
│   └── DecodeError        payload could not be decoded as the expected kind
├── PartialSyncError       server-side action committed, local re-sync failed
├── CodenameExhausted      claim attempt cap reached without a terminal answer
└── ConfigurationError     invalid or missing configuration
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for logging and alerting."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"  # Concerning but handled (e.g., retryable errors)
    ERROR = "error"
    CRITICAL = "critical"


class ProfileSyncException(Exception):
    """
    Base exception for all pogoprofile infrastructure-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        severity: Error severity level for logging handlers
        is_retryable: Whether the operation can be retried
        error_code: Optional code for programmatic handling

    Example:
        >>> raise ProfileSyncException(
        ...     "Dispatcher returned too few responses",
        ...     {"expected": 5, "received": 3}
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        is_retryable: Optional[bool] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.is_retryable: bool = (
            is_retryable if is_retryable is not None else self.DEFAULT_RETRYABLE
        )
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}, "
            f"is_retryable={self.is_retryable!r}"
            ")"
        )


class DispatchError(ProfileSyncException):
    """
    Raised by the dispatcher when a batch could not be delivered.

    Always fatal to the current orchestrator operation; this package never
    retries it. Retrying is the caller's (or the dispatcher's) decision.

    Args:
        message: Description of the transport failure
        request_types: Names of the request kinds in the failed batch
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING
    DEFAULT_RETRYABLE = True

    def __init__(
        self,
        message: str,
        request_types: Optional[list[str]] = None,
        error_code: str = "DISPATCH_FAILED",
    ) -> None:
        self.request_types = list(request_types or [])
        super().__init__(
            message,
            details={"request_types": self.request_types},
            error_code=error_code,
        )


class SessionError(DispatchError):
    """
    Raised when the dispatcher reports an authentication or session failure.

    Not retryable without re-authenticating, which is outside this package.
    """

    DEFAULT_SEVERITY = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE = False

    def __init__(
        self,
        message: str = "Session rejected by server",
        request_types: Optional[list[str]] = None,
    ) -> None:
        super().__init__(message, request_types, error_code="SESSION_REJECTED")


class RemoteServerError(ProfileSyncException):
    """
    Raised when the server's answer cannot be used.

    Covers malformed payloads (see `DecodeError`) and missing response slots.
    """

    DEFAULT_SEVERITY = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE = True

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "REMOTE_SERVER_ERROR",
    ) -> None:
        super().__init__(message, details=details, error_code=error_code)


class DecodeError(RemoteServerError):
    """
    Raised by a response decoder when a payload is not a valid `kind` message.

    Fatal to the batch that produced it: no member of that batch is applied.

    Args:
        kind: Name of the expected response kind
        reason: Why decoding failed
    """

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(
            f"Cannot decode {kind} response: {reason}",
            details={"kind": kind, "reason": reason},
            error_code="DECODE_FAILED",
        )


class PartialSyncError(ProfileSyncException):
    """
    Raised when a step's server-side action committed but a follow-up failed.

    The server state is correct; the local mirror is stale. Callers should
    retry only `pending_step` (usually ``refresh_profile``), never the whole
    operation.

    Args:
        operation: The orchestrator operation that committed
        pending_step: The follow-up that still has to run
        committed: Result of the committed phase, if any
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING
    DEFAULT_RETRYABLE = True

    def __init__(
        self,
        operation: str,
        pending_step: str,
        committed: Any = None,
    ) -> None:
        self.operation = operation
        self.pending_step = pending_step
        self.committed = committed
        super().__init__(
            f"{operation} committed on the server but {pending_step} failed; "
            f"retry {pending_step} only",
            details={"operation": operation, "pending_step": pending_step},
            error_code="PARTIAL_SYNC",
        )


class CodenameExhausted(ProfileSyncException):
    """
    Raised when codename claiming hits the local attempt cap.

    Guards against a server that keeps rejecting names while reporting
    remaining claims. A server-reported zero is not an error; it is returned
    as a rejected claim result.

    Args:
        attempts: Number of claims sent
        last_attempt: The last codename tried
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING
    DEFAULT_RETRYABLE = False

    def __init__(self, attempts: int, last_attempt: Optional[str]) -> None:
        self.attempts = attempts
        self.last_attempt = last_attempt
        super().__init__(
            f"No codename accepted after {attempts} attempts",
            details={"attempts": attempts, "last_attempt": last_attempt},
            error_code="CODENAME_EXHAUSTED",
        )


class ConfigurationError(ProfileSyncException):
    """
    Raised when a configuration key is invalid or missing.

    Args:
        config_key: The configuration key that has issues
        message: Description of the configuration problem
    """

    DEFAULT_SEVERITY = ErrorSeverity.CRITICAL
    DEFAULT_RETRYABLE = False

    def __init__(self, config_key: str, message: str) -> None:
        self.config_key = config_key
        super().__init__(
            f"Configuration error for {config_key}: {message}",
            details={"config_key": config_key, "message": message},
            error_code="CONFIG_ERROR",
        )


# ============================================================================
# Helpers
# ============================================================================


def is_transient_error(exc: BaseException) -> bool:
    """Return True if `exc` is a pogoprofile error the caller may retry."""
    return isinstance(exc, ProfileSyncException) and exc.is_retryable


def get_error_severity(exc: BaseException) -> ErrorSeverity:
    if isinstance(exc, ProfileSyncException):
        return exc.severity
    return ErrorSeverity.ERROR


def should_alert(exc: BaseException) -> bool:
    """Errors at ERROR or above warrant attention beyond a log line."""
    return get_error_severity(exc) in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)


__all__ = [
    "ErrorSeverity",
    "ProfileSyncException",
    "DispatchError",
    "SessionError",
    "RemoteServerError",
    "DecodeError",
    "PartialSyncError",
    "CodenameExhausted",
    "ConfigurationError",
    "is_transient_error",
    "get_error_severity",
    "should_alert",
]
