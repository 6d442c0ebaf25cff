"""
Domain exceptions for pogoprofile.

Purpose
-------
Define the domain-specific exception hierarchy for profile state rules.
Infrastructure failures (dispatch, decode, partial sync) live in
``pogoprofile.core.exceptions``; business rejections from the server are
returned as result objects and never raised.

Design Notes
------------
- All domain exceptions inherit from `ProfileDomainException`.
- Each exception carries `message`, `details`, `severity`, `is_retryable`
  and `error_code`, like the infrastructure hierarchy.
- `InvalidCurrencyKind` is the only failure the sync path absorbs: it is
  logged and the offending entry is skipped.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pogoprofile.core.exceptions import ErrorSeverity


class ProfileDomainException(Exception):
    """
    Base exception for all pogoprofile domain-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        severity: Error severity level for logging handlers
        is_retryable: Whether the operation can be retried
        error_code: Optional code for programmatic handling
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


class InvalidCurrencyKind(ProfileDomainException):
    """
    Raised when a currency name is not part of the closed `CurrencyKind` set.

    Servers may introduce new currencies before clients learn about them, so
    the snapshot path logs this at WARNING and carries on.

    Args:
        name: The unrecognized currency name
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Unknown currency kind: {name!r}",
            details={"currency": name},
            error_code="INVALID_CURRENCY_KIND",
        )


__all__ = ["ProfileDomainException", "InvalidCurrencyKind"]
