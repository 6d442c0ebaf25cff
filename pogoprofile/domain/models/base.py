"""
Base domain model helpers for pogoprofile.

Purpose
-------
Provide the validation primitives shared by the profile mirror and its
derived value objects (currency ledger, tutorial progress, avatar).

Non-Responsibilities
--------------------
- Network I/O (handled by the orchestrator services)
- Wire decoding (handled by the messaging layer)

Design Patterns
---------------
- **Value Object**: immutable objects defined by their attributes
  (``PlayerAvatar``, ``DailyBonus``, ``ContactSettings``, ``PlayerStats``)
- **Mirror**: a mutable aggregate replaced wholesale from server snapshots
"""

from __future__ import annotations

from typing import Optional


class DomainValidationError(Exception):
    """
    Exception raised when domain model validation fails.

    This is the base exception for all business rule violations
    in domain models.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        """
        Initialize validation error.

        Parameters
        ----------
        message : str
            Human-readable error message
        field : Optional[str]
            Field name that failed validation (if applicable)
        """
        super().__init__(message)
        self.field = field


def validate_non_negative(value: int, field_name: str) -> None:
    """
    Validate that a value is a non-negative integer.

    Parameters
    ----------
    value : int
        Value to validate
    field_name : str
        Name of the field (for error messages)

    Raises
    ------
    DomainValidationError
        If value is negative or not an integer
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DomainValidationError(
            f"{field_name} must be a non-negative integer, got {value!r}",
            field=field_name,
        )


def validate_not_empty(value: str, field_name: str) -> None:
    """Validate that a string is not empty or whitespace-only."""
    if not value or not value.strip():
        raise DomainValidationError(
            f"{field_name} cannot be empty",
            field=field_name,
        )
