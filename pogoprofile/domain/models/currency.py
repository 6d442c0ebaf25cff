"""
Currency ledger for the profile mirror.

The ledger maps a closed set of currency kinds to non-negative balances.
Entries are overwritten on every sync, never incremented.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from pogoprofile.domain.models.base import validate_non_negative
from pogoprofile.modules.shared.exceptions import InvalidCurrencyKind


class CurrencyKind(Enum):
    """Currencies the client understands."""

    STARDUST = "STARDUST"
    POKECOIN = "POKECOIN"

    @classmethod
    def from_name(cls, name: str) -> Optional["CurrencyKind"]:
        """Look up a kind by server name; ``None`` for names we do not know."""
        try:
            return cls(name)
        except ValueError:
            return None


class CurrencyLedger:
    """
    Balance per `CurrencyKind`.

    >>> ledger = CurrencyLedger()
    >>> ledger.record("STARDUST", 500)
    >>> ledger[CurrencyKind.STARDUST]
    500
    """

    def __init__(self) -> None:
        self._balances: Dict[CurrencyKind, int] = {}

    def record(self, name: str, amount: int) -> CurrencyKind:
        """
        Overwrite the balance for the currency called `name`.

        Raises
        ------
        InvalidCurrencyKind
            If `name` is not a known currency.
        DomainValidationError
            If `amount` is negative.
        """
        kind = CurrencyKind.from_name(name)
        if kind is None:
            raise InvalidCurrencyKind(name)
        validate_non_negative(amount, f"currency[{name}]")
        self._balances[kind] = amount
        return kind

    def get(self, kind: CurrencyKind, default: int = 0) -> int:
        return self._balances.get(kind, default)

    def __getitem__(self, kind: CurrencyKind) -> int:
        return self._balances[kind]

    def __contains__(self, kind: object) -> bool:
        return kind in self._balances

    def __iter__(self) -> Iterator[Tuple[CurrencyKind, int]]:
        return iter(self._balances.items())

    def __len__(self) -> int:
        return len(self._balances)

    def as_dict(self) -> Dict[str, int]:
        return {kind.value: amount for kind, amount in self._balances.items()}

    def __repr__(self) -> str:
        return f"CurrencyLedger({self.as_dict()!r})"
