"""
Tutorial progress tracking.

`TutorialState` values match the server's tutorial flag numbers so snapshots
round-trip. Only five of them make up the bootstrap sequence; the rest are
carried so a snapshot never loses a flag the server reported.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Iterable, Optional, Set, Tuple, Union


class TutorialState(Enum):
    LEGAL_SCREEN = 0
    AVATAR_SELECTION = 1
    ACCOUNT_CREATION = 2
    POKEMON_CAPTURE = 3
    NAME_SELECTION = 4
    POKEMON_BERRY = 5
    USE_ITEM = 6
    FIRST_TIME_EXPERIENCE_COMPLETE = 7
    POKESTOP_TUTORIAL = 8
    GYM_TUTORIAL = 9

    @classmethod
    def parse(cls, value: Union[int, str]) -> Optional["TutorialState"]:
        """Accept either the flag number or its name; ``None`` if unknown."""
        if isinstance(value, str):
            return cls.__members__.get(value)
        try:
            return cls(value)
        except ValueError:
            return None


BOOTSTRAP_ORDER: Tuple[TutorialState, ...] = (
    TutorialState.LEGAL_SCREEN,
    TutorialState.AVATAR_SELECTION,
    TutorialState.NAME_SELECTION,
    TutorialState.POKEMON_CAPTURE,
    TutorialState.FIRST_TIME_EXPERIENCE_COMPLETE,
)


class TutorialProgress:
    """Set of completed tutorial flags. Marking is monotonic."""

    def __init__(self, completed: Iterable[TutorialState] = ()) -> None:
        self._completed: Set[TutorialState] = set(completed)

    def mark(self, flag: TutorialState) -> bool:
        """Mark `flag` complete. Returns False if it already was."""
        if flag in self._completed:
            return False
        self._completed.add(flag)
        return True

    def is_complete(self, flag: TutorialState) -> bool:
        return flag in self._completed

    def next_milestone(self) -> Optional[TutorialState]:
        """First bootstrap milestone not yet complete, or None when done."""
        for flag in BOOTSTRAP_ORDER:
            if flag not in self._completed:
                return flag
        return None

    @property
    def completed(self) -> FrozenSet[TutorialState]:
        return frozenset(self._completed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TutorialProgress):
            return NotImplemented
        return self._completed == other._completed

    def __repr__(self) -> str:
        names = sorted(flag.name for flag in self._completed)
        return f"TutorialProgress({names!r})"
