"""Result types for bootstrap steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from pogoprofile.domain.models.profile import ProfileMirror
from pogoprofile.domain.models.tutorial import TutorialState


class StepStatus(Enum):
    COMPLETED = "completed"
    ALREADY_COMPLETE = "already_complete"
    REJECTED = "rejected"


@dataclass(frozen=True)
class StepResult:
    step: str
    status: StepStatus
    milestone: Optional[TutorialState] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status is not StepStatus.REJECTED


class BootstrapState(Enum):
    """Where a session stands in the bootstrap sequence."""

    UNINITIALIZED = "uninitialized"
    PROFILE_FETCHED = "profile_fetched"
    LEGAL_ACCEPTED = "legal_accepted"
    AVATAR_SET = "avatar_set"
    NAME_CLAIMED = "name_claimed"
    STARTER_CAUGHT = "starter_caught"
    FIRST_TIME_EXPERIENCE_COMPLETE = "first_time_experience_complete"

    @classmethod
    def of(cls, mirror: ProfileMirror) -> "BootstrapState":
        """Furthest state reached, walking the bootstrap order."""
        if not mirror.is_populated:
            return cls.UNINITIALIZED
        state = cls.PROFILE_FETCHED
        for milestone, reached in _MILESTONE_STATES:
            if not mirror.is_milestone_complete(milestone):
                break
            state = reached
        return state


_MILESTONE_STATES = (
    (TutorialState.LEGAL_SCREEN, BootstrapState.LEGAL_ACCEPTED),
    (TutorialState.AVATAR_SELECTION, BootstrapState.AVATAR_SET),
    (TutorialState.NAME_SELECTION, BootstrapState.NAME_CLAIMED),
    (TutorialState.POKEMON_CAPTURE, BootstrapState.STARTER_CAUGHT),
    (
        TutorialState.FIRST_TIME_EXPERIENCE_COMPLETE,
        BootstrapState.FIRST_TIME_EXPERIENCE_COMPLETE,
    ),
)
