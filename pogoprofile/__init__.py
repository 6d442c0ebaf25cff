"""
pogoprofile: account bootstrap and profile synchronization for a game
client session.

Quick start
-----------
>>> from pogoprofile import BootstrapOrchestrator, ProfileSession
>>> orchestrator = BootstrapOrchestrator(ProfileSession(dispatcher))
>>> await orchestrator.run_bootstrap()

Logging is not configured on import; hosts call
``pogoprofile.core.logging.setup_logging()`` when they want it.
"""

from pogoprofile.core.exceptions import (
    CodenameExhausted,
    DecodeError,
    DispatchError,
    PartialSyncError,
    ProfileSyncException,
    RemoteServerError,
    SessionError,
)
from pogoprofile.domain.models import (
    CurrencyKind,
    Gender,
    PlayerAvatar,
    ProfileMirror,
    TutorialState,
)
from pogoprofile.messaging import Dispatcher, JsonResponseDecoder, RequestType, ServerRequest
from pogoprofile.modules.badges import BadgeSyncResult
from pogoprofile.modules.bootstrap import (
    BootstrapOrchestrator,
    BootstrapState,
    StepResult,
    StepStatus,
)
from pogoprofile.modules.codename import ClaimStatus, CodenameClaimResult
from pogoprofile.modules.rewards import LevelUpRewards, RewardStatus
from pogoprofile.modules.shared.exceptions import InvalidCurrencyKind
from pogoprofile.session import PlayerLocale, ProfileSession, TutorialListener

__version__ = "0.1.0"

__all__ = [
    "BadgeSyncResult",
    "BootstrapOrchestrator",
    "BootstrapState",
    "ClaimStatus",
    "CodenameClaimResult",
    "CodenameExhausted",
    "CurrencyKind",
    "DecodeError",
    "Dispatcher",
    "DispatchError",
    "Gender",
    "InvalidCurrencyKind",
    "JsonResponseDecoder",
    "LevelUpRewards",
    "PartialSyncError",
    "PlayerAvatar",
    "PlayerLocale",
    "ProfileMirror",
    "ProfileSession",
    "ProfileSyncException",
    "RemoteServerError",
    "RequestType",
    "RewardStatus",
    "ServerRequest",
    "SessionError",
    "StepResult",
    "StepStatus",
    "TutorialListener",
    "TutorialState",
]
