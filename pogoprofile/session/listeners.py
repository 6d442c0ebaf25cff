"""
Tutorial listeners: host hooks that override the default bootstrap choices.

Each hook returns a concrete choice or ``None`` for "no opinion". Hooks may
be plain methods or coroutines. The registry asks listeners in
registration order and the first non-``None`` answer wins.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, List, Optional

from pogoprofile.core.logging.logger import get_logger

if TYPE_CHECKING:
    from pogoprofile.domain.models.avatar import PlayerAvatar
    from pogoprofile.modules.bootstrap.service import BootstrapOrchestrator

logger = get_logger(__name__)


class TutorialListener:
    """
    Base listener; override only the hooks you care about.

    Hooks run while the orchestrator holds the session lock, which is not
    reentrant. A hook may read `orchestrator.mirror` but must not await
    another orchestrator operation; doing so deadlocks the session.
    """

    def select_avatar(self, orchestrator: BootstrapOrchestrator) -> Optional[PlayerAvatar]:
        return None

    def select_starter(self, orchestrator: BootstrapOrchestrator) -> Optional[str]:
        """Return a starter species name (e.g. ``"SQUIRTLE"``)."""
        return None

    def claim_name(
        self, orchestrator: BootstrapOrchestrator, last_failure: Optional[str]
    ) -> Optional[str]:
        """Return a codename to claim; `last_failure` is the last rejected one."""
        return None


class ListenerRegistry:
    def __init__(self) -> None:
        self._listeners: List[TutorialListener] = []

    def register(self, listener: TutorialListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister(self, listener: TutorialListener) -> bool:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._listeners)

    async def first_answer(self, hook: str, *args: Any) -> Any:
        """Ask each listener's `hook` in order; return the first non-None answer."""
        for listener in self._listeners:
            answer = getattr(listener, hook)(*args)
            if inspect.isawaitable(answer):
                answer = await answer
            if answer is not None:
                logger.debug(
                    "Listener override applied",
                    extra={"hook": hook, "listener": type(listener).__name__},
                )
                return answer
        return None
