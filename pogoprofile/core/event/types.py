"""
Core Event Types for the pogoprofile EventBus.

Priority Levels
---------------
- CRITICAL (0): Sequential, awaited. Use for state that other listeners read.
- HIGH (10): Sequential, awaited.
- NORMAL (50): Concurrent (asyncio.gather), awaited. Use for notifications.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

# Simple dict structure that should be JSON-serializable for best observability
EventPayload = dict[str, Any]


class ListenerPriority(Enum):
    """Priority levels for event listeners (lower value runs earlier)."""

    CRITICAL = 0
    HIGH = 10
    NORMAL = 50

    @property
    def is_sequential(self) -> bool:
        return self is not ListenerPriority.NORMAL


CallbackType = Union[
    Callable[[EventPayload], Any],
    Callable[[EventPayload], Awaitable[Any]],
]


@dataclass(slots=True, frozen=True)
class EventListener:
    """
    Represents a registered event listener.

    Attributes
    ----------
    pattern:
        Exact event name or wildcard pattern the listener was registered for.
    callback:
        Async or sync callable invoked with the event payload.
    priority:
        ListenerPriority determining execution order and concurrency.
    identifier:
        Unique string identifier for deduplication and unsubscription.
    once:
        If True, the listener is removed before its first execution.
    """

    pattern: str
    callback: CallbackType
    priority: ListenerPriority
    identifier: str
    once: bool = False

    @classmethod
    def from_callback(
        cls,
        pattern: str,
        callback: CallbackType,
        priority: ListenerPriority,
        identifier: Optional[str],
        once: bool,
    ) -> EventListener:
        """
        Create a listener, deriving an identifier from the callback if needed.

        >>> EventListener.from_callback(
        ...     "profile.synced", on_synced, ListenerPriority.NORMAL, None, False
        ... ).identifier
        'mymodule.on_synced@profile.synced'
        """
        if identifier is None:
            module = getattr(callback, "__module__", None) or "unknown"
            name = (
                getattr(callback, "__qualname__", None)
                or getattr(callback, "__name__", None)
                or type(callback).__name__
            )
            identifier = f"{module}.{name}@{pattern}"

        return cls(
            pattern=pattern,
            callback=callback,
            priority=priority,
            identifier=identifier,
            once=once,
        )
