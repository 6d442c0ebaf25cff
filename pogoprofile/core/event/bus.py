"""
pogoprofile EventBus: in-process async pub/sub for profile changes.

Purpose
-------
Lets host code react to mirror changes (profile synced, milestone completed,
codename claimed, badge equipped) without the orchestrator knowing who is
listening.

Responsibilities
----------------
- Register/unregister listeners with priorities
- Publish events to all matching listeners (exact + wildcard)
- Execute listeners by tier:
  * CRITICAL, HIGH: sequential, in registration order
  * NORMAL: concurrent (gather)
- Error isolation (one failing listener never blocks others or the publisher)

Design Decisions
----------------
- **Instance-based**: every session gets its own bus unless one is injected
- **Wildcard support**: ``fnmatch``-style patterns such as ``"profile.*"``
- **Publisher never fails**: listener exceptions are logged, counted and
  returned in place of the result
"""

from __future__ import annotations

import asyncio
import inspect
from collections import Counter
from fnmatch import fnmatchcase
from typing import Any, Optional

from pogoprofile.core.event.types import (
    CallbackType,
    EventListener,
    EventPayload,
    ListenerPriority,
)
from pogoprofile.core.logging.logger import LogContext, get_logger

logger = get_logger(__name__)


class EventBus:
    """
    Async EventBus with tiered listener execution.

    Thread Safety
    -------------
    Designed for single-threaded asyncio usage. All methods must be called
    from the same event loop.

    Examples
    --------
    >>> bus = EventBus()
    >>> bus.subscribe("tutorial.milestone_completed", on_milestone)
    >>> await bus.publish("tutorial.milestone_completed", {"milestone": "LEGAL_SCREEN"})
    """

    def __init__(self) -> None:
        self._listeners: list[EventListener] = []
        self._published: Counter[str] = Counter()
        self._errors: Counter[str] = Counter()

    # ------------------------------------------------------------------ #
    # Subscription API
    # ------------------------------------------------------------------ #

    @staticmethod
    def _validate_callback_signature(callback: CallbackType) -> None:
        """Ensure callback accepts exactly one parameter."""
        try:
            sig = inspect.signature(callback)
        except (TypeError, ValueError):
            # Built-ins may not expose a signature; trust the caller
            return

        params = list(sig.parameters.values())
        if len(params) != 1:
            callback_name = getattr(callback, "__qualname__", None) or repr(callback)
            raise ValueError(
                f"Event listener must accept exactly 1 parameter (EventPayload), "
                f"got {len(params)} parameters for '{callback_name}'"
            )

    def subscribe(
        self,
        event_name: str,
        callback: CallbackType,
        *,
        priority: ListenerPriority = ListenerPriority.NORMAL,
        identifier: Optional[str] = None,
        once: bool = False,
    ) -> str:
        """
        Subscribe a callback to an event name or wildcard pattern.

        Returns
        -------
        str:
            The listener identifier (for unsubscribing later).

        Raises
        ------
        ValueError:
            If callback signature is invalid.
        """
        self._validate_callback_signature(callback)

        listener = EventListener.from_callback(
            pattern=event_name,
            callback=callback,
            priority=priority,
            identifier=identifier,
            once=once,
        )

        for existing in self._listeners:
            if (
                existing.pattern == listener.pattern
                and existing.identifier == listener.identifier
            ):
                logger.warning(
                    "EventBus: duplicate listener prevented",
                    extra={"event_name": event_name, "listener_id": listener.identifier},
                )
                return existing.identifier

        self._listeners.append(listener)
        logger.debug(
            "EventBus: subscribed listener",
            extra={
                "event_name": event_name,
                "listener_id": listener.identifier,
                "priority": listener.priority.name,
                "once": listener.once,
            },
        )
        return listener.identifier

    def unsubscribe(self, event_name: str, identifier: str) -> bool:
        """Remove a listener; returns True if one was removed."""
        before = len(self._listeners)
        self._listeners = [
            listener
            for listener in self._listeners
            if not (listener.pattern == event_name and listener.identifier == identifier)
        ]
        return len(self._listeners) < before

    def clear(self) -> None:
        """Remove all listeners from all events."""
        self._listeners.clear()

    # ------------------------------------------------------------------ #
    # Publish API
    # ------------------------------------------------------------------ #

    def _extract_listeners(self, event_name: str) -> list[EventListener]:
        matched = [
            listener
            for listener in self._listeners
            if listener.pattern == event_name or fnmatchcase(event_name, listener.pattern)
        ]
        once_ids = {id(listener) for listener in matched if listener.once}
        if once_ids:
            self._listeners = [
                listener for listener in self._listeners if id(listener) not in once_ids
            ]
        # sorted() is stable, so registration order holds within a tier
        return sorted(matched, key=lambda listener: listener.priority.value)

    async def _invoke(
        self, event_name: str, listener: EventListener, payload: EventPayload
    ) -> Any:
        try:
            result = listener.callback(payload)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as exc:
            self._errors[event_name] += 1
            logger.error(
                "EventBus: listener failed",
                extra={
                    "event_name": event_name,
                    "listener_id": listener.identifier,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
                exc_info=True,
            )
            return exc

    async def publish(self, event_name: str, data: EventPayload) -> list[Any]:
        """
        Publish an event to all subscribed listeners.

        Returns
        -------
        list[Any]:
            Listener results in execution order; a failing listener
            contributes its exception instead of a result.
        """
        self._published[event_name] += 1
        listeners = self._extract_listeners(event_name)

        if not listeners:
            return []

        results: list[Any] = []
        async with LogContext(component="event_bus", operation=event_name):
            sequential = [l for l in listeners if l.priority.is_sequential]
            concurrent = [l for l in listeners if not l.priority.is_sequential]

            for listener in sequential:
                results.append(await self._invoke(event_name, listener, data))

            if concurrent:
                results.extend(
                    await asyncio.gather(
                        *(self._invoke(event_name, l, data) for l in concurrent)
                    )
                )

        return results

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def get_listener_count(self, event_name: Optional[str] = None) -> int:
        if event_name is None:
            return len(self._listeners)
        return sum(
            1
            for listener in self._listeners
            if listener.pattern == event_name or fnmatchcase(event_name, listener.pattern)
        )

    def get_metrics_summary(self) -> dict[str, Any]:
        total = sum(self._published.values())
        errors = sum(self._errors.values())
        return {
            "total_events_published": total,
            "events_by_type": dict(self._published),
            "total_errors": errors,
            "errors_by_event": dict(self._errors),
            "total_listeners": len(self._listeners),
        }
