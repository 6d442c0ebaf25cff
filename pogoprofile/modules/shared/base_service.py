"""
Base Service Foundation

Purpose
-------
Provides the foundational class for the profile services. Services send
request batches through the session's dispatcher, decode the answers,
apply them to the mirror and collaborators, and emit domain events.

Design Notes
------------
This base class provides:
- Structured logging with operation context
- Safe config access patterns
- Event emission helpers
- Batch dispatch/decode helpers with the standard post-action batch
- Companion application (inventory, stats, settings)

What this class does NOT do:
- Take the session lock. Every service method assumes the caller (the
  bootstrap orchestrator) already holds ``session.lock``.
- Retry. Dispatch and decode failures propagate unmodified.

Usage
-----
    class BadgeSynchronizer(BaseService):
        async def sync(self) -> BadgeSyncResult:
            responses = await self.send(single_batch(msg.check_awarded_badges()))
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Sequence

from pogoprofile.messaging import batch as batches
from pogoprofile.messaging.batch import BatchPlan, BatchResponses
from pogoprofile.messaging.requests import ServerRequest, names_of

if TYPE_CHECKING:
    from logging import Logger

    from pogoprofile.core.config.manager import ConfigManager
    from pogoprofile.core.event.bus import EventBus
    from pogoprofile.domain.models.profile import ProfileMirror
    from pogoprofile.session.context import ProfileSession


class BaseService:
    """
    Base class for all profile services.

    Args:
        session: Per-session state (dispatcher, decoder, mirror, collaborators)
        config_manager: Tunable configuration (class or instance)
        event_bus: Event bus for domain events
        logger: Structured logger instance
    """

    def __init__(
        self,
        session: ProfileSession,
        config_manager: type[ConfigManager] | ConfigManager,
        event_bus: EventBus,
        logger: Logger,
    ) -> None:
        self._session = session
        self._config = config_manager
        self._events = event_bus
        self.log = logger

    @property
    def mirror(self) -> ProfileMirror:
        return self._session.mirror

    # ------------------------------------------------------------------ #
    # Config / events / logging
    # ------------------------------------------------------------------ #

    def get_config(
        self, key: str, default: Optional[Any] = None, required: bool = False
    ) -> Any:
        """
        Safely retrieve configuration value.

        Raises:
            ConfigurationError: If required=True and key is missing
        """
        from pogoprofile.core.exceptions import ConfigurationError

        value = self._config.get(key, default)
        if required and value is None:
            raise ConfigurationError(
                key, f"Required configuration key '{key}' is missing"
            )
        return value

    async def emit_event(
        self,
        event_type: str,
        data: Dict[str, Any],
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Publish a domain event tagged with the session id."""
        payload = {"session_id": self._session.session_id, **data, **(context or {})}
        await self._events.publish(event_type, payload)

    def log_operation(self, operation: str, **context: Any) -> None:
        self.log.info(
            f"Service operation: {operation}",
            extra={"operation": operation, **context},
        )

    def log_error(self, operation: str, error: Exception, **context: Any) -> None:
        self.log.error(
            f"Service error during {operation}: {error}",
            extra={
                "operation": operation,
                "error_type": type(error).__name__,
                "error_message": str(error),
                **context,
            },
        )

    # ------------------------------------------------------------------ #
    # Dispatch helpers
    # ------------------------------------------------------------------ #

    def standard_batch(self, primary: ServerRequest) -> BatchPlan:
        return batches.standard_batch(
            primary,
            inventory_timestamp_ms=self._session.inventory.last_timestamp_ms,
            settings_hash=self._session.settings.hash,
        )

    async def dispatch(self, plan: BatchPlan) -> Sequence[bytes]:
        kinds = names_of(plan.requests)
        self.log.debug("Dispatching batch", extra={"request_types": kinds})
        try:
            payloads = await self._session.dispatcher.send(list(plan.requests))
        except Exception as exc:
            self.log_error("dispatch", exc, request_types=kinds)
            raise
        return payloads

    async def send(
        self, plan: BatchPlan, names: Optional[Iterable[str]] = None
    ) -> BatchResponses:
        """Dispatch `plan` and decode the named slots (all if None)."""
        payloads = await self.dispatch(plan)
        return plan.decode(payloads, self._session.decoder, names)

    async def send_standard(self, primary: ServerRequest) -> BatchResponses:
        """Send `primary` in the standard batch and decode the applied slots."""
        return await self.send(self.standard_batch(primary), batches.APPLIED_SLOTS)

    def apply_companions(self, responses: BatchResponses) -> None:
        """Apply the inventory and settings slots of a standard batch."""
        inventory = responses.inventory
        self._session.inventory.update_inventories(inventory)
        if inventory.player_stats is not None:
            self.mirror.apply_stats(inventory.player_stats)
        self._session.settings.update_settings(responses.settings)
