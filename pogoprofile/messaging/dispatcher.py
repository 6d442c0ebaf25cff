"""
Dispatcher contract.

The dispatcher is the transport collaborator: it encodes requests, sends
them as one batch, and hands back one raw payload per request, in request
order. It may append requests of its own (challenge checks and the like);
any trailing extra payloads are ignored by the services here.

Authentication, retries, backoff, timeouts and encryption all belong to
the dispatcher. It reports failures by raising `DispatchError`, or
`SessionError` when the session itself was rejected.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from pogoprofile.messaging.requests import ServerRequest


class Dispatcher(ABC):
    """Abstract transport used by every orchestrator operation."""

    @abstractmethod
    async def send(self, requests: Sequence[ServerRequest]) -> Sequence[bytes]:
        """
        Send `requests` as a single batch.

        Returns
        -------
        Sequence[bytes]
            Raw response payloads index-aligned with `requests`.

        Raises
        ------
        DispatchError
            If the batch could not be delivered.
        SessionError
            If the server rejected the session.
        """
