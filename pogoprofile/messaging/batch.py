"""
Named-slot request batches.

Many operations send a primary request together with the standard
post-action companions. The server answers at fixed positions:

    0  primary
    1  GET_HATCHED_EGGS
    2  GET_INVENTORY
    3  CHECK_AWARDED_BADGES
    4  DOWNLOAD_SETTINGS

A `BatchPlan` records which slot holds what so consumers read
``responses.inventory`` instead of indexing a raw list. Decoding is
all-or-nothing: every requested slot is decoded before anything is
returned, so a bad settings payload fails the batch before the caller has
applied the primary response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from pogoprofile.core.exceptions import DecodeError
from pogoprofile.messaging import requests as msg
from pogoprofile.messaging.decoder import ResponseDecoder
from pogoprofile.messaging.requests import RequestType, ServerRequest

PRIMARY = "primary"
CHALLENGE = "challenge"
HATCHED_EGGS = "hatched_eggs"
INVENTORY = "inventory"
AWARDED_BADGES = "awarded_badges"
SETTINGS = "settings"

# Slots every standard-batch consumer applies.
APPLIED_SLOTS: Tuple[str, ...] = (PRIMARY, INVENTORY, SETTINGS)


@dataclass(frozen=True)
class BatchResponses:
    """Decoded responses by slot name; slots that were not decoded are None."""

    primary: Any = None
    challenge: Any = None
    hatched_eggs: Any = None
    inventory: Any = None
    awarded_badges: Any = None
    settings: Any = None


@dataclass(frozen=True)
class BatchPlan:
    requests: Tuple[ServerRequest, ...]
    slots: Mapping[str, int]

    def kind_of(self, slot: str) -> RequestType:
        return self.requests[self.slots[slot]].type

    def decode(
        self,
        payloads: Sequence[bytes],
        decoder: ResponseDecoder,
        names: Optional[Iterable[str]] = None,
    ) -> BatchResponses:
        """
        Decode the named slots (all slots when `names` is None).

        Extra trailing payloads are ignored. A slot past the end of
        `payloads` raises DecodeError.
        """
        decoded: Dict[str, Any] = {}
        for name in names if names is not None else self.slots:
            index = self.slots[name]
            kind = self.kind_of(name)
            if index >= len(payloads):
                raise DecodeError(
                    kind.value,
                    f"response slot {index} missing ({len(payloads)} payloads received)",
                )
            decoded[name] = decoder.decode(payloads[index], kind)
        return BatchResponses(**decoded)


def profile_batch(locale: Any) -> BatchPlan:
    """GET_PLAYER with a challenge check; only the player slot is consumed."""
    return BatchPlan(
        requests=(msg.get_player(locale), msg.check_challenge()),
        slots={PRIMARY: 0, CHALLENGE: 1},
    )


def single_batch(request: ServerRequest) -> BatchPlan:
    return BatchPlan(requests=(request,), slots={PRIMARY: 0})


def standard_batch(
    primary: ServerRequest,
    inventory_timestamp_ms: int = 0,
    settings_hash: str = "",
) -> BatchPlan:
    """`primary` followed by the standard post-action companions."""
    return BatchPlan(
        requests=(
            primary,
            msg.get_hatched_eggs(),
            msg.get_inventory(inventory_timestamp_ms),
            msg.check_awarded_badges(),
            msg.download_settings(settings_hash),
        ),
        slots={
            PRIMARY: 0,
            HATCHED_EGGS: 1,
            INVENTORY: 2,
            AWARDED_BADGES: 3,
            SETTINGS: 4,
        },
    )
