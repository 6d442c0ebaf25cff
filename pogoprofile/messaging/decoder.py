"""
Response decoding.

`ResponseDecoder` is the contract; `JsonResponseDecoder` is the reference
implementation used when payloads are UTF-8 JSON objects.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Type

from pogoprofile.core.exceptions import DecodeError
from pogoprofile.domain.models.base import DomainValidationError
from pogoprofile.messaging.requests import RequestType
from pogoprofile.messaging.responses import (
    CheckAwardedBadgesResponse,
    CheckChallengeResponse,
    ClaimCodenameResponse,
    DownloadSettingsResponse,
    EncounterTutorialCompleteResponse,
    EquipBadgeResponse,
    GetHatchedEggsResponse,
    GetInventoryResponse,
    GetPlayerResponse,
    LevelUpRewardsResponse,
    MarkTutorialCompleteResponse,
    SetAvatarResponse,
)

RESPONSE_TYPES: Dict[RequestType, Type[Any]] = {
    RequestType.GET_PLAYER: GetPlayerResponse,
    RequestType.CHECK_CHALLENGE: CheckChallengeResponse,
    RequestType.GET_HATCHED_EGGS: GetHatchedEggsResponse,
    RequestType.GET_INVENTORY: GetInventoryResponse,
    RequestType.CHECK_AWARDED_BADGES: CheckAwardedBadgesResponse,
    RequestType.DOWNLOAD_SETTINGS: DownloadSettingsResponse,
    RequestType.SET_AVATAR: SetAvatarResponse,
    RequestType.ENCOUNTER_TUTORIAL_COMPLETE: EncounterTutorialCompleteResponse,
    RequestType.CLAIM_CODENAME: ClaimCodenameResponse,
    RequestType.MARK_TUTORIAL_COMPLETE: MarkTutorialCompleteResponse,
    RequestType.LEVEL_UP_REWARDS: LevelUpRewardsResponse,
    RequestType.EQUIP_BADGE: EquipBadgeResponse,
}


class ResponseDecoder(ABC):
    """Turns one raw payload into the typed response for `kind`."""

    @abstractmethod
    def decode(self, payload: bytes, kind: RequestType) -> Any:
        """
        Raises
        ------
        DecodeError
            If `payload` is not a valid `kind` response.
        """


class JsonResponseDecoder(ResponseDecoder):
    """
    Decode UTF-8 JSON object payloads.

    >>> JsonResponseDecoder().decode(b'{"result": "SUCCESS"}', RequestType.EQUIP_BADGE)
    EquipBadgeResponse(result=<Result.SUCCESS: 'SUCCESS'>, equipped=None)
    """

    def decode(self, payload: bytes, kind: RequestType) -> Any:
        response_type = RESPONSE_TYPES.get(kind)
        if response_type is None:
            raise DecodeError(kind.value, "no response type registered")
        if not isinstance(payload, (bytes, bytearray)):
            raise DecodeError(kind.value, f"expected bytes, got {type(payload).__name__}")

        try:
            data = json.loads(payload.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise DecodeError(kind.value, f"payload is not UTF-8: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise DecodeError(kind.value, f"payload is not JSON: {exc.msg}") from exc

        try:
            return response_type.from_dict(data)
        except KeyError as exc:
            raise DecodeError(kind.value, f"missing field {exc}") from exc
        except (TypeError, ValueError, DomainValidationError) as exc:
            raise DecodeError(kind.value, str(exc)) from exc
