"""Write last-match rewards to Cloud Save player data."""

from __future__ import annotations

import logging
from typing import Any

from .errors import CloudSaveWriteFailed
from .models import RewardRecord
from .unity import UnityServicesClient

logger = logging.getLogger(__name__)

XP_KEY = "lastMatchXp"
GOLD_KEY = "lastMatchGold"


def reward_records(player_id: str, xp_earned: Any, gold_earned: Any) -> list[RewardRecord]:
    return [
        RewardRecord(player_id=player_id, key=XP_KEY, value=xp_earned),
        RewardRecord(player_id=player_id, key=GOLD_KEY, value=gold_earned),
    ]


async def save_player_rewards(
    unity: UnityServicesClient,
    player_id: str,
    xp_earned: Any,
    gold_earned: Any,
    token: str | None = None,
) -> list[RewardRecord]:
    """Write one item per reward key, in order, and return the records written.

    Without a token this is a no-op. The first non-2xx write raises
    CloudSaveWriteFailed and the remaining keys are not written.
    """
    if token is None:
        token = await unity.exchange_token()
    if not token:
        logger.warning("No Unity access token, Cloud Save not called for playerId=%s", player_id)
        return []

    written: list[RewardRecord] = []
    for record in reward_records(player_id, xp_earned, gold_earned):
        logger.info("Calling Cloud Save items for playerId=%s key=%s value=%s", player_id, record.key, record.value)
        response = await unity.save_player_item(token, player_id, record.key, record.value)
        if not response.ok:
            logger.error(
                "Cloud Save write failed for playerId=%s key=%s: status=%s body=%s",
                player_id,
                record.key,
                response.status_code,
                response.body,
            )
            raise CloudSaveWriteFailed(
                f"Cloud Save write of {record.key} for {player_id} returned {response.status_code}",
                status_code=response.status_code,
                body=response.body,
            )
        logger.info("Cloud Save OK for playerId=%s key=%s", player_id, record.key)
        written.append(record)
    return written
