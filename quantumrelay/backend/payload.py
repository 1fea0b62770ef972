"""Game result payload parsing and reward extraction."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import PayloadMalformed
from .models import PlayerReward

logger = logging.getLogger(__name__)


class PlayerResult(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    # Only presence is checked; values pass through as sent.
    slot: Any = Field(alias="PlayerSlot")
    placement: Any = Field(default=None, alias="Placement")
    xp_earned: Any = Field(default=None, alias="XpEarned")
    gold_earned: Any = Field(default=None, alias="GoldEarned")


class ClientInfo(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    slot: Any = Field(default=None, alias="PlayerSlot")
    user_id: Any = Field(default=None, alias="UserId")


class MatchResult(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    players: list[PlayerResult] = Field(alias="Players")


class GameResultBatch(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    result: MatchResult = Field(alias="Result")
    clients: list[ClientInfo] | None = Field(default=None, alias="Clients")

    def client_for_slot(self, slot: Any) -> ClientInfo | None:
        for client in self.clients or []:
            if same_slot(client.slot, slot):
                return client
        return None


def same_slot(left: Any, right: Any) -> bool:
    """Strict slot equality: numbers match numbers, nothing is coerced."""
    if isinstance(left, bool) or isinstance(right, bool):
        return left is right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


_BATCHES = TypeAdapter(list[GameResultBatch])


def decode_body(raw: bytes) -> Any:
    """Parse the raw request body as JSON."""
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise PayloadMalformed(f"body is not valid JSON: {exc}") from exc


def parse_batches(payload: Any) -> list[GameResultBatch]:
    """Check the presence of Result.Players in every batch of the payload."""
    if not isinstance(payload, list) or not payload:
        raise PayloadMalformed("payload must be a non-empty array of game results")
    try:
        return _BATCHES.validate_python(payload)
    except ValidationError as exc:
        raise PayloadMalformed(f"unexpected game result shape ({exc.error_count()} error(s))") from exc


def extract_rewards(batches: list[GameResultBatch]) -> list[PlayerReward]:
    """Join each player result to its client by PlayerSlot.

    Players without a matching client, or whose client carries no UserId,
    are skipped.
    """
    rewards: list[PlayerReward] = []
    for batch in batches:
        for player in batch.result.players:
            client = batch.client_for_slot(player.slot)
            if client is None or client.user_id is None:
                logger.info("No client found for PlayerSlot %s, skipping reward", player.slot)
                continue
            reward = PlayerReward(
                player_id=str(client.user_id),
                slot=player.slot,
                placement=player.placement,
                xp_earned=player.xp_earned or 0,
                gold_earned=player.gold_earned or 0,
            )
            logger.info(
                "Result received - playerId=%s slot=%s placement=%s xpEarned=%s goldEarned=%s",
                reward.player_id,
                reward.slot,
                reward.placement,
                reward.xp_earned,
                reward.gold_earned,
            )
            rewards.append(reward)
    return rewards
