"""Per-request relay pipeline and response policy."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import RelaySettings
from .errors import DownstreamError, PayloadMalformed, RelayError
from .forwarder import FORWARD_STEP, forward_game_result
from .models import RelayReport, StepOutcome
from .payload import GameResultBatch, decode_body, extract_rewards, parse_batches
from .rewards import save_player_rewards
from .unity import UnityServicesClient, open_http_client

logger = logging.getLogger(__name__)

PARSE_STEP = "parse"
EXTRACT_STEP = "extract"
TOKEN_STEP = "token"
REWARD_STEP = "reward"
PROCESS_STEP = "process"


class GameResultRelay:
    """Turns one webhook body into Unity calls and decides the response status.

    Downstream failures never change the status: they are logged and kept in
    the report as swallowed outcomes.
    """

    def __init__(self, settings: RelaySettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    async def handle(self, raw_body: bytes) -> RelayReport:
        report = RelayReport()
        policy = self.settings.policy

        try:
            payload = decode_body(raw_body)
        except PayloadMalformed as exc:
            logger.warning("Failed to parse JSON body: %s", exc)
            return self._malformed(report, PARSE_STEP, exc)
        logger.debug("JSON body parsed")

        # null, false, 0 and "" count as no payload; empty arrays and objects do not.
        no_payload = not payload and not isinstance(payload, (list, dict))
        if no_payload and not policy.reject_malformed_payload:
            report.add(StepOutcome.skipped(PARSE_STEP, "empty payload"))
            return report

        batches: list[GameResultBatch] | None = None
        try:
            batches = parse_batches(payload)
        except PayloadMalformed as exc:
            logger.warning("Game result payload has an unexpected shape: %s", exc)
            if policy.reject_malformed_payload:
                return self._malformed(report, EXTRACT_STEP, exc)
            report.add(StepOutcome.logged_failure(EXTRACT_STEP, exc))

        try:
            await self._relay(payload, batches, report)
        except Exception as exc:
            logger.exception("Unexpected error while processing game result")
            error = RelayError(f"unexpected processing error: {exc}")
            if policy.fail_on_processing_error:
                report.status_code = 500
                report.add(StepOutcome.caller_failure(PROCESS_STEP, error))
            else:
                report.add(StepOutcome.logged_failure(PROCESS_STEP, error))
        return report

    def _malformed(self, report: RelayReport, step: str, error: PayloadMalformed) -> RelayReport:
        if self.settings.policy.reject_malformed_payload:
            report.status_code = error.status_code
            report.add(StepOutcome.caller_failure(step, error))
        else:
            report.add(StepOutcome.logged_failure(step, error))
        return report

    async def _relay(self, payload: Any, batches: list[GameResultBatch] | None, report: RelayReport) -> None:
        settings = self.settings
        if not settings.forwarding_enabled and not settings.rewards_enabled:
            report.add(StepOutcome.skipped(TOKEN_STEP, "forwarding and rewards are disabled"))
            return

        logger.info("[Webhook] Game result received, relaying to Unity")
        async with open_http_client(settings, self._transport) as http:
            unity = UnityServicesClient(settings, http)

            try:
                token = await unity.exchange_token()
            except DownstreamError as exc:
                logger.error("[Webhook] Token exchange error, skipping Unity calls: %s", exc)
                report.add(StepOutcome.logged_failure(TOKEN_STEP, exc))
                return
            if not token:
                report.add(StepOutcome.skipped(TOKEN_STEP, "Unity settings are incomplete"))
                return
            report.add(StepOutcome.ok(TOKEN_STEP))

            try:
                report.add(await forward_game_result(unity, payload, token))
            except DownstreamError as exc:
                logger.error("[Webhook] Error calling Cloud Code for game result: %s", exc)
                report.add(StepOutcome.logged_failure(FORWARD_STEP, exc))

            if not settings.rewards_enabled:
                report.add(StepOutcome.skipped(REWARD_STEP, "CLOUD_SAVE_REWARDS_ENABLED is off"))
                return
            if batches is None:
                return

            for reward in extract_rewards(batches):
                try:
                    await save_player_rewards(unity, reward.player_id, reward.xp_earned, reward.gold_earned, token)
                except DownstreamError as exc:
                    logger.error("[Webhook] Rewards for playerId=%s not saved: %s", reward.player_id, exc)
                    report.add(StepOutcome.logged_failure(REWARD_STEP, exc))
                else:
                    report.add(StepOutcome.ok(REWARD_STEP, reward.player_id))
