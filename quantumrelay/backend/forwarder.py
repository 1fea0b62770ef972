"""Forward the raw game result to the Cloud Code processing script."""

from __future__ import annotations

import logging
from typing import Any

from .errors import ForwardFailed
from .models import StepOutcome
from .unity import UnityServicesClient

logger = logging.getLogger(__name__)

FORWARD_STEP = "forward"
PAYLOAD_PARAM = "photonGameResult"


async def forward_game_result(
    unity: UnityServicesClient,
    payload: Any,
    token: str | None = None,
) -> StepOutcome:
    """Run the configured Cloud Code script with the payload as its params.

    A non-2xx answer is logged and reported as a swallowed failure. Having no
    token at all raises ForwardFailed.
    """
    script_name = unity.settings.cloud_code_script_name
    if not script_name:
        return StepOutcome.skipped(FORWARD_STEP, "CLOUD_CODE_SCRIPT_NAME is blank")

    if token is None:
        token = await unity.exchange_token()
    if not token:
        raise ForwardFailed("no access token available for Cloud Code")

    logger.info("[CloudCode] Calling script %s", script_name)
    response = await unity.run_script(token, script_name, {PAYLOAD_PARAM: payload})
    logger.info("[CloudCode] Script response: status=%s body=%s", response.status_code, response.body)

    if not response.ok:
        error = ForwardFailed(
            f"Cloud Code script {script_name} returned {response.status_code}",
            status_code=response.status_code,
            body=response.body,
        )
        logger.error("[CloudCode] Script error: status=%s body=%s", response.status_code, response.body)
        return StepOutcome.logged_failure(FORWARD_STEP, error)

    logger.info("[CloudCode] Game result processed")
    return StepOutcome.ok(FORWARD_STEP, f"status={response.status_code}")
