"""Thin async client for the Unity Gaming Services REST APIs used by the relay."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .config import RelaySettings
from .errors import (
    CloudSaveWriteFailed,
    DownstreamError,
    ForwardFailed,
    TokenExchangeFailed,
    TokenExchangeMalformed,
)
from .models import HttpResult
from .security import basic_credentials

logger = logging.getLogger(__name__)

TOKEN_EXCHANGE_URL = "https://services.api.unity.com/auth/v1/token-exchange"
CLOUD_CODE_SCRIPT_URL = "https://cloud-code.services.api.unity.com/v1/projects/{project_id}/scripts/{script_name}"
CLOUD_SAVE_ITEMS_URL = "https://cloud-save.services.api.unity.com/v1/data/projects/{project_id}/players/{player_id}/items"


def open_http_client(
    settings: RelaySettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the per-invocation HTTP client. A None timeout waits forever."""
    return httpx.AsyncClient(timeout=settings.http_timeout_sec, transport=transport)


def _to_result(response: httpx.Response) -> HttpResult:
    body = response.text
    parsed: Any = None
    if body:
        try:
            parsed = response.json()
        except ValueError:
            parsed = None
    return HttpResult(status_code=response.status_code, body=body, json=parsed)


class UnityServicesClient:
    def __init__(self, settings: RelaySettings, http: httpx.AsyncClient) -> None:
        self.settings = settings
        self._http = http

    async def _post(
        self,
        url: str,
        *,
        headers: dict[str, str],
        error_cls: type[DownstreamError],
        params: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> HttpResult:
        try:
            response = await self._http.post(url, headers=headers, params=params, json=json_body)
        except httpx.HTTPError as exc:
            raise error_cls(f"POST {url} failed: {exc}") from exc
        return _to_result(response)

    async def exchange_token(self) -> str | None:
        """Trade the service-account key pair for a short-lived access token.

        Returns None when the Unity settings are incomplete; the caller then
        skips every Unity call.
        """
        settings = self.settings
        if not settings.unity_configured:
            logger.warning(
                "Unity settings missing (UNITY_PROJECT_ID, UNITY_ENVIRONMENT_ID, UNITY_SA_KEY_ID, "
                "UNITY_SA_SECRET). Unity services will not be called."
            )
            return None

        logger.info("Calling Unity token exchange")
        result = await self._post(
            TOKEN_EXCHANGE_URL,
            headers={"Authorization": basic_credentials(settings.unity_sa_key_id, settings.unity_sa_secret)},
            params={
                "projectId": settings.unity_project_id,
                "environmentId": settings.unity_environment_id,
            },
            error_cls=TokenExchangeFailed,
        )
        if not result.ok:
            logger.error("Token exchange failed: status=%s body=%s", result.status_code, result.body)
            raise TokenExchangeFailed("token exchange failed", status_code=result.status_code, body=result.body)

        token = result.json.get("accessToken") if isinstance(result.json, dict) else None
        if not token:
            logger.error("Token exchange response has no accessToken: %s", result.body)
            raise TokenExchangeMalformed(
                "token exchange response has no accessToken", status_code=result.status_code, body=result.body
            )

        logger.info("Token exchange OK")
        return token

    async def run_script(self, token: str, script_name: str, params: dict[str, Any]) -> HttpResult:
        url = CLOUD_CODE_SCRIPT_URL.format(
            project_id=quote(self.settings.unity_project_id, safe=""),
            script_name=quote(script_name, safe=""),
        )
        return await self._post(
            url,
            headers={"Authorization": f"Bearer {token}"},
            json_body={"params": params},
            error_cls=ForwardFailed,
        )

    async def save_player_item(self, token: str, player_id: str, key: str, value: Any) -> HttpResult:
        url = CLOUD_SAVE_ITEMS_URL.format(
            project_id=quote(self.settings.unity_project_id, safe=""),
            player_id=quote(player_id, safe=""),
        )
        return await self._post(
            url,
            headers={"Authorization": f"Bearer {token}"},
            json_body={"key": key, "value": value},
            error_cls=CloudSaveWriteFailed,
        )
