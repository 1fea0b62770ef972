from __future__ import annotations

import copy
import json
from typing import Any

import httpx
import pytest

from quantumrelay.backend.config import RelaySettings

TOKEN_HOST = "services.api.unity.com"
CLOUD_CODE_HOST = "cloud-code.services.api.unity.com"
CLOUD_SAVE_HOST = "cloud-save.services.api.unity.com"

GAME_RESULT = [
    {
        "Result": {"Players": [{"PlayerSlot": 0, "Placement": 1, "XpEarned": 100, "GoldEarned": 50}]},
        "Clients": [{"PlayerSlot": 0, "UserId": "TEST_PLAYER_ID"}],
    }
]


class FakeUnity:
    """Records every outbound request and answers like the Unity APIs."""

    def __init__(
        self,
        token_status: int = 200,
        token_body: Any = None,
        script_status: int = 200,
        save_failures: dict[tuple[str, str], int] | None = None,
    ) -> None:
        self.token_status = token_status
        self.token_body = {"accessToken": "access-123"} if token_body is None else token_body
        self.script_status = script_status
        self.save_failures = save_failures or {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host == TOKEN_HOST:
            return httpx.Response(self.token_status, json=self.token_body)
        if host == CLOUD_CODE_HOST:
            return httpx.Response(self.script_status, json={"output": "processed"})
        if host == CLOUD_SAVE_HOST:
            item = json.loads(request.content)
            status = self.save_failures.get((self.player_id(request), item["key"]), 200)
            return httpx.Response(status, json={"writeLock": "lock-1"})
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, host: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.host == host]

    def token_calls(self) -> list[httpx.Request]:
        return self.calls(TOKEN_HOST)

    def script_calls(self) -> list[httpx.Request]:
        return self.calls(CLOUD_CODE_HOST)

    def save_calls(self) -> list[httpx.Request]:
        return self.calls(CLOUD_SAVE_HOST)

    @staticmethod
    def player_id(request: httpx.Request) -> str:
        # /v1/data/projects/{projectId}/players/{playerId}/items
        return request.url.path.split("/")[6]

    def saved_items(self) -> list[tuple[str, str, Any]]:
        saved = []
        for request in self.calls(CLOUD_SAVE_HOST):
            item = json.loads(request.content)
            saved.append((self.player_id(request), item["key"], item["value"]))
        return saved


@pytest.fixture()
def settings() -> RelaySettings:
    return RelaySettings(
        webhook_secret="photon-secret",
        unity_project_id="proj-1",
        unity_environment_id="env-1",
        unity_sa_key_id="key-1",
        unity_sa_secret="sa-secret",
    )


@pytest.fixture()
def fake_unity() -> FakeUnity:
    return FakeUnity()


@pytest.fixture()
def make_unity():
    return FakeUnity


@pytest.fixture()
def game_result() -> list[dict[str, Any]]:
    return copy.deepcopy(GAME_RESULT)
