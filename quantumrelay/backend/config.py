"""Configuration helpers for backend runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_SCRIPT_NAME = "ProcessPhotonGameResult"
DEFAULT_SERVICE_NAME = "Quantum backend"


@dataclass(frozen=True)
class WebhookPolicy:
    """How the ingress answers when the request or payload is not usable."""

    name: str
    # Reject every request with 401 when no shared secret is configured.
    require_secret: bool
    # Answer 400 for unparseable or structurally invalid payloads instead of 200.
    reject_malformed_payload: bool
    # Answer 500 when an unexpected exception escapes processing.
    fail_on_processing_error: bool


LENIENT = WebhookPolicy(
    name="lenient",
    require_secret=False,
    reject_malformed_payload=False,
    fail_on_processing_error=False,
)
STRICT = WebhookPolicy(
    name="strict",
    require_secret=True,
    reject_malformed_payload=True,
    fail_on_processing_error=True,
)
POLICIES = {policy.name: policy for policy in (LENIENT, STRICT)}


@dataclass(frozen=True)
class RelaySettings:
    webhook_secret: str = ""
    unity_project_id: str = ""
    unity_environment_id: str = ""
    unity_sa_key_id: str = ""
    unity_sa_secret: str = ""
    cloud_code_script_name: str = DEFAULT_SCRIPT_NAME
    rewards_enabled: bool = True
    policy: WebhookPolicy = LENIENT
    service_name: str = DEFAULT_SERVICE_NAME
    http_timeout_sec: float | None = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @property
    def unity_configured(self) -> bool:
        return all(
            (
                self.unity_project_id,
                self.unity_environment_id,
                self.unity_sa_key_id,
                self.unity_sa_secret,
            )
        )

    @property
    def forwarding_enabled(self) -> bool:
        return bool(self.cloud_code_script_name)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_policy(raw: str) -> WebhookPolicy:
    policy = POLICIES.get(raw.strip().lower())
    if policy is None:
        raise ValueError(f"QUANTUM_WEBHOOK_POLICY must be one of {sorted(POLICIES)}, got {raw!r}")
    return policy


def load_settings() -> RelaySettings:
    port_raw = os.getenv("PORT", "3000")
    timeout_raw = os.getenv("UNITY_HTTP_TIMEOUT_SEC", "").strip()
    return RelaySettings(
        webhook_secret=os.getenv("PHOTON_WEBHOOK_SECRET", ""),
        unity_project_id=os.getenv("UNITY_PROJECT_ID", ""),
        unity_environment_id=os.getenv("UNITY_ENVIRONMENT_ID", ""),
        unity_sa_key_id=os.getenv("UNITY_SA_KEY_ID", ""),
        unity_sa_secret=os.getenv("UNITY_SA_SECRET", ""),
        cloud_code_script_name=os.getenv("CLOUD_CODE_SCRIPT_NAME", DEFAULT_SCRIPT_NAME).strip(),
        rewards_enabled=_parse_bool(
            "CLOUD_SAVE_REWARDS_ENABLED", os.getenv("CLOUD_SAVE_REWARDS_ENABLED", "true")
        ),
        policy=_parse_policy(os.getenv("QUANTUM_WEBHOOK_POLICY", LENIENT.name)),
        service_name=os.getenv("QUANTUM_SERVICE_NAME", DEFAULT_SERVICE_NAME),
        http_timeout_sec=float(timeout_raw) if timeout_raw else None,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(port_raw),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
