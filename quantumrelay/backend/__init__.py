"""Backend package for the Quantum game result relay."""

from .config import LENIENT, STRICT, RelaySettings, WebhookPolicy, load_settings
from .errors import (
    AuthRejected,
    CloudSaveWriteFailed,
    ForwardFailed,
    PayloadMalformed,
    RelayError,
    TokenExchangeFailed,
    TokenExchangeMalformed,
)
from .models import FailureScope, RelayReport, StepOutcome, StepStatus
from .relay import GameResultRelay
from .security import basic_credentials, verify_webhook_secret

__all__ = [
    "AuthRejected",
    "basic_credentials",
    "CloudSaveWriteFailed",
    "FailureScope",
    "ForwardFailed",
    "GameResultRelay",
    "LENIENT",
    "load_settings",
    "PayloadMalformed",
    "RelayError",
    "RelayReport",
    "RelaySettings",
    "StepOutcome",
    "StepStatus",
    "STRICT",
    "TokenExchangeFailed",
    "TokenExchangeMalformed",
    "verify_webhook_secret",
    "WebhookPolicy",
]
