import base64

import pytest

from quantumrelay.backend.config import LENIENT, STRICT
from quantumrelay.backend.errors import AuthRejected
from quantumrelay.backend.security import basic_credentials, secret_matches, verify_webhook_secret


def test_secret_matches_is_exact_byte_equality() -> None:
    assert secret_matches("photon-secret", "photon-secret") is True
    assert secret_matches("Photon-secret", "photon-secret") is False
    assert secret_matches("photon-secret ", "photon-secret") is False
    assert secret_matches(None, "photon-secret") is False


@pytest.mark.parametrize("policy", [LENIENT, STRICT])
def test_verify_webhook_secret_rejects_mismatch_when_secret_configured(policy) -> None:
    verify_webhook_secret("photon-secret", "photon-secret", policy)

    with pytest.raises(AuthRejected):
        verify_webhook_secret("wrong", "photon-secret", policy)
    with pytest.raises(AuthRejected):
        verify_webhook_secret(None, "photon-secret", policy)


def test_lenient_policy_accepts_anything_without_configured_secret() -> None:
    verify_webhook_secret(None, "", LENIENT)
    verify_webhook_secret("whatever", "", LENIENT)


def test_strict_policy_rejects_everything_without_configured_secret() -> None:
    with pytest.raises(AuthRejected):
        verify_webhook_secret("whatever", "", STRICT)


def test_basic_credentials_encodes_key_and_secret() -> None:
    header = basic_credentials("key-1", "sa-secret")

    assert header.startswith("Basic ")
    assert base64.b64decode(header.removeprefix("Basic ")) == b"key-1:sa-secret"
