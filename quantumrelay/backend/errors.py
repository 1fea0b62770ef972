"""Error taxonomy for the relay.

Caller-facing errors carry the status code the webhook caller receives.
Downstream errors are raised by the Unity calls, caught by the relay pipeline
and only ever logged.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for every error the relay raises on purpose."""


class CallerFacingError(RelayError):
    status_code = 500
    reason = "Internal Server Error"


class AuthRejected(CallerFacingError):
    status_code = 401
    reason = "Unauthorized"


class PayloadMalformed(CallerFacingError):
    status_code = 400
    reason = "Bad Request"


class DownstreamError(RelayError):
    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TokenExchangeFailed(DownstreamError):
    pass


class TokenExchangeMalformed(DownstreamError):
    pass


class ForwardFailed(DownstreamError):
    pass


class CloudSaveWriteFailed(DownstreamError):
    pass
