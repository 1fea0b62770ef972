"""FastAPI endpoints for the Photon game result webhook."""

from __future__ import annotations

import logging
from http import HTTPStatus

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import RelaySettings, load_settings
from .errors import CallerFacingError
from .relay import GameResultRelay
from .security import SECRET_HEADER, verify_webhook_secret

logger = logging.getLogger(__name__)


def create_app(
    settings: RelaySettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    relay_settings = settings if settings is not None else load_settings()
    app = FastAPI(title="Quantum Relay", version="0.1.0")
    relay = GameResultRelay(relay_settings, transport=transport)
    app.state.settings = relay_settings
    app.state.relay = relay

    if not relay_settings.webhook_secret:
        if relay_settings.policy.require_secret:
            logger.warning("PHOTON_WEBHOOK_SECRET is not set: every webhook request will be rejected with 401.")
        else:
            logger.warning("PHOTON_WEBHOOK_SECRET is not set: webhook requests are accepted without a secret.")

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def plain_http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        # Unknown routes and unsupported methods both answer 404.
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found\n", status_code=404)
        return PlainTextResponse(f"{exc.detail}\n", status_code=exc.status_code)

    @app.exception_handler(CallerFacingError)
    async def caller_facing_error(request: Request, exc: CallerFacingError) -> PlainTextResponse:
        return PlainTextResponse(exc.reason, status_code=exc.status_code)

    @app.get("/", response_class=PlainTextResponse)
    def index() -> str:
        return f"{relay_settings.service_name} OK\n"

    @app.post("/game/result", response_class=PlainTextResponse)
    async def game_result(request: Request) -> PlainTextResponse:
        client_host = request.client.host if request.client else "-"
        try:
            verify_webhook_secret(
                request.headers.get(SECRET_HEADER),
                relay_settings.webhook_secret,
                relay_settings.policy,
            )
        except CallerFacingError as exc:
            logger.warning("Webhook rejected from %s: %s", client_host, exc)
            raise

        body = await request.body()
        logger.debug("Raw body received: %s", body.decode("utf-8", errors="replace"))

        report = await relay.handle(body)
        if report.status_code == 200:
            return PlainTextResponse("OK\n")
        return PlainTextResponse(HTTPStatus(report.status_code).phrase, status_code=report.status_code)

    return app


app = create_app()
