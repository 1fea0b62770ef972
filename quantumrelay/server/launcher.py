"""Server launcher for the Quantum game result relay."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from urllib import error, request

import uvicorn
from dotenv import load_dotenv

from quantumrelay.backend.config import load_settings
from quantumrelay.backend.logs import configure_logging

logger = logging.getLogger("quantumrelay.server")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Quantum game result relay")
    parser.add_argument("--host", default=None, help="listen address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="listen port (default: PORT or 3000)")
    parser.add_argument("--log-level", default=None, help="root log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--env-file", default=".env", help="dotenv file loaded before reading settings")
    parser.add_argument(
        "--check",
        metavar="URL",
        default=None,
        help="request GET / from a running relay and exit 0 when it answers",
    )
    return parser.parse_args(argv)


def wait_for_server(server_url: str, timeout_s: float = 8.0) -> bool:
    start = time.time()
    while time.time() - start < timeout_s:
        try:
            with request.urlopen(f"{server_url.rstrip('/')}/", timeout=0.5) as response:
                if int(response.status) == 200:
                    return True
        except (error.URLError, TimeoutError):
            pass
        time.sleep(0.2)
    return False


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    load_dotenv(args.env_file)

    if args.check is not None:
        if wait_for_server(args.check):
            return 0
        print(f"Relay not reachable at {args.check}", file=sys.stderr)
        return 1

    settings = load_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    log_level = (args.log_level or settings.log_level).upper()
    configure_logging(log_level)

    logger.info("Starting Quantum relay (policy=%s)", settings.policy.name)
    logger.info("Listening on http://%s:%s", host, port)
    uvicorn.run(
        "quantumrelay.backend.api:app",
        host=host,
        port=port,
        log_level=log_level.lower(),
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
