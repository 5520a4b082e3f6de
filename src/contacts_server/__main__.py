"""Command-line entry point: ``python -m contacts_server``.

Example
-------
    OAUTH_CLIENT_ID=... OAUTH_CLIENT_SECRET=... python -m contacts_server --port 3000
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from contacts_server.servers.main import create_app
from contacts_server.session_auth.config import AuthSettings
from contacts_server.utils.environment import env_str
from contacts_server.utils.logging import setup_logging

logger = logging.getLogger("contacts-server.cli")

_UVICORN_LEVELS = ("critical", "error", "warning", "info", "debug")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="contacts-server",
        description="Contacts web server with OAuth login and cookie sessions.",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=3000, help="Bind port (default: 3000)")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=Path(".env"),
        help="KEY=VALUE file loaded before reading settings (default: .env)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level; falls back to $CONTACTS_LOG_LEVEL, then INFO",
    )
    return parser.parse_args(argv)


def _uvicorn_log_level(level: int) -> str:
    """Map the level setup_logging resolved to a name uvicorn accepts."""
    name = logging.getLevelName(level).lower()
    return name if name in _UVICORN_LEVELS else "info"


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    if args.env_file.exists():
        # real environment wins over the file
        load_dotenv(args.env_file, override=False)

    level = args.log_level or env_str("CONTACTS_LOG_LEVEL", "INFO")
    root = setup_logging(level)

    settings = AuthSettings.from_env()
    if not settings.client_id or not settings.client_secret:
        logger.warning(
            "OAUTH_CLIENT_ID / OAUTH_CLIENT_SECRET not set – /auth will answer 500 "
            "until they are configured."
        )

    uvicorn.run(
        create_app(settings),
        host=args.host,
        port=args.port,
        log_level=_uvicorn_log_level(root.level),
    )


if __name__ == "__main__":
    main()
