from __future__ import annotations

import argparse
import os
import sys

import uvicorn

from .config import load_settings
from .errors import ConfigError
from .logging_conf import get_logger, setup_logging
from .main import create_app

logger = get_logger("fileserver")


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments; every flag falls back to an environment variable."""
    parser = argparse.ArgumentParser(description="Share a local directory over HTTP with Basic auth")
    parser.add_argument(
        "--port",
        type=int,
        default=os.getenv("FILESERVER_PORT", "8080"),
        help="port to listen on (default: 8080)",
    )
    parser.add_argument(
        "--path",
        default=os.getenv("FILESERVER_PATH", "./"),
        help="local directory to share (default: current directory)",
    )
    parser.add_argument(
        "--users",
        default=os.getenv("FILESERVER_USERS", ""),
        help="accounts as user1:pass1,user2:pass2 (default: admin:123456)",
    )
    parser.add_argument(
        "--logpath",
        default=os.getenv("FILESERVER_LOG_PATH", ""),
        dest="log_path",
        help="optional log file, e.g. /var/log/file-server.log",
    )
    parser.add_argument("--host", default=os.getenv("FILESERVER_HOST", "0.0.0.0"))
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO").upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument(
        "--log-format",
        default=os.getenv("LOG_FORMAT", "text"),
        choices=["text", "json"],
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        setup_logging(args.log_level, log_path=args.log_path or None, fmt=args.log_format)
        settings = load_settings(
            root=args.path,
            users=args.users,
            host=args.host,
            port=args.port,
            log_path=args.log_path or None,
        )
    except ConfigError as e:
        logger.error("startup failed: %s", e, extra={"event": "startup_failed"})
        raise SystemExit(1) from e

    app = create_app(settings)
    # uvicorn exits non-zero by itself if the port cannot be bound.
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
        # Client identity must come from the socket peer, never X-Forwarded-For.
        proxy_headers=False,
    )


if __name__ == "__main__":
    main()
