"""FastAPI app factory: one handler chain mounted over every path."""
from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from starlette.types import ASGIApp

from . import __version__
from .config import Settings
from .domain.credentials import CredentialStore
from .logging_conf import get_logger
from .middleware import DEFAULT_REALM, AccessLogger, AuthGate
from .service.files import DirectoryFiles

logger = get_logger("fileserver")


def build_handler(root: str | Path, store: CredentialStore, realm: str = DEFAULT_REALM) -> ASGIApp:
    """Compose auth -> access log -> file serving for ``root``.

    Authentication runs first so unauthenticated requests never touch the
    filesystem and never reach the access log.
    """
    files = DirectoryFiles(directory=root)
    return AuthGate(AccessLogger(files), store=store, realm=realm)


def create_app(settings: Settings) -> FastAPI:
    # No docs/openapi routes: every path belongs to the shared tree.
    app = FastAPI(
        title="Basic-auth file server",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    @app.on_event("startup")
    async def _on_startup() -> None:
        logger.info("===== file server starting =====", extra={"event": "startup"})
        logger.info("listening on: http://%s:%d", settings.host, settings.port)
        logger.info("shared path: %s", settings.root)
        logger.info("configured users: %s", ", ".join(sorted(settings.users)))
        if settings.users.is_default:
            logger.warning(
                "no users configured, falling back to the built-in default account; "
                "set --users for anything beyond local testing",
                extra={"event": "default_credentials"},
            )
        if settings.log_path:
            logger.info("log file: %s", settings.log_path)
        logger.info("================================")
        logger.info("(press Ctrl+C to stop)")

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        logger.info("shutdown", extra={"event": "shutdown"})

    app.mount("/", build_handler(settings.root, settings.users, settings.realm), name="files")
    return app
