from __future__ import annotations

from fastapi import Request, Response, status
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from ..domain.basic_auth import parse_basic_auth
from ..domain.credentials import CredentialStore
from ..domain.identity import client_ip, peer_address
from ..logging_conf import get_logger

logger = get_logger("fileserver.auth")

DEFAULT_REALM = "File Server Login"
UNAUTHORIZED_BODY = "authentication failed, please enter a valid username and password\n"


class AuthGate(BaseHTTPMiddleware):
    """HTTP Basic authentication in front of an inner ASGI app.

    Every request produces exactly one audit line:
    - no (or unparseable) credentials -> 401 + challenge, inner app skipped
    - unknown user or wrong password  -> 401 + challenge, inner app skipped
    - valid credentials               -> inner app called with the request as-is

    Each request is judged on its own; there is no lockout or rate limiting.
    """

    def __init__(self, app: ASGIApp, store: CredentialStore, realm: str = DEFAULT_REALM) -> None:
        super().__init__(app)
        self.store = store
        self.realm = realm

    def challenge(self) -> Response:
        return PlainTextResponse(
            UNAUTHORIZED_BODY,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={
                "WWW-Authenticate": f'Basic realm="{self.realm}"',
                "X-Content-Type-Options": "nosniff",
            },
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        ip = client_ip(peer_address(request.client))
        path = request.url.path
        credentials = parse_basic_auth(request.headers.get("Authorization"))

        if credentials is None:
            logger.warning(
                "[%s] auth failed - no credentials (path: %s)",
                ip,
                path,
                extra={
                    "event": "auth_failed",
                    "reason": "no_credentials",
                    "client_ip": ip,
                    "path": path,
                },
            )
            return self.challenge()

        username = credentials.username
        if not self.store.verify(username, credentials.password):
            logger.warning(
                "[%s] auth failed - bad credentials (username: %s, path: %s)",
                ip,
                username,
                path,
                extra={
                    "event": "auth_failed",
                    "reason": "bad_credentials",
                    "client_ip": ip,
                    "username": username,
                    "path": path,
                },
            )
            return self.challenge()

        logger.info(
            "[%s] auth succeeded - username: %s (path: %s)",
            ip,
            username,
            path,
            extra={
                "event": "auth_succeeded",
                "client_ip": ip,
                "username": username,
                "path": path,
            },
        )
        return await call_next(request)
