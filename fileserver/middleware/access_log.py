from __future__ import annotations

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from ..domain.identity import client_ip, peer_address
from ..logging_conf import get_logger

logger = get_logger("fileserver.access")


class AccessLogger(BaseHTTPMiddleware):
    """Log the client and requested path, then always forward to the inner app."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        ip = client_ip(peer_address(request.client))
        path = request.url.path
        logger.info(
            "[%s] file access - path: %s",
            ip,
            path,
            extra={"event": "file_access", "client_ip": ip, "path": path},
        )
        return await call_next(request)
