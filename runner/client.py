from __future__ import annotations

import asyncio
import time

import httpx

from fileserver.logging_conf import get_logger
from runner.types import SmokeError

logger = get_logger("runner.client")


async def wait_for_listener(
    base_url: str, timeout_s: float = 20.0, *, transport: httpx.AsyncBaseTransport | None = None
) -> None:
    """Request / until the server answers at all or raise after a timeout.

    - Any HTTP response counts, including the 401 challenge
    - Logs a concise status once the listener is up
    """
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0, transport=transport) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/")
            except httpx.TransportError:
                await asyncio.sleep(0.25)
                continue
            logger.info(
                "listener.ok",
                extra={"event": "listener_ok", "status_code": r.status_code},
            )
            return
    raise SmokeError(f"no response from {base_url} within {timeout_s}s")


async def fetch(
    base_url: str,
    path: str,
    auth: tuple[str, str] | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """GET ``path`` once, optionally with Basic credentials; redirects are followed."""
    async with httpx.AsyncClient(
        base_url=base_url,
        timeout=10.0,
        transport=transport,
        follow_redirects=True,
    ) as client:
        return await client.get(path, auth=auth)
