#!/usr/bin/env python3
"""High-level smoke runner against a running file server.

Steps:
- wait for the listener
- request without credentials, expect 401 with a Basic challenge
- request with a wrong password, expect 401
- request with the configured credentials, expect a non-error status
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from fileserver.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import fetch, wait_for_listener
from runner.types import CheckResult

logger = get_logger("runner")


def _is_challenge(r: httpx.Response) -> bool:
    return r.status_code == 401 and r.headers.get("WWW-Authenticate", "").lower().startswith("basic")


async def run_checks(
    *,
    base_url: str,
    user: str,
    password: str,
    path: str = "/",
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[CheckResult]:
    results: list[CheckResult] = []

    r = await fetch(base_url, path, transport=transport)
    results.append(CheckResult("no_credentials_rejected", _is_challenge(r), r.status_code))

    r = await fetch(base_url, path, auth=(user, password + "-wrong"), transport=transport)
    results.append(CheckResult("bad_password_rejected", _is_challenge(r), r.status_code))

    r = await fetch(base_url, path, auth=(user, password), transport=transport)
    results.append(
        CheckResult(
            "credentials_accepted",
            r.status_code < 400,
            r.status_code,
            detail=r.headers.get("content-type", ""),
        )
    )

    for res in results:
        log = logger.info if res.passed else logger.error
        log(
            "check.%s",
            res.name,
            extra={
                "event": "check",
                "check": res.name,
                "passed": res.passed,
                "status_code": res.status_code,
            },
        )
    return results


async def run_smoke(
    *,
    base_url: str,
    user: str,
    password: str,
    path: str = "/",
    timeout_s: float = 20.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    await wait_for_listener(base_url, timeout_s, transport=transport)
    results = await run_checks(
        base_url=base_url, user=user, password=password, path=path, transport=transport
    )
    failed = [r.name for r in results if not r.passed]
    logger.info(
        "runner.summary",
        extra={
            "component": "runner",
            "event": "summary",
            "checks": len(results),
            "failed": failed,
        },
    )
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> None:
    setup_logging()
    args = parse_args(sys.argv[1:] if argv is None else argv)
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            user=args.user,
            password=args.password,
            path=args.path,
            timeout_s=args.timeout,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
