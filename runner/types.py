from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CheckResult:
    """Outcome of a single smoke check."""

    name: str
    passed: bool
    status_code: int
    detail: str = ""


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., listener never ready)."""
