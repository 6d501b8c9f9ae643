"""Startup configuration and its validation phase.

load_settings() turns plain CLI/env values into a frozen Settings object or
raises ConfigError. It never exits the process; the entry point decides that.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .domain.credentials import CredentialStore, parse_users
from .errors import ConfigError
from .middleware.auth import DEFAULT_REALM

__all__ = [
    "ConfigError",
    "Settings",
    "load_settings",
]


class Settings(BaseModel):
    """Validated, read-only server configuration."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    host: str = "0.0.0.0"
    port: int = Field(8080, ge=0, le=65535)
    root: Path
    users: CredentialStore
    log_path: Optional[Path] = None
    realm: str = DEFAULT_REALM

    @field_validator("root")
    @classmethod
    def _root_must_be_directory(cls, value: Path) -> Path:
        resolved = value.expanduser().resolve()
        if not resolved.exists():
            raise ValueError(f"shared path does not exist: {resolved}")
        if not resolved.is_dir():
            raise ValueError(f"shared path is not a directory: {resolved}")
        return resolved


def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e["loc"]) or "settings"
        parts.append(f"{loc}: {e['msg']}")
    return "; ".join(parts)


def load_settings(
    *,
    root: str | Path,
    users: str = "",
    host: str = "0.0.0.0",
    port: int = 8080,
    log_path: str | Path | None = None,
) -> Settings:
    """Parse and validate startup values.

    Raises:
        ConfigError: on malformed users, a missing or non-directory root,
            or any out-of-range value.
    """
    store = parse_users(users)
    try:
        return Settings(
            host=host,
            port=port,
            root=Path(root),
            users=store,
            log_path=Path(log_path) if log_path else None,
        )
    except ValidationError as e:
        raise ConfigError(_describe(e)) from e
