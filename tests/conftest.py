"""
pytest configuration and fixtures.
"""
from __future__ import annotations

import base64
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fileserver.config import Settings, load_settings
from fileserver.domain.credentials import CredentialStore, parse_users
from fileserver.logging_conf import CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME
from fileserver.main import create_app

AUDIT_LOGGERS = ("fileserver.auth", "fileserver.access")


def basic_header(username: str, password: str) -> dict[str, str]:
    """Authorization header for the given credentials."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


def audit_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    """Records emitted by the auth gate and the access logger, in order."""
    return [r for r in caplog.records if r.name in AUDIT_LOGGERS]


@pytest.fixture
def shared_root(tmp_path: Path) -> Path:
    """A small directory tree to serve."""
    root = tmp_path / "share"
    root.mkdir()
    (root / "hello.txt").write_text("hello world\n")
    (root / "x&y.txt").write_text("ampersand\n")
    sub = root / "sub"
    sub.mkdir()
    (sub / "b.txt").write_text("b\n")
    (sub / "a dir").mkdir()
    site = root / "site"
    site.mkdir()
    (site / "index.html").write_text("<h1>site index</h1>")
    return root


@pytest.fixture
def store() -> CredentialStore:
    return parse_users("alice:secret,bob:pa:ss")


@pytest.fixture
def settings(shared_root: Path) -> Settings:
    return load_settings(root=shared_root, users="alice:secret,bob:pa:ss", port=0)


@pytest.fixture
def client(settings: Settings) -> TestClient:
    """Client for the full app; lifespan events are not run."""
    return TestClient(create_app(settings))


@pytest.fixture
def alice() -> dict[str, str]:
    return basic_header("alice", "secret")


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo handler/level changes made by setup_logging()."""
    root = logging.getLogger()
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        if handler.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
