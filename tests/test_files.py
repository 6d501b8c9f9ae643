"""
Tests for the static file engine with directory listings.
"""
from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from starlette.applications import Starlette
from starlette.routing import Mount

from fileserver.service import files
from fileserver.service.files import DirectoryFiles, list_directory, render_listing


@pytest.fixture
def engine(shared_root: Path) -> DirectoryFiles:
    return DirectoryFiles(directory=shared_root)


@pytest.fixture
def files_client(engine: DirectoryFiles) -> TestClient:
    # Mounted in an app so HTTP exceptions become responses.
    app = Starlette(routes=[Mount("/", app=engine)])
    return TestClient(app)


class TestListDirectory:
    def test_sorted_with_directory_suffix(self, shared_root: Path):
        assert list_directory(shared_root / "sub") == ["a dir/", "b.txt"]

    def test_render_escapes_and_quotes(self):
        body = render_listing(["a dir/", "x&y.txt"])
        assert '<a href="a%20dir/">a dir/</a>' in body
        assert '<a href="x%26y.txt">x&amp;y.txt</a>' in body
        assert body.startswith("<!doctype html>")


class TestDirectoryFiles:
    def test_serves_file_bytes(self, files_client):
        r = files_client.get("/hello.txt")
        assert r.status_code == 200
        assert r.content == b"hello world\n"
        assert r.headers["content-type"].startswith("text/plain")
        assert r.headers["content-length"] == "12"

    def test_byte_range(self, files_client):
        r = files_client.get("/hello.txt", headers={"Range": "bytes=0-4"})
        assert r.status_code == 206
        assert r.content == b"hello"

    def test_missing_file_is_404(self, files_client):
        assert files_client.get("/nope.txt").status_code == 404

    def test_root_listing(self, files_client):
        r = files_client.get("/")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/html")
        for name in ("hello.txt", "sub/", "site/"):
            assert f">{name}</a>" in r.text

    def test_directory_without_slash_redirects(self, files_client):
        r = files_client.get("/sub", follow_redirects=False)
        assert r.status_code in (302, 307)
        assert r.headers["location"].endswith("/sub/")

        r = files_client.get("/sub")
        assert r.status_code == 200
        assert ">b.txt</a>" in r.text

    def test_directory_index_is_served(self, files_client):
        r = files_client.get("/site/")
        assert r.status_code == 200
        assert r.text == "<h1>site index</h1>"

    def test_write_methods_are_rejected(self, files_client):
        assert files_client.put("/hello.txt", content=b"x").status_code == 405

    def test_head_on_directory_has_length_but_no_body(self, files_client, shared_root: Path):
        r = files_client.head("/sub/")
        expected = render_listing(list_directory(shared_root / "sub")).encode()
        assert r.status_code == 200
        assert r.content == b""
        assert r.headers["content-length"] == str(len(expected))
        assert r.headers["content-type"].startswith("text/html")


class TestPermissionErrors:
    def test_unreadable_file_is_403_not_a_challenge(self, engine, files_client, monkeypatch):
        def denied(path):
            raise PermissionError(path)

        monkeypatch.setattr(engine, "lookup_path", denied)
        r = files_client.get("/hello.txt")
        assert r.status_code == 403
        assert "WWW-Authenticate" not in r.headers

    def test_unlistable_directory_is_403(self, files_client, monkeypatch):
        def denied(path):
            raise PermissionError(path)

        monkeypatch.setattr(files, "list_directory", denied)
        r = files_client.get("/sub/")
        assert r.status_code == 403
        assert "WWW-Authenticate" not in r.headers
