"""Static file serving with directory listings.

Starlette's StaticFiles handles regular files (content type, length, ETag,
byte ranges, HEAD) and keeps lookups inside the root. This subclass adds what
it leaves out for directories: redirect to the slashed URL, serve
``index.html`` when present, and otherwise render a plain link listing.
"""
from __future__ import annotations

import html
import os
import stat
from collections.abc import Iterable
from urllib.parse import quote

import anyio
import anyio.to_thread
from fastapi import status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.datastructures import URL
from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.types import Scope

__all__ = [
    "DirectoryFiles",
    "list_directory",
    "render_listing",
]

INDEX_FILE = "index.html"


def list_directory(path: str | os.PathLike[str]) -> list[str]:
    """Return entry names under ``path`` sorted by name; directories end in ``/``."""
    names: list[str] = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            names.append(entry.name + "/" if is_dir else entry.name)
    return sorted(names)


def render_listing(names: Iterable[str]) -> str:
    """Render entry names as an HTML ``<pre>`` block of relative links."""
    lines = [
        "<!doctype html>",
        '<meta name="viewport" content="width=device-width">',
        "<pre>",
    ]
    for name in names:
        lines.append(f'<a href="{quote(name)}">{html.escape(name)}</a>')
    lines.append("</pre>")
    return "\n".join(lines) + "\n"


class DirectoryFiles(StaticFiles):
    """StaticFiles that also answers directory requests."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code == status.HTTP_401_UNAUTHORIZED:
                # Starlette reports PermissionError as 401, which clients would
                # read as an auth challenge.
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN) from exc
            if exc.status_code != status.HTTP_404_NOT_FOUND:
                raise
            full_path, stat_result = await anyio.to_thread.run_sync(self.lookup_path, path)
            if stat_result is None or not stat.S_ISDIR(stat_result.st_mode):
                raise

        if not scope["path"].endswith("/"):
            url = URL(scope=scope)
            return RedirectResponse(url=url.replace(path=url.path + "/"))

        index_path, index_stat = await anyio.to_thread.run_sync(
            self.lookup_path, os.path.join(path, INDEX_FILE)
        )
        if index_stat is not None and stat.S_ISREG(index_stat.st_mode):
            return self.file_response(index_path, index_stat, scope)

        try:
            names = await anyio.to_thread.run_sync(list_directory, full_path)
        except PermissionError as exc:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN) from exc
        body = render_listing(names)
        if scope["method"] == "HEAD":
            return HTMLResponse(headers={"Content-Length": str(len(body.encode()))})
        return HTMLResponse(body)
