from __future__ import annotations

import base64
import binascii
from typing import NamedTuple

__all__ = [
    "BasicCredentials",
    "parse_basic_auth",
]

_SCHEME = "basic "


class BasicCredentials(NamedTuple):
    username: str
    password: str


def parse_basic_auth(header: str | None) -> BasicCredentials | None:
    """Decode an ``Authorization: Basic <base64(user:pass)>`` header value.

    Returns None for anything that is not a well-formed Basic credential:
    a missing header, another scheme, invalid base64, a payload that is not
    UTF-8, or a payload without a colon. The payload splits on its first
    colon, so the password may contain colons.
    """
    if not header or len(header) < len(_SCHEME):
        return None
    if header[: len(_SCHEME)].lower() != _SCHEME:
        return None

    try:
        decoded = base64.b64decode(header[len(_SCHEME) :], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return BasicCredentials(username, password)
