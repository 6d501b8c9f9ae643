from __future__ import annotations

from typing import Any

__all__ = [
    "AddressError",
    "UNKNOWN_PEER",
    "split_host_port",
    "client_ip",
    "peer_address",
]

UNKNOWN_PEER = "unknown"


class AddressError(ValueError):
    """Raised when a transport address cannot be split into host and port."""


def split_host_port(address: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[ipv6]:port`` into its two parts.

    Brackets around an IPv6 host are removed. An empty port (``host:``) is
    accepted; a missing separator is not.

    Raises:
        AddressError: on a missing port, unbalanced brackets, or an
            unbracketed host that contains colons.
    """
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise AddressError(f"missing ']' in address: {address!r}")
        host, rest = address[1:end], address[end + 1 :]
        if not rest.startswith(":"):
            raise AddressError(f"missing port in address: {address!r}")
        port = rest[1:]
        if "[" in host or "]" in rest:
            raise AddressError(f"unexpected bracket in address: {address!r}")
        if ":" in port:
            raise AddressError(f"too many colons in address: {address!r}")
        return host, port

    host, sep, port = address.rpartition(":")
    if not sep:
        raise AddressError(f"missing port in address: {address!r}")
    if ":" in host:
        raise AddressError(f"too many colons in address: {address!r}")
    if "[" in address or "]" in address:
        raise AddressError(f"unexpected bracket in address: {address!r}")
    return host, port


def client_ip(address: str) -> str:
    """Return the host part of a ``host:port`` peer address.

    Falls back to ``address`` unchanged when it cannot be split; identity
    extraction must never abort a request.
    """
    try:
        host, _ = split_host_port(address)
    except AddressError:
        return address
    return host


def peer_address(client: Any) -> str:
    """Render an ASGI ``client`` (``(host, port)`` or None) as ``host:port``."""
    if not client:
        return UNKNOWN_PEER
    host, port = client[0], client[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"
