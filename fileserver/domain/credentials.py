from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from ..errors import ConfigError

__all__ = [
    "DEFAULT_USERNAME",
    "DEFAULT_PASSWORD",
    "CredentialStore",
    "parse_users",
]

# Installed when no users are configured. A convenience for local use only,
# never a credential to rely on; the server warns at startup when it is active.
DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "123456"


class CredentialStore(Mapping[str, str]):
    """Read-only username -> password mapping.

    Built once at startup and shared by every request handler. The backing
    dict is wrapped in a ``MappingProxyType`` so there is no mutation path.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, str] | Iterable[tuple[str, str]]) -> None:
        data = dict(entries)
        if not data:
            raise ConfigError("no valid users configured, check the users setting")
        self._entries: Mapping[str, str] = MappingProxyType(data)

    def __getitem__(self, username: str) -> str:
        return self._entries[username]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        # Usernames only; passwords must not end up in logs.
        return f"CredentialStore(users={sorted(self._entries)!r})"

    @property
    def is_default(self) -> bool:
        """True when the store holds only the built-in fallback account."""
        return dict(self._entries) == {DEFAULT_USERNAME: DEFAULT_PASSWORD}

    def verify(self, username: str, password: str) -> bool:
        """Return True if ``username`` exists and ``password`` matches exactly."""
        expected = self._entries.get(username)
        return expected is not None and expected == password


def parse_users(config: str) -> CredentialStore:
    """Build a CredentialStore from ``user1:pass1,user2:pass2``.

    Rules:
    - Empty input installs the fallback ``admin``/``123456`` account.
    - Segments are comma-separated and trimmed; empty segments are skipped.
    - Each segment splits on the first colon, so passwords may contain colons.
    - Later duplicates of a username overwrite earlier ones.

    Raises:
        ConfigError: for a segment without a colon, an empty username or
            password, or input that yields no users at all.
    """
    if not config.strip():
        return CredentialStore({DEFAULT_USERNAME: DEFAULT_PASSWORD})

    users: dict[str, str] = {}
    for raw in config.split(","):
        segment = raw.strip()
        if not segment:
            continue
        username, sep, password = segment.partition(":")
        if not sep:
            raise ConfigError(
                f"malformed user entry: {segment!r} (expected user:pass,user2:pass2)"
            )
        username, password = username.strip(), password.strip()
        if not username or not password:
            raise ConfigError(f"username and password must not be empty: {segment!r}")
        users[username] = password

    return CredentialStore(users)
