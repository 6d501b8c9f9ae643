"""Request-gating stages, each an ASGI middleware wrapping the next app."""
from .access_log import AccessLogger
from .auth import DEFAULT_REALM, AuthGate

__all__ = ["AccessLogger", "AuthGate", "DEFAULT_REALM"]
