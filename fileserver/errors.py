from __future__ import annotations


class ConfigError(ValueError):
    """Raised when startup configuration is unusable; the server must not start."""
