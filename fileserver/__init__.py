"""Read-only file server gated by HTTP Basic credentials.

Exposes ``__version__`` from the installed distribution metadata.
"""
from importlib.metadata import PackageNotFoundError, version

try:  # Resolves once the project is installed; plain checkouts fall back.
    __version__ = version("basic-auth-fileserver")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
