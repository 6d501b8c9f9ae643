"""Pure domain utilities: credentials, Basic auth decoding, client identity.

These modules are free of FastAPI/HTTP framework concerns so they can be
unit-tested on their own and shared by the middleware and the smoke runner.
"""
__all__ = ["basic_auth", "credentials", "identity"]
