"""Smoke runner exercising a running file server end to end."""
