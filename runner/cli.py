from __future__ import annotations

import argparse
import os


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="File server smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8080"))
    parser.add_argument("--user", default=os.getenv("SMOKE_USER", "admin"))
    parser.add_argument("--password", default=os.getenv("SMOKE_PASSWORD", "123456"))
    parser.add_argument("--path", default="/", help="path expected to be served after login")
    parser.add_argument("--timeout", type=float, default=20.0)
    return parser.parse_args(argv)
