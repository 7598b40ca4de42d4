from __future__ import annotations

import argparse
import os


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the login gate probe."""
    parser = argparse.ArgumentParser(description="Verify a deployed hidden login gate")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8000"))
    parser.add_argument(
        "--hidden-path",
        default=os.getenv("HIDDEN_LOGIN_PATH", ""),
        help="Configured hidden login path (e.g. my-login)",
    )
    parser.add_argument(
        "--block-path",
        default=os.getenv("BLOCK_REDIRECT_PATH", ""),
        help="Configured block redirect path; empty means site root",
    )
    parser.add_argument("--site-url", default=os.getenv("SITE_URL", ""))
    parser.add_argument("--timeout", type=float, default=20.0)
    return parser.parse_args(argv)
