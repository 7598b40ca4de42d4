#!/usr/bin/env python3
"""Smoke probe for a running login gate deployment.

Steps:
- wait for server health
- send the legacy-endpoint, hidden-path and POST pass-through checks
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from login_gate.logging_conf import get_logger, setup_logging
from probe.cli import parse_args
from probe.client import run_checks, wait_for_health
from probe.utils import build_checks, summarize

logger = get_logger("probe")


async def run_probe(
    *,
    base_url: str,
    hidden_path: str,
    block_path: str = "",
    site_url: str = "",
    timeout_s: float = 20.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    checks = build_checks(hidden_path=hidden_path, block_path=block_path, site_url=site_url)
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0, transport=transport) as client:
        await wait_for_health(client, timeout_s=timeout_s)
        results = await run_checks(client, checks)
    summary, exit_code = summarize(results)
    logger.info("probe.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    setup_logging()
    args = parse_args(argv if argv is not None else sys.argv[1:])
    code = asyncio.run(
        run_probe(
            base_url=args.base_url,
            hidden_path=args.hidden_path,
            block_path=args.block_path,
            site_url=args.site_url,
            timeout_s=args.timeout,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
