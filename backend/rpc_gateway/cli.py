"""
Command line entry point.

``run-cycle`` is what an external scheduler (cron, systemd timer, k8s CronJob)
invokes once per interval when the in-process scheduler is disabled.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from rpc_gateway.config import settings
from rpc_gateway.errors import StoreUnavailable
from rpc_gateway.services.health import HealthMonitor
from rpc_gateway.services.registry import close_registry, get_registry, normalize_endpoints, require_http_urls

logger = logging.getLogger(__name__)


async def run_cycle() -> int:
    registry = get_registry()
    monitor = HealthMonitor(registry)
    try:
        report = await monitor.run_cycle()
    finally:
        await monitor.close()
        await close_registry()
    print(json.dumps(report.to_dict(), indent=2))
    return 0 if report.published else 1


async def set_endpoints(urls: List[str]) -> int:
    try:
        endpoints = normalize_endpoints(require_http_urls(urls))
    except ValueError as exc:
        logger.error("Refusing endpoint list: %s", exc)
        return 2
    if not endpoints:
        logger.error("No usable endpoint URLs given")
        return 2
    registry = get_registry()
    try:
        await registry.put_universe(endpoints)
    finally:
        await close_registry()
    print(json.dumps({"universe": endpoints}, indent=2))
    return 0


async def show() -> int:
    registry = get_registry()
    try:
        universe = await registry.get_universe()
        healthy = await registry.get_healthy()
    finally:
        await close_registry()
    print(json.dumps({"universe": universe, "healthy": healthy}, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Health-aware JSON-RPC gateway")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("run-cycle", help="Probe every endpoint once and publish the healthy set")
    p_set = sub.add_parser("set-endpoints", help="Replace the configured endpoint universe")
    p_set.add_argument("urls", nargs="+")
    sub.add_parser("show", help="Print the universe and the healthy set")
    p_serve = sub.add_parser("serve", help="Run the gateway HTTP server")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "run-cycle":
            return asyncio.run(run_cycle())
        if args.command == "set-endpoints":
            return asyncio.run(set_endpoints(args.urls))
        if args.command == "show":
            return asyncio.run(show())
    except StoreUnavailable as exc:
        logger.error("Endpoint registry unavailable: %s", exc)
        return 1

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "rpc_gateway.main:app",
            host=args.host,
            port=args.port,
            log_level=settings.log_level.lower(),
        )
        return 0
    return 2


if __name__ == "__main__":
    sys.exit(main())
