from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from rpc_gateway.config import settings
from rpc_gateway.services.health import HealthCheckScheduler, HealthMonitor
from rpc_gateway.services.registry import EndpointRegistry, get_registry
from rpc_gateway.services.routing import RandomEndpointSelector, RequestRouter, UpstreamForwarder

logger = logging.getLogger(__name__)


class Gateway:
    """
    Wires the registry, the request router and the health monitor for one
    process. The router and monitor share nothing but the registry.
    """

    def __init__(
        self,
        registry: Optional[EndpointRegistry] = None,
        upstream_client: Optional[httpx.AsyncClient] = None,
        probe_client: Optional[httpx.AsyncClient] = None,
        selector: Optional[RandomEndpointSelector] = None,
    ) -> None:
        self.registry = registry or get_registry()
        self._upstream_client = upstream_client or httpx.AsyncClient(
            limits=httpx.Limits(max_connections=settings.upstream_max_connections),
            timeout=httpx.Timeout(settings.upstream_timeout),
        )
        self.router = RequestRouter(
            registry=self.registry,
            forwarder=UpstreamForwarder(self._upstream_client),
            selector=selector,
        )
        self.monitor = HealthMonitor(self.registry, client=probe_client)
        self.scheduler = HealthCheckScheduler(self.monitor)

    async def close(self) -> None:
        await self.scheduler.stop()
        # Close outside the scheduler so an in-flight cycle is already cancelled
        await asyncio.gather(
            self.monitor.close(),
            self._upstream_client.aclose(),
            return_exceptions=True,
        )


# Global gateway instance
_gateway: Optional[Gateway] = None


def get_gateway() -> Gateway:
    """Get or create the global Gateway instance"""
    global _gateway
    if _gateway is None:
        _gateway = Gateway()
    return _gateway


def set_gateway(gateway: Optional[Gateway]) -> None:
    global _gateway
    _gateway = gateway
