from __future__ import annotations

import logging
from typing import Optional

from rpc_gateway.cors import PREFLIGHT_HEADERS, with_allow_origin
from rpc_gateway.errors import NoHealthyEndpoints
from rpc_gateway.services.registry import EndpointRegistry

from .forwarder import ProxyRequest, ProxyResponse, UpstreamForwarder
from .selector import RandomEndpointSelector

logger = logging.getLogger(__name__)


class RequestRouter:
    """
    Forwards one client request to one member of the healthy set.

    The router keeps no state between requests and never retries: the outcome of
    the single selected endpoint, good or bad, is the outcome of the request.
    """

    def __init__(
        self,
        registry: EndpointRegistry,
        forwarder: UpstreamForwarder,
        selector: Optional[RandomEndpointSelector] = None,
    ) -> None:
        self._registry = registry
        self._forwarder = forwarder
        self._selector = selector or RandomEndpointSelector()

    @staticmethod
    def preflight() -> ProxyResponse:
        return ProxyResponse(status_code=204, headers=list(PREFLIGHT_HEADERS.items()))

    async def select_endpoint(self) -> str:
        # StoreUnavailable propagates to the caller as-is
        healthy = await self._registry.get_healthy()
        if not healthy:
            raise NoHealthyEndpoints()
        return self._selector.choose(healthy)

    async def route(self, request: ProxyRequest) -> ProxyResponse:
        if request.method.upper() == "OPTIONS":
            return self.preflight()

        endpoint = await self.select_endpoint()
        logger.debug("Routing %s %s to %s", request.method, request.path, endpoint)
        response = await self._forwarder.forward(endpoint, request)
        response.headers = with_allow_origin(response.headers)
        return response
