"""Test doubles for the registry and for upstream RPC nodes"""

import json
from typing import Callable, Dict, List, Optional

import httpx
from redis.exceptions import ConnectionError as RedisConnectionError

from rpc_gateway.errors import StoreUnavailable
from rpc_gateway.services.registry import EndpointRegistry


class UnreachableRegistry(EndpointRegistry):
    """Registry whose backing store is down"""

    def __init__(self) -> None:
        self.calls: List[str] = []

    async def get_universe(self) -> List[str]:
        self.calls.append("get_universe")
        raise StoreUnavailable("connection refused")

    async def get_healthy(self) -> List[str]:
        self.calls.append("get_healthy")
        raise StoreUnavailable("connection refused")

    async def put_healthy(self, endpoints: List[str]) -> None:
        self.calls.append("put_healthy")
        raise StoreUnavailable("connection refused")

    async def put_universe(self, endpoints: List[str]) -> None:
        self.calls.append("put_universe")
        raise StoreUnavailable("connection refused")


class FakeRedisClient:
    """Minimal stand-in for the redis.asyncio client surface the registry uses"""

    def __init__(self, down: bool = False) -> None:
        self.values: Dict[str, str] = {}
        self.down = down
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        if self.down:
            raise RedisConnectionError("Connection refused")
        return self.values.get(key)

    async def set(self, key: str, value: str) -> bool:
        if self.down:
            raise RedisConnectionError("Connection refused")
        self.values[key] = value
        return True

    async def aclose(self) -> None:
        self.closed = True


def rpc_node_transport(
    routes: Dict[str, Callable[[httpx.Request], httpx.Response]],
    seen: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """
    Mock transport dispatching on scheme://host of the request URL.
    Hosts without a route fail with a connection error.
    """

    async def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        key = f"{request.url.scheme}://{request.url.host}"
        route = routes.get(key)
        if route is None:
            raise httpx.ConnectError("connection refused", request=request)
        result = route(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    return httpx.MockTransport(handler)


def health_ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "ok"})


def echo_rpc(name: str) -> Callable[[httpx.Request], httpx.Response]:
    """Node that answers getHealth with ok and echoes any other call"""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        if body.get("method") == "getHealth":
            return health_ok(request)
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": body.get("id"), "result": {"node": name}},
            headers={"X-Node": name},
        )

    return handler
