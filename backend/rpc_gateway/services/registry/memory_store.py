from __future__ import annotations

from typing import Dict, List, Optional

from rpc_gateway.config import settings

from .codec import decode_endpoints, encode_endpoints
from .store import EndpointRegistry


class InMemoryEndpointRegistry(EndpointRegistry):
    """
    Process-local registry holding the same serialized JSON arrays as Redis.

    Used for single-process deployments and as the substitutable fake in tests.
    Every write swaps in a freshly encoded string, so there is no in-place mutation.
    """

    def __init__(
        self,
        universe: Optional[List[str]] = None,
        healthy: Optional[List[str]] = None,
        universe_key: Optional[str] = None,
        healthy_key: Optional[str] = None,
    ) -> None:
        self.universe_key = universe_key or settings.registry_universe_key
        self.healthy_key = healthy_key or settings.registry_healthy_key
        self._values: Dict[str, str] = {}
        if universe is not None:
            self._values[self.universe_key] = encode_endpoints(universe)
        if healthy is not None:
            self._values[self.healthy_key] = encode_endpoints(healthy)

    async def get_universe(self) -> List[str]:
        return decode_endpoints(self._values.get(self.universe_key), key=self.universe_key)

    async def get_healthy(self) -> List[str]:
        return decode_endpoints(self._values.get(self.healthy_key), key=self.healthy_key)

    async def put_healthy(self, endpoints: List[str]) -> None:
        self._values[self.healthy_key] = encode_endpoints(endpoints)

    async def put_universe(self, endpoints: List[str]) -> None:
        self._values[self.universe_key] = encode_endpoints(endpoints)

    def raw(self, key: str) -> Optional[str]:
        return self._values.get(key)
