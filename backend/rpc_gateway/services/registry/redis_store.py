from __future__ import annotations

import logging
from typing import Any, List, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from rpc_gateway.config import settings
from rpc_gateway.errors import StoreUnavailable

from .codec import decode_endpoints, encode_endpoints
from .store import EndpointRegistry

logger = logging.getLogger(__name__)


class RedisEndpointRegistry(EndpointRegistry):
    """
    Redis backend for the endpoint registry.

    Each key holds one JSON array written with a single SET, which Redis applies
    atomically, so readers never observe a list mixing two publishes.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        universe_key: Optional[str] = None,
        healthy_key: Optional[str] = None,
    ) -> None:
        if client is None:
            client = aioredis.from_url(
                settings.redis_url,
                password=settings.redis_password if settings.redis_password else None,
                decode_responses=True,
            )
        self.client = client
        self.universe_key = universe_key or settings.registry_universe_key
        self.healthy_key = healthy_key or settings.registry_healthy_key

    async def _get(self, key: str) -> Optional[str]:
        try:
            return await self.client.get(key)
        except (RedisError, OSError) as exc:
            logger.error("Registry read of %s failed: %s", key, exc)
            raise StoreUnavailable(f"Cannot read {key}: {exc}") from exc

    async def _set(self, key: str, endpoints: List[str]) -> None:
        try:
            await self.client.set(key, encode_endpoints(endpoints))
        except (RedisError, OSError) as exc:
            logger.error("Registry write of %s failed: %s", key, exc)
            raise StoreUnavailable(f"Cannot write {key}: {exc}") from exc

    async def get_universe(self) -> List[str]:
        return decode_endpoints(await self._get(self.universe_key), key=self.universe_key)

    async def get_healthy(self) -> List[str]:
        return decode_endpoints(await self._get(self.healthy_key), key=self.healthy_key)

    async def put_healthy(self, endpoints: List[str]) -> None:
        await self._set(self.healthy_key, endpoints)

    async def put_universe(self, endpoints: List[str]) -> None:
        await self._set(self.universe_key, endpoints)

    async def close(self) -> None:
        """Close Redis connection"""
        try:
            await self.client.aclose()
        except (RedisError, OSError) as exc:
            logger.warning("Closing Redis connection failed: %s", exc)
