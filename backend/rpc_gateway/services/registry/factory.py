from __future__ import annotations

import logging
from typing import List, Optional

from rpc_gateway.config import settings

from .codec import normalize_endpoints
from .store import EndpointRegistry

logger = logging.getLogger(__name__)


def build_registry() -> EndpointRegistry:
    """
    Create the registry backend selected by configuration.
    """

    if settings.registry_backend == "redis":
        from .redis_store import RedisEndpointRegistry

        return RedisEndpointRegistry()
    if settings.registry_backend == "memory":
        from .memory_store import InMemoryEndpointRegistry

        return InMemoryEndpointRegistry()
    raise ValueError("registry_backend must be 'redis' or 'memory'")


async def seed_universe(registry: EndpointRegistry, urls: List[str]) -> bool:
    """
    Write configured URLs as the universe if the registry does not hold one yet.
    Returns True when the universe was written.
    """

    endpoints = normalize_endpoints(urls)
    if not endpoints:
        return False
    if await registry.get_universe():
        logger.debug("Universe already present, ignoring %d configured RPC URLs", len(endpoints))
        return False
    await registry.put_universe(endpoints)
    logger.info("Seeded endpoint universe with %d RPC URLs", len(endpoints))
    return True


# Global registry instance
_registry: Optional[EndpointRegistry] = None


def get_registry() -> EndpointRegistry:
    """Get or create the global EndpointRegistry instance"""
    global _registry
    if _registry is None:
        _registry = build_registry()
    return _registry


def set_registry(registry: Optional[EndpointRegistry]) -> None:
    global _registry
    _registry = registry


async def close_registry() -> None:
    global _registry
    if _registry is not None:
        await _registry.close()
        _registry = None
