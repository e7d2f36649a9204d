"""
Endpoint registry package.

The registry holds the configured endpoint universe and the currently healthy
subset. The health monitor writes it, and the request router reads it. Higher-level
code should import from this package rather than individual submodules.
"""

from .codec import decode_endpoints, encode_endpoints, normalize_endpoints, require_http_urls
from .factory import close_registry, get_registry, seed_universe, set_registry
from .memory_store import InMemoryEndpointRegistry
from .redis_store import RedisEndpointRegistry
from .store import EndpointRegistry

__all__ = [
    "EndpointRegistry",
    "InMemoryEndpointRegistry",
    "RedisEndpointRegistry",
    "close_registry",
    "decode_endpoints",
    "encode_endpoints",
    "get_registry",
    "normalize_endpoints",
    "require_http_urls",
    "seed_universe",
    "set_registry",
]
